from http_ast.parser.base import Header
from http_ast.parser.body import BodyParser, is_json_type, media_type
from http_ast.scanner.lines import LineScanner

JSON = [Header(name="Content-Type", value="application/json")]
FORM = [Header(name="Content-Type", value="application/x-www-form-urlencoded")]


def _multipart(boundary: str = "X-BOUNDARY") -> list[Header]:
    return [Header(name="Content-Type", value=f'multipart/form-data; boundary="{boundary}"')]


class TestContentTypeHelpers:
    def test_media_type(self):
        assert media_type("Application/JSON; charset=utf-8") == "application/json"
        assert media_type(None) == ""

    def test_is_json_type(self):
        assert is_json_type("application/json")
        assert is_json_type("text/json")
        assert is_json_type("application/problem+json; charset=utf-8")
        assert not is_json_type("text/plain")


class TestJsonBody:
    def test_json(self):
        result = BodyParser().parse(['{"a":1}'], JSON)

        assert result.status == "parsed"
        assert result.kind == "json"
        assert result.content.data == {"a": 1}
        assert result.raw == '{"a":1}'
        assert result.content_type == "application/json"
        assert result.size == 7

    def test_invalid_json(self):
        result = BodyParser().parse(["{invalid"], JSON)

        assert result.status == "error"
        assert result.content is None
        assert "Invalid JSON" in result.error.message
        assert result.raw == "{invalid"
        assert result.size == 8

    def test_invalid_json_reports_document_line(self):
        lines = LineScanner().scan('POST /x\n\n{\n  "a": 1,\n  oops\n}')[2:]
        result = BodyParser().parse(lines, JSON)

        assert result.status == "error"
        assert result.error.line_number == 5

    def test_multiline_json(self):
        result = BodyParser().parse(["{", '  "items": [1, 2]', "}"], JSON)

        assert result.content.data == {"items": [1, 2]}


class TestFormBody:
    def test_form(self):
        result = BodyParser().parse(["name=John+Doe&email=john%40example.com&tag=a&tag=b"], FORM)

        assert result.kind == "form"
        assert result.content.fields == {"name": "John Doe", "email": "john@example.com", "tag": ["a", "b"]}

    def test_empty_form(self):
        result = BodyParser().parse([], FORM)

        assert result.kind == "form"
        assert result.content.fields == {}


class TestMultipartBody:
    def test_parts(self):
        lines = [
            "--X-BOUNDARY",
            'Content-Disposition: form-data; name="title"',
            "",
            "Hello",
            "--X-BOUNDARY",
            'Content-Disposition: form-data; name="file"; filename="a.txt"',
            "Content-Type: text/plain",
            "",
            "file contents",
            "--X-BOUNDARY",
            "Content-Type: text/plain",
            "",
            "no name, dropped",
            "--X-BOUNDARY--",
        ]
        result = BodyParser().parse(lines, _multipart())

        assert result.kind == "multipart"
        assert result.content.boundary == "X-BOUNDARY"
        assert [p.name for p in result.content.parts] == ["title", "file"]
        assert result.content.parts[0].value == "Hello"
        assert result.content.parts[1].filename == "a.txt"
        assert result.content.parts[1].content_type == "text/plain"
        assert result.content.parts[1].value == "file contents"

    def test_missing_boundary(self):
        headers = [Header(name="Content-Type", value="multipart/form-data")]
        result = BodyParser().parse(["--x", "whatever"], headers)

        assert result.status == "error"
        assert result.error.message == "Missing boundary in Content-Type header"


class TestFileReference:
    def test_plain_reference(self):
        result = BodyParser().parse(["< ./payload.json"], JSON)

        assert result.kind == "file_ref"
        assert result.content.path == "./payload.json"
        assert result.content.process_variables is False
        assert result.content.encoding is None

    def test_reference_with_variables(self):
        result = BodyParser().parse(["<@ ./template.xml"], [])

        assert result.content.path == "./template.xml"
        assert result.content.process_variables is True
        assert result.content.encoding is None

    def test_reference_with_encoding(self):
        result = BodyParser().parse(["<@latin1 ./legacy.txt"], [])

        assert result.content.encoding == "latin1"
        assert result.content.process_variables is True

    def test_only_single_line_bodies(self):
        result = BodyParser().parse(["< ./a.json", "more"], [])

        assert result.kind == "text"


class TestGraphQLBody:
    def test_query_and_variables(self):
        lines = ["query Q($id: ID!) {", "  user(id: $id) { name }", "}", "", '{"id": 1}']
        result = BodyParser().parse(lines, JSON, graphql=True)

        assert result.kind == "graphql"
        assert result.content.query == "query Q($id: ID!) {\n  user(id: $id) { name }\n}"
        assert result.content.variables == '{"id": 1}'

    def test_query_only(self):
        result = BodyParser().parse(["", "{ me { id } }"], [], graphql=True)

        assert result.content.query == "{ me { id } }"
        assert result.content.variables is None


class TestTextBody:
    def test_text_preserves_lines(self):
        result = BodyParser().parse(["  line one", "", "line three  "], [Header(name="Content-Type", value="text/plain")])

        assert result.kind == "text"
        assert result.content.text == "  line one\n\nline three  "

    def test_no_content_type(self):
        result = BodyParser().parse(["hello"], [])

        assert result.kind == "text"
        assert result.content_type is None

    def test_empty(self):
        result = BodyParser().parse([], JSON)

        assert result.kind == "text"
        assert result.content.text == ""
        assert result.size == 0


class TestMaxBodySize:
    def test_too_large(self):
        result = BodyParser(max_body_size=4).parse(['{"a":1}'], JSON)

        assert result.status == "error"
        assert "exceeds maximum of 4 bytes" in result.error.message
        assert result.content is None

    def test_size_counts_utf8_bytes(self):
        result = BodyParser(max_body_size=5).parse(["héllo"], [])

        assert result.size == 6
        assert result.status == "error"
