from http_ast.parser.base import Header, find_header
from http_ast.parser.headers import HeaderParser
from http_ast.scanner.lines import LineScanner


class TestHeaderParser:
    def test_stops_at_blank_line(self):
        result = HeaderParser().parse(["Content-Type: application/json", "", "body"])

        assert result.headers == [Header(name="Content-Type", value="application/json")]
        assert result.consumed_lines_count == 1

    def test_value_keeps_later_colons(self):
        result = HeaderParser().parse(["Host: example.com:8080", "X-Time:  12:30:00 "])

        assert result.headers[0].value == "example.com:8080"
        assert result.headers[1].value == "12:30:00"
        assert result.consumed_lines_count == 2

    def test_empty_name_consumed_but_skipped(self):
        result = HeaderParser().parse([": orphan", "Accept: */*"])

        assert [h.name for h in result.headers] == ["Accept"]
        assert result.consumed_lines_count == 2

    def test_line_without_colon_stops(self):
        result = HeaderParser().parse(["Accept: */*", "{not a header}", "X-A: b"])

        assert len(result.headers) == 1
        assert result.consumed_lines_count == 1

    def test_name_casing_preserved(self):
        lines = LineScanner().scan("x-API-key: secret")
        result = HeaderParser().parse(lines)

        assert result.headers[0].name == "x-API-key"
        assert find_header(result.headers, "X-Api-Key").value == "secret"
        assert find_header(result.headers, "Accept") is None

    def test_no_lines(self):
        result = HeaderParser().parse([])

        assert result.headers == []
        assert result.consumed_lines_count == 0
