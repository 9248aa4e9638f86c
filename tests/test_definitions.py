from http_ast.scanner.definitions import VariableScanner, unescape
from http_ast.scanner.lines import LineScanner


def _scan(text: str, scope_for=None):
    return VariableScanner().scan(LineScanner().scan(text), scope_for=scope_for)


class TestUnescape:
    def test_escapes(self):
        assert unescape(r"a\nb\tc\rd\\e") == "a\nb\tc\rd\\e"

    def test_unknown_escape_kept(self):
        assert unescape(r"a\qb") == r"a\qb"


class TestFileVariables:
    def test_file_variable(self):
        result = _scan("@host = https://example.com  ")

        [variable] = result.file_variables
        assert variable.key == "host"
        assert variable.value == "https://example.com"
        assert variable.line_number == 1
        assert variable.scope_id is None

    def test_value_is_unescaped(self):
        [variable] = _scan(r"@greeting = hello\nworld").file_variables

        assert variable.value == "hello\nworld"

    def test_empty_value(self):
        [variable] = _scan("@empty =").file_variables

        assert variable.value == ""

    def test_scope_callback(self):
        [variable] = _scan("@a = 1", scope_for=lambda line_number: 7).file_variables

        assert variable.scope_id == 7


class TestRequestName:
    def test_hash_name(self):
        result = _scan("# @name login\nPOST /login")

        assert result.request_name == "login"
        assert result.request_name_line == 1

    def test_slash_name(self):
        assert _scan("// @name other").request_name == "other"

    def test_bare_name(self):
        assert _scan("@name bare").request_name == "bare"

    def test_first_name_wins(self):
        result = _scan("# @name first\n# @name second")

        assert result.request_name == "first"
        assert result.request_name_line == 1


class TestPromptsAndSettings:
    def test_prompt_with_description(self):
        [prompt] = _scan("# @prompt password   Your   account password").prompts

        assert prompt.name == "password"
        assert prompt.description == "Your account password"
        assert prompt.line_number == 1

    def test_prompt_without_description(self):
        [prompt] = _scan("// @prompt otp").prompts

        assert prompt.name == "otp"
        assert prompt.description is None

    def test_settings(self):
        result = _scan("# @no-redirect\n# @timeout 5000")

        assert [(s.name, s.value) for s in result.settings] == [("no-redirect", None), ("timeout", "5000")]

    def test_name_and_prompt_are_not_settings(self):
        result = _scan("# @name x\n# @prompt y")

        assert result.settings == []


class TestComments:
    def test_comments_without_marker(self):
        result = _scan("# first note\n//second note\nGET /x")

        assert [(c.text, c.line_number) for c in result.comments] == [("first note", 1), ("second note", 2)]

    def test_directives_are_not_comments(self):
        result = _scan("# @name x\n@a = 1\n# real comment")

        assert [c.text for c in result.comments] == ["real comment"]
