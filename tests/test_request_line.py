import pytest

from http_ast.exceptions import RequestLineError
from http_ast.parser.request_line import RequestLineParser, is_known_method


class TestRequestLineParser:
    def test_method_url_version(self):
        line = RequestLineParser().parse("POST https://example.com/api HTTP/1.1")

        assert line.method == "POST"
        assert line.url == "https://example.com/api"
        assert line.http_version == "HTTP/1.1"

    def test_method_url(self):
        line = RequestLineParser().parse("delete https://example.com/items/1")

        assert line.method == "DELETE"
        assert line.url == "https://example.com/items/1"
        assert line.http_version is None

    def test_url_only_defaults_to_get(self):
        line = RequestLineParser().parse("https://example.com/health")

        assert line.method == "GET"
        assert line.url == "https://example.com/health"

    def test_url_and_lowercase_version(self):
        line = RequestLineParser().parse("https://example.com http/2")

        assert line.method == "GET"
        assert line.url == "https://example.com"
        assert line.http_version == "HTTP/2"

    def test_custom_method_kept_verbatim(self):
        line = RequestLineParser().parse("Frobnicate /widgets")

        assert line.method == "Frobnicate"
        assert line.url == "/widgets"

    def test_url_with_spaces_is_joined(self):
        line = RequestLineParser().parse("GET   /search?q=a   b   HTTP/1.1")

        assert line.url == "/search?q=a b"
        assert line.http_version == "HTTP/1.1"

    def test_invalid_method_token(self):
        with pytest.raises(RequestLineError, match="Invalid HTTP method token") as exc_info:
            RequestLineParser().parse("GE(T /x", line_number=4)

        assert exc_info.value.line_number == 4

    def test_empty_line(self):
        line = RequestLineParser().parse("   ")

        assert line.method == "GET"
        assert line.url == ""


class TestKnownMethods:
    def test_known(self):
        assert is_known_method("propfind")
        assert is_known_method("PATCH")

    def test_unknown(self):
        assert not is_known_method("FETCH")
