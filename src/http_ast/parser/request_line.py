"""Request line parser.

Accepted forms, most specific first:

    POST https://example.com/api HTTP/1.1
    GET https://example.com/api
    https://example.com/api            (method defaults to GET)
"""

import re

from http_ast.exceptions import RequestLineError
from http_ast.parser.base import RequestLine

DEFAULT_METHOD = "GET"

KNOWN_METHODS = {
    "GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS", "TRACE", "CONNECT",
    "PROPFIND", "PROPPATCH", "MKCOL", "COPY", "MOVE", "LOCK", "UNLOCK",
    "PURGE", "LINK", "UNLINK", "SEARCH",
}

# RFC 7230 token
METHOD_TOKEN_RE = re.compile(r"^[!#$%&'*+.^_`|~0-9A-Za-z-]+$")


def is_known_method(token: str) -> bool:
    return token.upper() in KNOWN_METHODS


class RequestLineParser:
    """Parses a single, already isolated request line."""

    def parse(self, text: str, line_number: int | None = None) -> RequestLine:
        """Split text into method, url and optional HTTP version.

        Raises RequestLineError when the method position holds something that
        is not a valid method token.
        """
        parts = text.split()
        if not parts:
            return RequestLine(method=DEFAULT_METHOD, url="")

        http_version = None
        if parts[-1].upper().startswith("HTTP/"):
            http_version = parts.pop().upper()

        if not parts:
            return RequestLine(method=DEFAULT_METHOD, url="", http_version=http_version)
        if len(parts) == 1:
            return RequestLine(method=DEFAULT_METHOD, url=parts[0], http_version=http_version)

        method = parts[0]
        if not METHOD_TOKEN_RE.match(method):
            raise RequestLineError(f"Invalid HTTP method token: {method!r}", line_number=line_number)
        if is_known_method(method):
            method = method.upper()

        return RequestLine(method=method, url=" ".join(parts[1:]), http_version=http_version)
