"""Response status line parser.

    HTTP/1.1 200 OK     -> version, code, text
    404 Not Found       -> code, text
    200                 -> code
    OK                  -> text
"""

from http_ast.parser.base import ResponseLine


class ResponseLineParser:
    """Parses a single, already isolated response line. Every part is optional."""

    def parse(self, text: str) -> ResponseLine:
        parts = text.split()
        if not parts:
            return ResponseLine()

        http_version = None
        if parts[0].upper().startswith("HTTP/"):
            http_version = parts.pop(0).upper()

        status_code = None
        if parts and parts[0].isascii() and parts[0].isdigit():
            status_code = int(parts.pop(0))

        status_text = " ".join(parts) or None
        return ResponseLine(http_version=http_version, status_code=status_code, status_text=status_text)
