"""Directive scanning: split a segment's lines into directives, comments and content.

Directives carry metadata rather than request content:
`# @name`, `# @prompt`, `# @setting`, the `//` variants of those,
bare `@name X`, and `@key = value` file variables.
"""

import re

from pydantic import BaseModel

from http_ast.parser.base import LineContext

COMMENT_PREFIXES = ("#", "//")
COMMENT_MARKER_RE = re.compile(r"^(#|//)\s*")
COMMENT_DIRECTIVE_RE = re.compile(r"^\s*(#|//)\s*@")
FILE_VARIABLE_RE = re.compile(r"^\s*@([^=\s]+)\s*=(.*)$")
BARE_NAME_RE = re.compile(r"^\s*@name\s+(\S.*)$")


def is_comment(text: str) -> bool:
    """True for `#` or `//` lines (directives included)."""
    return text.lstrip().startswith(COMMENT_PREFIXES)


def is_directive(text: str) -> bool:
    return (
        COMMENT_DIRECTIVE_RE.match(text) is not None
        or FILE_VARIABLE_RE.match(text) is not None
        or BARE_NAME_RE.match(text) is not None
    )


def is_significant(text: str) -> bool:
    """True for a line that can anchor a request or response."""
    stripped = text.strip()
    return bool(stripped) and not stripped.startswith(COMMENT_PREFIXES) and not stripped.startswith("@")


def strip_comment_marker(text: str) -> str:
    """'# some note' -> 'some note'."""
    return COMMENT_MARKER_RE.sub("", text.strip(), count=1).strip()


class DirectiveScanResult(BaseModel):
    directives: list[LineContext] = []
    comments: list[LineContext] = []
    content: list[LineContext] = []


class DirectiveScanner:
    """Categorizes lines; content keeps blank lines so later parsers see section breaks."""

    def scan(self, lines: list[LineContext]) -> DirectiveScanResult:
        result = DirectiveScanResult()
        for line in lines:
            if is_directive(line.text):
                result.directives.append(line)
            elif is_comment(line.text):
                result.comments.append(line)
            else:
                result.content.append(line)
        return result
