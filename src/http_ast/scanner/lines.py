"""Line scanning: split raw text into offset-tracked lines.

No semantics happen here. `\\n`, `\\r\\n` and a lone `\\r` all count as one
line break; the break itself is never part of a line's text.
"""

import re

from http_ast.parser.base import LineContext

LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


class LineScanner:
    """Splits text into LineContext objects."""

    def scan(self, text: str) -> list[LineContext]:
        """Return one LineContext per line; empty input yields a single empty line."""
        lines: list[LineContext] = []
        start = 0

        for number, match in enumerate(LINE_BREAK_RE.finditer(text), start=1):
            lines.append(LineContext(
                line_number=number,
                start_offset=start,
                end_offset=match.start(),
                text=text[start:match.start()],
            ))
            start = match.end()

        # trailing content, or the empty line after a final break
        lines.append(LineContext(
            line_number=len(lines) + 1,
            start_offset=start,
            end_offset=len(text),
            text=text[start:],
        ))
        return lines
