"""Group lines into segments separated by `###` delimiter lines."""

import re

from http_ast.parser.base import LineContext, Segment

DELIMITER_RE = re.compile(r"^\s*#{3,}\s*$")


def is_delimiter(text: str) -> bool:
    """True for a line holding only 3+ `#` characters (surrounding whitespace allowed)."""
    return DELIMITER_RE.match(text) is not None


class Segmenter:
    """Splits a line list into segments; delimiter lines belong to no segment."""

    def segment(self, lines: list[LineContext]) -> list[Segment]:
        """Return non-blank segments numbered 0..N-1 in document order."""
        groups: list[list[LineContext]] = [[]]
        for line in lines:
            if is_delimiter(line.text):
                if groups[-1]:
                    groups.append([])
                continue
            groups[-1].append(line)

        kept = [g for g in groups if any(line.text.strip() for line in g)]
        return [
            Segment(
                segment_id=segment_id,
                start_line=group[0].line_number,
                end_line=group[-1].line_number,
                lines=list(group),
            )
            for segment_id, group in enumerate(kept)
        ]

    def is_delimiter(self, text: str) -> bool:
        return is_delimiter(text)
