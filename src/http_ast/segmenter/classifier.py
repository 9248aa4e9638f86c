"""Segment classification: request vs response, and http/curl/graphql subtype."""

import logging
import re

from http_ast.parser.base import AnchorLine, ClassifiedSegment, LineContext, Segment
from http_ast.parser.directives import is_significant

logger = logging.getLogger(__name__)

GRAPHQL_HEADER_RE = re.compile(r"^x-request-type\s*:\s*graphql\s*$", re.IGNORECASE)


def find_anchor_index(lines: list[LineContext]) -> int | None:
    """Index of the first line that is not blank, a comment, or a directive."""
    for index, line in enumerate(lines):
        if is_significant(line.text):
            return index
    return None


def detect_message_type(text: str) -> str:
    """'HTTP/1.1 200 OK' -> 'response'; anything else -> 'request'."""
    if text.lstrip().upper().startswith("HTTP/"):
        return "response"
    return "request"


def detect_segment_type(lines: list[LineContext], anchor_index: int) -> str:
    """Return 'curl', 'graphql' or 'http' for the request anchored at anchor_index."""
    if lines[anchor_index].text.lstrip().lower().startswith("curl"):
        return "curl"

    # headers follow the anchor and stop at the first blank line
    for line in lines[anchor_index + 1:]:
        text = line.text.strip()
        if not text:
            break
        if GRAPHQL_HEADER_RE.match(text):
            return "graphql"
    return "http"


class SegmentClassifier:
    """Tags each segment with message_type, segment_type and its anchor line."""

    def classify(self, segments: list[Segment]) -> list[ClassifiedSegment]:
        return [self.classify_segment(segment) for segment in segments]

    def classify_segment(self, segment: Segment) -> ClassifiedSegment:
        anchor_index = find_anchor_index(segment.lines)

        if anchor_index is None:
            # comment/directive-only segment; harmless default
            return ClassifiedSegment(
                **segment.model_dump(),
                message_type="request",
                segment_type="http",
                first_non_empty_line=AnchorLine(line_number=segment.start_line, text=""),
            )

        anchor = segment.lines[anchor_index]
        message_type = detect_message_type(anchor.text)
        segment_type = detect_segment_type(segment.lines, anchor_index)
        logger.debug(
            "Segment %d classified as %s/%s (line %d)",
            segment.segment_id, message_type, segment_type, anchor.line_number,
        )
        return ClassifiedSegment(
            **segment.model_dump(),
            message_type=message_type,
            segment_type=segment_type,
            first_non_empty_line=AnchorLine(line_number=anchor.line_number, text=anchor.text),
        )
