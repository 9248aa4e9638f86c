"""Segment parser: turns one classified segment into a Request or ExpectedResponse.

Request segments run request line -> query continuations -> headers ->
(blank separator) -> body, each step continuing where the previous one
stopped. cURL segments are handed to the curl parser as a whole.
Response segments mirror the request flow with the response line parser.
"""

import json
import logging

from http_ast.exceptions import CurlSyntaxError, RequestLineError
from http_ast.parser.base import (
    ClassifiedSegment,
    ExpectedResponse,
    LineContext,
    ParseIssue,
    Request,
    TextRange,
    find_header,
)
from http_ast.parser.body import BodyParser, is_json_type
from http_ast.parser.curl import CurlParser
from http_ast.parser.directives import is_comment, is_directive
from http_ast.parser.headers import HeaderParser
from http_ast.parser.query import QueryParser
from http_ast.parser.request_line import RequestLineParser
from http_ast.parser.response_line import ResponseLineParser
from http_ast.scanner.definitions import DefinitionScanResult, VariableScanner
from http_ast.scanner.references import ReferenceScanner
from http_ast.scanner.registry import VariableRegistry
from http_ast.segmenter.classifier import find_anchor_index

logger = logging.getLogger(__name__)


def _strip_trailing_blanks(lines: list[LineContext]) -> list[LineContext]:
    """Drop trailing blank lines; they separate blocks rather than belong to a body."""
    end = len(lines)
    while end > 0 and not lines[end - 1].text.strip():
        end -= 1
    return lines[:end]


def _strip_leading_blanks(lines: list[LineContext]) -> list[LineContext]:
    start = 0
    while start < len(lines) and not lines[start].text.strip():
        start += 1
    return lines[start:]


def _head_region(lines: list[LineContext]) -> tuple[list[LineContext], list[LineContext]]:
    """Split lines after the anchor into (head, rest) at the first blank line.

    Comment and directive lines are dropped from the head so they can sit
    between headers without ending the header section.
    """
    blank = next((i for i, line in enumerate(lines) if not line.text.strip()), len(lines))
    head = [line for line in lines[:blank] if not is_comment(line.text) and not is_directive(line.text)]
    return head, lines[blank:]


class SegmentParser:
    """Routes a classified segment through the specialised parsers."""

    def __init__(self, max_body_size: int | None = None):
        self.variable_scanner = VariableScanner()
        self.reference_scanner = ReferenceScanner()
        self.request_line_parser = RequestLineParser()
        self.response_line_parser = ResponseLineParser()
        self.query_parser = QueryParser()
        self.header_parser = HeaderParser()
        self.body_parser = BodyParser(max_body_size=max_body_size)
        self.curl_parser = CurlParser()

    def parse_segment(
        self, segment: ClassifiedSegment, registry: VariableRegistry | None = None,
    ) -> Request | ExpectedResponse | None:
        """Parse a segment; None for segments holding only comments and directives."""
        if registry is None:
            registry = VariableRegistry()
        definitions = self.scan_definitions(segment, registry)

        if segment.message_type == "response":
            return self.parse_response(segment, definitions)
        return self.parse_request(segment, definitions)

    def scan_definitions(self, segment: ClassifiedSegment, registry: VariableRegistry) -> DefinitionScanResult:
        """Run the definition scan and record what it finds in the registry."""
        definitions = self.variable_scanner.scan(
            segment.lines,
            scope_for=lambda line_number: registry.scope_id_for(line_number, segment.segment_id),
        )
        for variable in definitions.file_variables:
            registry.define(variable)
        for prompt in definitions.prompts:
            registry.define_prompt(segment.segment_id, prompt)
        return definitions

    def parse_request(self, segment: ClassifiedSegment, definitions: DefinitionScanResult) -> Request | None:
        lines = segment.lines
        anchor = find_anchor_index(lines)
        if anchor is None:
            logger.debug("Segment %d has no request line, skipping", segment.segment_id)
            return None

        references = self.reference_scanner.scan(lines)
        request = Request(
            name=definitions.request_name,
            method=None,
            url="",
            block_variables=definitions.file_variables,
            prompt_variables=definitions.prompts,
            request_references=[r for r in references if r.kind == "request"],
            references=references,
            settings=definitions.settings,
            segment_id=segment.segment_id,
            segment_type=segment.segment_type,
            raw_text_range=TextRange(start_line=segment.start_line, end_line=segment.end_line),
        )

        if segment.segment_type == "curl":
            parsed = self._apply_curl(request, lines, anchor)
            if parsed:
                request.comments = [c.text for c in definitions.comments]
                return request
            request.segment_type = "http"

        body_start = self._apply_http(request, lines, anchor, graphql=segment.segment_type == "graphql")
        request.comments = [c.text for c in definitions.comments if c.line_number < body_start]
        return request

    def _apply_curl(self, request: Request, lines: list[LineContext], anchor: int) -> bool:
        """Fill request from a curl command; False when the anchor isn't a curl command."""
        try:
            result = self.curl_parser.parse(lines[anchor:])
        except CurlSyntaxError as e:
            logger.debug("Rejected curl command at line %s: %s", e.line_number, e)
            request.url = lines[anchor].text.strip()
            request.errors.append(ParseIssue(message=str(e), line_number=e.line_number))
            return True
        if result is None:
            return False

        request.method = result.method
        request.url = result.url
        request.headers = result.headers
        request.query_params = self.query_parser.parse_inline(result.url)
        if result.body is not None:
            request.body = self.body_parser.parse([result.body], result.headers)
        return True

    def _apply_http(self, request: Request, lines: list[LineContext], anchor: int, graphql: bool) -> int:
        """Fill request from request line, query, headers and body. Returns the body's first line number."""
        anchor_line = lines[anchor]
        try:
            request_line = self.request_line_parser.parse(anchor_line.text, anchor_line.line_number)
        except RequestLineError as e:
            logger.debug("Rejected request line %d: %s", anchor_line.line_number, e)
            request.url = anchor_line.text.strip()
            request.errors.append(ParseIssue(message=str(e), line_number=e.line_number))
        else:
            request.method = request_line.method
            request.url = request_line.url
            request.http_version = request_line.http_version

        head, rest = _head_region(lines[anchor + 1:])
        region = head + rest

        query = self.query_parser.parse(region)
        request.query_params = self.query_parser.parse_inline(request.url) + query.query_params

        header_start = query.consumed_lines_count
        headers = self.header_parser.parse(region[header_start:])
        request.headers = headers.headers

        body_lines = self._body_lines(region, header_start + headers.consumed_lines_count)
        if not body_lines:
            return lines[-1].line_number + 1
        request.body = self.body_parser.parse(body_lines, request.headers, graphql=graphql)
        return body_lines[0].line_number

    def _body_lines(self, region: list[LineContext], after_headers: int) -> list[LineContext]:
        start = after_headers
        # one blank line separates headers from body
        if start < len(region) and not region[start].text.strip():
            start += 1
        body = _strip_trailing_blanks(region[start:])
        if not any(line.text.strip() for line in body):
            return []
        return body

    def parse_response(self, segment: ClassifiedSegment, definitions: DefinitionScanResult) -> ExpectedResponse | None:
        lines = segment.lines
        anchor = find_anchor_index(lines)
        if anchor is None:
            logger.debug("Segment %d has no status line, skipping", segment.segment_id)
            return None

        status = self.response_line_parser.parse(lines[anchor].text)
        head, rest = _head_region(lines[anchor + 1:])
        region = head + rest
        headers = self.header_parser.parse(region)

        body_lines = self._body_lines(region, headers.consumed_lines_count)
        body = "\n".join(line.text for line in _strip_leading_blanks(body_lines)) or None
        content_type = find_header(headers.headers, "Content-Type")
        if body is not None and content_type and is_json_type(content_type.value):
            try:
                body = json.loads(body)
            except json.JSONDecodeError:
                logger.debug("Response body of segment %d is not valid JSON, keeping raw text", segment.segment_id)

        return ExpectedResponse(
            status_code=status.status_code or 0,
            status_text=status.status_text,
            http_version=status.http_version,
            headers=headers.headers,
            body=body,
            variables=definitions.file_variables,
            references=self.reference_scanner.scan(lines),
            segment_id=segment.segment_id,
            raw_text_range=TextRange(start_line=segment.start_line, end_line=segment.end_line),
        )
