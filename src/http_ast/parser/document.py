"""AST assembly: runs the whole pipeline over one document and links responses.

Pipeline:

1. line scanning
2. segmentation on `###` delimiters
3. classification (request/response, http/curl/graphql)
4. per-segment parsing (definitions, references, structure)
5. response linking: a response belongs to the most recent request;
   the first response wins, later ones and orphans are dropped
6. variable views: global, file-scoped and per-request block variables

Each call builds a fresh VariableRegistry, so parses never share state.
"""

import codecs
import logging
from collections.abc import AsyncIterable, Iterable

from pydantic import BaseModel

from http_ast.config import ParserOptions
from http_ast.exceptions import InputValidationError
from http_ast.parser.base import (
    ClassifiedSegment,
    Diagnostic,
    ExpectedResponse,
    FileVariable,
    LineContext,
    ParseMetadata,
    Request,
    Segment,
    SourceMetadata,
)
from http_ast.parser.segment import SegmentParser
from http_ast.scanner.lines import LineScanner
from http_ast.scanner.registry import VariableRegistry
from http_ast.segmenter.classifier import SegmentClassifier
from http_ast.segmenter.segmenter import Segmenter, is_delimiter

logger = logging.getLogger(__name__)


class HttpRequestAST(BaseModel):
    requests: list[Request] = []
    file_scoped_variables: list[FileVariable] = []  # defined before the first delimiter
    global_variables: list[FileVariable] = []  # every definition, document order
    registry: VariableRegistry = VariableRegistry()


class ParseResult(BaseModel):
    text: str
    metadata: ParseMetadata
    line_contexts: list[LineContext]
    segments: list[Segment]
    classified_segments: list[ClassifiedSegment]
    ast: HttpRequestAST
    diagnostics: list[Diagnostic] = []


class HttpRequestParser:
    """Parses HTTP-file text into a ParseResult.

    Args:
        options: Parser options; defaults are used when omitted.
    """

    def __init__(self, options: ParserOptions | None = None):
        self.options = options or ParserOptions()
        self.line_scanner = LineScanner()
        self.segmenter = Segmenter()
        self.classifier = SegmentClassifier()
        self.segment_parser = SegmentParser(max_body_size=self.options.max_body_size)

    def parse_text(self, text: str, source: SourceMetadata | None = None) -> ParseResult:
        """Parse a complete document held in memory."""
        if not isinstance(text, str):
            raise InputValidationError(f"Expected text input, got {type(text).__name__}")

        diagnostics: list[Diagnostic] = []
        lines = self.line_scanner.scan(text)
        segments = self.segmenter.segment(lines)
        segments = self._limit_segments(segments, diagnostics)
        classified = self.classifier.classify(segments)
        logger.debug("Scanned %d lines into %d segments", len(lines), len(segments))

        registry = VariableRegistry(first_delimiter_line=self._first_delimiter_line(lines))
        nodes = [self.segment_parser.parse_segment(segment, registry) for segment in classified]
        requests = self.link_responses(nodes, diagnostics)

        global_variables = registry.all_variables()
        ast = HttpRequestAST(
            requests=requests,
            file_scoped_variables=[v for v in global_variables if v.scope_id is None],
            global_variables=global_variables,
            registry=registry,
        )
        return ParseResult(
            text=text,
            metadata=ParseMetadata(
                length=len(text),
                line_count=len(lines),
                encoding=self.options.encoding,
                source=source or SourceMetadata(),
            ),
            line_contexts=lines,
            segments=segments,
            classified_segments=classified,
            ast=ast,
            diagnostics=diagnostics,
        )

    def parse_bytes(self, data: bytes, name: str | None = None) -> ParseResult:
        """Decode data with the configured encoding, then parse it."""
        if not isinstance(data, (bytes, bytearray)):
            raise InputValidationError(f"Expected bytes input, got {type(data).__name__}")
        text = bytes(data).decode(self.options.encoding)
        return self.parse_text(text, SourceMetadata(type="bytes", name=name))

    async def parse_stream(self, chunks: AsyncIterable[bytes] | Iterable[bytes], name: str | None = None) -> ParseResult:
        """Collect and decode a chunk stream, then parse the whole text at once."""
        decoder = codecs.getincrementaldecoder(self.options.encoding)()
        parts = []
        if isinstance(chunks, AsyncIterable):
            async for chunk in chunks:
                parts.append(decoder.decode(chunk))
        else:
            for chunk in chunks:
                parts.append(decoder.decode(chunk))
        parts.append(decoder.decode(b"", final=True))
        return self.parse_text("".join(parts), SourceMetadata(type="stream", name=name))

    def link_responses(
        self, nodes: list[Request | ExpectedResponse | None], diagnostics: list[Diagnostic] | None = None,
    ) -> list[Request]:
        """Attach each response to the most recent request (first response wins)."""
        requests: list[Request] = []
        last_request: Request | None = None

        for node in nodes:
            if node is None:
                continue
            if node.kind == "request":
                requests.append(node)
                last_request = node
            elif last_request is None:
                self._report(
                    diagnostics, "orphan-response",
                    f"Expected response at line {node.raw_text_range.start_line} has no preceding request",
                    node.raw_text_range.start_line,
                )
            elif last_request.expected_response is not None:
                self._report(
                    diagnostics, "duplicate-response",
                    f"Request at line {last_request.raw_text_range.start_line} already has an expected response; "
                    f"ignoring the one at line {node.raw_text_range.start_line}",
                    node.raw_text_range.start_line,
                )
            else:
                last_request.expected_response = node

        return requests

    def _report(self, diagnostics: list[Diagnostic] | None, code: str, message: str, line_number: int) -> None:
        if not self.options.strict or diagnostics is None:
            return
        logger.warning(message)
        diagnostics.append(Diagnostic(code=code, message=message, line_number=line_number))

    def _limit_segments(self, segments: list[Segment], diagnostics: list[Diagnostic]) -> list[Segment]:
        limit = self.options.max_segments
        if limit is None or len(segments) <= limit:
            return segments
        message = f"Document has {len(segments)} segments; only the first {limit} were parsed"
        logger.warning(message)
        diagnostics.append(Diagnostic(code="max-segments", message=message, line_number=segments[limit].start_line))
        return segments[:limit]

    def _first_delimiter_line(self, lines: list[LineContext]) -> int | None:
        return next((line.line_number for line in lines if is_delimiter(line.text)), None)


def parse_http(text: str, options: ParserOptions | None = None) -> ParseResult:
    """Parse HTTP-file text with default (or given) options."""
    return HttpRequestParser(options).parse_text(text)


def parse_http_bytes(data: bytes, options: ParserOptions | None = None, name: str | None = None) -> ParseResult:
    return HttpRequestParser(options).parse_bytes(data, name=name)


async def parse_http_stream(
    chunks: AsyncIterable[bytes] | Iterable[bytes], options: ParserOptions | None = None, name: str | None = None,
) -> ParseResult:
    """Parse a byte stream; the only awaiting happens while chunks arrive."""
    return await HttpRequestParser(options).parse_stream(chunks, name=name)
