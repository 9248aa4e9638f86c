"""Data models for the http-ast parsing pipeline.

Every stage (scanner, segmenter, classifier, segment parser, assembler)
produces or consumes these models. They are created fresh for every parse
call and carry no behaviour beyond small lookups.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field


# --- lines and segments ---


class LineContext(BaseModel):
    """A single source line with its position in the original text."""

    line_number: int  # 1-based
    start_offset: int
    end_offset: int  # exclusive
    text: str  # without the line terminator


def line_text(line: LineContext | str) -> str:
    """Parsers accept LineContext objects or plain strings."""
    return line.text if isinstance(line, LineContext) else line


class Segment(BaseModel):
    """A run of lines between delimiter lines."""

    segment_id: int
    start_line: int
    end_line: int
    lines: list[LineContext]


class AnchorLine(BaseModel):
    line_number: int
    text: str


MessageType = Literal["request", "response"]
SegmentType = Literal["http", "curl", "graphql"]


class ClassifiedSegment(Segment):
    """A segment tagged as request/response and http/curl/graphql."""

    message_type: MessageType
    segment_type: SegmentType
    first_non_empty_line: AnchorLine


# --- variables and directives ---


class VariableReference(BaseModel):
    """A {{...}} reference found inside a line."""

    kind: Literal["system", "request", "custom"]
    name: str  # trimmed text inside the braces
    raw: str
    offset: int  # 0-based offset within the line text
    length: int
    line_number: int | None = None

    # system variables
    system_name: str | None = None
    params: str | None = None

    # request variables
    request_name: str | None = None
    source: Literal["request", "response"] | None = None
    part: Literal["body", "headers"] | None = None
    path: str | None = None


class FileVariable(BaseModel):
    """An `@key = value` definition."""

    key: str
    value: str
    line_number: int
    scope_id: int | None = None  # owning segment id; None = file scope


class PromptVariable(BaseModel):
    """A `# @prompt name [description]` declaration."""

    name: str
    description: str | None = None
    line_number: int


class RequestSetting(BaseModel):
    """A `# @setting [value]` directive such as `# @no-redirect`."""

    name: str
    value: str | None = None
    line_number: int


class Comment(BaseModel):
    text: str
    line_number: int


# --- request parts ---


class Header(BaseModel):
    name: str
    value: str


class QueryParam(BaseModel):
    key: str
    value: str


def find_header(headers: list[Header], name: str) -> Header | None:
    """Return the first header matching name case-insensitively."""
    wanted = name.lower()
    for header in headers:
        if header.name.lower() == wanted:
            return header
    return None


class RequestLine(BaseModel):
    method: str
    url: str
    http_version: str | None = None


class ResponseLine(BaseModel):
    http_version: str | None = None
    status_code: int | None = None
    status_text: str | None = None


# --- bodies ---


class FormPart(BaseModel):
    name: str
    value: str
    filename: str | None = None
    content_type: str | None = None
    headers: dict[str, str] | None = None


class JsonContent(BaseModel):
    kind: Literal["json"] = "json"
    data: Any = None


class TextContent(BaseModel):
    kind: Literal["text"] = "text"
    text: str = ""


class FormContent(BaseModel):
    kind: Literal["form"] = "form"
    fields: dict[str, str | list[str]] = {}


class MultipartContent(BaseModel):
    kind: Literal["multipart"] = "multipart"
    boundary: str
    parts: list[FormPart] = []


class FileRefContent(BaseModel):
    kind: Literal["file_ref"] = "file_ref"
    path: str
    encoding: str | None = None
    process_variables: bool = False


class GraphQLContent(BaseModel):
    kind: Literal["graphql"] = "graphql"
    query: str
    variables: str | None = None


BodyContent = Annotated[
    Union[JsonContent, TextContent, FormContent, MultipartContent, FileRefContent, GraphQLContent],
    Field(discriminator="kind"),
]


class BodyError(BaseModel):
    message: str
    line_number: int | None = None


class BodyResult(BaseModel):
    """Outcome of body parsing: parsed content or an error, plus raw text and size."""

    status: Literal["parsed", "error"]
    content: BodyContent | None = None
    raw: str
    content_type: str | None = None
    size: int  # UTF-8 bytes of raw
    error: BodyError | None = None

    @property
    def kind(self) -> str | None:
        return self.content.kind if self.content is not None else None


# --- AST nodes ---


class ParseIssue(BaseModel):
    """A localized structural problem attached to the node it concerns."""

    message: str
    line_number: int | None = None
    type: Literal["syntax", "validation", "semantic"] = "syntax"


class Diagnostic(BaseModel):
    """A document-level anomaly reported in strict mode."""

    severity: Literal["warning", "error"] = "warning"
    code: str
    message: str
    line_number: int | None = None


class TextRange(BaseModel):
    start_line: int
    end_line: int


class ExpectedResponse(BaseModel):
    """A response block used as an assertion/fixture for the preceding request."""

    kind: Literal["response"] = "response"
    status_code: int
    status_text: str | None = None
    http_version: str | None = None
    headers: list[Header] = []
    body: Any = None  # raw text, or parsed JSON
    variables: list[FileVariable] = []
    references: list[VariableReference] = []
    segment_id: int
    raw_text_range: TextRange


class Request(BaseModel):
    """A single parsed request block."""

    kind: Literal["request"] = "request"
    name: str | None = None
    method: str | None  # None only when the request line was rejected
    url: str
    http_version: str | None = None
    query_params: list[QueryParam] = []
    headers: list[Header] = []
    body: BodyResult | None = None
    block_variables: list[FileVariable] = []
    prompt_variables: list[PromptVariable] = []
    request_references: list[VariableReference] = []
    references: list[VariableReference] = []
    settings: list[RequestSetting] = []
    comments: list[str] = []
    errors: list[ParseIssue] = []
    segment_id: int
    segment_type: SegmentType = "http"
    raw_text_range: TextRange
    expected_response: ExpectedResponse | None = None

    def header(self, name: str) -> str | None:
        """Return the value of the named header (case-insensitive), if present."""
        found = find_header(self.headers, name)
        return found.value if found else None


# --- parse result ---


class SourceMetadata(BaseModel):
    type: Literal["string", "stream", "bytes"] = "string"
    name: str | None = None


class ParseMetadata(BaseModel):
    length: int
    line_count: int
    encoding: str
    source: SourceMetadata
