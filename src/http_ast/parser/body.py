"""Body parser: dispatches body lines to JSON / form / multipart / GraphQL / file-ref / text.

Parsing never raises. A body that cannot be parsed comes back as a
BodyResult with status "error", still carrying its raw text, content type
and byte size, so the rest of the document keeps parsing.
"""

import json
import re
from urllib.parse import unquote_plus

from http_ast.parser.base import (
    BodyContent,
    BodyError,
    BodyResult,
    FileRefContent,
    FormContent,
    FormPart,
    GraphQLContent,
    Header,
    JsonContent,
    LineContext,
    MultipartContent,
    TextContent,
    find_header,
    line_text,
)

JSON_TYPES = {"application/json", "text/json"}
FORM_TYPE = "application/x-www-form-urlencoded"
MULTIPART_TYPE = "multipart/form-data"

# < path | <@ path | <@encoding path
FILE_REF_RE = re.compile(r"^<(@(\S*))?\s+(\S.*)$")
BOUNDARY_RE = re.compile(r"boundary=([^;]+)", re.IGNORECASE)
DISPOSITION_NAME_RE = re.compile(r'(?:^|;)\s*name=(?:"([^"]*)"|([^;\s]+))', re.IGNORECASE)
DISPOSITION_FILENAME_RE = re.compile(r'(?:^|;)\s*filename=(?:"([^"]*)"|([^;\s]+))', re.IGNORECASE)


class BodyParseError(ValueError):
    def __init__(self, message: str, line_number: int | None = None):
        super().__init__(message)
        self.line_number = line_number


def byte_size(raw: str) -> int:
    return len(raw.encode("utf-8"))


def media_type(content_type: str | None) -> str:
    """'Application/JSON; charset=utf-8' -> 'application/json'."""
    return (content_type or "").split(";", 1)[0].strip().lower()


def is_json_type(content_type: str | None) -> bool:
    mime = media_type(content_type)
    return mime in JSON_TYPES or mime.endswith("+json")


class BodyParser:
    """Turns the lines after the header section into a BodyResult."""

    def __init__(self, max_body_size: int | None = None):
        self.max_body_size = max_body_size

    def parse(self, lines: list[LineContext | str], headers: list[Header], graphql: bool = False) -> BodyResult:
        """Parse body lines using the Content-Type found in headers.

        graphql=True splits the body into query and variables instead of
        looking at the content type.
        """
        raw = "\n".join(line_text(line) for line in lines)
        header = find_header(headers, "Content-Type")
        content_type = header.value if header else None
        size = byte_size(raw)
        first_line = lines[0].line_number if lines and isinstance(lines[0], LineContext) else None

        if self.max_body_size is not None and size > self.max_body_size:
            return self._error(
                f"Body size {size} exceeds maximum of {self.max_body_size} bytes",
                raw, content_type, size, first_line,
            )

        try:
            content = self._parse_content(raw, content_type, graphql, first_line)
        except BodyParseError as e:
            return self._error(str(e), raw, content_type, size, e.line_number)

        return BodyResult(status="parsed", content=content, raw=raw, content_type=content_type, size=size)

    def _parse_content(
        self, raw: str, content_type: str | None, graphql: bool, first_line: int | None,
    ) -> BodyContent:
        mime = media_type(content_type)
        stripped = raw.strip()

        if not stripped:
            if mime == FORM_TYPE:
                return FormContent(fields={})
            return TextContent(text="")

        if "\n" not in stripped:
            file_ref = self.parse_file_ref(stripped)
            if file_ref is not None:
                return file_ref

        if graphql:
            return self.parse_graphql(raw)
        if is_json_type(content_type):
            return self.parse_json(raw, first_line)
        if mime == FORM_TYPE:
            return self.parse_form(raw)
        if mime == MULTIPART_TYPE:
            return self.parse_multipart(raw, content_type)
        return TextContent(text=raw)

    def parse_file_ref(self, text: str) -> FileRefContent | None:
        match = FILE_REF_RE.match(text)
        if not match:
            return None
        return FileRefContent(
            path=match.group(3).strip(),
            encoding=match.group(2) or None,
            process_variables=match.group(1) is not None,
        )

    def parse_json(self, raw: str, first_line: int | None = None) -> JsonContent:
        try:
            return JsonContent(data=json.loads(raw))
        except json.JSONDecodeError as e:
            line_number = first_line + e.lineno - 1 if first_line is not None else e.lineno
            raise BodyParseError(f"Invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})", line_number) from e

    def parse_form(self, raw: str) -> FormContent:
        """'a=1&b=x+y&a=2' -> {'a': ['1', '2'], 'b': 'x y'}"""
        fields: dict[str, str | list[str]] = {}
        for pair in raw.split("&"):
            key, _, value = pair.partition("=")
            key = unquote_plus(key.strip())
            if not key:
                continue
            value = unquote_plus(value.strip())
            existing = fields.get(key)
            if existing is None:
                fields[key] = value
            elif isinstance(existing, list):
                existing.append(value)
            else:
                fields[key] = [existing, value]
        return FormContent(fields=fields)

    def parse_multipart(self, raw: str, content_type: str | None) -> MultipartContent:
        match = BOUNDARY_RE.search(content_type or "")
        boundary = match.group(1).strip().strip("\"'") if match else ""
        if not boundary:
            raise BodyParseError("Missing boundary in Content-Type header")

        parts = []
        for section in raw.split(f"--{boundary}"):
            section = section.strip()
            if not section or section == "--":
                continue
            part = self._parse_part(section)
            if part is not None:
                parts.append(part)
        return MultipartContent(boundary=boundary, parts=parts)

    def _parse_part(self, section: str) -> FormPart | None:
        lines = section.split("\n")
        headers: dict[str, str] = {}
        value_start = len(lines)

        for index, line in enumerate(lines):
            if not line.strip():
                value_start = index + 1
                break
            name, sep, value = line.partition(":")
            if sep and name.strip():
                headers[name.strip()] = value.strip()

        lowered = {k.lower(): v for k, v in headers.items()}
        disposition = lowered.get("content-disposition")
        if not disposition:
            return None
        name_match = DISPOSITION_NAME_RE.search(disposition)
        if not name_match:
            return None
        filename_match = DISPOSITION_FILENAME_RE.search(disposition)

        return FormPart(
            name=name_match.group(1) if name_match.group(1) is not None else name_match.group(2),
            value="\n".join(lines[value_start:]).strip(),
            filename=(filename_match.group(1) or filename_match.group(2)) if filename_match else None,
            content_type=lowered.get("content-type"),
            headers=headers or None,
        )

    def parse_graphql(self, raw: str) -> GraphQLContent:
        """Query up to the first blank line; the rest (if any) is the variables JSON."""
        lines = raw.split("\n")
        start = next((i for i, line in enumerate(lines) if line.strip()), 0)
        split_at = next((i for i in range(start, len(lines)) if not lines[i].strip()), len(lines))
        query = "\n".join(lines[:split_at]).strip()
        variables = "\n".join(lines[split_at + 1:]).strip()
        return GraphQLContent(query=query, variables=variables or None)

    def _error(
        self, message: str, raw: str, content_type: str | None, size: int, line_number: int | None = None,
    ) -> BodyResult:
        return BodyResult(
            status="error",
            raw=raw,
            content_type=content_type,
            size=size,
            error=BodyError(message=message, line_number=line_number),
        )
