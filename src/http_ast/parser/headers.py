"""Header parsing: `Name: Value` lines up to the first blank line."""

from pydantic import BaseModel

from http_ast.parser.base import Header, LineContext, line_text


class HeaderParserResult(BaseModel):
    headers: list[Header]
    consumed_lines_count: int


class HeaderParser:
    """Header names keep their casing; compare them with find_header()."""

    def parse(self, lines: list[LineContext | str]) -> HeaderParserResult:
        """Parse headers; a blank line or a line without ':' ends the section."""
        headers: list[Header] = []
        consumed = 0

        for line in lines:
            text = line_text(line)
            if not text.strip():
                break
            name, sep, value = text.partition(":")
            if not sep:
                break
            name = name.strip()
            if name:
                headers.append(Header(name=name, value=value.strip()))
            consumed += 1

        return HeaderParserResult(headers=headers, consumed_lines_count=consumed)
