"""Query parameter parsing: inline `?a=1&b=2` and multiline `?`/`&` continuations."""

from pydantic import BaseModel

from http_ast.parser.base import LineContext, QueryParam, line_text

QUERY_PREFIXES = ("?", "&")


def _split_pair(content: str) -> QueryParam:
    key, _, value = content.partition("=")
    return QueryParam(key=key.strip(), value=value.strip())


class QueryParserResult(BaseModel):
    query_params: list[QueryParam]
    consumed_lines_count: int


class QueryParser:
    """Reads continuation lines directly after the request line."""

    def parse(self, lines: list[LineContext | str]) -> QueryParserResult:
        """Consume leading `?`/`&` lines; stop at the first line that isn't one."""
        params: list[QueryParam] = []
        consumed = 0

        for line in lines:
            text = line_text(line).strip()
            if not text.startswith(QUERY_PREFIXES):
                break
            content = text[1:].strip()
            if content:
                params.append(_split_pair(content))
            consumed += 1

        return QueryParserResult(query_params=params, consumed_lines_count=consumed)

    def parse_inline(self, url: str) -> list[QueryParam]:
        """Parameters written into the URL itself; the fragment is ignored."""
        _, sep, query = url.partition("?")
        if not sep:
            return []
        query = query.split("#", 1)[0]
        return [_split_pair(pair) for pair in query.split("&") if pair.strip()]
