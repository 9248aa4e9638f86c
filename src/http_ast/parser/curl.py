"""cURL command parser.

Handles commands such as

    curl -X POST https://api.example.com/login \\
      -H "Content-Type: application/json" \\
      -d '{"username": "test"}'

Lines ending in a backslash are merged, the command is tokenized with shell
quoting rules and the flags that matter for a request are picked out.
"""

import shlex

from pydantic import BaseModel

from http_ast.exceptions import CurlSyntaxError
from http_ast.parser.base import Header, LineContext, line_text
from http_ast.parser.directives import is_significant

METHOD_FLAGS = {"-X", "--request"}
HEADER_FLAGS = {"-H", "--header"}
DATA_FLAGS = {"-d", "--data", "--data-raw", "--data-binary", "--data-ascii", "--data-urlencode"}
URL_FLAGS = {"--url"}
HEAD_FLAGS = {"-I", "--head"}

# flags whose argument must be skipped so it isn't mistaken for the URL
OTHER_VALUE_FLAGS = {
    "-u", "--user", "-o", "--output", "-A", "--user-agent", "-e", "--referer",
    "-b", "--cookie", "-c", "--cookie-jar", "-F", "--form", "-m", "--max-time",
    "--connect-timeout", "-x", "--proxy", "-U", "--proxy-user", "-T", "--upload-file",
    "-w", "--write-out", "-r", "--range", "-E", "--cert", "--cacert", "--key",
    "--retry", "-K", "--config", "--resolve",
}
VALUE_FLAGS = METHOD_FLAGS | HEADER_FLAGS | DATA_FLAGS | URL_FLAGS | OTHER_VALUE_FLAGS
ATTACHED_SHORT_FLAGS = {"-X", "-H", "-d"}


def is_curl_command(text: str) -> bool:
    parts = text.split(maxsplit=1)
    return bool(parts) and parts[0].lower() == "curl"


class CurlParserResult(BaseModel):
    method: str
    url: str
    headers: list[Header] = []
    body: str | None = None
    consumed_lines_count: int


class CurlParser:
    """Parses the first curl command found in a list of lines."""

    def parse(self, lines: list[LineContext | str]) -> CurlParserResult | None:
        """Return the parsed command, or None when the first significant line isn't curl."""
        start = next((i for i, line in enumerate(lines) if is_significant(line_text(line))), None)
        if start is None or not is_curl_command(line_text(lines[start]).strip()):
            return None

        pieces = []
        consumed = start
        for line in lines[start:]:
            text = line_text(line).strip()
            consumed += 1
            if text.endswith("\\"):
                pieces.append(text[:-1].strip())
            else:
                pieces.append(text)
                break

        command = " ".join(p for p in pieces if p)
        args = command[len("curl"):]
        try:
            tokens = shlex.split(args)
        except ValueError as e:
            first = lines[start]
            line_number = first.line_number if isinstance(first, LineContext) else None
            raise CurlSyntaxError(f"Invalid curl command: {e}", line_number=line_number) from e

        return self._from_tokens(tokens, consumed)

    def _from_tokens(self, tokens: list[str], consumed: int) -> CurlParserResult:
        method = None
        url = None
        headers: list[Header] = []
        body = None
        head_only = False

        i = 0
        while i < len(tokens):
            token = tokens[i]
            i += 1

            if token == "--":
                if url is None and i < len(tokens):
                    url = tokens[i]
                break

            flag, value = token, None
            if token.startswith("--") and "=" in token:
                flag, value = token.split("=", 1)
            elif token in VALUE_FLAGS:
                if i < len(tokens):
                    value = tokens[i]
                    i += 1
            elif token[:2] in ATTACHED_SHORT_FLAGS and len(token) > 2:
                flag, value = token[:2], token[2:]
            elif token in HEAD_FLAGS:
                head_only = True
                continue
            elif token.startswith("-") and token != "-":
                # valueless flag such as -s, -L, --compressed
                continue
            else:
                if url is None:
                    url = token
                continue

            if value is None:
                continue
            if flag in METHOD_FLAGS:
                method = value
            elif flag in HEADER_FLAGS:
                name, sep, header_value = value.partition(":")
                if sep and name.strip():
                    headers.append(Header(name=name.strip(), value=header_value.strip()))
            elif flag in DATA_FLAGS:
                body = value
            elif flag in URL_FLAGS and url is None:
                url = value

        if method is None:
            if body is not None:
                method = "POST"
            elif head_only:
                method = "HEAD"
            else:
                method = "GET"

        return CurlParserResult(
            method=method.upper(),
            url=url or "",
            headers=headers,
            body=body,
            consumed_lines_count=consumed,
        )
