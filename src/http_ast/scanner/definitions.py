"""Definition scanning: file variables, request names, prompts, settings and comments."""

import re

from pydantic import BaseModel

from http_ast.parser.base import Comment, FileVariable, LineContext, PromptVariable, RequestSetting
from http_ast.parser.directives import BARE_NAME_RE, FILE_VARIABLE_RE, is_comment, strip_comment_marker
from http_ast.segmenter.segmenter import is_delimiter

ESCAPES = {"n": "\n", "r": "\r", "t": "\t", "\\": "\\"}
ESCAPE_RE = re.compile(r"\\([nrt\\])")


def unescape(value: str) -> str:
    r"""Turn the escape sequences \n \r \t \\ into their characters."""
    return ESCAPE_RE.sub(lambda m: ESCAPES[m.group(1)], value)


class DefinitionScanResult(BaseModel):
    request_name: str | None = None
    request_name_line: int | None = None
    file_variables: list[FileVariable] = []
    prompts: list[PromptVariable] = []
    settings: list[RequestSetting] = []
    comments: list[Comment] = []


class VariableScanner:
    """Extracts metadata definitions from a segment's lines.

    scope_for maps a line number to the scope id recorded on file variables
    (None for file scope). Without it every variable gets scope_id None.
    """

    def scan(self, lines: list[LineContext], scope_for=None) -> DefinitionScanResult:
        result = DefinitionScanResult()

        for line in lines:
            text = line.text.strip()
            if not text:
                continue

            var_match = FILE_VARIABLE_RE.match(text)
            if var_match:
                result.file_variables.append(FileVariable(
                    key=var_match.group(1),
                    value=unescape(var_match.group(2).strip()),
                    line_number=line.line_number,
                    scope_id=scope_for(line.line_number) if scope_for else None,
                ))
                continue

            name_match = BARE_NAME_RE.match(text)
            if name_match:
                self._set_name(result, name_match.group(1).strip(), line.line_number)
                continue

            if not is_comment(text) or is_delimiter(text):
                continue

            clean = strip_comment_marker(text)
            if not clean.startswith("@"):
                result.comments.append(Comment(text=clean, line_number=line.line_number))
                continue

            parts = clean[1:].split(maxsplit=1)
            if not parts:
                continue
            directive = parts[0]
            rest = parts[1].strip() if len(parts) > 1 else ""
            if directive == "name":
                if rest:
                    self._set_name(result, rest, line.line_number)
            elif directive == "prompt":
                prompt_parts = rest.split(maxsplit=1)
                if prompt_parts:
                    description = prompt_parts[1] if len(prompt_parts) > 1 else ""
                    result.prompts.append(PromptVariable(
                        name=prompt_parts[0],
                        description=" ".join(description.split()) or None,
                        line_number=line.line_number,
                    ))
            else:
                result.settings.append(RequestSetting(
                    name=directive,
                    value=" ".join(rest.split()) or None,
                    line_number=line.line_number,
                ))

        return result

    def _set_name(self, result: DefinitionScanResult, name: str, line_number: int) -> None:
        # first occurrence wins
        if result.request_name is None:
            result.request_name = name
            result.request_name_line = line_number
