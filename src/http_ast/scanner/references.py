"""Variable reference scanning: find and classify every {{...}} in a line.

    {{$guid}}                          -> system
    {{$randomInt 1 100}}               -> system, params "1 100"
    {{login.response.body.$.token}}    -> request
    {{host}}                           -> custom
"""

import re

from http_ast.parser.base import LineContext, VariableReference

REFERENCE_RE = re.compile(r"\{\{(.*?)\}\}")
REQUEST_REFERENCE_RE = re.compile(r"^([^.\s]+)\.(request|response)\.(body|headers)\.(.+)$")

KNOWN_SYSTEM_VARIABLES = (
    "$guid",
    "$randomInt",
    "$timestamp",
    "$datetime",
    "$localDatetime",
    "$processEnv",
    "$dotenv",
    "$aadToken",
)


def is_known_system_variable(name: str) -> bool:
    return name in KNOWN_SYSTEM_VARIABLES


def classify_reference(inner: str, raw: str, offset: int, line_number: int | None = None) -> VariableReference:
    """Build a VariableReference from the trimmed text inside the braces."""
    common = {"name": inner, "raw": raw, "offset": offset, "length": len(raw), "line_number": line_number}

    if inner.startswith("$"):
        system_name, _, params = inner.partition(" ")
        return VariableReference(kind="system", system_name=system_name, params=params.strip() or None, **common)

    match = REQUEST_REFERENCE_RE.match(inner)
    if match:
        return VariableReference(
            kind="request",
            request_name=match.group(1),
            source=match.group(2),
            part=match.group(3),
            path=match.group(4),
            **common,
        )

    return VariableReference(kind="custom", **common)


class ReferenceScanner:
    """Finds {{...}} references; each reference lives within one line."""

    def scan_text(self, text: str, line_number: int | None = None) -> list[VariableReference]:
        return [
            classify_reference(m.group(1).strip(), m.group(0), m.start(), line_number)
            for m in REFERENCE_RE.finditer(text)
        ]

    def scan(self, lines: list[LineContext]) -> list[VariableReference]:
        """All references in the given lines, in document order."""
        refs: list[VariableReference] = []
        for line in lines:
            refs.extend(self.scan_text(line.text, line.line_number))
        return refs
