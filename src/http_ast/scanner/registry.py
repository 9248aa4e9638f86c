"""Per-parse variable registry: definitions grouped by scope, with precedence lookups.

The registry never evaluates a value. It only answers "which definition wins
for this name inside this segment", using the precedence

    prompt (same request) > block (same segment) > file scope > elsewhere

and, inside one scope, the last definition in document order.
"""

from pydantic import BaseModel

from http_ast.parser.base import FileVariable, PromptVariable


class VariableRegistry(BaseModel):
    """Scope arena indexed by segment id. Create one per parse call."""

    first_delimiter_line: int | None = None
    file_scope: list[FileVariable] = []
    blocks: dict[int, list[FileVariable]] = {}
    prompts: dict[int, list[PromptVariable]] = {}

    def scope_id_for(self, line_number: int, segment_id: int) -> int | None:
        """None (file scope) for lines before the first delimiter, else the segment id."""
        if self.first_delimiter_line is None or line_number < self.first_delimiter_line:
            return None
        return segment_id

    def define(self, variable: FileVariable) -> None:
        if variable.scope_id is None:
            self.file_scope.append(variable)
        else:
            self.blocks.setdefault(variable.scope_id, []).append(variable)

    def define_prompt(self, segment_id: int, prompt: PromptVariable) -> None:
        self.prompts.setdefault(segment_id, []).append(prompt)

    def block(self, segment_id: int) -> list[FileVariable]:
        return list(self.blocks.get(segment_id, []))

    def all_variables(self) -> list[FileVariable]:
        """Every file variable definition in document order."""
        merged = list(self.file_scope)
        for variables in self.blocks.values():
            merged.extend(variables)
        return sorted(merged, key=lambda v: v.line_number)

    def visible(self, segment_id: int | None = None) -> dict[str, FileVariable | PromptVariable]:
        """Winning definition for every name visible from segment_id."""
        winners: dict[str, FileVariable | PromptVariable] = {}

        # lowest precedence first so later updates override
        for other_id, variables in sorted(self.blocks.items()):
            if other_id != segment_id:
                for v in variables:
                    winners[v.key] = v
        for v in self.file_scope:
            winners[v.key] = v
        if segment_id is not None:
            for v in self.blocks.get(segment_id, []):
                winners[v.key] = v
            for p in self.prompts.get(segment_id, []):
                winners[p.name] = p
        return winners

    def lookup(self, name: str, segment_id: int | None = None) -> FileVariable | PromptVariable | None:
        return self.visible(segment_id).get(name)
