"""Parser options schema and the http-ast.yaml / env var loader"""

import codecs
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from http_ast.exceptions import ConfigError


CONFIG_FILE = "http-ast.yaml"
ENV_PREFIX = "HTTP_AST_"


class ParserOptions(BaseModel):
    encoding:      str = Field(default="utf-8", description="Encoding used to decode byte input")
    strict:        bool = Field(default=False, description="Report soft anomalies as diagnostics")
    max_segments:  Optional[int] = Field(default=None, ge=1, description="Max segments to parse; None = unlimited")
    max_body_size: Optional[int] = Field(default=None, ge=0, description="Max body size in bytes; None = unlimited")

    @field_validator("encoding")
    @classmethod
    def _known_codec(cls, v: str) -> str:
        try:
            codecs.lookup(v)
        except LookupError as e:
            raise ValueError(f"unknown encoding: {v}") from e
        return v


def _read_config_file(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid {path}: expected a mapping, got {type(data).__name__}")
    return data


def load_options(config_path: Path | None = None, overrides: dict[str, Any] | None = None) -> ParserOptions:
    """Load ParserOptions from http-ast.yaml, then HTTP_AST_<FIELD> env vars, then non-None overrides."""
    data: dict[str, Any] = {}
    path = config_path or Path(CONFIG_FILE)
    if path.exists():
        data = _read_config_file(path)
    elif config_path is not None:
        raise ConfigError(f"Config file not found: {config_path}")

    for name in ParserOptions.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return ParserOptions(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid parser options: {e}") from e
