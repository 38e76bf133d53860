"""
Configuration — typed, validated settings loaded from environment/.env.

Uses pydantic-settings to:
  - Load from environment variables prefixed FULFILLMENT_TOKEN_
  - Fall back to a .env file at the project root
  - Validate types and constraints when the settings object is created

Only TokenSettings is a BaseSettings instance. Sub-settings are plain
BaseModel classes populated via env_nested_delimiter="__", so
FULFILLMENT_TOKEN_BUILDER__HMAC_PLACEHOLDER maps to builder.hmac_placeholder.

Every field has a default; TokenSettings() with an empty environment is valid.
The namespace, prefix and root name are fixed constants (domain.paths), not settings.
"""

from __future__ import annotations

import codecs
import logging
from pathlib import Path

from pydantic import BaseModel, Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fulfillment_token.elements import check_text

_ENV_FILE = Path(__file__).parent.parent.parent / ".env"


class BuilderSettings(BaseModel):
    """Values the staged builder writes on its own, and how it treats optional fields."""

    default_resource_item: str = Field(
        default="1",
        min_length=1,
        description="resourceItem value written at the commit point",
    )
    hmac_placeholder: str = Field(
        default="",
        description="hmac value written at the commit point, before signing",
    )
    create_missing_optional: bool = Field(
        default=True,
        description=(
            "Create src/downloadType/userId elements when an optional setter targets them; "
            "when false the write is dropped with a warning"
        ),
    )

    @field_validator("default_resource_item", "hmac_placeholder")
    @classmethod
    def validate_xml_text(cls, value: str, info: ValidationInfo) -> str:
        """Both values are written verbatim at the commit point."""
        return check_text(info.field_name, value)


class SerializationSettings(BaseModel):
    """How a finished token is rendered to bytes."""

    encoding: str = Field(default="utf-8", description="Output encoding")
    xml_declaration: bool = Field(default=True, description="Emit <?xml ...?> header")
    pretty_print: bool = Field(default=False, description="Indent the output")

    @field_validator("encoding")
    @classmethod
    def validate_encoding(cls, value: str) -> str:
        """Reject encodings Python does not know, and lxml's text-mode 'unicode'."""
        if value.lower() == "unicode":
            raise ValueError("encoding must produce bytes; 'unicode' is not allowed")
        try:
            codecs.lookup(value)
        except LookupError as e:
            raise ValueError(f"Unknown encoding: {value!r}") from e
        return value


class TokenSettings(BaseSettings):
    """
    Root settings — aggregates the sub-settings.

    Load order (highest priority first):
      1. Environment variables
      2. .env file
      3. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="FULFILLMENT_TOKEN_",
        env_file=_ENV_FILE,
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    builder: BuilderSettings = Field(default_factory=lambda: BuilderSettings())
    serialization: SerializationSettings = Field(default_factory=lambda: SerializationSettings())

    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value!r}")
        return level
