"""
Unit tests for configuration loading.

TokenSettings reads FULFILLMENT_TOKEN_* environment variables; nested
sub-settings use "__" as the delimiter.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from fulfillment_token.config import BuilderSettings, SerializationSettings, TokenSettings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "FULFILLMENT_TOKEN_LOG_LEVEL",
        "FULFILLMENT_TOKEN_BUILDER__HMAC_PLACEHOLDER",
        "FULFILLMENT_TOKEN_BUILDER__DEFAULT_RESOURCE_ITEM",
        "FULFILLMENT_TOKEN_BUILDER__CREATE_MISSING_OPTIONAL",
        "FULFILLMENT_TOKEN_SERIALIZATION__ENCODING",
        "FULFILLMENT_TOKEN_SERIALIZATION__PRETTY_PRINT",
    ):
        monkeypatch.delenv(name, raising=False)


class TestDefaults:
    def test_empty_environment_is_valid(self) -> None:
        settings = TokenSettings()
        assert settings.log_level == "INFO"
        assert settings.builder == BuilderSettings()
        assert settings.serialization == SerializationSettings()

    def test_builder_defaults(self) -> None:
        builder = BuilderSettings()
        assert builder.default_resource_item == "1"
        assert builder.hmac_placeholder == ""
        assert builder.create_missing_optional is True

    def test_serialization_defaults(self) -> None:
        serialization = SerializationSettings()
        assert serialization.encoding == "utf-8"
        assert serialization.xml_declaration is True
        assert serialization.pretty_print is False


class TestEnvironment:
    def test_log_level_is_normalized(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FULFILLMENT_TOKEN_LOG_LEVEL", " debug ")
        assert TokenSettings().log_level == "DEBUG"

    def test_nested_builder_values(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """
        GIVEN FULFILLMENT_TOKEN_BUILDER__* variables
        WHEN TokenSettings is created
        THEN they land on the builder sub-settings.
        """
        monkeypatch.setenv("FULFILLMENT_TOKEN_BUILDER__HMAC_PLACEHOLDER", "UNSIGNED")
        monkeypatch.setenv("FULFILLMENT_TOKEN_BUILDER__CREATE_MISSING_OPTIONAL", "false")
        settings = TokenSettings()
        assert settings.builder.hmac_placeholder == "UNSIGNED"
        assert settings.builder.create_missing_optional is False
        assert settings.builder.default_resource_item == "1"

    def test_nested_serialization_values(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FULFILLMENT_TOKEN_SERIALIZATION__ENCODING", "iso-8859-1")
        monkeypatch.setenv("FULFILLMENT_TOKEN_SERIALIZATION__PRETTY_PRINT", "true")
        settings = TokenSettings()
        assert settings.serialization.encoding == "iso-8859-1"
        assert settings.serialization.pretty_print is True


class TestValidation:
    def test_unknown_log_level_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FULFILLMENT_TOKEN_LOG_LEVEL", "LOUD")
        with pytest.raises(ValidationError, match="Unknown log level"):
            TokenSettings()

    @pytest.mark.parametrize("encoding", ["unicode", "Unicode", "no-such-codec"])
    def test_bad_encoding_rejected(self, encoding: str) -> None:
        with pytest.raises(ValidationError):
            SerializationSettings(encoding=encoding)

    def test_empty_default_resource_item_rejected(self) -> None:
        with pytest.raises(ValidationError):
            BuilderSettings(default_resource_item="")

    @pytest.mark.parametrize("field", ["default_resource_item", "hmac_placeholder"])
    def test_text_xml_cannot_carry_rejected(self, field: str) -> None:
        """Both values are written into the token at commit, so they must be XML text."""
        with pytest.raises(ValidationError, match=field):
            BuilderSettings(**{field: "x\x07"})

    def test_control_character_from_environment_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FULFILLMENT_TOKEN_BUILDER__HMAC_PLACEHOLDER", "sig\x01")
        with pytest.raises(ValidationError, match="hmac_placeholder"):
            TokenSettings()
