#!/usr/bin/env python3
"""Unit tests for DecorationConfig."""

import attrs
import pytest

from logger_decoration.utils.config import DecorationConfig


class TestDecorationConfig:
    """Defaults, validation and attribute naming."""

    def test_defaults(self):
        config = DecorationConfig()

        assert config.include_namespace is True
        assert config.include_signature is False
        assert config.clean_async_continuation is True
        assert config.clean_anonymous_delegate is True
        assert config.attribute_prefix == "caller_"
        assert config.skip_frames == 0
        assert config.log_level == "INFO"

    def test_attribute_names(self):
        config = DecorationConfig(attribute_prefix="site_")

        assert config.attribute("class_name") == "site_class_name"
        assert config.attribute_names == ("site_class_name", "site_method_name", "site_file_path", "site_line_number")

    def test_log_level_case_conversion(self):
        assert DecorationConfig(log_level="debug").log_level == "DEBUG"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"log_level": "INVALID"},
            {"skip_frames": -1},
            {"attribute_prefix": "not a prefix"},
        ],
    )
    def test_invalid_values_are_rejected(self, overrides):
        with pytest.raises(ValueError):
            DecorationConfig(**overrides)

    def test_type_validation(self):
        with pytest.raises(TypeError):
            DecorationConfig(include_namespace="yes")

    def test_frozen(self):
        config = DecorationConfig()

        with pytest.raises(attrs.exceptions.FrozenInstanceError):
            config.skip_frames = 1

    def test_create_with_overrides(self):
        config = DecorationConfig.create(include_signature=True, skip_frames=2)

        assert config.include_signature is True
        assert config.skip_frames == 2


class TestFromEnv:
    """Reading LOGGER_DECORATION_* variables."""

    def test_reads_prefixed_variables(self):
        environ = {
            "LOGGER_DECORATION_INCLUDE_NAMESPACE": "false",
            "LOGGER_DECORATION_SKIP_FRAMES": "1",
            "LOGGER_DECORATION_ATTRIBUTE_PREFIX": "site_",
            "LOGGER_DECORATION_LOG_LEVEL": "warning",
        }

        config = DecorationConfig.from_env(environ)

        assert config.include_namespace is False
        assert config.skip_frames == 1
        assert config.attribute_prefix == "site_"
        assert config.log_level == "WARNING"

    def test_generic_fallbacks(self):
        config = DecorationConfig.from_env({"LOG_LEVEL": "ERROR", "USE_RICH_LOGGING": "false"})

        assert config.log_level == "ERROR"
        assert config.use_rich is False

    def test_prefixed_variable_wins_over_fallback(self):
        config = DecorationConfig.from_env({"LOG_LEVEL": "ERROR", "LOGGER_DECORATION_LOG_LEVEL": "DEBUG"})

        assert config.log_level == "DEBUG"

    def test_overrides_win_over_environment(self):
        config = DecorationConfig.from_env({"LOGGER_DECORATION_SKIP_FRAMES": "3"}, skip_frames=0)

        assert config.skip_frames == 0

    def test_process_environment(self, monkeypatch):
        monkeypatch.setenv("LOGGER_DECORATION_INCLUDE_SIGNATURE", "true")

        assert DecorationConfig.from_env().include_signature is True
