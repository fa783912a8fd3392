"""Comprehensive tests for configuration system."""

import json
from dataclasses import FrozenInstanceError

import pytest

from utf8_engine.shared.config import (
    DEFAULT_GROWTH_FACTOR,
    DEFAULT_MIN_CAPACITY,
    BufferConfig,
    CodecConfig,
    ConfigError,
    ConfigValidationError,
    EngineConfig,
    ErrorPolicy,
    GlobalConfig,
)


class TestCodecConfig:
    """Test suite for CodecConfig."""

    def test_default_configuration(self):
        """Test default codec configuration values."""
        config = CodecConfig()
        assert config.error_policy is ErrorPolicy.REJECT
        assert config.record_diagnostics is True

    def test_invalid_policy(self):
        """Test that a plain string is not accepted as a policy."""
        with pytest.raises(ValueError, match="error_policy"):
            CodecConfig(error_policy="replace")


class TestBufferConfig:
    """Test suite for BufferConfig."""

    def test_default_configuration(self):
        """Test default buffer configuration values."""
        config = BufferConfig()
        assert config.min_capacity == DEFAULT_MIN_CAPACITY == 16
        assert config.growth_factor == DEFAULT_GROWTH_FACTOR == 2
        assert config.max_capacity is None

    @pytest.mark.parametrize(
        "kwargs,message",
        [
            ({"min_capacity": 0}, "min_capacity must be >= 1"),
            ({"growth_factor": 1}, "growth_factor must be >= 2"),
            ({"min_capacity": 32, "max_capacity": 16}, "max_capacity must be >= min_capacity"),
        ],
    )
    def test_validation_failures(self, kwargs, message):
        """Test buffer configuration validation."""
        with pytest.raises(ValueError, match=message):
            BufferConfig(**kwargs)

    @pytest.mark.parametrize(
        "kwargs,field_name",
        [
            ({"min_capacity": 16.0}, "min_capacity"),
            ({"growth_factor": 2.5}, "growth_factor"),
            ({"growth_factor": True}, "growth_factor"),
            ({"max_capacity": 64.0}, "max_capacity"),
            ({"min_capacity": "16"}, "min_capacity"),
        ],
    )
    def test_non_integer_sizes_rejected(self, kwargs, field_name):
        """Test that sizes must be plain integers."""
        with pytest.raises(ValueError, match=f"{field_name} must be an int"):
            BufferConfig(**kwargs)


class TestGlobalConfig:
    """Test suite for GlobalConfig."""

    def test_default_configuration(self):
        """Test default global configuration values."""
        config = GlobalConfig()
        assert config.logging_level == "WARNING"
        assert config.correlation_id is None

    def test_invalid_logging_level(self):
        """Test that unknown level names are rejected."""
        with pytest.raises(ValueError, match="logging_level must be one of"):
            GlobalConfig(logging_level="LOUD")


class TestEngineConfig:
    """Test suite for the aggregate EngineConfig."""

    def test_default_configuration(self):
        """Test that defaults are built for every component."""
        config = EngineConfig()
        assert isinstance(config.codec, CodecConfig)
        assert isinstance(config.buffer, BufferConfig)
        assert isinstance(config.global_, GlobalConfig)
        assert config.name is None

    def test_frozen(self):
        """Test that the aggregate is immutable."""
        config = EngineConfig()
        with pytest.raises(AttributeError):
            config.name = "changed"

    def test_cross_component_validation(self):
        """Test that a max_capacity without room for the terminator fails."""
        with pytest.raises(ConfigValidationError) as exc_info:
            EngineConfig(buffer=BufferConfig(min_capacity=1, max_capacity=1))

        assert exc_info.value.field_name == "buffer.max_capacity"
        assert exc_info.value.suggestions

    def test_component_errors_wrapped(self):
        """Test that component validation errors are wrapped on revalidation."""
        buffer = BufferConfig()
        object.__setattr__(buffer, "growth_factor", 1)
        with pytest.raises(ConfigValidationError, match="growth_factor"):
            EngineConfig(buffer=buffer)

    @pytest.mark.parametrize(
        "component,field_name,value",
        [
            ("buffer", "growth_factor", 1),
            ("buffer", "min_capacity", 0),
            ("codec", "error_policy", ErrorPolicy.REPLACE),
            ("global_", "logging_level", "DEBUG"),
        ],
    )
    def test_components_frozen(self, component, field_name, value):
        """Test that components of a shared configuration cannot be mutated."""
        config = EngineConfig()
        with pytest.raises(FrozenInstanceError):
            setattr(getattr(config, component), field_name, value)

    def test_float_growth_factor_from_json(self):
        """Test that non-integer buffer sizes in JSON are rejected."""
        with pytest.raises(ConfigValidationError, match="growth_factor must be an int"):
            EngineConfig.from_json('{"buffer": {"growth_factor": 2.5}}')
        with pytest.raises(ConfigValidationError, match="min_capacity must be an int"):
            EngineConfig.from_json('{"buffer": {"min_capacity": 16.0}}')

    def test_validation_error_is_config_error(self):
        """Test the configuration exception hierarchy."""
        assert issubclass(ConfigValidationError, ConfigError)

    def test_override_nested_fields(self):
        """Test overriding nested fields with double underscores."""
        config = EngineConfig()
        new_config = config.override(
            codec__error_policy=ErrorPolicy.REPLACE,
            buffer__min_capacity=64,
            name="custom",
        )

        assert new_config.codec.error_policy is ErrorPolicy.REPLACE
        assert new_config.buffer.min_capacity == 64
        assert new_config.name == "custom"
        assert config.codec.error_policy is ErrorPolicy.REJECT
        assert config.buffer.min_capacity == 16

    def test_override_validates(self):
        """Test that overrides are validated."""
        with pytest.raises(ValueError):
            EngineConfig().override(buffer__growth_factor=0)

    def test_to_dict(self):
        """Test dictionary conversion with enum names."""
        data = EngineConfig.lenient().to_dict()
        assert data["codec"]["error_policy"] == "REPLACE"
        assert data["buffer"]["min_capacity"] == 16
        assert data["global_"]["logging_level"] == "WARNING"
        assert data["name"] == "lenient"

    def test_json_round_trip(self):
        """Test that JSON serialization restores an equal configuration."""
        original = EngineConfig.compact().override(buffer__max_capacity=1024)
        restored = EngineConfig.from_json(original.to_json())

        assert restored == original
        assert json.loads(original.to_json())["buffer"]["max_capacity"] == 1024

    def test_from_dict_partial(self):
        """Test that missing keys keep defaults and unknown keys are ignored."""
        config = EngineConfig.from_dict({
            "codec": {"error_policy": "replace", "unknown": True},
            "extra": 1,
        })
        assert config.codec.error_policy is ErrorPolicy.REPLACE
        assert config.buffer == BufferConfig()

    def test_from_dict_invalid_policy(self):
        """Test that an unknown policy name is reported."""
        with pytest.raises(ConfigValidationError, match="Invalid configuration data"):
            EngineConfig.from_dict({"codec": {"error_policy": "ignore"}})

    def test_from_dict_invalid_values(self):
        """Test that invalid component values are reported."""
        with pytest.raises(ConfigValidationError):
            EngineConfig.from_dict({"buffer": {"min_capacity": 0}})

    def test_from_json_invalid(self):
        """Test malformed and non-object JSON."""
        with pytest.raises(ConfigValidationError, match="Invalid configuration JSON"):
            EngineConfig.from_json("{not json")
        with pytest.raises(ConfigValidationError, match="must be an object"):
            EngineConfig.from_json("[1, 2]")


class TestPresets:
    """Test preset factory methods."""

    def test_strict(self):
        config = EngineConfig.strict()
        assert config.codec.error_policy is ErrorPolicy.REJECT
        assert config.name == "strict"

    def test_lenient(self):
        config = EngineConfig.lenient()
        assert config.codec.error_policy is ErrorPolicy.REPLACE
        assert config.description

    def test_compact(self):
        config = EngineConfig.compact()
        assert config.buffer.min_capacity == 4
        assert config.global_.logging_level == "ERROR"
