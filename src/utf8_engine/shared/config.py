"""Configuration classes for the UTF-8 engine.

This module provides configuration objects for the codec, the string buffer
and process-wide settings, plus an aggregate ``EngineConfig`` with presets and
JSON round-tripping used by the command-line front end.
"""

import json
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional

# Buffer growth defaults
DEFAULT_MIN_CAPACITY = 16
DEFAULT_GROWTH_FACTOR = 2

VALID_LOGGING_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

COMPONENT_FIELDS = ["codec", "buffer", "global_"]


class ErrorPolicy(Enum):
    """What the bulk decoder does with malformed input."""

    REPLACE = "replace"  # Emit U+FFFD and keep going
    REJECT = "reject"    # Abort the whole decode


@dataclass(frozen=True)
class CodecConfig:
    """Configuration for bulk decode and encode operations."""

    error_policy: ErrorPolicy = ErrorPolicy.REJECT
    record_diagnostics: bool = True

    def __post_init__(self) -> None:
        """Validate codec configuration."""
        if not isinstance(self.error_policy, ErrorPolicy):
            raise ValueError(
                f"error_policy must be an ErrorPolicy, got {self.error_policy!r}"
            )


@dataclass(frozen=True)
class BufferConfig:
    """Configuration for string buffer storage growth."""

    min_capacity: int = DEFAULT_MIN_CAPACITY
    growth_factor: int = DEFAULT_GROWTH_FACTOR
    max_capacity: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate buffer configuration."""
        for name in ("min_capacity", "growth_factor", "max_capacity"):
            value = getattr(self, name)
            if name == "max_capacity" and value is None:
                continue
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValueError(f"{name} must be an int, got {value!r}")
        if self.min_capacity < 1:
            raise ValueError("min_capacity must be >= 1")
        if self.growth_factor < 2:
            raise ValueError("growth_factor must be >= 2")
        if self.max_capacity is not None and self.max_capacity < self.min_capacity:
            raise ValueError("max_capacity must be >= min_capacity or None")


@dataclass(frozen=True)
class GlobalConfig:
    """Settings that apply across all components."""

    logging_level: str = "WARNING"
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate global configuration."""
        if self.logging_level not in VALID_LOGGING_LEVELS:
            raise ValueError(f"logging_level must be one of {VALID_LOGGING_LEVELS}")


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class EngineConfig:
    """Immutable configuration for every engine component.

    Frozen so a single instance can be shared by independently owned buffers
    and codecs without any of them mutating it.
    """

    codec: CodecConfig = field(default_factory=CodecConfig)
    buffer: BufferConfig = field(default_factory=BufferConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete engine configuration."""
        try:
            self.codec.__post_init__()
            self.buffer.__post_init__()
            self.global_.__post_init__()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

        self._validate_cross_component_dependencies()

    def _validate_cross_component_dependencies(self) -> None:
        """Validate dependencies between component configurations."""
        max_capacity = self.buffer.max_capacity
        if max_capacity is not None and max_capacity <= 1:
            raise ConfigValidationError(
                "buffer.max_capacity leaves no room for the NUL terminator",
                field_name="buffer.max_capacity",
                suggestions=["Use max_capacity >= 2", "Set max_capacity to None"],
            )

    def override(self, **kwargs: Any) -> "EngineConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Field overrides; use ``component__field`` for nested fields

        Returns:
            New EngineConfig instance with overrides applied

        Example:
            >>> config = EngineConfig()
            >>> new_config = config.override(
            ...     buffer__min_capacity=64,
            ...     codec__error_policy=ErrorPolicy.REPLACE,
            ... )
        """
        nested_overrides: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                nested_overrides[key] = value

        new_fields: Dict[str, Any] = {}
        for field_name in COMPONENT_FIELDS:
            current_config = getattr(self, field_name)
            if field_name in nested_overrides:
                new_fields[field_name] = replace(
                    current_config, **nested_overrides[field_name]
                )
            else:
                new_fields[field_name] = current_config

        for key, value in nested_overrides.items():
            if key not in COMPONENT_FIELDS:
                new_fields[key] = value

        return replace(self, **new_fields)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        def _dataclass_to_dict(obj: Any) -> Any:
            if hasattr(obj, "__dataclass_fields__"):
                return {
                    name: _dataclass_to_dict(getattr(obj, name))
                    for name in obj.__dataclass_fields__
                }
            if isinstance(obj, Enum):
                return obj.name
            return obj

        result = _dataclass_to_dict(self)
        if not isinstance(result, dict):
            raise ConfigValidationError("Configuration serialization failed")
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EngineConfig":
        """Create configuration from dictionary.

        Unknown keys are ignored; missing keys keep their defaults.
        """
        component_types = {
            "codec": CodecConfig,
            "buffer": BufferConfig,
            "global_": GlobalConfig,
        }

        try:
            field_values: Dict[str, Any] = {}
            for name, component_type in component_types.items():
                raw = dict(data.get(name) or {})
                known = {
                    key: value for key, value in raw.items()
                    if key in component_type.__dataclass_fields__
                }
                if name == "codec" and isinstance(known.get("error_policy"), str):
                    known["error_policy"] = ErrorPolicy[known["error_policy"].upper()]
                field_values[name] = component_type(**known)
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigValidationError(f"Invalid configuration data: {e}") from e

        for name in ("name", "description"):
            if name in data:
                field_values[name] = data[name]

        return cls(**field_values)

    @classmethod
    def from_json(cls, json_str: str) -> "EngineConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration JSON must be an object")
        return cls.from_dict(data)

    # Preset factory methods
    @classmethod
    def strict(cls) -> "EngineConfig":
        """Preset that rejects any malformed input."""
        return cls(
            codec=CodecConfig(error_policy=ErrorPolicy.REJECT),
            name="strict",
            description="Abort decoding on the first malformed sequence",
        )

    @classmethod
    def lenient(cls) -> "EngineConfig":
        """Preset that substitutes U+FFFD for malformed input."""
        return cls(
            codec=CodecConfig(error_policy=ErrorPolicy.REPLACE),
            name="lenient",
            description="Replace malformed sequences with U+FFFD and continue",
        )

    @classmethod
    def compact(cls) -> "EngineConfig":
        """Preset for many small buffers."""
        return cls(
            buffer=BufferConfig(min_capacity=4),
            global_=GlobalConfig(logging_level="ERROR"),
            name="compact",
            description="Small initial buffer capacity for many short strings",
        )
