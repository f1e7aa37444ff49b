#!/usr/bin/env python
"""Configuration for logger decoration.

Explicit configuration over implicit defaults: every option can be passed to
``DecorationConfig`` directly, created with overrides through ``create`` or read
from ``LOGGER_DECORATION_*`` environment variables with ``from_env``.
"""

import os
from typing import Any, Final

import attrs

VALID_LOG_LEVELS: Final = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
ENV_PREFIX: Final = "LOGGER_DECORATION_"

# Record attributes written for every decorated log call
CLASS_NAME_ATTRIBUTE: Final = "class_name"
METHOD_NAME_ATTRIBUTE: Final = "method_name"
FILE_PATH_ATTRIBUTE: Final = "file_path"
LINE_NUMBER_ATTRIBUTE: Final = "line_number"


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


def _valid_prefix(_instance: Any, attribute: attrs.Attribute, value: str) -> None:
    if value and not value.isidentifier():
        raise ValueError(f"{attribute.name} must be a valid identifier prefix, got {value!r}")


@attrs.define(slots=True, frozen=True)
class DecorationConfig:
    """How call-site attributes are rendered and attached to log records.

    Examples:
        >>> config = DecorationConfig(include_namespace=False)
        >>> config.attribute("class_name")
        'caller_class_name'
        >>> config = DecorationConfig.from_env()
    """

    # Name rendering
    include_namespace: bool = attrs.field(default=True, validator=attrs.validators.instance_of(bool))
    include_signature: bool = attrs.field(default=False, validator=attrs.validators.instance_of(bool))
    clean_async_continuation: bool = attrs.field(default=True, validator=attrs.validators.instance_of(bool))
    clean_anonymous_delegate: bool = attrs.field(default=True, validator=attrs.validators.instance_of(bool))

    # Record attributes
    attribute_prefix: str = attrs.field(
        default="caller_",
        validator=[attrs.validators.instance_of(str), _valid_prefix],
    )
    skip_frames: int = attrs.field(default=0, validator=[attrs.validators.instance_of(int), attrs.validators.ge(0)])

    # Console output of the decorated records
    log_level: str = attrs.field(
        default="INFO",
        converter=str.upper,
        validator=[attrs.validators.instance_of(str), attrs.validators.in_(VALID_LOG_LEVELS)],
    )
    use_rich: bool = attrs.field(default=True, validator=attrs.validators.instance_of(bool))

    @classmethod
    def create(cls, **kwargs: Any) -> "DecorationConfig":
        """Create a config with the given overrides on top of the defaults."""
        return cls(**kwargs)

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None, **overrides: Any) -> "DecorationConfig":
        """Create a config from ``LOGGER_DECORATION_*`` environment variables.

        ``LOG_LEVEL`` and ``USE_RICH_LOGGING`` are honored as fallbacks for the
        console options. Explicit ``overrides`` win over the environment.
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        for field in attrs.fields(cls):
            raw = env.get(f"{ENV_PREFIX}{field.name.upper()}")
            if raw is None:
                continue
            if field.type is bool:
                values[field.name] = _to_bool(raw)
            elif field.type is int:
                values[field.name] = int(raw)
            else:
                values[field.name] = raw

        if "log_level" not in values and "LOG_LEVEL" in env:
            values["log_level"] = env["LOG_LEVEL"]
        if "use_rich" not in values and "USE_RICH_LOGGING" in env:
            values["use_rich"] = _to_bool(env["USE_RICH_LOGGING"])

        values.update(overrides)
        return cls.create(**values)

    def attribute(self, name: str) -> str:
        """Record attribute name for one of the call-site fields."""
        return f"{self.attribute_prefix}{name}"

    @property
    def attribute_names(self) -> tuple[str, str, str, str]:
        return (
            self.attribute(CLASS_NAME_ATTRIBUTE),
            self.attribute(METHOD_NAME_ATTRIBUTE),
            self.attribute(FILE_PATH_ATTRIBUTE),
            self.attribute(LINE_NUMBER_ATTRIBUTE),
        )
