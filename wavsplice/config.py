"""Processor configuration, the contract between CLI/API and the processors.

A configuration is one of two variants, tagged by ``type``:

    {"type": "splice", "duration": 2.0, "count": 3, "reverse": true}
    {"type": "normalize", "target_level": 0.9, "apply_to_splices": false}
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Union

from wavsplice.errors import (
    AudioIOError,
    InvalidConfigError,
    InvalidDurationError,
    InvalidSpliceCountError,
)


@dataclass(frozen=True)
class SpliceConfig:
    """Extract ``count`` random clips of ``duration`` seconds each."""

    duration: float
    count: int
    reverse: bool = False

    type = "splice"

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "duration": self.duration,
            "count": self.count,
            "reverse": self.reverse,
        }


@dataclass(frozen=True)
class NormalizeConfig:
    """Scale the peak to ``target_level`` (1.0 = full scale)."""

    target_level: float
    apply_to_splices: bool = False

    type = "normalize"

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "target_level": self.target_level,
            "apply_to_splices": self.apply_to_splices,
        }


ProcessorConfig = Union[SpliceConfig, NormalizeConfig]

_TRUE = {"true", "1", "on", "yes"}
_FALSE = {"false", "0", "off", "no", ""}

# form field name -> config field name
_FORM_ALIASES = {
    "spliceDuration": "duration",
    "spliceCount": "count",
    "targetLevel": "target_level",
    "applyToSplices": "apply_to_splices",
}


def parse_bool(value, field_name: str) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise InvalidConfigError(f"Invalid {field_name} flag format: {value!r}")


def _parse_duration(value) -> float:
    if isinstance(value, bool):
        raise InvalidDurationError("Invalid splice duration format")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise InvalidDurationError("Invalid splice duration format") from None


def _parse_count(value) -> int:
    if isinstance(value, bool):
        raise InvalidSpliceCountError("Invalid splice count format")
    if isinstance(value, float):
        if not value.is_integer():
            raise InvalidSpliceCountError("Invalid splice count format")
        return int(value)
    try:
        return int(str(value).strip())
    except ValueError:
        raise InvalidSpliceCountError("Invalid splice count format") from None


def _parse_level(value) -> float:
    if isinstance(value, bool):
        raise InvalidConfigError("Invalid target level format")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise InvalidConfigError("Invalid target level format") from None


def config_from_dict(data: Mapping, processor_type: str | None = None) -> ProcessorConfig:
    """Build a config variant from a mapping.

    The variant comes from ``data["type"]``, falling back to
    ``processor_type`` (used when the tag is implied by the endpoint).
    Only range checks are left to the processors' ``validate_config``.
    """
    kind = data.get("type") or processor_type
    if processor_type and kind != processor_type:
        raise InvalidConfigError(
            f"Config type {kind!r} does not match processor {processor_type!r}"
        )

    if kind == SpliceConfig.type:
        if "duration" not in data:
            raise InvalidDurationError("splice duration is required")
        if "count" not in data:
            raise InvalidSpliceCountError("splice count is required")
        return SpliceConfig(
            duration=_parse_duration(data["duration"]),
            count=_parse_count(data["count"]),
            reverse=parse_bool(data.get("reverse", False), "reverse"),
        )

    if kind == NormalizeConfig.type:
        if "target_level" not in data:
            raise InvalidConfigError("target_level is required")
        return NormalizeConfig(
            target_level=_parse_level(data["target_level"]),
            apply_to_splices=parse_bool(
                data.get("apply_to_splices", False), "apply_to_splices"
            ),
        )

    raise InvalidConfigError(f"Unknown processor type: {kind!r}")


def config_from_form(form: Mapping, processor_type: str) -> ProcessorConfig:
    """Build a config from multipart/form fields.

    A ``config`` field holding JSON takes precedence; otherwise the
    individual fields are read, under either their camelCase form names
    or their config names.
    """
    raw = form.get("config")
    if raw:
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise InvalidConfigError(f"config field is not valid JSON: {e}") from None
        if not isinstance(data, dict):
            raise InvalidConfigError("config field must be a JSON object")
        return config_from_dict(data, processor_type)

    data = {}
    for key in form.keys():
        data[_FORM_ALIASES.get(key, key)] = form.get(key)
    data.pop("config", None)
    data["type"] = processor_type
    return config_from_dict(data, processor_type)


def load_config(path: str | Path) -> ProcessorConfig:
    """Load a processor config from a JSON file.

    An unreadable file raises AudioIOError; content that is not UTF-8 JSON
    raises InvalidConfigError.
    """
    path = Path(path)
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise AudioIOError(f"cannot read config {path}: {e}") from e
    try:
        data = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise InvalidConfigError(f"{path.name} is not valid JSON: {e}") from None

    if not isinstance(data, dict) or "type" not in data:
        raise InvalidConfigError("Config must be a JSON object with a 'type' field")

    return config_from_dict(data)
