import json
import logging
import math
import os
import re
from typing import Any, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from pwmeter.core.errors import ConfigurationError

logger = logging.getLogger("pwmeter.config")

SETTINGS_PATH = os.environ.get("PWMETER_SETTINGS", "")

# compiled-pattern flags that can be carried as inline flags in the pattern text
_INLINE_FLAGS = (
    (re.ASCII, "a"),
    (re.MULTILINE, "m"),
    (re.DOTALL, "s"),
    (re.VERBOSE, "x"),
)


class Range(BaseModel):
    """Labeled entropy bucket; both bounds are inclusive."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    min: float = -math.inf
    max: float = math.inf
    label: str

    @field_validator("min", mode="before")
    @classmethod
    def unbounded_min(cls, v):
        return -math.inf if v is None else v

    @field_validator("max", mode="before")
    @classmethod
    def unbounded_max(cls, v):
        return math.inf if v is None else v

    @field_validator("min", "max")
    @classmethod
    def not_nan(cls, v):
        if math.isnan(v):
            raise ValueError("Range bounds must not be NaN")
        return v

    @field_validator("max")
    @classmethod
    def ordered_bounds(cls, v, info):
        low = info.data.get("min")
        if low is not None and low > v:
            raise ValueError(f"Range min ({low}) is greater than max ({v})")
        return v

    def contains(self, entropy: float) -> bool:
        return self.min <= entropy <= self.max

    def as_dict(self) -> dict:
        # JSON has no infinity; open ends are sent as null
        return {
            "min": None if math.isinf(self.min) else self.min,
            "max": None if math.isinf(self.max) else self.max,
            "label": self.label,
        }


class Rule(BaseModel):
    """
    Pass/fail check on the raw password.

    ``pattern`` is searched for anywhere in the password. The rule holds when
    the outcome equals ``result``: ``result=False`` means the pattern must
    NOT be found.

    A compiled pattern may be given instead of a string. ``re.IGNORECASE``
    becomes ``ignore_case``; ASCII, MULTILINE, DOTALL and VERBOSE are kept
    as inline flags. Any other flag is rejected.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    pattern: str
    result: bool = True
    ignore_case: bool = False
    description: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def compiled_pattern(cls, data):
        if not isinstance(data, dict) or not isinstance(data.get("pattern"), re.Pattern):
            return data
        compiled = data["pattern"]
        flags = compiled.flags & ~re.UNICODE
        data = dict(data)
        if flags & re.IGNORECASE:
            data["ignore_case"] = True
            flags &= ~re.IGNORECASE
        inline = ""
        for flag, letter in _INLINE_FLAGS:
            if flags & flag:
                inline += letter
                flags &= ~flag
        if flags:
            raise ValueError(f"Unsupported flags on compiled rule pattern: {flags:#x}")
        data["pattern"] = f"(?{inline}){compiled.pattern}" if inline else compiled.pattern
        return data

    @field_validator("pattern")
    @classmethod
    def valid_pattern(cls, v):
        if not v:
            raise ValueError("Rule pattern must not be empty")
        try:
            re.compile(v)
        except re.error as exc:
            raise ValueError(f"Invalid rule pattern {v!r}: {exc}")
        return v

    def test(self, password: str) -> bool:
        flags = re.IGNORECASE if self.ignore_case else 0
        return re.search(self.pattern, password, flags) is not None

    def is_satisfied(self, password: str) -> bool:
        return self.test(password) == self.result


def default_ranges() -> List[Range]:
    return [
        Range(min=-math.inf, max=0, label="empty"),
        Range(min=0, max=56, label="weak"),
        Range(min=56, max=80, label="good"),
        Range(min=80, max=math.inf, label="strong"),
    ]


class MeterSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    ranges: List[Range] = Field(default_factory=default_ranges)
    rules: List[Rule] = Field(default_factory=list)
    valid_label: str = "valid"
    invalid_label: str = "invalid"

    @field_validator("valid_label", "invalid_label")
    @classmethod
    def non_empty_label(cls, v):
        if not v.strip():
            raise ValueError("Labels must not be blank")
        return v

    def as_dict(self) -> dict:
        return {
            "ranges": [r.as_dict() for r in self.ranges],
            "rules": [r.model_dump() for r in self.rules],
            "valid_label": self.valid_label,
            "invalid_label": self.invalid_label,
        }


def parse_settings(data: Union[None, MeterSettings, Mapping[str, Any]]) -> MeterSettings:
    """Build a private ``MeterSettings`` copy, raising ``ConfigurationError`` on bad input."""
    if data is None:
        return MeterSettings()
    if isinstance(data, MeterSettings):
        return data.model_copy(deep=True)
    if not isinstance(data, Mapping):
        raise ConfigurationError(f"Settings must be a mapping, got {type(data).__name__}")
    try:
        return MeterSettings(**data).model_copy(deep=True)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid meter settings: {exc}") from exc


class ConfigManager:
    """Holds the service-wide meter settings."""

    def __init__(self, path: str = SETTINGS_PATH):
        self.path = path
        self._settings = self._load()

    def _load(self) -> MeterSettings:
        if not self.path:
            return MeterSettings()
        try:
            with open(self.path, encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as exc:
            raise ConfigurationError(f"Cannot read settings file {self.path}: {exc}") from exc
        settings = parse_settings(data)
        logger.info(
            "Loaded settings from %s (%d ranges, %d rules)",
            self.path, len(settings.ranges), len(settings.rules),
        )
        return settings

    def get_settings(self) -> MeterSettings:
        return self._settings.model_copy(deep=True)

    def update_settings(self, settings: Union[MeterSettings, Mapping[str, Any]]):
        self._settings = parse_settings(settings)
        logger.info(
            "Settings updated (%d ranges, %d rules)",
            len(self._settings.ranges), len(self._settings.rules),
        )
