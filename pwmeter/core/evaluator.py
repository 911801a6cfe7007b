"""
Strength evaluation for a stream of password values.

A ``StrengthEvaluator`` watches one input (a form field, a websocket
connection). Each time it observes a value different from the previous
one it scores the password, checks the rules, picks a range and hands the
result to its ``on_change`` listener. The listener decides whether the
presentation layer should be updated for that result.

The dictionary passed in is built once per process and shared; the
evaluator itself must not be shared between inputs since it remembers the
last password it saw.
"""
import logging
from enum import Enum
from typing import AbstractSet, Any, Callable, List, Mapping, NamedTuple, Optional, Union

from pydantic import BaseModel

from pwmeter.core import entropy as entropy_estimator
from pwmeter.core import rules as rule_validator
from pwmeter.core.charset import analyze
from pwmeter.core.config import MeterSettings, Range, Rule, parse_settings
from pwmeter.core.errors import ConfigurationError
from pwmeter.core.ranges import classify

logger = logging.getLogger("pwmeter.evaluator")


class Presentation(str, Enum):
    APPLY = "apply"
    SUPPRESS = "suppress"


class EvaluationResult(BaseModel):
    password: str
    length: int = 0
    entropy: int = 0
    in_dictionary: bool = False
    charset_size: int = 0
    charset_count: int = 0
    valid: bool = True
    range: Optional[Range] = None
    failed_rules: List[Rule] = []

    @property
    def label(self) -> Optional[str]:
        return self.range.label if self.range else None

    def as_dict(self, include_password: bool = False) -> dict:
        data = {
            "length": self.length,
            "entropy": self.entropy,
            "in_dictionary": self.in_dictionary,
            "charset": {"size": self.charset_size, "count": self.charset_count},
            "valid": self.valid,
            "range": self.range.as_dict() if self.range else None,
            "failed_rules": [r.model_dump() for r in self.failed_rules],
        }
        if include_password:
            data["password"] = self.password
        return data


class Observation(NamedTuple):
    result: EvaluationResult
    presentation: Presentation


Listener = Callable[[EvaluationResult], Optional[Presentation]]


class StrengthEvaluator:
    def __init__(
        self,
        dictionary: AbstractSet[str],
        settings: Union[None, MeterSettings, Mapping[str, Any]] = None,
        on_change: Optional[Listener] = None,
    ):
        if not isinstance(dictionary, AbstractSet):
            raise ConfigurationError("dictionary must be a set of lowercase words")
        if on_change is not None and not callable(on_change):
            raise ConfigurationError("on_change must be callable")

        self.dictionary = dictionary
        self.settings = parse_settings(settings)
        self.on_change = on_change
        # last password seen; None until the first observation
        self.password: Optional[str] = None

    def evaluate(self, password: str) -> EvaluationResult:
        """Score a single password without touching the observation state."""
        profile = analyze(password)
        estimate = entropy_estimator.estimate(password, self.dictionary, profile)
        report = rule_validator.validate(password, self.settings.rules)
        matched = classify(estimate.entropy, self.settings.ranges)

        return EvaluationResult(
            password=password,
            length=estimate.length,
            entropy=estimate.entropy,
            in_dictionary=estimate.in_dictionary,
            charset_size=profile.size,
            charset_count=profile.count,
            valid=report.valid,
            range=matched,
            failed_rules=report.failed_rules,
        )

    def observe(self, value: Any) -> Optional[Observation]:
        """
        Feed the current value of the watched input.

        Returns None when the value is unchanged. Otherwise the result is
        passed to ``on_change`` and returned together with the listener's
        presentation decision.
        """
        if not isinstance(value, str):
            value = ""
        if value == self.password:
            return None

        self.password = value
        result = self.evaluate(value)
        logger.debug(
            "Password changed: length=%d entropy=%d range=%s valid=%s failed=%d",
            result.length, result.entropy, result.label, result.valid, len(result.failed_rules),
        )

        presentation = Presentation.APPLY
        if self.on_change is not None:
            if self.on_change(result) == Presentation.SUPPRESS:
                presentation = Presentation.SUPPRESS
                logger.debug("Listener suppressed presentation update")

        return Observation(result=result, presentation=presentation)
