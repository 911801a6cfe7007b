"""
Strength meter presentation state.

Keeps the list of class names a strength meter widget should carry and
updates it from evaluation results: one validity label plus the label of
the matched range.
"""
from typing import Iterable, List, Optional

from pwmeter.core.config import MeterSettings
from pwmeter.core.evaluator import EvaluationResult, Observation, Presentation


class MeterState:
    def __init__(self, settings: MeterSettings, classes: Optional[Iterable[str]] = None):
        self.settings = settings
        self.classes: List[str] = [c for c in (classes or []) if c]

    def add(self, name: str):
        if name and name not in self.classes:
            self.classes.append(name)

    def remove(self, name: str):
        if name in self.classes:
            self.classes.remove(name)

    def apply(self, result: EvaluationResult) -> List[str]:
        if result.valid:
            self.remove(self.settings.invalid_label)
            self.add(self.settings.valid_label)
        else:
            self.remove(self.settings.valid_label)
            self.add(self.settings.invalid_label)

        current = result.label
        if current:
            self.add(current)
        for configured in self.settings.ranges:
            if configured.label != current:
                self.remove(configured.label)
        return list(self.classes)

    def update(self, observation: Optional[Observation]) -> bool:
        """Apply an observation unless it was skipped or suppressed. Returns True if applied."""
        if observation is None or observation.presentation == Presentation.SUPPRESS:
            return False
        self.apply(observation.result)
        return True
