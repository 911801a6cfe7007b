from typing import List, NamedTuple, Sequence

from pwmeter.core.config import Rule


class RuleReport(NamedTuple):
    valid: bool
    failed_rules: List[Rule]


def validate(password: str, rules: Sequence[Rule]) -> RuleReport:
    """
    Check every rule, in order, without stopping at the first failure.

    Failed rules are returned as copies so callers can't alter the
    evaluator's configuration through a result.
    """
    failed = [rule.model_copy() for rule in rules if not rule.is_satisfied(password)]
    return RuleReport(valid=not failed, failed_rules=failed)
