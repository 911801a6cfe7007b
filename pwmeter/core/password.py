"""
One-shot strength reports for the HTTP API.

The NIST entropy estimate decides the range and validity. zxcvbn is run
alongside it only to produce human-readable feedback (a warning and
suggestions); its score is reported but never used for classification.

Raw passwords are NEVER logged and never included in a report.
"""
import logging
from typing import Optional

import zxcvbn as _zxcvbn

from pwmeter.core.evaluator import StrengthEvaluator
from pwmeter.core.meter import MeterState

logger = logging.getLogger("pwmeter.password")

# zxcvbn refuses long inputs; the tail adds nothing to its feedback
FEEDBACK_MAX_LENGTH = 72


def zxcvbn_feedback(password: str, username: Optional[str] = None) -> dict:
    user_inputs = [username] if username else []
    result = _zxcvbn.zxcvbn(password[:FEEDBACK_MAX_LENGTH], user_inputs=user_inputs)
    feedback = result.get("feedback", {})
    return {
        "score": result["score"],          # 0–4
        "warning": feedback.get("warning", ""),
        "suggestions": feedback.get("suggestions", []),
    }


def strength_report(evaluator: StrengthEvaluator, password: str, username: Optional[str] = None) -> dict:
    """
    Evaluate ``password`` once and return a sanitised report suitable for
    sending to the client.
    """
    result = evaluator.evaluate(password)
    meter = MeterState(evaluator.settings)

    report = result.as_dict()
    report["classes"] = meter.apply(result)
    report["feedback"] = zxcvbn_feedback(password, username=username) if password else {
        "score": 0,
        "warning": "",
        "suggestions": [],
    }
    logger.info(
        "Strength report: length=%d entropy=%d range=%s valid=%s",
        result.length, result.entropy, result.label, result.valid,
    )
    return report
