from typing import Optional, Sequence

from pwmeter.core.config import Range


def classify(entropy: float, ranges: Sequence[Range]) -> Optional[Range]:
    """First range containing ``entropy``; list order breaks ties on shared bounds."""
    for candidate in ranges:
        if candidate.contains(entropy):
            return candidate
    return None
