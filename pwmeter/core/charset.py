import re
from typing import NamedTuple, Tuple

# Non-keyboard characters stand in for the rest of the 16-bit code space.
NON_KEYBOARD_SIZE = 65535 - 94

# (name, pattern, alphabet contribution); each class counts once when present
CHARSET_CLASSES: Tuple[Tuple[str, "re.Pattern[str]", int], ...] = (
    ("lowercase", re.compile(r"[a-z]"), 26),
    ("uppercase", re.compile(r"[A-Z]"), 26),
    ("digit", re.compile(r"[0-9]"), 10),
    ("space", re.compile(r" "), 1),
    ("symbol_upper", re.compile(r"[~`!@#$%^&*()\-_+=]"), 16),
    ("symbol_lower", re.compile(r"[\[{\]}\\|;:'\",<.>/?]"), 16),
    ("non_keyboard", re.compile(r"[^ -~]"), NON_KEYBOARD_SIZE),
)


class CharsetProfile(NamedTuple):
    size: int = 0
    count: int = 0


def analyze(password: str) -> CharsetProfile:
    """Effective alphabet size and number of character classes used."""
    size = 0
    count = 0
    for _name, pattern, weight in CHARSET_CLASSES:
        if pattern.search(password):
            size += weight
            count += 1
    return CharsetProfile(size=size, count=count)


def code_unit_length(password: str) -> int:
    """Length in UTF-16 code units, so astral characters count twice."""
    return len(password.encode("utf-16-le", "surrogatepass")) // 2
