"""
Entropy estimate after NIST SP 800-63-1, Appendix A.

    entropy = floor(log2(alphabet size) * length)
              + composition bonus + dictionary bonus

An empty alphabet (empty password) scores 0 with no bonuses.
"""
import math
from typing import AbstractSet, NamedTuple, Optional

from pwmeter.core.charset import CharsetProfile, analyze, code_unit_length

DICTIONARY_MIN_LENGTH = 4
DICTIONARY_MAX_LENGTH = 20  # exclusive
DICTIONARY_MAX_BONUS = 6


class EntropyEstimate(NamedTuple):
    entropy: int
    in_dictionary: bool
    charset: CharsetProfile
    length: int


def composition_bonus(length: int, class_count: int) -> int:
    """Extra bits for short passwords that mix at least three classes."""
    if length < 4 or class_count < 3:
        return 0
    if length >= 8:
        return 6
    if length == 7:
        return 5
    if length >= 5:
        return 3
    return 2


def dictionary_bonus(password: str, dictionary: AbstractSet[str], length: Optional[int] = None) -> int:
    if length is None:
        length = code_unit_length(password)
    if DICTIONARY_MIN_LENGTH <= length < DICTIONARY_MAX_LENGTH and password.lower() not in dictionary:
        return min(length, DICTIONARY_MAX_BONUS)
    return 0


def estimate(password: str, dictionary: AbstractSet[str], profile: Optional[CharsetProfile] = None) -> EntropyEstimate:
    if profile is None:
        profile = analyze(password)
    length = code_unit_length(password)
    dict_bits = dictionary_bonus(password, dictionary, length)

    if profile.size <= 0:
        entropy = 0
    else:
        entropy = (
            math.floor(math.log(profile.size) * (length / math.log(2)))
            + composition_bonus(length, profile.count)
            + dict_bits
        )

    # Membership is reported whenever no dictionary bonus was granted,
    # including words outside the 4..19 length window.
    in_dictionary = dict_bits == 0 and password.lower() in dictionary

    return EntropyEstimate(entropy=entropy, in_dictionary=in_dictionary, charset=profile, length=length)
