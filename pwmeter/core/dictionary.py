"""
Common-password dictionary.

The word list ships prefix-compressed: every word is written as an
uppercase marker followed by a run of literal characters. The marker's
alphabet position (A=0 ... Z=25) says how many leading characters to
keep from the previous word before appending the run, so

    "Apass" "Eword" "Is"  ->  pass, password, passwords

Decoding is done once at startup; the resulting frozenset is shared
read-only by every evaluator.
"""
import logging
import os
import re
from pathlib import Path
from typing import FrozenSet, Optional, Union

from pwmeter.core.errors import ConfigurationError, DecodeError

logger = logging.getLogger("pwmeter.dictionary")

DEFAULT_DICTIONARY_PATH = Path(__file__).resolve().parents[1] / "data" / "common_passwords.txt"

_TOKEN_RX = re.compile(r"([A-Z])([^A-Z]+)")

DictionarySet = FrozenSet[str]


def decode(packed: str) -> DictionarySet:
    """
    Expand a packed word list into a set of lowercase words.

    Raises:
        DecodeError: a marker keeps more characters than the previously
            decoded word holds.
    """
    word = ""
    words = set()

    for index, match in enumerate(_TOKEN_RX.finditer(packed)):
        marker, run = match.group(1), match.group(2)
        keep = ord(marker) - ord("A")
        if keep > len(word):
            raise DecodeError(
                f"Token {index} ('{marker}') keeps {keep} characters but the "
                f"previous word only has {len(word)}",
                index=index,
                marker=marker,
            )
        word = word[:keep] + run
        words.add(word.lower())

    return frozenset(words)


def load_dictionary(path: Optional[Union[str, os.PathLike]] = None) -> DictionarySet:
    """
    Read and decode a packed dictionary file.

    Defaults to the bundled list. An unreadable file is a configuration
    problem; a corrupt one propagates ``DecodeError``.
    """
    source = Path(path) if path else DEFAULT_DICTIONARY_PATH
    try:
        packed = source.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Cannot read dictionary file {source}: {exc}") from exc

    words = decode(packed.rstrip("\r\n"))
    logger.info("Loaded %d dictionary words from %s", len(words), source.name)
    return words
