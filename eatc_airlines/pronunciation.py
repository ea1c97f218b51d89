"""Speakable renderings of airline codes."""

from __future__ import annotations

import re
from typing import Mapping, Optional

from .model import SYNTHESIZED_SUFFIX, is_synthesized_code

PHONETIC = {
    "A": "alpha",
    "B": "bravo",
    "C": "charlie",
    "D": "delta",
    "E": "echo",
    "F": "foxtrot",
    "G": "golf",
    "H": "hotel",
    "I": "india",
    "J": "juliet",
    "K": "kilo",
    "L": "lima",
    "M": "mike",
    "N": "november",
    "O": "oscar",
    "P": "papa",
    "Q": "quebec",
    "R": "romeo",
    "S": "sierra",
    "T": "tango",
    "U": "uniform",
    "V": "victor",
    "W": "whisky",
    "X": "x-ray",
    "Y": "yankee",
    "Z": "zulu",
}

NUMBERS = {
    "0": " zero ",
    "1": " one ",
    "2": " two ",
    "3": " three ",
    "4": " four ",
    "5": " five ",
    "6": " six ",
    "7": " seven ",
    "8": " eight ",
    "9": " nine ",
}

_WHITESPACE = re.compile(r"\s+")


def spell_phonetic(code: str) -> str:
    """Spell a code with the NATO alphabet; non-letters are kept verbatim."""

    return " ".join(PHONETIC.get(char, char) for char in code.upper())


def speak_synthesized(code: str) -> str:
    """Spoken form of a registration-derived code such as ``HBZAB1-``."""

    spoken = "".join(NUMBERS.get(char, char) for char in code.rstrip(SYNTHESIZED_SUFFIX))
    return _WHITESPACE.sub(" ", spoken).strip().lower()


def pronounce(code: Optional[str], dictionary: Mapping[str, str]) -> Optional[str]:
    """Derive the pronunciation of an airline code.

    Synthesized codes (trailing dash) are read out; null codes and
    registration formats with an internal dash have none; everything else is
    looked up in ``dictionary`` and spelled phonetically when absent.
    """

    if is_synthesized_code(code):
        return speak_synthesized(code)
    if code is None or "-" in code:
        return None
    known = dictionary.get(code.upper())
    if known is not None:
        return known
    return spell_phonetic(code)
