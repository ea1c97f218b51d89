"""Registration classifier.

Aircraft flying under their own registration (general aviation, private
flights) have no operator code. For those we split the registration into its
nationality mark and local part and turn it into a callsign *format*, e.g.
``N-12345`` or ``G-ABCD``, which the traffic generator fills with random
letters/digits of the same shape.
"""

from __future__ import annotations

import string
from typing import Iterable, Optional, Tuple

from .reference import RegionRule

DIGITS = "1234567890"
ALPHABET = string.ascii_uppercase


def normalise_registration(value: str) -> str:
    return value.replace("-", "").upper()


def is_registration_callsign(tail: Optional[str], callsign: Optional[str]) -> bool:
    """True when the aircraft squawks its own registration as callsign."""

    if tail is None or callsign is None:
        return False
    return normalise_registration(tail) == normalise_registration(callsign)


def transliterate(local: str) -> str:
    """Replace digits and letters with the next entry of their rotating cycle.

    The digit and letter cursors are independent and only advance when a
    character of their kind is consumed; anything else is copied verbatim.
    """

    digit_index = 0
    letter_index = 0
    out = []
    for char in local.upper():
        if char in string.digits:
            out.append(DIGITS[digit_index % len(DIGITS)])
            digit_index += 1
        elif char in ALPHABET:
            out.append(ALPHABET[letter_index % len(ALPHABET)])
            letter_index += 1
        else:
            out.append(char)
    return "".join(out)


def synthesize_callsign(country: str, local: str) -> str:
    return f"{country.upper()}-{transliterate(local)}"


def split_registration(registration: str, rules: Iterable[RegionRule]) -> Optional[Tuple[str, str]]:
    """Split a registration into (country, local) using the region rules, then the first dash.

    Returns None when no rule matches and the registration has no dash.
    """

    upper = registration.upper()
    for rule in rules:
        if rule.matches(upper):
            return upper[: rule.prefix_length].replace("-", ""), upper[rule.prefix_length :]

    if "-" in upper:
        country, _, local = upper.partition("-")
        return country, local
    return None


def longest_prefix(registration: str, prefixes: Iterable[str]) -> Optional[str]:
    """Longest nationality prefix the registration starts with (case-insensitive)."""

    upper = registration.upper()
    candidates = [prefix for prefix in prefixes if prefix and upper.startswith(prefix.upper())]
    if not candidates:
        return None
    return max(candidates, key=len)


def classify(
    registration: str,
    callsign: str,
    rules: Iterable[RegionRule],
    prefixes: Iterable[str] = (),
) -> Optional[str]:
    """Synthesize a callsign format for an aircraft flying under its registration.

    Undashed registrations no region rule recognises fall back to the longest
    nationality prefix. Returns None when the callsign is not the registration
    or no country part can be found.
    """

    if not is_registration_callsign(registration, callsign):
        return None
    parts = split_registration(registration, rules)
    if parts is None:
        prefix = longest_prefix(registration, prefixes)
        if prefix is None:
            return None
        parts = prefix, registration[len(prefix) :]
    return synthesize_callsign(*parts)
