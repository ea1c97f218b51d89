import string

import pytest

from eatc_airlines.registration import (
    classify,
    is_registration_callsign,
    longest_prefix,
    split_registration,
    synthesize_callsign,
    transliterate,
)


def test_transliterate_keeps_cycle_start():
    assert transliterate("ABCD") == "ABCD"
    assert transliterate("A1B2") == "A1B2"


def test_transliterate_is_positional_not_valued():
    assert transliterate("98765") == "12345"
    assert transliterate("zq-9") == "AB-1"


def test_transliterate_cursors_wrap():
    assert transliterate("0" * 11) == "12345678901"
    assert transliterate("X" * 27) == string.ascii_uppercase + "A"


def test_non_alphanumeric_does_not_advance_cursors():
    assert transliterate("9-9 Z.Z") == "1-2 A.B"


def test_synthesize_callsign_uppercases_country():
    assert synthesize_callsign("g", "xyzw") == "G-ABCD"


@pytest.mark.parametrize(
    "registration, expected",
    [
        ("N12345", ("N", "12345")),
        ("n512ab", ("N", "512AB")),
        ("JA801A", ("JA", "801A")),
        ("C-FABC", ("CF", "ABC")),
        ("7T-VAB", ("7TV", "AB")),
        ("VQ-BAB", ("VQB", "AB")),
        ("CU-A11234", ("CUA1", "1234")),
        ("D-EABC", ("D", "EABC")),
        ("OE-ABC", ("OE", "ABC")),
    ],
)
def test_split_registration(reference, registration, expected):
    assert split_registration(registration, reference.region_rules) == expected


def test_split_registration_without_rule_or_dash_fails(reference):
    assert split_registration("PHABC", reference.region_rules) is None


def test_longest_prefix_is_case_insensitive():
    assert longest_prefix("hbzab", ["H", "HB", "D"]) == "HB"
    assert longest_prefix("QQ123", ["H", "HB"]) is None


def test_is_registration_callsign_ignores_dashes_and_case():
    assert is_registration_callsign("D-EABC", "deabc")
    assert not is_registration_callsign("D-EABC", "DLH123")
    assert not is_registration_callsign(None, "DEABC")


def test_classify(reference):
    assert classify("N12345", "N12345", reference.region_rules) == "N-12345"
    assert classify("G-ABCD", "GABCD", reference.region_rules) == "G-ABCD"
    assert classify("G-ABCD", "BAW12", reference.region_rules) is None
    assert classify("PHABC", "PHABC", reference.region_rules) is None


def test_synthesized_local_part_keeps_length(reference):
    for registration in ("N98765", "C-GXYZ", "HL8012", "D-EFGH"):
        country, local = split_registration(registration, reference.region_rules)
        synthesized = classify(registration, registration, reference.region_rules)
        assert synthesized.startswith(country + "-")
        assert len(synthesized) == len(country) + 1 + len(local)


def test_classify_falls_back_to_nationality_prefix(reference):
    assert classify("HBZAB", "hbzab", reference.region_rules, reference.prefixes) == "HB-ABC"
    assert classify("QQ123", "QQ123", reference.region_rules, reference.prefixes) is None
