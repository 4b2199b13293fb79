"""Unit tests for merchant normalization"""

import pytest
from spend_insights.domain.merchants import normalize_merchant, UNKNOWN_MERCHANT


def test_normalize_strips_reference_digits_and_punctuation():
    """Card/reference numbers and separators are removed"""
    key = normalize_merchant("AMZN*123  Mktp-US")

    assert key == "AMZN MKTP US"
    assert not any(ch.isdigit() for ch in key)
    assert not any(ch in "*#-_:" for ch in key)


def test_normalize_keeps_single_digits():
    assert normalize_merchant("7-eleven store 4") == "7 ELEVEN STORE 4"


@pytest.mark.parametrize(
    "raw",
    [
        "AMZN*123  Mktp-US",
        "  spotify   usa #0042 ",
        "SQ *COFFEE_HOUSE: 99812",
        "1a23b4",
        "12345",
    ],
)
def test_normalize_is_idempotent(raw: str):
    once = normalize_merchant(raw)
    assert normalize_merchant(once) == once


@pytest.mark.parametrize("raw", [None, "", "   ", "12345", "*#-_:"])
def test_normalize_empty_maps_to_unknown(raw):
    assert normalize_merchant(raw) == UNKNOWN_MERCHANT
