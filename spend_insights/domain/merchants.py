"""Merchant normalization for grouping free-text transaction descriptions"""

import re

UNKNOWN_MERCHANT = "UNKNOWN"

_WHITESPACE = re.compile(r"\s+")
_PUNCTUATION = re.compile(r"[*#\-_:]")
_REFERENCE_DIGITS = re.compile(r"\d{2,}")


def normalize_merchant(text: str | None) -> str:
    """
    Canonicalize a description into a stable grouping key.

    Uppercases, swaps the separators ``* # - _ :`` for spaces, drops digit runs
    of two or more (card and reference numbers) and collapses whitespace.
    Idempotent; empty input maps to ``UNKNOWN``.

    Example:
        "AMZN*123  Mktp-US" -> "AMZN MKTP US"
    """
    if not text:
        return UNKNOWN_MERCHANT

    key = _WHITESPACE.sub(" ", str(text).upper())
    key = _PUNCTUATION.sub(" ", key)
    key = _REFERENCE_DIGITS.sub("", key)
    key = _WHITESPACE.sub(" ", key).strip()

    return key or UNKNOWN_MERCHANT
