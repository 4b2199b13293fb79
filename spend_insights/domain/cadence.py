"""Cadence detection - infer how often a charge repeats from its dates"""

import math
from datetime import date
from typing import List, Sequence, Tuple
from spend_insights.domain.models import CadenceResult

# (cadence, target period, tolerance, confidence floor), checked in order
CADENCE_BANDS: List[Tuple[str, int, int, float]] = [
    ("monthly", 30, 3, 0.7),
    ("monthly", 28, 3, 0.65),
    ("biweekly", 14, 2, 0.6),
    ("weekly", 7, 1, 0.6),
    ("yearly", 365, 10, 0.6),
]

MIN_CONFIDENCE = 0.1


def detect_cadence(dates: Sequence[date]) -> CadenceResult:
    """
    Classify the periodicity of ascending, unique calendar dates.

    Confidence starts at 1 / (1 + std) of the day gaps, clamped to [0.1, 1.0].
    The first tolerance band containing the mean gap wins and lifts confidence
    to that band's floor. No match yields ``unknown`` with the rounded mean gap.
    """
    if len(dates) < 2:
        return CadenceResult(cadence="unknown", period_days=None, confidence=MIN_CONFIDENCE)

    deltas = [(later - earlier).days for earlier, later in zip(dates, dates[1:])]
    avg = sum(deltas) / len(deltas)
    variance = sum((d - avg) ** 2 for d in deltas) / len(deltas)
    std = math.sqrt(variance)

    confidence = max(MIN_CONFIDENCE, min(1.0, 1 / (1 + std)))

    for cadence, period, tolerance, floor in CADENCE_BANDS:
        if abs(avg - period) <= tolerance:
            return CadenceResult(
                cadence=cadence,
                period_days=period,
                confidence=round(max(confidence, floor), 2),
            )

    return CadenceResult(cadence="unknown", period_days=round(avg), confidence=round(confidence, 2))
