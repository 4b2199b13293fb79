"""Recurring charge aggregation - group, classify and rank repeating charges"""

from datetime import date, timedelta
from typing import Dict, List, Tuple
from spend_insights.domain.models import Transaction, MerchantGroup, RecurringItem
from spend_insights.domain.merchants import normalize_merchant
from spend_insights.domain.cadence import detect_cadence
from spend_insights.utils.date_utils import to_calendar_date

DEFAULT_HORIZON_DAYS = 90
MAX_ITEMS = 20
FALLBACK_PERIOD_DAYS = 30
DEFAULT_CATEGORY = "Other"


def group_by_merchant(transactions: List[Transaction]) -> List[MerchantGroup]:
    """Bucket non-zero charges by (normalized merchant, category)"""
    groups: Dict[Tuple[str, str], MerchantGroup] = {}

    for txn in transactions:
        amount = abs(txn.amount or 0)
        if amount == 0:
            continue

        category = txn.category or DEFAULT_CATEGORY
        merchant = normalize_merchant(txn.description or txn.category)
        key = (merchant, category)

        if key not in groups:
            groups[key] = MerchantGroup(merchant=merchant, category=category)
        groups[key].dates.append(to_calendar_date(txn.date))
        groups[key].amounts.append(amount)

    return list(groups.values())


def find_recurring(
    transactions: List[Transaction],
    horizon_days: int = DEFAULT_HORIZON_DAYS,
    today: date | None = None,
) -> List[RecurringItem]:
    """
    Detect recurring charges and predict their next due date.

    Requirements:
    - At least 2 distinct charge days per group
    - Groups with unknown cadence are dropped
    - Only items due within ``horizon_days`` of today, nearest first, at most 20
    """
    if today is None:
        today = date.today()

    items = []
    for group in group_by_merchant(transactions):
        dates = sorted(set(group.dates))
        if len(dates) < 2:
            continue

        result = detect_cadence(dates)
        if result.cadence == "unknown":
            continue

        avg_amount = sum(group.amounts) / len(group.amounts)
        next_due = dates[-1] + timedelta(days=result.period_days or FALLBACK_PERIOD_DAYS)

        items.append(
            RecurringItem(
                merchant=group.merchant,
                category=group.category,
                avg_amount=round(avg_amount, 2),
                cadence=result.cadence,
                next_due_date=next_due,
                confidence=result.confidence,
            )
        )

    items.sort(key=lambda item: item.next_due_date)
    upcoming = [item for item in items if (item.next_due_date - today).days <= horizon_days]

    return upcoming[:MAX_ITEMS]
