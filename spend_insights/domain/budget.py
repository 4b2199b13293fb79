"""Heuristic budget engine - monthly-ized category spend, trimmed targets and tips"""

import re
from typing import Dict, List, Tuple
from spend_insights.domain.models import Transaction, BudgetSuggestion, CategoryBudget, Tip
from spend_insights.utils.date_utils import window_days

DEFAULT_CATEGORY = "Other"
MAX_TIPS = 6
HIGH_IMPACT_THRESHOLD = 1000

NOT_ENOUGH_DATA_NOTE = "Not enough data. Add transactions to get personalized tips."
HEURISTIC_NOTE = "These suggestions are heuristic; refine with AI providers for deeper personalization."

# (pattern, multiplier); every matching rule applies and the lowest target wins
TRIM_RULES = [
    (re.compile(r"food|dining|restaurant|delivery", re.IGNORECASE), 0.85),
    (re.compile(r"entertainment|shopping", re.IGNORECASE), 0.9),
    (re.compile(r"transport", re.IGNORECASE), 0.95),
]


def aggregate_spend(
    transactions: List[Transaction], default_category: str = DEFAULT_CATEGORY
) -> Tuple[Dict[str, float], int]:
    """
    Net signed amount per category plus the window-day span.

    Categories netting to zero or below are income and are left out. The
    span covers every transaction, income included. Empty input gives ({}, 0).
    """
    if not transactions:
        return {}, 0

    totals: Dict[str, float] = {}
    for txn in transactions:
        category = txn.category or default_category
        totals[category] = totals.get(category, 0.0) + (txn.amount or 0)

    first = min(t.date for t in transactions)
    last = max(t.date for t in transactions)

    spend = {cat: total for cat, total in totals.items() if total > 0}
    return spend, window_days(first, last)


def suggest_target(category: str, monthly: float) -> float:
    """Apply discretionary trim rules to a category's monthly spend"""
    suggested = monthly
    for pattern, multiplier in TRIM_RULES:
        if pattern.search(category):
            suggested = min(suggested, monthly * multiplier)
    return suggested


def compute_budget(transactions: List[Transaction]) -> BudgetSuggestion:
    """
    Derive suggested monthly budgets, savings estimate and ranked tips.

    Totals are scaled to 30 days (monthly factor = 30 / window days). Tips
    go to every trimmed category; high impact (> 1000 saved) sort first and
    only the first 6 are kept.
    """
    if not transactions:
        return BudgetSuggestion(
            tips=[],
            savings_estimate=0.0,
            suggested_budget={},
            notes=[NOT_ENOUGH_DATA_NOTE],
        )

    spend, days = aggregate_spend(transactions)
    monthly_factor = 30 / days

    suggested_budget: Dict[str, CategoryBudget] = {}
    savings = 0.0
    tips: List[Tip] = []

    for category, total in spend.items():
        monthly = total * monthly_factor
        suggested = suggest_target(category, monthly)

        suggested_budget[category] = CategoryBudget(
            current=round(monthly, 2),
            suggested=round(suggested, 2),
        )
        savings += max(0.0, monthly - suggested)

        if suggested < monthly:
            cut_pct = 100 - (suggested / monthly) * 100
            tips.append(
                Tip(
                    title=f"Reduce {category} by {cut_pct:.0f}%",
                    detail=(
                        f"Average monthly spend is ~{monthly:.0f}. Aim for ~{suggested:.0f} "
                        "by planning purchases and avoiding impulse buys."
                    ),
                    impact="high" if monthly - suggested > HIGH_IMPACT_THRESHOLD else "medium",
                    category=category,
                )
            )

    # Stable sort keeps insertion order within each impact level
    tips.sort(key=lambda tip: tip.impact != "high")

    return BudgetSuggestion(
        tips=tips[:MAX_TIPS],
        savings_estimate=round(savings, 2),
        suggested_budget=suggested_budget,
        notes=[HEURISTIC_NOTE],
    )
