"""Expense forecasting from historical daily averages"""

from typing import Dict, List
from spend_insights.domain.models import Transaction, ForecastResult, CategoryForecast
from spend_insights.domain.budget import aggregate_spend

FORECAST_DAYS = 30
UNCATEGORIZED = "uncategorized"


def forecast_expenses(transactions: List[Transaction]) -> ForecastResult:
    """
    Project the next 30 days of spend per category and overall.

    The overall total is 30 x the sum of the unrounded per-day averages, not
    the sum of the rounded per-category projections.
    """
    spend, days = aggregate_spend(transactions, default_category=UNCATEGORIZED)
    if days == 0:
        return ForecastResult(days_analyzed=0, predicted_next_month_total=0.0, category_breakdown={})

    breakdown: Dict[str, CategoryForecast] = {}
    total_avg_per_day = 0.0

    for category, total in spend.items():
        avg_per_day = total / days
        breakdown[category] = CategoryForecast(
            total=round(total, 2),
            avg_per_day=round(avg_per_day, 4),
            predicted_next_30_days=round(avg_per_day * FORECAST_DAYS, 2),
        )
        total_avg_per_day += avg_per_day

    return ForecastResult(
        days_analyzed=days,
        predicted_next_month_total=round(total_avg_per_day * FORECAST_DAYS, 2),
        category_breakdown=breakdown,
    )
