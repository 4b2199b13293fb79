"""Prompt text sent to text-generation providers"""

import json
from typing import Any, Dict, List

RECURRING_SYSTEM = "Detect recurring charges and predict next due dates. Respond with strict JSON."
COACH_SYSTEM = "You are a budgeting coach that gives concise, actionable tips with estimated savings."
FORECAST_SYSTEM = "You are an assistant that predicts monthly expenses from recent transaction summaries."

RECURRING_TEMPERATURE = 0.1
COACH_TEMPERATURE = 0.2
FORECAST_TEMPERATURE = 0.2


def build_recurring_prompt(items: List[Dict[str, Any]]) -> str:
    summary = [
        {
            "merchant": item["merchant"],
            "category": item["category"],
            "avgAmount": item["avgAmount"],
            "cadence": item["cadence"],
            "nextDueDate": item["nextDueDate"],
            "confidence": item["confidence"],
        }
        for item in items
    ]
    return (
        f"Given these candidate recurring charges: {json.dumps(summary)}, refine and return JSON "
        'only in the shape { "items": [{ merchant, category, avgAmount, cadence, nextDueDate, '
        "confidence, notes }] }. Ensure ISO nextDueDate and confidence 0..1."
    )


def build_coach_prompt(days_analyzed: int, monthly_by_category: Dict[str, float]) -> str:
    return (
        f"You are a budgeting assistant. Given user spending over {days_analyzed} days with "
        f"per-category monthlyized spend {json.dumps(monthly_by_category)}, return JSON only in "
        "shape: { tips: [{title, detail, impact: 'high'|'medium'|'low', category?}], "
        "savingsEstimate: number, suggestedBudget: { [category]: { current:number, suggested:number } }, "
        "notes: string[] } with concise, actionable tips for next month."
    )


def build_forecast_prompt(days_analyzed: int, totals_by_category: Dict[str, float]) -> str:
    summary = {
        "daysAnalyzed": days_analyzed,
        "categories": {cat: {"total": total} for cat, total in totals_by_category.items()},
    }
    return (
        f"Given the recent spending summary over {days_analyzed} days: {json.dumps(summary)}, "
        "predict the total spending for the next 30 days and a simple per-category breakdown as "
        "JSON in the shape { total:number, categories: { [category:string]: number } }. "
        "Do not include any text besides pure JSON."
    )
