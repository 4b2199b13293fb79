"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Transaction:
    """Transaction fetched from the store (positive = spend, negative = income)"""

    date: datetime
    amount: float
    category: str
    description: Optional[str] = None
    transaction_id: Optional[str] = None


@dataclass(frozen=True)
class CadenceResult:
    """Inferred periodicity of a merchant's charge dates"""

    cadence: str  # weekly | biweekly | monthly | yearly | unknown
    period_days: Optional[int]
    confidence: float


@dataclass
class MerchantGroup:
    """Charges sharing a normalized merchant key and category"""

    merchant: str
    category: str
    dates: List[date] = field(default_factory=list)
    amounts: List[float] = field(default_factory=list)


@dataclass
class RecurringItem:
    """Predicted recurring charge"""

    merchant: str
    category: str
    avg_amount: float
    cadence: str
    next_due_date: date
    confidence: float
    notes: List[str] = field(default_factory=list)
    source: str = "heuristic"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "merchant": self.merchant,
            "category": self.category,
            "avgAmount": self.avg_amount,
            "cadence": self.cadence,
            "nextDueDate": self.next_due_date.isoformat(),
            "confidence": self.confidence,
            "notes": list(self.notes),
            "source": self.source,
        }


@dataclass
class CategoryBudget:
    """Monthly spend for a category and the suggested target"""

    current: float
    suggested: float


@dataclass
class Tip:
    """Coaching tip for one category"""

    title: str
    detail: str
    impact: str  # "high" | "medium"
    category: str


@dataclass
class BudgetSuggestion:
    """Output of the heuristic budget engine"""

    tips: List[Tip]
    savings_estimate: float
    suggested_budget: Dict[str, CategoryBudget]
    notes: List[str]
    source: str = "heuristic"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tips": [
                {"title": t.title, "detail": t.detail, "impact": t.impact, "category": t.category}
                for t in self.tips
            ],
            "savingsEstimate": self.savings_estimate,
            "suggestedBudget": {
                cat: {"current": b.current, "suggested": b.suggested}
                for cat, b in self.suggested_budget.items()
            },
            "notes": list(self.notes),
            "source": self.source,
        }


@dataclass
class CategoryForecast:
    """Per-category daily average and 30-day projection"""

    total: float
    avg_per_day: float
    predicted_next_30_days: float


@dataclass
class ForecastResult:
    """Next-30-day expense forecast"""

    days_analyzed: int
    predicted_next_month_total: float
    category_breakdown: Dict[str, CategoryForecast]
    method: str = "heuristic"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "daysAnalyzed": self.days_analyzed,
            "predictedNextMonthTotal": self.predicted_next_month_total,
            "categoryBreakdown": {
                cat: {
                    "total": c.total,
                    "avgPerDay": c.avg_per_day,
                    "predictedNext30Days": c.predicted_next_30_days,
                }
                for cat, c in self.category_breakdown.items()
            },
            "method": self.method,
        }


@dataclass(frozen=True)
class InsightResult:
    """What an entry point hands back: payload plus provenance"""

    payload: Any
    source: str
    cached: bool = False
    note: Optional[str] = None
