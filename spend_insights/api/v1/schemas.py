"""Pydantic schemas for API request/response validation"""

import math
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, List, Optional

from spend_insights.domain.providers import Provider


class InsightRequest(BaseModel):
    """Shared request fields; out-of-range days are clamped, not rejected"""

    model_config = ConfigDict(populate_by_name=True)

    days: Optional[float] = Field(None, description="Lookback window in days")

    @field_validator("days", mode="before")
    @classmethod
    def _numeric_days_or_default(cls, v: Any) -> float | None:
        # Anything non-numeric falls back to the operation's default window
        if v is None or isinstance(v, bool):
            return None
        try:
            fv = float(v)
        except (TypeError, ValueError):
            return None
        return None if math.isnan(fv) else fv


class RecurringScanRequest(InsightRequest):
    """Request body for POST /v1/ai/recurring/scan"""

    free_only: bool = Field(False, alias="freeOnly")
    provider: Provider = Provider.HEURISTIC


class CoachRequest(InsightRequest):
    """Request body for POST /v1/ai/coach"""

    free_only: bool = Field(False, alias="freeOnly")
    provider: Optional[Provider] = None
    use_gemini: bool = Field(False, alias="useGemini")
    use_openai: bool = Field(False, alias="useOpenAI")


class ForecastRequest(InsightRequest):
    """Request body for POST /v1/predict"""

    use_gemini: bool = Field(False, alias="useGemini")
    use_openai: bool = Field(False, alias="useOpenAI")


class RecurringScanResponse(BaseModel):
    """Response for POST /v1/ai/recurring/scan"""

    items: List[Dict[str, Any]]
    source: str
    cached: bool = False
    note: Optional[str] = None


class CoachResponse(BaseModel):
    """Response for POST /v1/ai/coach"""

    coach: Dict[str, Any]
    source: str
    cached: bool = False
    note: Optional[str] = None


class ForecastResponse(BaseModel):
    """Response for POST /v1/predict"""

    prediction: Dict[str, Any]
    source: str
    cached: bool = False
    note: Optional[str] = None
