"""Provider fallback orchestration - optional refinement with heuristic degradation"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple, Union
from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, ValidationError

from spend_insights.domain.exceptions import ProviderError, ExtractionError
from spend_insights.domain.providers import Provider
from spend_insights.infrastructure.clients.providers import TextProviderClient
from spend_insights.infrastructure.observability.logging import log_provider_fallback
from spend_insights.infrastructure.observability.metrics import provider_fallback_counter

_CLOSERS = {"{": "}", "[": "]"}


def extract_json(text: str, opener: str = "{") -> Any:
    """
    Parse the span from the first ``opener`` to the last matching closer.

    Raises:
        ExtractionError: No span found, or the span is not valid JSON
    """
    closer = _CLOSERS[opener]
    start = text.find(opener) if text else -1
    end = text.rfind(closer) if text else -1
    if start == -1 or end == -1 or end < start:
        raise ExtractionError(f"No JSON {opener}...{closer} span in provider reply")

    try:
        return json.loads(text[start : end + 1], parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise ExtractionError(f"Provider reply is not valid JSON: {e}") from e


def _reject_constant(name: str) -> Any:
    # NaN and Infinity are not JSON
    raise ExtractionError(f"Provider reply contains non-finite number {name}")


# Expected shapes of refined payloads


class RefinedRecurringItem(BaseModel):
    model_config = ConfigDict(extra="allow")

    merchant: str
    category: Optional[str] = None
    avgAmount: float
    cadence: str
    nextDueDate: str
    confidence: float = Field(ge=0, le=1)
    notes: List[str] = Field(default_factory=list)


class RefinedCoach(BaseModel):
    model_config = ConfigDict(extra="allow")

    tips: List[Dict[str, Any]]


class RefinedForecast(BaseModel):
    model_config = ConfigDict(extra="allow")

    total: Union[StrictInt, StrictFloat]
    categories: Dict[str, float] = Field(default_factory=dict)


def parse_recurring(text: str, provider: str) -> List[Dict[str, Any]]:
    """Refined recurring items; must be a non-empty array of well-formed items"""
    data = extract_json(text, "[")
    if not isinstance(data, list) or not data:
        raise ExtractionError("Expected a non-empty array of recurring items")
    try:
        items = [RefinedRecurringItem.model_validate(item) for item in data]
    except ValidationError as e:
        raise ExtractionError(f"Malformed recurring item: {e}") from e
    return [{**item.model_dump(), "source": provider} for item in items]


def parse_coach(text: str, provider: str) -> Dict[str, Any]:
    """Refined coaching result; must carry a tips list"""
    data = extract_json(text, "{")
    try:
        RefinedCoach.model_validate(data)
    except ValidationError as e:
        raise ExtractionError(f"Coaching result missing tips: {e}") from e
    return {**data, "source": provider}


def forecast_parser(days_analyzed: int) -> Callable[[str, str], Dict[str, Any]]:
    """Build a forecast parser that keeps the heuristic's day count"""

    def parse_forecast(text: str, provider: str) -> Dict[str, Any]:
        data = extract_json(text, "{")
        try:
            refined = RefinedForecast.model_validate(data)
        except ValidationError as e:
            raise ExtractionError(f"Forecast result lacks a numeric total: {e}") from e
        return {
            "daysAnalyzed": days_analyzed,
            "predictedNextMonthTotal": round(float(refined.total), 2),
            "categoryBreakdown": {cat: round(value, 2) for cat, value in refined.categories.items()},
            "method": provider,
        }

    return parse_forecast


@dataclass(frozen=True)
class RefinementRequest:
    """Everything needed to ask a provider to refine one heuristic result"""

    operation: str
    prompt: str
    system: str
    temperature: float
    parse: Callable[[str, str], Any]


async def resolve(
    request: RefinementRequest,
    heuristic: Any,
    client: Optional[TextProviderClient],
) -> Tuple[Any, str]:
    """
    Return (payload, source): the provider's refinement, or the heuristic.

    Without a client the heuristic is returned untouched. Any failure during
    the provider call or while reading its reply is logged and counted, and
    the heuristic is returned instead; nothing is raised to the caller.
    """
    if client is None:
        return heuristic, Provider.HEURISTIC.value

    try:
        text = await client.generate(request.prompt, system=request.system, temperature=request.temperature)
        return request.parse(text, client.name), client.name

    except ProviderError as e:
        _record_fallback(request.operation, client.name, "provider_error", str(e))
    except ExtractionError as e:
        _record_fallback(request.operation, client.name, "extraction_error", str(e))
    except Exception as e:
        logging.error(
            f"Unexpected provider failure: {e}",
            extra={"operation": request.operation, "provider": client.name},
        )
        _record_fallback(request.operation, client.name, "unexpected_error", str(e))

    return heuristic, Provider.HEURISTIC.value


def _record_fallback(operation: str, provider: str, reason: str, detail: str) -> None:
    provider_fallback_counter.labels(provider=provider, reason=reason).inc()
    log_provider_fallback(operation, provider, f"{reason}: {detail}")
