"""Insight entry points: recurring scan, budget coaching and expense forecast"""

import time
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Any, Awaitable, Callable, List, Optional, Protocol, Tuple

from spend_insights.config import Settings, settings as default_settings
from spend_insights.domain.budget import compute_budget
from spend_insights.domain.exceptions import RateLimitExceeded
from spend_insights.domain.forecast import forecast_expenses
from spend_insights.domain.models import Transaction, InsightResult
from spend_insights.domain.providers import Provider, provider_from_flags
from spend_insights.domain.recurring import find_recurring
from spend_insights.infrastructure.clients.providers import ProviderRegistry, ProviderSelection, TextProviderClient
from spend_insights.infrastructure.observability.logging import log_insight
from spend_insights.infrastructure.observability.metrics import record_insight, rate_limited_counter
from spend_insights.services import prompts
from spend_insights.services.orchestrator import (
    RefinementRequest,
    forecast_parser,
    parse_coach,
    parse_recurring,
    resolve,
)
from spend_insights.services.throttling import RateLimiter, ResultCache
from spend_insights.utils.date_utils import clamp_days, window_days

RECURRING = "recurring"
COACH = "coach"
FORECAST = "forecast"

# (min, max, default) lookback days per operation
LOOKBACK_BOUNDS = {
    RECURRING: (30, 365, 180),
    COACH: (7, 180, 90),
    FORECAST: (7, 180, 90),
}

Builder = Callable[[List[Transaction], Optional[TextProviderClient]], Awaitable[Tuple[Any, str]]]


class TransactionSource(Protocol):
    async def get_transactions(self, user_id: str, since: datetime) -> List[Transaction]:
        ...


class InsightService:
    """
    Rate-limits, caches and computes insights for a user.

    Flow per call:
    1. Clamp the lookback window
    2. Admit through the operation's rate limiter (RateLimitExceeded otherwise)
    3. Serve a fresh cached result if one exists
    4. Fetch transactions, compute the heuristic, optionally refine via a provider
    5. Cache and return
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        cache: ResultCache,
        limiters: dict[str, RateLimiter],
        cache_ttl: float | None = None,
        horizon_days: int = 90,
        now: Callable[[], datetime] = datetime.now,
    ):
        self.registry = registry
        self.cache = cache
        self.limiters = limiters
        self.cache_ttl = cache_ttl
        self.horizon_days = horizon_days
        self._now = now

    @classmethod
    def from_settings(cls, config: Settings | None = None, registry: ProviderRegistry | None = None) -> "InsightService":
        config = config or default_settings
        limiters = {
            operation: RateLimiter(
                max_requests=config.rate_limit_max_requests,
                window_seconds=config.rate_limit_window_seconds,
                max_tracked_users=config.rate_limit_max_tracked_users,
            )
            for operation in (RECURRING, COACH, FORECAST)
        }
        return cls(
            registry=registry or ProviderRegistry.from_settings(config),
            cache=ResultCache(max_entries=config.cache_max_entries, default_ttl=config.cache_ttl_seconds),
            limiters=limiters,
            cache_ttl=config.cache_ttl_seconds,
            horizon_days=config.recurring_horizon_days,
        )

    async def scan_recurring(
        self,
        user_id: str,
        store: TransactionSource,
        lookback_days: float | None = None,
        free_only: bool = False,
        provider: Provider | str = Provider.HEURISTIC,
    ) -> InsightResult:
        """Recurring charges due within the horizon; payload is a list of item dicts"""

        async def build(transactions, client):
            items = [
                item.to_dict()
                for item in find_recurring(transactions, self.horizon_days, today=self._now().date())
            ]
            # Nothing for a provider to refine
            if not items:
                return items, Provider.HEURISTIC.value

            request = RefinementRequest(
                operation=RECURRING,
                prompt=prompts.build_recurring_prompt(items),
                system=prompts.RECURRING_SYSTEM,
                temperature=prompts.RECURRING_TEMPERATURE,
                parse=parse_recurring,
            )
            return await resolve(request, items, client)

        selection = self.registry.select(provider, free_only=free_only)
        return await self._serve(RECURRING, user_id, store, lookback_days, selection, build)

    async def get_coach(
        self,
        user_id: str,
        store: TransactionSource,
        lookback_days: float | None = None,
        free_only: bool = False,
        provider: Provider | str = Provider.HEURISTIC,
    ) -> InsightResult:
        """Budget coaching; payload is a BudgetSuggestion dict or the provider's object"""

        async def build(transactions, client):
            suggestion = compute_budget(transactions)
            days_analyzed = (
                window_days(transactions[0].date, transactions[-1].date) if transactions else 0
            )
            request = RefinementRequest(
                operation=COACH,
                prompt=prompts.build_coach_prompt(
                    days_analyzed,
                    {cat: budget.current for cat, budget in suggestion.suggested_budget.items()},
                ),
                system=prompts.COACH_SYSTEM,
                temperature=prompts.COACH_TEMPERATURE,
                parse=parse_coach,
            )
            return await resolve(request, suggestion.to_dict(), client)

        selection = self.registry.select(provider, free_only=free_only)
        return await self._serve(COACH, user_id, store, lookback_days, selection, build)

    async def get_forecast(
        self,
        user_id: str,
        store: TransactionSource,
        lookback_days: float | None = None,
        use_gemini: bool = False,
        use_openai: bool = False,
    ) -> InsightResult:
        """Next-30-day forecast; payload is a ForecastResult dict"""

        async def build(transactions, client):
            forecast = forecast_expenses(transactions)
            request = RefinementRequest(
                operation=FORECAST,
                prompt=prompts.build_forecast_prompt(
                    forecast.days_analyzed,
                    {cat: c.total for cat, c in forecast.category_breakdown.items()},
                ),
                system=prompts.FORECAST_SYSTEM,
                temperature=prompts.FORECAST_TEMPERATURE,
                parse=forecast_parser(forecast.days_analyzed),
            )
            return await resolve(request, forecast.to_dict(), client)

        selection = self.registry.select(provider_from_flags(use_gemini, use_openai))
        return await self._serve(FORECAST, user_id, store, lookback_days, selection, build)

    async def _serve(
        self,
        operation: str,
        user_id: str,
        store: TransactionSource,
        lookback_days: float | None,
        selection: ProviderSelection,
        build: Builder,
    ) -> InsightResult:
        start_time = time.time()
        days = clamp_days(lookback_days, *LOOKBACK_BOUNDS[operation])

        limiter = self.limiters[operation]
        if not limiter.admit(user_id):
            rate_limited_counter.labels(operation=operation).inc()
            raise RateLimitExceeded(operation, limiter.retry_after(user_id))

        cache_key = (operation, user_id, days, selection.name)
        cached = self.cache.get(cache_key)

        if cached is not None:
            # The note follows this request's provider selection, not the one that filled the cache
            result = replace(cached, cached=True, note=selection.note)
        else:
            since = self._now() - timedelta(days=days)
            transactions = await store.get_transactions(user_id, since)
            payload, source = await build(transactions, selection.client)
            result = InsightResult(payload=payload, source=source, note=selection.note)
            self.cache.put(cache_key, result, self.cache_ttl)

        duration_ms = (time.time() - start_time) * 1000
        record_insight(operation, result.source, result.cached)
        log_insight(operation, user_id, result.source, result.cached, duration_ms)

        return result
