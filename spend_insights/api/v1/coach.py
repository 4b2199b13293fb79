"""POST /v1/ai/coach - budget coaching endpoint"""

from fastapi import APIRouter, Depends, Request

from spend_insights.api.v1.schemas import CoachRequest, CoachResponse
from spend_insights.api.v1.errors import insight_errors
from spend_insights.api.dependencies import (
    get_current_user_id,
    get_insight_service,
    get_request_id,
    get_transaction_store,
)
from spend_insights.domain.providers import provider_from_flags
from spend_insights.infrastructure.database.repositories import SqlTransactionStore
from spend_insights.services.insights import InsightService

router = APIRouter()


@router.post("/ai/coach", response_model=CoachResponse, response_model_exclude_none=True)
async def get_coach(
    request_body: CoachRequest,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    service: InsightService = Depends(get_insight_service),
    store: SqlTransactionStore = Depends(get_transaction_store),
):
    """
    Suggest monthly budgets, a savings estimate and tips.

    Lookback defaults to 90 days, clamped to [7, 180]. Without an explicit
    provider, useGemini/useOpenAI pick one.
    """
    provider = request_body.provider or provider_from_flags(request_body.use_gemini, request_body.use_openai)

    with insight_errors(get_request_id(request), user_id):
        result = await service.get_coach(
            user_id,
            store,
            lookback_days=request_body.days,
            free_only=request_body.free_only,
            provider=provider,
        )

    return CoachResponse(coach=result.payload, source=result.source, cached=result.cached, note=result.note)
