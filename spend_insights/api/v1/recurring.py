"""POST /v1/ai/recurring/scan - recurring charge detection endpoint"""

from fastapi import APIRouter, Depends, Request

from spend_insights.api.v1.schemas import RecurringScanRequest, RecurringScanResponse
from spend_insights.api.v1.errors import insight_errors
from spend_insights.api.dependencies import (
    get_current_user_id,
    get_insight_service,
    get_request_id,
    get_transaction_store,
)
from spend_insights.infrastructure.database.repositories import SqlTransactionStore
from spend_insights.services.insights import InsightService

router = APIRouter()


@router.post("/ai/recurring/scan", response_model=RecurringScanResponse, response_model_exclude_none=True)
async def scan_recurring(
    request_body: RecurringScanRequest,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    service: InsightService = Depends(get_insight_service),
    store: SqlTransactionStore = Depends(get_transaction_store),
):
    """
    Detect recurring charges and predict their next due dates.

    Lookback defaults to 180 days, clamped to [30, 365].
    """
    with insight_errors(get_request_id(request), user_id):
        result = await service.scan_recurring(
            user_id,
            store,
            lookback_days=request_body.days,
            free_only=request_body.free_only,
            provider=request_body.provider,
        )

    return RecurringScanResponse(items=result.payload, source=result.source, cached=result.cached, note=result.note)
