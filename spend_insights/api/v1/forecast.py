"""POST /v1/predict - next-30-day expense forecast endpoint"""

from fastapi import APIRouter, Depends, Request

from spend_insights.api.v1.schemas import ForecastRequest, ForecastResponse
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


@router.post("/predict", response_model=ForecastResponse, response_model_exclude_none=True)
async def predict_expenses(
    request_body: ForecastRequest,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    service: InsightService = Depends(get_insight_service),
    store: SqlTransactionStore = Depends(get_transaction_store),
):
    """Forecast next-30-day spend from daily averages (lookback 90, clamped to [7, 180])"""
    with insight_errors(get_request_id(request), user_id):
        result = await service.get_forecast(
            user_id,
            store,
            lookback_days=request_body.days,
            use_gemini=request_body.use_gemini,
            use_openai=request_body.use_openai,
        )

    return ForecastResponse(prediction=result.payload, source=result.source, cached=result.cached, note=result.note)
