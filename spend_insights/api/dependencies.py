"""Dependency injection for FastAPI endpoints"""

from functools import lru_cache
from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.orm import Session

from spend_insights.infrastructure.database.session import get_db
from spend_insights.infrastructure.database.repositories import SqlTransactionStore
from spend_insights.services.insights import InsightService


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_current_user_id(x_user_id: str | None = Header(None)) -> str:
    """Caller identity, resolved upstream by the authentication layer"""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Unauthorized")
    return x_user_id.strip()


@lru_cache(maxsize=1)
def get_insight_service() -> InsightService:
    """Process-wide service so rate limits and cache persist across requests"""
    return InsightService.from_settings()


def get_transaction_store(db: Session = Depends(get_db)) -> SqlTransactionStore:
    """Provide a request-scoped transaction store"""
    return SqlTransactionStore(db)
