"""Translate domain failures into HTTP errors"""

import logging
from contextlib import contextmanager
from fastapi import HTTPException

from spend_insights.domain.exceptions import RateLimitExceeded, TransactionStoreError
from spend_insights.infrastructure.observability.metrics import store_fetch_failures_counter


@contextmanager
def insight_errors(request_id: str, user_id: str):
    """
    Map failures raised while serving an insight.

    - RateLimitExceeded: 429 with Retry-After
    - TransactionStoreError: 503
    - anything else: 500
    """
    try:
        yield
    except RateLimitExceeded as e:
        logging.warning(f"Rate limited: {e}", extra={"request_id": request_id, "user_id": user_id})
        raise HTTPException(
            status_code=429,
            detail="Too many requests. Try again later.",
            headers={"Retry-After": str(max(1, int(e.retry_after_seconds)))},
        )
    except TransactionStoreError as e:
        store_fetch_failures_counter.inc()
        logging.error(f"Transaction store error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Transaction store unavailable")
    except HTTPException:
        raise
    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")
