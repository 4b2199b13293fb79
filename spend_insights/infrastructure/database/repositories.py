"""Data access layer for transactions"""

from datetime import datetime
from typing import List
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from spend_insights.infrastructure.database.models import TransactionRecord
from spend_insights.domain.models import Transaction
from spend_insights.domain.exceptions import TransactionStoreError


class TransactionRepository:
    """Read access to the transactions table"""

    def __init__(self, db: Session):
        self.db = db

    def list_since(self, user_id: str, since: datetime) -> List[Transaction]:
        """Fetch a user's transactions dated on or after ``since``, oldest first"""
        rows = (
            self.db.query(TransactionRecord)
            .filter(TransactionRecord.user_id == user_id)
            .filter(TransactionRecord.date >= since)
            .order_by(TransactionRecord.date.asc())
            .all()
        )
        return [
            Transaction(
                date=row.date,
                amount=float(row.amount),
                category=row.category,
                description=row.description,
                transaction_id=str(row.id),
            )
            for row in rows
        ]


class SqlTransactionStore:
    """Async facade over TransactionRepository"""

    def __init__(self, db: Session):
        self.repository = TransactionRepository(db)

    async def get_transactions(self, user_id: str, since: datetime) -> List[Transaction]:
        """
        Fetch transactions without blocking the event loop.

        Raises:
            TransactionStoreError: On any database failure
        """
        try:
            return await run_in_threadpool(self.repository.list_since, user_id, since)
        except SQLAlchemyError as e:
            raise TransactionStoreError(f"Transaction store unavailable: {e}") from e
