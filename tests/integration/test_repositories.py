"""Integration tests for the SQL transaction store"""

import random
import pytest
from datetime import datetime, timedelta
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session
from spend_insights.domain.exceptions import TransactionStoreError
from spend_insights.infrastructure.database.models import TransactionRecord
from spend_insights.infrastructure.database.repositories import TransactionRepository, SqlTransactionStore
from spend_insights.infrastructure.database.seed import (
    build_demo_transactions,
    seed_demo_transactions,
    EXPENSE_CATEGORIES,
    INCOME_CATEGORIES,
)


def _add(db: Session, user_id: str, days_ago: int, amount: float, category: str = "Food", description: str = ""):
    db.add(
        TransactionRecord(
            user_id=user_id,
            amount=amount,
            category=category,
            description=description,
            date=datetime.now() - timedelta(days=days_ago),
        )
    )


def test_list_since_filters_user_and_window_and_sorts(db: Session):
    _add(db, "u1", 5, 10.0, description="latest")
    _add(db, "u1", 40, 20.0, description="too old")
    _add(db, "u1", 20, 30.0, description="oldest in window")
    _add(db, "u2", 1, 99.0, description="someone else")
    db.commit()

    rows = TransactionRepository(db).list_since("u1", datetime.now() - timedelta(days=30))

    assert [t.description for t in rows] == ["oldest in window", "latest"]
    assert rows[0].amount == 30.0
    assert rows[0].transaction_id is not None


async def test_store_returns_domain_transactions(db: Session):
    _add(db, "u1", 2, -1500.0, category="Salary", description="PAYROLL")
    db.commit()

    transactions = await SqlTransactionStore(db).get_transactions("u1", datetime.now() - timedelta(days=7))

    assert len(transactions) == 1
    assert transactions[0].category == "Salary"
    assert transactions[0].amount == -1500.0


async def test_store_wraps_database_errors():
    class BrokenSession:
        def query(self, *args, **kwargs):
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    with pytest.raises(TransactionStoreError):
        await SqlTransactionStore(BrokenSession()).get_transactions("u1", datetime.now())


def test_demo_transactions_follow_sign_convention():
    now = datetime(2024, 6, 30, 12)
    records = build_demo_transactions("u1", count=200, rng=random.Random(3), now=now)

    assert len(records) == 200
    for record in records:
        if record.category in INCOME_CATEGORIES:
            assert record.amount < 0
        else:
            assert record.category in EXPENSE_CATEGORIES
            assert record.amount > 0
        assert now - timedelta(days=91) < record.date <= now.replace(hour=23, minute=59, second=59)


def test_seed_inserts_rows(db: Session):
    inserted = seed_demo_transactions(db, "demo", count=25, rng=random.Random(1))

    assert inserted == 25
    assert db.query(TransactionRecord).filter(TransactionRecord.user_id == "demo").count() == 25
