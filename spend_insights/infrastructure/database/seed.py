"""Seed a user with random demo transactions"""

import random
from datetime import datetime, timedelta
from typing import List
from sqlalchemy.orm import Session

from spend_insights.infrastructure.database.models import TransactionRecord

EXPENSE_CATEGORIES = ["Food", "Transport", "Shopping", "Health", "Utilities", "Entertainment", "General", "Other"]
INCOME_CATEGORIES = ["Salary", "Bonus", "Refund", "Interest"]
INCOME_SHARE = 0.25


def build_demo_transactions(
    user_id: str,
    count: int = 60,
    days_back: int = 90,
    rng: random.Random | None = None,
    now: datetime | None = None,
) -> List[TransactionRecord]:
    """Random mix of spend (positive) and income (negative) within the last ``days_back`` days"""
    rng = rng or random.Random()
    now = now or datetime.now()

    records = []
    for i in range(count):
        is_income = rng.random() < INCOME_SHARE
        base = round(rng.uniform(5, 250), 2)
        category = rng.choice(INCOME_CATEGORIES if is_income else EXPENSE_CATEGORIES)
        when = (now - timedelta(days=rng.randint(0, days_back))).replace(
            hour=rng.randint(0, 23), minute=rng.randint(0, 59), second=rng.randint(0, 59), microsecond=0
        )
        records.append(
            TransactionRecord(
                user_id=user_id,
                amount=-base if is_income else base,
                category=category,
                description=f"{'Income' if is_income else 'Expense'} seed txn #{i + 1}",
                date=when,
            )
        )
    return records


def seed_demo_transactions(
    db: Session,
    user_id: str,
    count: int = 60,
    rng: random.Random | None = None,
) -> int:
    """Insert demo transactions for a user and commit; returns the number inserted"""
    records = build_demo_transactions(user_id, count=count, rng=rng)
    db.add_all(records)
    db.commit()
    return len(records)


if __name__ == "__main__":
    import argparse
    from spend_insights.infrastructure.database.models import Base
    from spend_insights.infrastructure.database.session import SessionLocal, engine

    parser = argparse.ArgumentParser(description="Seed demo transactions")
    parser.add_argument("user_id")
    parser.add_argument("--count", type=int, default=60)
    args = parser.parse_args()

    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        inserted = seed_demo_transactions(session, args.user_id, count=args.count)
        print(f"Inserted {inserted} transactions for {args.user_id}")
    finally:
        session.close()
