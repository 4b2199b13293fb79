"""Unit tests for recurring charge aggregation"""

from datetime import date, timedelta
from conftest import txn
from spend_insights.domain.recurring import find_recurring, group_by_merchant, MAX_ITEMS


def test_monthly_subscription_scenario(monthly_subscription):
    """Charges 60, 30 and 0 days ago -> one monthly item due in 30 days"""
    items = find_recurring(monthly_subscription)

    assert len(items) == 1
    item = items[0]
    assert item.merchant == "NETFLIX.COM"
    assert item.category == "Subscriptions"
    assert item.cadence == "monthly"
    assert item.avg_amount == 50.00
    assert item.next_due_date == date.today() + timedelta(days=30)
    assert item.source == "heuristic"
    assert item.to_dict()["nextDueDate"] == (date.today() + timedelta(days=30)).isoformat()


def test_single_occurrence_is_dropped():
    assert find_recurring([txn(5, 12.0, "Food", "CHIPOTLE 1234")]) == []


def test_same_day_charges_count_once():
    """Two charges on one day plus one a month later: 2 distinct dates, 3 amounts"""
    transactions = [
        txn(30, 10.0, "Music", "SPOTIFY"),
        txn(30, 20.0, "Music", "SPOTIFY"),
        txn(0, 30.0, "Music", "SPOTIFY"),
    ]
    groups = group_by_merchant(transactions)
    items = find_recurring(transactions)

    assert len(groups[0].dates) == 3
    assert len(items) == 1
    assert items[0].cadence == "monthly"
    assert items[0].avg_amount == 20.00


def test_zero_amounts_are_skipped():
    transactions = [
        txn(30, 0.0, "Music", "SPOTIFY"),
        txn(0, 9.99, "Music", "SPOTIFY"),
    ]
    assert find_recurring(transactions) == []


def test_groups_split_by_category():
    """Same merchant under two categories never pools its dates"""
    transactions = [
        txn(30, 15.0, "Groceries", "COSTCO"),
        txn(0, 80.0, "Fuel", "COSTCO"),
    ]
    assert find_recurring(transactions) == []


def test_income_is_detected_by_absolute_amount():
    transactions = [
        txn(28, -2500.0, "Salary", "ACME PAYROLL"),
        txn(14, -2500.0, "Salary", "ACME PAYROLL"),
        txn(0, -2500.0, "Salary", "ACME PAYROLL"),
    ]
    items = find_recurring(transactions)

    assert len(items) == 1
    assert items[0].cadence == "biweekly"
    assert items[0].avg_amount == 2500.00


def test_missing_description_groups_by_category():
    transactions = [txn(14, 40.0, "Gym"), txn(7, 40.0, "Gym"), txn(0, 40.0, "Gym")]
    items = find_recurring(transactions)

    assert items[0].merchant == "GYM"
    assert items[0].cadence == "weekly"


def test_unknown_cadence_is_dropped():
    transactions = [txn(100, 20.0, "Misc", "HARDWARE"), txn(50, 20.0, "Misc", "HARDWARE")]
    assert find_recurring(transactions) == []


def test_horizon_excludes_distant_due_dates():
    """Yearly charge last seen 10 days ago is due in 355 days"""
    transactions = [
        txn(740, 99.0, "Software", "DOMAIN RENEWAL"),
        txn(375, 99.0, "Software", "DOMAIN RENEWAL"),
        txn(10, 99.0, "Software", "DOMAIN RENEWAL"),
    ]

    assert find_recurring(transactions) == []

    items = find_recurring(transactions, horizon_days=400)
    assert len(items) == 1
    assert items[0].cadence == "yearly"


def test_results_sorted_and_capped():
    """25 weekly merchants -> 20 items, nearest due date first"""
    transactions = []
    for i in range(25):
        name = f"MERCHANT {chr(ord('A') + i)}"
        last_seen = i % 7
        for week in range(3):
            transactions.append(txn(last_seen + 7 * week, 5.0, "Subscriptions", name))

    items = find_recurring(transactions)

    assert len(items) == MAX_ITEMS
    due_dates = [item.next_due_date for item in items]
    assert due_dates == sorted(due_dates)


def test_overdue_items_are_kept():
    """Missed charge: next due date already passed, still within horizon"""
    transactions = [txn(90, 12.0, "Streaming", "HULU"), txn(60, 12.0, "Streaming", "HULU")]
    items = find_recurring(transactions, today=date.today())

    assert len(items) == 1
    assert items[0].next_due_date < date.today()
