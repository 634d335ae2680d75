"""
Tests for the pure budget, expiry and ordering calculations.

These functions back every page: the budget summary, the dashboard warning,
the ingredients expiry badge and the meal ordering.
"""

import math
from datetime import date, datetime, timezone

import pytest

from domain.calculators import (
    budget_status,
    format_currency,
    is_budget_low,
    is_expiring_soon,
    parse_iso_date,
    remaining_budget,
    sort_by_created_desc,
    sort_by_expiry_then_name,
    sort_by_weekday,
    total_spent,
    weekday_label,
)
from domain.enums import BudgetTone, ThresholdReason
from domain.schemas import Ingredient, Meal

TODAY = date(2024, 6, 10)


# =============================================================================
# SPENT / REMAINING
# =============================================================================


def test_total_spent_ignores_bad_prices():
    """
    Verifies:
    - Missing, non-numeric, NaN and negative prices count as 0
    - Dicts and schema objects are both accepted
    """
    items = [
        {"price": 2.5},
        {"price": "3"},
        {},
        {"price": float("nan")},
        {"price": -4},
        {"price": True},
        Ingredient(id="a", price=1.5),
    ]
    assert total_spent(items) == pytest.approx(4.0)
    assert total_spent([]) == 0


def test_remaining_budget():
    assert remaining_budget(None, 30) is None
    assert remaining_budget(100, 30) == 70
    assert remaining_budget(50, 80) == -30


# =============================================================================
# EXPIRY WINDOW
# =============================================================================


@pytest.mark.parametrize(
    "expiry, expected",
    [
        ("2024-06-10", True),
        ("2024-06-13", True),
        ("2024-06-14", False),
        ("2024-06-09", False),
        ("", False),
        ("not-a-date", False),
        (None, False),
    ],
)
def test_is_expiring_soon_window(expiry, expected):
    assert is_expiring_soon(expiry, TODAY) is expected


def test_is_expiring_soon_window_override():
    assert is_expiring_soon("2024-06-15", TODAY, window_days=5) is True
    assert is_expiring_soon("2024-06-11", TODAY, window_days=0) is False


def test_parse_iso_date_accepts_datetimes_and_strings():
    assert parse_iso_date("2024-06-10") == TODAY
    assert parse_iso_date(datetime(2024, 6, 10, 23, 59, tzinfo=timezone.utc)) == TODAY
    assert parse_iso_date("10/06/2024") is None


# =============================================================================
# BUDGET STATUS
# =============================================================================


def test_budget_status_tones():
    """
    Verifies the tone for (limit, spent):
    - (100, 100) warning, exactly used
    - (100, 85) warning, low
    - (100, 50) ok
    - (100, 110) danger, over budget
    """
    exhausted = budget_status(remaining_budget(100, 100), 100)
    assert exhausted.tone == BudgetTone.WARNING
    assert exhausted.threshold_reason == ThresholdReason.EXHAUSTED
    assert exhausted.message == "You have exactly used your monthly budget."

    low = budget_status(remaining_budget(100, 85), 100)
    assert low.tone == BudgetTone.WARNING
    assert low.threshold_reason == ThresholdReason.LOW
    assert low.message == "Your remaining budget is getting low: €15.00 left."

    ok = budget_status(remaining_budget(100, 50), 100)
    assert ok.tone == BudgetTone.OK
    assert ok.threshold_reason is None

    over = budget_status(remaining_budget(100, 110), 100)
    assert over.tone == BudgetTone.DANGER
    assert over.message == "You are over budget by €10.00 this month."


def test_budget_status_unknown_and_ratio_override():
    assert budget_status(None, 100) is None
    assert budget_status(10, None) is None
    assert budget_status(30, 100, low_ratio=0.5).tone == BudgetTone.WARNING
    assert budget_status(30, 100).tone == BudgetTone.OK


def test_is_budget_low():
    assert is_budget_low(20, 100) is True
    assert is_budget_low(21, 100) is False
    assert is_budget_low(-5, 0) is False
    assert is_budget_low(None, 100) is False


def test_format_currency():
    assert format_currency(1234.5) == "€1,234.50"
    assert format_currency(-3) == "-€3.00"
    assert format_currency(None) == "-"
    assert format_currency(math.nan) == "-"
    assert format_currency("12") == "-"


# =============================================================================
# ORDERING
# =============================================================================


def test_sort_by_expiry_then_name():
    items = [
        {"name": "Undated", "expiry_date": ""},
        {"name": "b", "expiry_date": "2024-01-02"},
        {"name": "a", "expiry_date": "2024-01-02"},
        {"name": "c", "expiry_date": "2024-01-01"},
    ]
    assert [i["name"] for i in sort_by_expiry_then_name(items)] == ["c", "a", "b", "Undated"]


def test_sort_by_weekday_unknown_first_and_stable():
    meals = [
        Meal(id="1", weekday="wednesday"),
        Meal(id="2", weekday="monday"),
        Meal(id="3", weekday="someday"),
        Meal(id="4", weekday="monday"),
    ]
    assert [m.id for m in sort_by_weekday(meals)] == ["3", "2", "4", "1"]


def test_sort_by_created_desc_puts_missing_last():
    older = Meal(id="old", created_at=datetime(2024, 6, 1, tzinfo=timezone.utc))
    newer = Meal(id="new", created_at=datetime(2024, 6, 2, tzinfo=timezone.utc))
    pending = Meal(id="pending")
    assert [m.id for m in sort_by_created_desc([older, pending, newer])] == ["new", "old", "pending"]


def test_weekday_label():
    assert weekday_label("friday") == "Friday"
    assert weekday_label("Someday") == "Someday"
    assert weekday_label(None) == ""
