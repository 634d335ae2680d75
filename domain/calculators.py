"""
Pure calculations derived from the cached snapshots: spend totals, remaining
budget, expiry windows, currency formatting and list ordering.

Items may be schema objects or plain dicts straight from a snapshot.
"""

from __future__ import annotations

import math
from datetime import date, datetime
from typing import Any, Iterable, List, Optional

from app.config import settings
from domain.enums import BudgetTone, ThresholdReason, WEEKDAY_ORDER, Weekday
from domain.schemas.budget_schemas import BudgetStatus

PLACEHOLDER = "-"


def get_field(item: Any, name: str, default: Any = None) -> Any:
    if isinstance(item, dict):
        return item.get(name, default)
    return getattr(item, name, default)


def _as_price(value: Any) -> float:
    """Numeric, finite, non-negative price or 0"""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    if math.isnan(value) or math.isinf(value) or value < 0:
        return 0.0
    return float(value)


def total_spent(ingredients: Iterable[Any]) -> float:
    """Sum of ingredient prices; bad or missing prices count as 0."""
    return sum((_as_price(get_field(ing, "price")) for ing in ingredients), 0.0)


def remaining_budget(limit: Optional[float], spent: float) -> Optional[float]:
    """limit - spent, or None when no limit has been set."""
    if limit is None:
        return None
    return limit - spent


def parse_iso_date(value: Any) -> Optional[date]:
    """Parse a date-only value; anything unusable becomes None."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            return None
    return None


def days_between(reference: date, target: date) -> int:
    """Whole calendar days from reference to target (negative when in the past)."""
    return (target - reference).days


def is_expiring_soon(
    expiry_date: Any,
    reference_date: Optional[date] = None,
    window_days: Optional[int] = None,
) -> bool:
    """True when the expiry falls within [reference, reference + window] inclusive."""
    expiry = parse_iso_date(expiry_date)
    if expiry is None:
        return False
    reference = parse_iso_date(reference_date) or date.today()
    window = settings.expiring_soon_days if window_days is None else window_days
    diff = days_between(reference, expiry)
    return 0 <= diff <= window


def format_currency(value: Any) -> str:
    """Format an amount in the fixed display currency, "-" when unknown."""
    if value is None or isinstance(value, bool) or not isinstance(value, (int, float)):
        return PLACEHOLDER
    if math.isnan(value) or math.isinf(value):
        return PLACEHOLDER
    sign = "-" if value < 0 else ""
    return f"{sign}{settings.currency_symbol}{abs(value):,.2f}"


def budget_status(
    remaining: Optional[float],
    limit: Optional[float],
    low_ratio: Optional[float] = None,
) -> Optional[BudgetStatus]:
    """
    Classify the remaining budget.

    danger when over budget, warning when exactly used or at most low_ratio of
    the limit is left (only evaluated for a positive limit), ok otherwise.
    Returns None while either value is unknown.
    """
    if remaining is None or limit is None:
        return None
    ratio = settings.low_budget_ratio if low_ratio is None else low_ratio

    if remaining < 0:
        return BudgetStatus(
            tone=BudgetTone.DANGER,
            threshold_reason=ThresholdReason.OVER_BUDGET,
            message=f"You are over budget by {format_currency(-remaining)} this month.",
        )
    if remaining == 0:
        return BudgetStatus(
            tone=BudgetTone.WARNING,
            threshold_reason=ThresholdReason.EXHAUSTED,
            message="You have exactly used your monthly budget.",
        )
    if limit > 0 and remaining <= limit * ratio:
        return BudgetStatus(
            tone=BudgetTone.WARNING,
            threshold_reason=ThresholdReason.LOW,
            message=f"Your remaining budget is getting low: {format_currency(remaining)} left.",
        )
    return BudgetStatus(
        tone=BudgetTone.OK,
        message=f"You still have {format_currency(remaining)} left in your budget.",
    )


def is_budget_low(remaining: Optional[float], limit: Optional[float], low_ratio: Optional[float] = None) -> bool:
    """Dashboard warning flag: a positive limit with at most low_ratio left."""
    if remaining is None or limit is None or limit <= 0:
        return False
    ratio = settings.low_budget_ratio if low_ratio is None else low_ratio
    return remaining <= limit * ratio


def sort_by_expiry_then_name(ingredients: Iterable[Any]) -> List[Any]:
    """Soonest expiry first, undated items last, ties by name (case-sensitive)."""

    def key(ing):
        expiry = get_field(ing, "expiry_date") or ""
        name = get_field(ing, "name") or ""
        return (expiry == "", expiry, name)

    return sorted(ingredients, key=key)


def weekday_index(value: Any) -> int:
    """Position in the weekday enum, -1 when unrecognized."""
    try:
        return WEEKDAY_ORDER.index(value)
    except ValueError:
        return -1


def weekday_label(value: Any) -> str:
    """Display label for a weekday value; unknown values are shown verbatim."""
    try:
        return Weekday(value).label
    except ValueError:
        return value if isinstance(value, str) else ""


def sort_by_weekday(meals: Iterable[Any]) -> List[Any]:
    """Monday..Sunday; unrecognized weekdays sort first (index -1). Stable."""
    return sorted(meals, key=lambda meal: weekday_index(get_field(meal, "weekday")))


def sort_by_created_desc(items: Iterable[Any]) -> List[Any]:
    """Newest first; items without a creation time go last."""

    def key(item):
        created = get_field(item, "created_at")
        return created.timestamp() if isinstance(created, datetime) else 0.0

    return sorted(items, key=key, reverse=True)
