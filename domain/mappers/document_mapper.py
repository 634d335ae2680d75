"""
Document mappers.
Handles transformation between raw store snapshots and domain schemas.
"""

import math
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from domain.schemas import Budget, Ingredient, Meal, MealTemplate, OnboardingState


def _timestamp(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    return None


def _number(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value)


def _finite_number(value: Any) -> float:
    number = _number(value)
    return number if math.isfinite(number) else 0.0


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


class DocumentMapper:
    """Mapper for snapshot documents (objects exposing ``id`` and ``data``)."""

    @staticmethod
    def to_ingredient(snapshot) -> Ingredient:
        data: Mapping[str, Any] = snapshot.data or {}
        return Ingredient(
            id=snapshot.id,
            name=_text(data.get("name")),
            qty=_number(data.get("qty")),
            unit=_text(data.get("unit")),
            # NaN survives here on purpose; calculators treat it as 0
            price=_number(data.get("price")),
            expiry_date=_text(data.get("expiryDate")),
            created_at=_timestamp(data.get("createdAt")),
        )

    @staticmethod
    def to_meal(snapshot) -> Meal:
        data: Mapping[str, Any] = snapshot.data or {}
        return Meal(
            id=snapshot.id,
            name=_text(data.get("name")),
            weekday=_text(data.get("weekday")),
            created_at=_timestamp(data.get("createdAt")),
        )

    @staticmethod
    def to_template(snapshot) -> MealTemplate:
        data: Mapping[str, Any] = snapshot.data or {}
        return MealTemplate(
            id=snapshot.id,
            name=_text(data.get("name")),
            default_weekday=_text(data.get("defaultWeekday")),
            created_at=_timestamp(data.get("createdAt")),
        )

    @staticmethod
    def to_budget(snapshot) -> Optional[Budget]:
        """None when the budget document does not exist."""
        if snapshot.data is None:
            return None
        limit = snapshot.data.get("monthlyLimit")
        return Budget(
            monthly_limit=_finite_number(limit),
            updated_at=_timestamp(snapshot.data.get("updatedAt")),
        )

    @staticmethod
    def to_onboarding(snapshot) -> OnboardingState:
        data = snapshot.data or {}
        return OnboardingState(completed=data.get("completed") is True)
