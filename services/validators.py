"""
Form validation run before any write. Failures raise ServiceValidationError
with the offending field in details and never reach the store.
"""

import math
from typing import Any, Dict, Optional, Tuple

from app.exceptions import ServiceValidationError
from domain.calculators import parse_iso_date
from domain.enums import Unit, Weekday
from domain.schemas import IngredientForm

MAX_NAME_LENGTH = 100


def _invalid(message: str, field: str) -> ServiceValidationError:
    return ServiceValidationError(message, details={"field": field}, code="validation_error")


def parse_number(raw: Any) -> Optional[float]:
    """Finite float from a number or numeric string, else None."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str):
        try:
            value = float(raw.strip())
        except ValueError:
            return None
    else:
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value


def _is_blank(raw: Any) -> bool:
    return raw is None or (isinstance(raw, str) and not raw.strip())


def validate_monthly_limit(raw: Any, message: str = "Monthly limit must be a number greater than 0.") -> float:
    value = parse_number(raw)
    if value is None or value <= 0:
        raise _invalid(message, "monthly_limit")
    return value


def validate_ingredient_form(form: IngredientForm) -> Dict[str, Any]:
    """Return the normalized document fields for a new ingredient."""
    name = (form.name or "").strip()
    if not name:
        raise _invalid("Ingredient name is required.", "name")
    if len(name) > MAX_NAME_LENGTH:
        raise _invalid(f"Ingredient name must be {MAX_NAME_LENGTH} characters or fewer.", "name")

    qty = parse_number(form.quantity)
    if qty is None or qty <= 0:
        raise _invalid("Quantity must be greater than 0.", "quantity")

    if not form.unit:
        raise _invalid("Please select a unit.", "unit")
    try:
        unit = Unit(form.unit).value
    except ValueError:
        raise _invalid("Please select a unit.", "unit")

    if _is_blank(form.price):
        price = 0.0
    else:
        price = parse_number(form.price)
        if price is None or price < 0:
            raise _invalid("Price must be 0 or greater.", "price")

    if not (form.expiry_date or "").strip():
        raise _invalid("Expiry date is required.", "expiry_date")
    expiry = parse_iso_date(form.expiry_date)
    if expiry is None:
        raise _invalid("Expiry date must be a valid date (YYYY-MM-DD).", "expiry_date")

    return {
        "name": name,
        "qty": qty,
        "unit": unit,
        "price": price,
        "expiry_date": expiry.isoformat(),
    }


def validate_weekday(raw: Any, required: bool = True) -> str:
    if _is_blank(raw):
        if required:
            raise _invalid("Please select a weekday.", "weekday")
        return ""
    try:
        return Weekday(str(raw).strip().lower()).value
    except ValueError:
        raise _invalid("Please select a weekday.", "weekday")


def validate_meal_name(raw: Any, label: str = "Meal name") -> str:
    name = (raw or "").strip() if isinstance(raw, str) else ""
    if not name:
        raise _invalid(f"{label} is required.", "name")
    if len(name) > MAX_NAME_LENGTH:
        raise _invalid(f"{label} must be {MAX_NAME_LENGTH} characters or fewer.", "name")
    return name


def validate_meal_form(name: Any, weekday: Any) -> Tuple[str, str]:
    return validate_meal_name(name), validate_weekday(weekday)


def validate_template_form(name: Any, weekday: Any) -> Tuple[str, str]:
    """Templates may leave the weekday empty."""
    return validate_meal_name(name, "Template name"), validate_weekday(weekday, required=False)
