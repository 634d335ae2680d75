"""
Plain-text export of the meal plan.

Format:

    Monday
    - Pasta
    - Soup

    Wednesday
    - Curry

Groups follow the weekday order, empty groups are left out, and meals with an
unrecognized weekday are appended under their raw label.
"""

from datetime import date
from typing import Dict, Iterable, List, Optional

from domain.calculators import get_field
from domain.enums import Weekday

EXPORT_FILENAME_PREFIX = "unimeal-meals"


def render_week_export(meals: Iterable, weekday_filter: Optional[str] = None) -> str:
    """
    Render meals grouped by weekday.

    Args:
        meals: Meal schemas or dicts with name and weekday
        weekday_filter: Only export this weekday when given

    Returns:
        Export text, empty when there is nothing to export
    """
    known: Dict[str, List[str]] = {day.value: [] for day in Weekday}
    unknown: Dict[str, List[str]] = {}

    for meal in meals:
        weekday = get_field(meal, "weekday") or ""
        if weekday_filter and weekday != weekday_filter:
            continue
        name = get_field(meal, "name") or ""
        if weekday in known:
            known[weekday].append(name)
        else:
            unknown.setdefault(weekday, []).append(name)

    groups = [(Weekday(day).label, names) for day, names in known.items()]
    groups += list(unknown.items())

    lines: List[str] = []
    for label, names in groups:
        if not names:
            continue
        lines.append(label)
        lines.extend(f"- {name}" for name in names)
        lines.append("")

    if lines and lines[-1] == "":
        lines.pop()
    return "\n".join(lines)


def export_filename(today: Optional[date] = None) -> str:
    """unimeal-meals-YYYY-MM-DD.txt for the given (default: current) date."""
    today = today or date.today()
    return f"{EXPORT_FILENAME_PREFIX}-{today.isoformat()}.txt"
