"""
Tests for the plain-text meal plan export.
"""

from datetime import date

from domain.schemas import Meal
from services.export_service import export_filename, render_week_export


def test_groups_in_weekday_order_and_omits_empty_days():
    meals = [
        Meal(id="1", name="Curry", weekday="wednesday"),
        Meal(id="2", name="Pasta", weekday="monday"),
        Meal(id="3", name="Soup", weekday="monday"),
    ]
    assert render_week_export(meals) == "Monday\n- Pasta\n- Soup\n\nWednesday\n- Curry"


def test_unknown_weekdays_follow_under_raw_label():
    meals = [
        {"name": "Leftovers", "weekday": "someday"},
        {"name": "Toast", "weekday": "sunday"},
    ]
    assert render_week_export(meals) == "Sunday\n- Toast\n\nsomeday\n- Leftovers"


def test_weekday_filter_and_empty_export():
    meals = [
        Meal(id="1", name="Curry", weekday="wednesday"),
        Meal(id="2", name="Pasta", weekday="monday"),
    ]
    assert render_week_export(meals, "wednesday") == "Wednesday\n- Curry"
    assert render_week_export(meals, "friday") == ""
    assert render_week_export([]) == ""


def test_export_filename():
    assert export_filename(date(2024, 6, 10)) == "unimeal-meals-2024-06-10.txt"
