"""
Domain enums for UniMeal application.
Contains all enumeration types used across the domain schemas and views.
"""

import enum


class Unit(str, enum.Enum):
    """Units an ingredient quantity can be recorded in"""

    KG = "kg"
    G = "g"
    L = "L"
    ML = "mL"
    PIECES = "pieces"
    PACK = "pack"


class Weekday(str, enum.Enum):
    """Days a meal can be planned for, in display order"""

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @property
    def label(self) -> str:
        return self.value.capitalize()


WEEKDAY_ORDER = [day.value for day in Weekday]


class BudgetTone(str, enum.Enum):
    """Severity of the remaining-budget message"""

    OK = "ok"
    WARNING = "warning"
    DANGER = "danger"


class ThresholdReason(str, enum.Enum):
    """Which budget rule produced a non-ok tone"""

    OVER_BUDGET = "over_budget"
    EXHAUSTED = "exhausted"
    LOW = "low"


class LoadState(str, enum.Enum):
    """Lifecycle of a view model for one signed-in session"""

    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


class ViewMode(str, enum.Enum):
    """Layout of the meals page"""

    LIST = "list"
    WEEK = "week"


class Theme(str, enum.Enum):
    """Colour scheme preference"""

    LIGHT = "light"
    DARK = "dark"
