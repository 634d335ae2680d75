"""API routes package"""

from . import budget, dashboard, health, ingredients, meals, onboarding, preferences, templates

__all__ = [
    "budget",
    "dashboard",
    "health",
    "ingredients",
    "meals",
    "onboarding",
    "preferences",
    "templates",
]
