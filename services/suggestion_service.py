"""
Use-it-up Service - Prevents food waste by suggesting dishes for expiring ingredients.

Matching is a plain keyword lookup: each ingredient name is lower-cased and
trimmed, and every keyword it contains contributes its dishes. No ranking and
no fuzzy matching.
"""

from datetime import date
from typing import Dict, Iterable, List, Optional
import logging

from app.config import settings
from domain.calculators import is_expiring_soon

logger = logging.getLogger("unimeal.suggestions")

# Keyword (found inside an ingredient name) -> dishes, in lookup order
USE_IT_UP_SUGGESTIONS: Dict[str, List[str]] = {
    "milk": ["French toast", "Oatmeal", "Hot chocolate", "Smoothie"],
    "bread": ["Grilled cheese", "French toast", "Toast", "Croutons"],
    "tomato": ["Pasta sauce", "Bruschetta", "Salad", "Soup"],
    "tomatoes": ["Pasta sauce", "Bruschetta", "Salad", "Soup"],
    "chicken": ["Stir-fry", "Soup", "Sandwich", "Salad"],
    "egg": ["Scrambled eggs", "Omelette", "French toast"],
    "eggs": ["Scrambled eggs", "Omelette", "French toast"],
    "cheese": ["Grilled cheese", "Pasta", "Omelette", "Toast"],
    "potato": ["Mash", "Soup", "Roast", "Hash"],
    "potatoes": ["Mash", "Soup", "Roast", "Hash"],
    "onion": ["Stir-fry", "Soup", "Omelette", "Pasta"],
    "onions": ["Stir-fry", "Soup", "Omelette", "Pasta"],
    "rice": ["Stir-fry", "Rice bowl", "Soup", "Pudding"],
    "pasta": ["Pasta sauce", "Carbonara", "Salad"],
    "spinach": ["Salad", "Omelette", "Soup", "Pasta"],
    "mushroom": ["Stir-fry", "Soup", "Omelette", "Pasta"],
    "mushrooms": ["Stir-fry", "Soup", "Omelette", "Pasta"],
    "carrot": ["Soup", "Stir-fry", "Salad", "Roast"],
    "carrots": ["Soup", "Stir-fry", "Salad", "Roast"],
    "banana": ["Smoothie", "Oatmeal", "Pancakes"],
    "bananas": ["Smoothie", "Oatmeal", "Pancakes"],
    "lemon": ["Lemonade", "Fish", "Salad", "Tea"],
    "lemons": ["Lemonade", "Fish", "Salad", "Tea"],
    "yogurt": ["Smoothie", "Oatmeal", "Parfait"],
    "yoghurt": ["Smoothie", "Oatmeal", "Parfait"],
    "lentils": ["Soup", "Curry", "Salad"],
    "beans": ["Soup", "Salad", "Chilli", "Pasta"],
    "bacon": ["Carbonara", "Omelette", "Sandwich", "Salad"],
    "fish": ["Fish and vegetables", "Soup", "Tacos"],
    "mince": ["Bolognese", "Chilli", "Tacos"],
    "minced": ["Bolognese", "Chilli", "Tacos"],
    "beef": ["Stir-fry", "Soup", "Sandwich"],
    "pork": ["Stir-fry", "Roast", "Sandwich"],
    "lettuce": ["Salad", "Sandwich", "Wrap"],
    "cucumber": ["Salad", "Sandwich", "Tzatziki"],
    "pepper": ["Stir-fry", "Salad", "Roast", "Omelette"],
    "peppers": ["Stir-fry", "Salad", "Roast", "Omelette"],
    "broccoli": ["Stir-fry", "Soup", "Roast", "Pasta"],
    "cauliflower": ["Soup", "Roast", "Curry"],
    "zucchini": ["Stir-fry", "Pasta", "Roast"],
    "courgette": ["Stir-fry", "Pasta", "Roast"],
    "avocado": ["Toast", "Salad", "Guacamole"],
    "olive": ["Pasta", "Salad", "Pizza"],
    "olives": ["Pasta", "Salad", "Pizza"],
}


def get_use_it_up_suggestions(names: Iterable[str], limit: Optional[int] = None) -> List[str]:
    """
    Dishes for the given ingredient names.

    Args:
        names: Ingredient names, typically of the items expiring soon
        limit: Maximum number of dishes (default: settings.max_suggestions)

    Returns:
        De-duplicated dishes in first-seen order, at most ``limit`` long
    """
    max_results = settings.max_suggestions if limit is None else limit
    seen = set()
    suggestions: List[str] = []
    for name in names:
        lower = (name or "").lower().strip()
        if not lower:
            continue
        for keyword, dishes in USE_IT_UP_SUGGESTIONS.items():
            if keyword in lower:
                for dish in dishes:
                    if dish not in seen:
                        seen.add(dish)
                        suggestions.append(dish)
    return suggestions[:max_results]


class UseItUpService:
    @staticmethod
    def expiring_items(ingredients, reference_date: Optional[date] = None) -> list:
        """Ingredients whose expiry falls inside the expiring-soon window."""
        return [i for i in ingredients if is_expiring_soon(i.expiry_date, reference_date)]

    @staticmethod
    def suggest_for(ingredients, reference_date: Optional[date] = None) -> List[str]:
        """
        Use-it-up suggestions for a user's ingredient list.

        1. Keep only the ingredients expiring soon
        2. Look their names up in the keyword table
        """
        expiring = UseItUpService.expiring_items(ingredients, reference_date)
        if not expiring:
            return []
        suggestions = get_use_it_up_suggestions(i.name for i in expiring)
        logger.debug(
            "Generated %d use-it-up suggestions from %d expiring items",
            len(suggestions),
            len(expiring),
        )
        return suggestions
