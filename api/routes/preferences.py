"""Local UI preference routes (theme)"""

from fastapi import APIRouter, Depends
import logging

from adapters.preference_store import PreferenceStore, get_theme, set_theme, toggle_theme
from api.dependencies import get_user_preferences
from api.responses import USER_ERRORS
from domain.schemas import ThemeUpdate

router = APIRouter(prefix="/preferences", tags=["Preferences"])
logger = logging.getLogger("unimeal.api.preferences")


@router.get("/theme", response_model=ThemeUpdate, responses=USER_ERRORS)
def read_theme(preferences: PreferenceStore = Depends(get_user_preferences)):
    """Stored colour theme, light when never set"""
    return ThemeUpdate(theme=get_theme(preferences))


@router.put("/theme", response_model=ThemeUpdate, responses=USER_ERRORS)
def update_theme(payload: ThemeUpdate, preferences: PreferenceStore = Depends(get_user_preferences)):
    set_theme(preferences, payload.theme)
    return ThemeUpdate(theme=get_theme(preferences))


@router.post("/theme/toggle", response_model=ThemeUpdate, responses=USER_ERRORS)
def switch_theme(preferences: PreferenceStore = Depends(get_user_preferences)):
    """Flip between light and dark"""
    theme = toggle_theme(preferences)
    logger.debug("Theme switched to %s", theme.value)
    return ThemeUpdate(theme=theme)
