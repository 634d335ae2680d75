"""Schemas for planned meals and reusable meal templates"""

from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from datetime import datetime

from domain.enums import ViewMode


class Meal(BaseModel):
    """Meal as cached from the latest store snapshot"""

    id: str
    name: str = ""
    weekday: str = ""
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class MealTemplate(BaseModel):
    """Saved meal pattern that can be instantiated into a Meal"""

    id: str
    name: str = ""
    default_weekday: str = Field(default="", description="Weekday value or empty")
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class MealForm(BaseModel):
    """Raw add-meal form input"""

    name: str = ""
    weekday: str = ""


class MealTemplateForm(BaseModel):
    """Current meal form captured as a template"""

    name: str = ""
    weekday: str = ""


class MealItemResponse(Meal):
    weekday_label: str = ""


class MealListResponse(BaseModel):
    """Meals page state"""

    items: List[MealItemResponse] = Field(default_factory=list)
    total: int
    weekday_filter: Optional[str] = None
    view_mode: ViewMode = ViewMode.LIST
    week: Dict[str, List[MealItemResponse]] = Field(
        default_factory=dict, description="Meals grouped by weekday label (week view)"
    )
    error: Optional[str] = None


class MealTemplateListResponse(BaseModel):
    items: List[MealTemplate] = Field(default_factory=list)
    total: int


class ViewModeUpdate(BaseModel):
    view_mode: ViewMode


class MealCreatedResponse(BaseModel):
    id: str
    status: str = "created"
