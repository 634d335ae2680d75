"""Schemas for pantry ingredients"""

from pydantic import BaseModel, Field
from typing import List, Optional, Union
from datetime import datetime


class Ingredient(BaseModel):
    """Ingredient as cached from the latest store snapshot.

    Fields are deliberately loose: whatever the store holds is shown, and
    aggregation treats bad values as zero.
    """

    id: str
    name: str = ""
    qty: float = 0
    unit: str = ""
    price: float = 0
    expiry_date: str = Field(default="", description="ISO date (YYYY-MM-DD) or empty")
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class IngredientForm(BaseModel):
    """Raw add-ingredient form input, validated by services.validators"""

    name: str = ""
    quantity: Optional[Union[float, str]] = None
    unit: str = ""
    price: Optional[Union[float, str]] = None
    expiry_date: str = ""


class IngredientItemResponse(Ingredient):
    """Ingredient row with its derived expiry flag"""

    expiring_soon: bool = False


class IngredientListResponse(BaseModel):
    """Ingredients page state"""

    items: List[IngredientItemResponse] = Field(default_factory=list)
    total: int = Field(..., description="Number of ingredients before filtering")
    expiring_soon_count: int = Field(..., description="Items expiring within the window")
    search_query: str = ""
    expiring_soon_only: bool = False
    min_expiry_date: str = Field(..., description="Earliest date the form suggests")
    error: Optional[str] = None


class IngredientCreatedResponse(BaseModel):
    id: str
    status: str = "created"
