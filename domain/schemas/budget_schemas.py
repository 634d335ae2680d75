"""Schemas for the monthly food budget"""

from pydantic import BaseModel, Field
from typing import Optional, Union
from datetime import datetime

from domain.enums import BudgetTone, ThresholdReason, LoadState


class Budget(BaseModel):
    """The single budget document of a user"""

    monthly_limit: float = 0
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class BudgetUpdate(BaseModel):
    """Raw monthly limit input; parsed by services.validators"""

    monthly_limit: Union[float, str, None] = None


class BudgetStatus(BaseModel):
    """Tone and message describing the remaining budget"""

    tone: BudgetTone
    threshold_reason: Optional[ThresholdReason] = None
    message: str


class BudgetSummary(BaseModel):
    """Budget page state"""

    state: LoadState
    monthly_limit: Optional[float] = None
    limit_input: str = ""
    spent: float = 0
    remaining: Optional[float] = None
    spent_display: str = "-"
    remaining_display: str = "-"
    limit_display: str = "-"
    status: Optional[BudgetStatus] = None
    currency: str = Field(..., description="Fixed display currency code")
    error: Optional[str] = None
