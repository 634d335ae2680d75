"""Schemas for local UI preferences"""

from pydantic import BaseModel

from domain.enums import Theme


class ThemeUpdate(BaseModel):
    theme: Theme
