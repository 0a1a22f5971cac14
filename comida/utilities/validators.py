"""
Input validation schemas using Pydantic for better data integrity.
"""
from datetime import date, timedelta
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from comida.domain.Profile import ActivityLevel, Gender
from comida.utilities.config import DEFAULT_MENU_DAYS, MAX_MENU_DAYS
from comida.utilities.constants import MEAL_TYPES


class ProfileInput(BaseModel):
    """Schema for family member form validation."""
    name: str = Field(..., min_length=1, max_length=100)
    age: int = Field(..., ge=1, le=120)
    gender: Gender
    activity_level: ActivityLevel
    notes: str = Field(default="", max_length=500)

    @field_validator('name', 'notes', mode='before')
    @classmethod
    def strip_whitespace(cls, v):
        """Remove leading/trailing whitespace."""
        if isinstance(v, str):
            return v.strip()
        return v


class RecipeInput(BaseModel):
    """Schema for family recipe form validation."""
    name: str = Field(..., min_length=1, max_length=200)
    ingredients: str = Field(..., min_length=1, max_length=2000)
    category: Optional[str] = None

    @field_validator('name', 'ingredients', mode='before')
    @classmethod
    def strip_whitespace(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v


class MenuRequestInput(BaseModel):
    """Schema for menu generation requests."""
    start_date: date = Field(default_factory=lambda: date.today() + timedelta(days=1))
    days: int = Field(default=DEFAULT_MENU_DAYS, ge=1, le=MAX_MENU_DAYS)
    preferences: str = Field(default="", max_length=1000)
    include_breakfasts: bool = False

    @field_validator('preferences', mode='before')
    @classmethod
    def strip_preferences(cls, v):
        return v.strip() if isinstance(v, str) else (v or "")


class SwapInput(BaseModel):
    """Schema for replacing one meal of the active menu."""
    date: str = Field(..., pattern=r'^\d{4}-\d{2}-\d{2}$')
    meal_type: str = Field(..., pattern=r'^(breakfast|lunch|dinner)$')
    recipe_id: Optional[str] = None
    name: Optional[str] = None
    category: Optional[str] = None

    @field_validator('meal_type')
    @classmethod
    def known_meal_type(cls, v):
        if v not in MEAL_TYPES:
            raise ValueError(f'Unknown meal type: {v}')
        return v


class RecipeDetailsInput(BaseModel):
    dish_name: str = Field(..., min_length=1, max_length=200)
