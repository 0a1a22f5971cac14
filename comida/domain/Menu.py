"""Menu domain entities: meal details, day slots, menu plans and saved menus."""
from datetime import datetime
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator

from comida.utilities.constants import MAIN_DISH_CATEGORY, MEAL_TYPES


class MealDetail(BaseModel):
    """A dish placed in a slot. Replaced wholesale on swap, never edited."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    category: str = MAIN_DISH_CATEGORY

    @model_validator(mode="before")
    @classmethod
    def accept_plain_name(cls, data):
        # Older stored menus kept only the dish name
        if isinstance(data, str):
            return {"name": data, "category": MAIN_DISH_CATEGORY}
        return data

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("meal name cannot be empty")
        return v

    def __str__(self) -> str:
        return self.name


class DayMeals(BaseModel):
    model_config = ConfigDict(frozen=True)

    breakfast: Optional[MealDetail] = None
    lunch: MealDetail
    dinner: MealDetail

    def slot(self, meal_type: str) -> Optional[MealDetail]:
        if meal_type not in MEAL_TYPES:
            raise ValueError(f"Unknown meal type: {meal_type}")
        return getattr(self, meal_type)

    def meals(self) -> List[MealDetail]:
        return [m for m in (self.breakfast, self.lunch, self.dinner) if m is not None]


# Calendar-day key (YYYY-MM-DD) -> meals of that day
MenuPlan = Dict[str, DayMeals]
menu_plan_adapter = TypeAdapter(MenuPlan)


def plan_from_dict(data) -> MenuPlan:
    return menu_plan_adapter.validate_python(data)


def plan_to_dict(plan: MenuPlan) -> dict:
    return {day: meals.model_dump(exclude_none=True) for day, meals in sorted(plan.items())}


def sorted_days(plan: Optional[MenuPlan]) -> List[str]:
    return sorted(plan.keys()) if plan else []


def meal_names(plan: MenuPlan) -> List[str]:
    '''All dish names of the plan in calendar order (breakfast, lunch, dinner).'''
    return [meal.name for day in sorted_days(plan) for meal in plan[day].meals()]


class SavedMenu(BaseModel):
    id: str = ""
    start_date: str
    end_date: str
    menu_plan: MenuPlan
    created_at: str = Field(default_factory=lambda: datetime.now().isoformat(timespec="seconds"))

    @staticmethod
    def from_plan(plan: MenuPlan) -> "SavedMenu":
        days = sorted_days(plan)
        if not days:
            raise ValueError("Cannot save an empty menu")
        return SavedMenu(start_date=days[0], end_date=days[-1], menu_plan=dict(plan))

    @staticmethod
    def from_dict(data) -> "SavedMenu":
        return SavedMenu.model_validate(dict(data))

    def to_dict(self) -> dict:
        return {
            "start_date": self.start_date,
            "end_date": self.end_date,
            "menu_plan": plan_to_dict(self.menu_plan),
            "created_at": self.created_at,
        }
