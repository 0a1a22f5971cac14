"""UserRecipe domain entity: a family recipe entered by hand or imported from CSV."""
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from comida.utilities.constants import RECIPE_CATEGORIES, UNCLASSIFIED


def normalize_category(value: Optional[str]) -> str:
    """Return the canonical category for value (case-insensitive), else Sin Clasificar."""
    if not isinstance(value, str):
        return UNCLASSIFIED
    wanted = value.strip().lower()
    for category in RECIPE_CATEGORIES:
        if category.lower() == wanted:
            return category
    return UNCLASSIFIED


class UserRecipe(BaseModel):
    id: str = ""
    name: str = Field(..., min_length=1)
    ingredients: str = Field(..., min_length=1)
    category: str = UNCLASSIFIED

    @field_validator("name", "ingredients")
    @classmethod
    def strip_whitespace(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("category", mode="before")
    @classmethod
    def canonical_category(cls, v):
        return normalize_category(v)

    def summary(self) -> str:
        return f"{self.name} (Ingredientes: {self.ingredients})"

    @staticmethod
    def from_dict(data) -> "UserRecipe":
        return UserRecipe.model_validate(dict(data))

    def to_dict(self) -> dict:
        return self.model_dump(exclude={"id"})

    def __str__(self) -> str:
        return f"{self.name} [{self.category}] - {self.ingredients}"

    __repr__ = __str__
