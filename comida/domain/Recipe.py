"""Recipe detail: transient projection of one generation response, never persisted."""
from typing import List
from pydantic import BaseModel, ConfigDict, Field


class NutritionalInfo(BaseModel):
    protein: str
    carbohydrates: str
    fats: str


class RecipeDetail(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    ingredients: List[str]
    instructions: List[str]
    calories: float = Field(..., ge=0)
    nutritional_info: NutritionalInfo = Field(..., alias="nutritionalInfo")
    motivational_comment: str = Field(..., alias="motivationalComment")

    def __str__(self) -> str:
        return f"{self.name} - {len(self.ingredients)} ingredientes - {self.calories:g} kcal"

    __repr__ = __str__
