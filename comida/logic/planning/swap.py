"""Swap-merge: replace one slot of the active menu with a user recipe."""
import logging
from typing import Iterable, List, Optional

from comida.domain.Menu import DayMeals, MealDetail, MenuPlan
from comida.domain.UserRecipe import UserRecipe
from comida.utilities.constants import HEAVY_CATEGORIES, MEAL_TYPE_LABELS, MEAL_TYPES

logger = logging.getLogger(__name__)


def confirm_swap(plan: MenuPlan, day: str, meal_type: str, new_meal: MealDetail) -> MenuPlan:
    """Return a new plan with `day`.`meal_type` replaced by `new_meal`.

    The input plan is never mutated: every untouched day object is shared as-is
    with the returned plan, only the targeted day is rebuilt.
    """
    if meal_type not in MEAL_TYPES:
        raise ValueError(f"Unknown meal type: {meal_type}")
    if day not in plan:
        raise ValueError(f"Day {day} is not part of the menu")
    updated = dict(plan)
    updated[day] = plan[day].model_copy(update={meal_type: new_meal})
    logger.info("Swapped %s of %s for %s", meal_type, day, new_meal.name)
    return updated


def balance_advice(day_meals: DayMeals, meal_type: str, new_meal: MealDetail) -> Optional[str]:
    '''
    Non-blocking suggestion when the new dish repeats the heavy category of the
    other main meal of the same day. Returns None when there is nothing to say.
    '''
    other_type = "dinner" if meal_type == "lunch" else "lunch"
    other = day_meals.slot(other_type)
    if other is None:
        return None
    if new_meal.category == other.category and new_meal.category in HEAVY_CATEGORIES:
        return (
            f"💡 Sugerencia: Ya tienes un plato de {new_meal.category.lower()} para la "
            f"{MEAL_TYPE_LABELS[other_type]}. Para un menú más variado, podrías considerar otra opción."
        )
    return None


def swap_candidates(recipes: Iterable[UserRecipe], category: Optional[str] = None) -> List[UserRecipe]:
    """User recipes offered in the swap modal, optionally narrowed to one category, sorted by name."""
    chosen = [r for r in recipes if not category or r.category == category]
    return sorted(chosen, key=lambda r: r.name.lower())


def meal_from_recipe(recipe: UserRecipe) -> MealDetail:
    return MealDetail(name=recipe.name, category=recipe.category)
