"""Menu, recipe and shopping-list generation.

Each operation builds a prompt and a strict output schema, sends both to a
generation gateway and validates the returned text into domain objects. Any
response that does not parse or does not fit the expected shape raises
GenerationFormatError; nothing is retried automatically.
"""
import json
import logging
import re
from datetime import date
from json import JSONDecodeError
from typing import List, Protocol, Sequence, Union

from pydantic import ValidationError

from comida.domain.Menu import MenuPlan, meal_names, plan_from_dict
from comida.domain.Profile import Profile
from comida.domain.Recipe import RecipeDetail
from comida.domain.ShoppingList import ShoppingListItem
from comida.domain.UserRecipe import UserRecipe
from comida.domain.errors import GenerationFormatError
from comida.logic.generation import prompts
from comida.logic.planning.dates import expand_date_range
from comida.utilities.constants import BREAKFAST_CATEGORY, MEAL_CATEGORIES

logger = logging.getLogger(__name__)


class GenerationGateway(Protocol):
    def complete(self, prompt: str, schema: dict, name: str) -> str:
        """Return raw model text expected to be JSON matching `schema`."""
        ...


# === Text Cleaning Helpers ===
def _strip_code_fences(text: str) -> str:
    """Remove markdown code fences around the JSON and surrounding whitespace."""
    text = (text or "").strip()
    text = re.sub(r"^```(?:json)?\s*\n?(.*?)\n?```$", r"\1", text, flags=re.S)
    return text.strip()


def _parse_json(raw: str, what: str):
    text = _strip_code_fences(raw)
    if not text:
        raise GenerationFormatError(f"Empty {what} response")
    try:
        return json.loads(text)
    except JSONDecodeError as e:
        logger.warning("Failed to parse %s JSON: %.200s", what, raw)
        raise GenerationFormatError(f"Received invalid JSON format for the {what}.") from e


# === Menu Plan ===
def generate_menu_plan(gateway: GenerationGateway, start: Union[str, date], days: int, preferences: str,
                       profiles: Sequence[Profile], recipes: Sequence[UserRecipe],
                       include_breakfasts: bool) -> MenuPlan:
    """Generate a plan for `days` consecutive days starting at `start`.

    The response must contain exactly the requested day keys, each with lunch
    and dinner, and breakfast too when `include_breakfasts` is set.
    """
    date_keys = expand_date_range(start, days)
    schema = prompts.menu_plan_schema(date_keys, include_breakfasts)
    prompt = prompts.build_menu_prompt(date_keys, preferences, profiles, recipes, include_breakfasts)

    data = _parse_json(gateway.complete(prompt, schema, "menu_plan"), "menu plan")
    if not isinstance(data, dict):
        raise GenerationFormatError("Menu plan response is not a JSON object")

    returned, expected = set(data.keys()), set(date_keys)
    if returned != expected:
        missing = sorted(expected - returned)
        extra = sorted(returned - expected)
        logger.warning("Menu plan dates mismatch: missing=%s extra=%s", missing, extra)
        raise GenerationFormatError(f"Menu plan dates mismatch (missing={missing}, extra={extra})")

    try:
        plan = plan_from_dict(data)
    except ValidationError as e:
        raise GenerationFormatError("Menu plan does not match the expected shape") from e

    if include_breakfasts and any(plan[key].breakfast is None for key in date_keys):
        raise GenerationFormatError("Menu plan is missing a requested breakfast")
    if not include_breakfasts:
        plan = {key: day.model_copy(update={"breakfast": None}) for key, day in plan.items()}
    for key in date_keys:
        day = plan[key]
        if day.breakfast is not None and day.breakfast.category != BREAKFAST_CATEGORY:
            raise GenerationFormatError(f"Breakfast on {key} is not in the {BREAKFAST_CATEGORY} category")
        unknown = [m.category for m in (day.lunch, day.dinner) if m.category not in MEAL_CATEGORIES]
        if unknown:
            raise GenerationFormatError(f"Menu plan uses unknown categories on {key}: {unknown}")

    logger.info("Generated menu plan %s..%s", date_keys[0], date_keys[-1])
    return {key: plan[key] for key in date_keys}


# === Recipe Details ===
def get_recipe_details(gateway: GenerationGateway, dish_name: str, profiles: Sequence[Profile]) -> RecipeDetail:
    dish_name = (dish_name or "").strip()
    if not dish_name:
        raise ValueError("dish_name cannot be empty")
    prompt = prompts.build_recipe_prompt(dish_name, profiles)
    data = _parse_json(gateway.complete(prompt, prompts.RECIPE_SCHEMA, "recipe"), "recipe")
    try:
        return RecipeDetail.model_validate(data)
    except ValidationError as e:
        raise GenerationFormatError("Recipe does not match the expected shape") from e


# === Shopping List ===
def generate_shopping_list(gateway: GenerationGateway, plan: MenuPlan, profiles: Sequence[Profile]) -> List[ShoppingListItem]:
    """Consolidated, section-tagged list for every dish of the plan. Items start unchecked."""
    meals = meal_names(plan)
    if not meals:
        raise ValueError("Cannot build a shopping list from an empty menu")
    prompt = prompts.build_shopping_list_prompt(meals, len(profiles) or 1)
    data = _parse_json(gateway.complete(prompt, prompts.SHOPPING_LIST_SCHEMA, "shopping_list"), "shopping list")

    # Accept a bare array as well as the wrapped object
    if isinstance(data, dict):
        data = data.get(prompts.SHOPPING_LIST_ROOT)
    if not isinstance(data, list):
        raise GenerationFormatError("Shopping list response is not a list of items")
    try:
        return [ShoppingListItem.model_validate({**item, "checked": False}) for item in data]
    except (TypeError, ValidationError) as e:
        raise GenerationFormatError("Shopping list item does not match the expected shape") from e
