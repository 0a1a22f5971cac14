"""Prompt text and strict JSON output schemas for the three generation requests."""
from typing import Dict, List, Sequence

from comida.domain.Profile import Profile
from comida.domain.UserRecipe import UserRecipe
from comida.utilities.constants import (
    BREAKFAST_CATEGORY,
    CHEF_PREAMBLE,
    MEAL_CATEGORIES,
    SHOPPER_PREAMBLE,
    SUPERMARKET_SECTIONS,
)

SHOPPING_LIST_ROOT = "items"


def _object(properties: Dict[str, dict]) -> dict:
    # Strict structured output: every property required, nothing else allowed
    return {
        "type": "object",
        "properties": properties,
        "required": list(properties.keys()),
        "additionalProperties": False,
    }


MEAL_DETAIL_SCHEMA: dict = _object({
    "name": {"type": "string", "description": "Concise name of the dish"},
    "category": {
        "type": "string",
        "description": "The primary category of the dish.",
        "enum": list(MEAL_CATEGORIES),
    },
})

RECIPE_SCHEMA: dict = _object({
    "name": {"type": "string"},
    "ingredients": {"type": "array", "items": {"type": "string"}},
    "instructions": {"type": "array", "items": {"type": "string"}},
    "calories": {"type": "number"},
    "nutritionalInfo": _object({
        "protein": {"type": "string", "description": "Approximate protein content, e.g., '25g'"},
        "carbohydrates": {"type": "string", "description": "Approximate carbohydrate content, e.g., '50g'"},
        "fats": {"type": "string", "description": "Approximate fat content, e.g., '15g'"},
    }),
    "motivationalComment": {"type": "string", "description": "A motivational comment about the recipe's benefits."},
})

SHOPPING_ITEM_SCHEMA: dict = _object({
    "ingredient": {"type": "string"},
    "quantity": {"type": "string", "description": "Amount as text, ranges allowed, e.g. '1-2'"},
    "unit": {"type": "string"},
    "category": {"type": "string", "description": "Supermarket section, e.g., 'Frutas y Verduras', 'Carnicería', 'Despensa'"},
})

SHOPPING_LIST_SCHEMA: dict = _object({
    SHOPPING_LIST_ROOT: {"type": "array", "items": SHOPPING_ITEM_SCHEMA},
})


def menu_plan_schema(date_keys: Sequence[str], include_breakfasts: bool) -> dict:
    """One required object per requested day, each with lunch/dinner (and breakfast when asked)."""
    meals = {}
    if include_breakfasts:
        meals["breakfast"] = MEAL_DETAIL_SCHEMA
    meals["lunch"] = MEAL_DETAIL_SCHEMA
    meals["dinner"] = MEAL_DETAIL_SCHEMA
    return _object({key: _object(meals) for key in date_keys})


# -------------------- Summaries --------------------
def summarize_profiles(profiles: Sequence[Profile], with_notes: bool = True, default: str = "Default: a standard adult.") -> str:
    if not profiles:
        return default
    return "; ".join(p.summary(with_notes=with_notes) for p in profiles)


def summarize_recipes(recipes: Sequence[UserRecipe]) -> str:
    if not recipes:
        return "Ninguna."
    return "; ".join(r.summary() for r in recipes)


# -------------------- Prompts --------------------
def build_menu_prompt(date_keys: Sequence[str], preferences: str, profiles: Sequence[Profile],
                      recipes: Sequence[UserRecipe], include_breakfasts: bool) -> str:
    meals_line = "Include breakfast, lunch, and dinner." if include_breakfasts else "Include lunch and dinner only."
    return "\n".join([
        CHEF_PREAMBLE,
        f"Generate a meal plan for {len(date_keys)} days, starting from {date_keys[0]}.",
        f"Use exactly these dates as the keys of the JSON object: {', '.join(date_keys)}.",
        f"The family consists of: {summarize_profiles(profiles)}. It is crucial that the menu is specifically "
        "adapted to the individual needs described in each profile (e.g., high protein for athletes, "
        "calcium-rich foods for menopause concerns mentioned in the notes, etc.).",
        meals_line,
        "Base your suggestions on Mediterranean diet principles, prioritizing seasonal and local Spanish products.",
        f'User preferences: "{(preferences or "").strip() or "No specific preferences"}".',
        f"Also consider incorporating these user-provided favorite recipes if possible: {summarize_recipes(recipes)}",
        "For each meal, provide an object with the concise name of the dish and its category from the provided enum.",
        f"For breakfasts, always use the category '{BREAKFAST_CATEGORY}'. For other meals, classify them accurately "
        "(e.g., 'Lentejas con chorizo' is 'Legumbres', 'Paella de marisco' is 'Arroces').",
        "Do NOT add any extra descriptions. Provide the output as a valid JSON object matching the requested schema. "
        "Only output the JSON.",
    ])


def build_recipe_prompt(dish_name: str, profiles: Sequence[Profile]) -> str:
    family = summarize_profiles(profiles, with_notes=False, default="1 standard adult.")
    return "\n".join([
        CHEF_PREAMBLE,
        f'Provide a detailed recipe for "{dish_name}".',
        f"The recipe should be portioned for the following family: {family}.",
        "Include:",
        "1. A list of ingredients with precise quantities.",
        "2. Step-by-step instructions.",
        "3. Estimated total calories for the whole dish.",
        '4. A brief nutritional breakdown (protein, carbohydrates, fats) as strings (e.g., "Aproximadamente X g").',
        "5. A motivational and scientific comment about the dish's benefits, like "
        '"Este plato es excelente para la recuperación muscular por su alto contenido en proteínas."',
        "Provide the output as a valid JSON object matching the schema. Only output the JSON.",
    ])


def build_shopping_list_prompt(meal_list: List[str], people: int) -> str:
    sections = ", ".join(f"'{s}'" for s in SUPERMARKET_SECTIONS)
    return "\n".join([
        SHOPPER_PREAMBLE,
        f"Based on the following meals for {people} person(s), create a consolidated shopping list.",
        "Combine quantities of the same ingredient.",
        f"Crucially, categorize each item into a logical supermarket section (e.g., {sections}).",
        f"Meals: {', '.join(meal_list)}.",
        f'Provide the output as a JSON object with an "{SHOPPING_LIST_ROOT}" array of objects, where each object has '
        '"ingredient", "quantity" (as a string to handle ranges like "1-2"), "unit", and "category". '
        "Only output the JSON.",
    ])
