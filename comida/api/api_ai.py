"""JSON routes over the per-client state: active menu, swap, recipe details, shopping list.

Failures caught by the state layer are mapped back to HTTP status codes from
the kind of the last recorded error.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException

from comida.api.context import get_user_state
from comida.domain.Menu import MealDetail, plan_to_dict
from comida.domain.errors import (
    AuthFailure,
    ComidaError,
    GenerationFailure,
    GenerationFormatError,
    MalformedInput,
    PersistenceFailure,
    StorageUnavailable,
)
from comida.logic.planning.swap import balance_advice, meal_from_recipe
from comida.logic.state.app_state import AppState
from comida.utilities.constants import MAIN_DISH_CATEGORY
from comida.utilities.validators import MenuRequestInput, RecipeDetailsInput, SwapInput

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

_STATUS_BY_ERROR = {
    MalformedInput: 400,
    AuthFailure: 401,
    GenerationFormatError: 502,
    GenerationFailure: 502,
    StorageUnavailable: 503,
    PersistenceFailure: 503,
}


def _raise_for(state: AppState, fallback: str, status_code: int = 502):
    error: Optional[ComidaError] = state.last_error
    if error is None:
        raise HTTPException(status_code=status_code, detail=fallback)
    raise HTTPException(status_code=_STATUS_BY_ERROR.get(type(error), 500), detail=error.user_message)


def _menu_payload(state: AppState) -> dict:
    plan = state.menu.data
    return {"status": state.menu.status.value, "menu": plan_to_dict(plan) if plan else None}


def _resolve_meal(state: AppState, payload: SwapInput) -> MealDetail:
    if payload.recipe_id:
        recipe = state.find_recipe(payload.recipe_id)
        if recipe is None:
            raise HTTPException(status_code=404, detail="Recipe not found")
        return meal_from_recipe(recipe)
    if not payload.name or not payload.name.strip():
        raise HTTPException(status_code=400, detail="recipe_id or name is required")
    return MealDetail(name=payload.name, category=payload.category or MAIN_DISH_CATEGORY)


# === Menu ===
@router.get("/menu")
def get_menu(state: AppState = Depends(get_user_state)):
    if not state.menu.data:
        raise HTTPException(status_code=404, detail="No active menu")
    return _menu_payload(state)


@router.post("/menu/generate")
async def generate_menu(payload: MenuRequestInput, state: AppState = Depends(get_user_state)):
    state.last_error = None
    if not await state.generate_menu(payload.start_date, payload.days, payload.preferences, payload.include_breakfasts):
        _raise_for(state, state.menu.error or "Menu generation failed")
    return _menu_payload(state)


@router.post("/menu/swap/advice")
def swap_advice(payload: SwapInput, state: AppState = Depends(get_user_state)):
    plan = state.menu.data
    if not plan or payload.date not in plan:
        raise HTTPException(status_code=404, detail="Day not in the active menu")
    return {"advice": balance_advice(plan[payload.date], payload.meal_type, _resolve_meal(state, payload))}


@router.post("/menu/swap")
def swap_meal(payload: SwapInput, state: AppState = Depends(get_user_state)):
    meal = _resolve_meal(state, payload)
    try:
        advice = state.swap_meal(payload.date, payload.meal_type, meal)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {**_menu_payload(state), "advice": advice}


# === Recipe details ===
@router.post("/recipe-details")
async def recipe_details(payload: RecipeDetailsInput, state: AppState = Depends(get_user_state)):
    state.last_error = None
    if not await state.show_recipe(payload.dish_name):
        _raise_for(state, state.recipe_detail.error or "Recipe generation failed")
    return state.recipe_detail.data.model_dump(by_alias=True)


# === Shopping list ===
def _shopping_payload(state: AppState) -> dict:
    shopping = state.shopping_list.data
    items = [item.model_dump() for item in shopping.get_items()] if shopping is not None else []
    return {"count": len(items), "items": items}


@router.post("/shopping-list")
async def shopping_list(state: AppState = Depends(get_user_state)):
    if not state.menu.data:
        raise HTTPException(status_code=400, detail="No active menu")
    state.last_error = None
    if not await state.build_shopping_list():
        _raise_for(state, state.shopping_list.error or "Shopping list generation failed")
    return _shopping_payload(state)


@router.post("/shopping-list/{index}/toggle")
def toggle_item(index: int, state: AppState = Depends(get_user_state)):
    if not state.toggle_shopping_item(index):
        raise HTTPException(status_code=404, detail="Shopping list item not found")
    return _shopping_payload(state)


# === Recipes ===
@router.post("/recipes/import")
async def import_recipes(csv_text: str = Body(..., embed=True), state: AppState = Depends(get_user_state)):
    state.last_error = None
    count = await state.import_recipes(csv_text)
    if count == 0:
        _raise_for(state, state.import_error or "Nothing imported", status_code=400)
    return {"imported": count, "total": len(state.recipes.data)}
