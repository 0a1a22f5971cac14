import logging
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Form
from fastapi.responses import RedirectResponse
from pydantic import ValidationError

from comida.api.context import get_session_state
from comida.logic.state.app_state import AppState
from comida.utilities.validators import MenuRequestInput

router = APIRouter(prefix="/menu")
logger = logging.getLogger(__name__)


def _back() -> RedirectResponse:
    return RedirectResponse(url="/?tab=generator", status_code=303)


# -------------------- Generation --------------------
@router.post("/generate")
async def generate_menu(start_date: str = Form(default=""), days: str = Form(default=""),
                        preferences: str = Form(default=""), include_breakfasts: bool = Form(default=False),
                        state: AppState = Depends(get_session_state)):
    try:
        req = MenuRequestInput(
            **({"start_date": start_date} if start_date else {}),
            **({"days": days} if days else {}),
            preferences=preferences,
            include_breakfasts=include_breakfasts,
        )
    except ValidationError as e:
        logger.info("Rejected menu request: %s", e.errors())
        ticket = state.menu.begin()
        state.menu.fail(ticket, "Revisa la fecha de inicio y el número de días.")
        return _back()
    await state.generate_menu(req.start_date, req.days, req.preferences, req.include_breakfasts)
    return _back()


@router.post("/recipe")
async def show_recipe(dish: str = Form(default=""), state: AppState = Depends(get_session_state)):
    await state.show_recipe(dish)
    return _back()


@router.post("/recipe/close")
def close_recipe(state: AppState = Depends(get_session_state)):
    state.close_recipe()
    return _back()


# -------------------- Shopping list --------------------
@router.post("/shopping-list")
async def build_shopping_list(state: AppState = Depends(get_session_state)):
    await state.build_shopping_list()
    return _back()


@router.post("/shopping-list/toggle")
def toggle_shopping_item(index: int = Form(...), state: AppState = Depends(get_session_state)):
    state.toggle_shopping_item(index)
    return RedirectResponse(url="/?tab=generator#shopping-list", status_code=303)


@router.post("/shopping-list/close")
def close_shopping_list(state: AppState = Depends(get_session_state)):
    state.close_shopping_list()
    return _back()


# -------------------- Swap --------------------
@router.post("/swap")
def begin_swap(day: str = Form(...), meal_type: str = Form(...), state: AppState = Depends(get_session_state)):
    state.begin_swap(day, meal_type)
    return _back()


@router.post("/swap/preview")
def preview_swap(recipe_id: str = Form(...), state: AppState = Depends(get_session_state)):
    state.preview_swap(recipe_id)
    query = {"tab": "generator", "candidate": recipe_id}
    recipe = state.find_recipe(recipe_id)
    if recipe is not None:
        query["swap_category"] = recipe.category
    return RedirectResponse(url=f"/?{urlencode(query)}", status_code=303)


@router.post("/swap/confirm")
def confirm_swap(recipe_id: str = Form(...), state: AppState = Depends(get_session_state)):
    state.confirm_swap(recipe_id)
    return _back()


@router.post("/swap/cancel")
def cancel_swap(state: AppState = Depends(get_session_state)):
    state.cancel_swap()
    return _back()


# -------------------- Save --------------------
@router.post("/save")
async def save_menu(state: AppState = Depends(get_session_state)):
    if await state.save_menu():
        return RedirectResponse(url="/?tab=saved", status_code=303)
    return _back()
