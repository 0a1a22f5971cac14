import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import RedirectResponse
from pydantic import ValidationError

from comida.api.context import get_session_state
from comida.domain.UserRecipe import UserRecipe
from comida.logic.state.app_state import AppState
from comida.utilities.validators import RecipeInput

router = APIRouter(prefix="/recipes")
logger = logging.getLogger(__name__)


def _back() -> RedirectResponse:
    return RedirectResponse(url="/?tab=recipes", status_code=303)


@router.post("")
async def create_recipe(name: str = Form(default=""), ingredients: str = Form(default=""),
                        category: str = Form(default=""), state: AppState = Depends(get_session_state)):
    try:
        data = RecipeInput(name=name, ingredients=ingredients, category=category)
    except ValidationError:
        state.recipes.report("Por favor, completa el nombre y los ingredientes.")
        return _back()
    await state.add_recipe(UserRecipe(name=data.name, ingredients=data.ingredients, category=data.category))
    return _back()


@router.post("/{recipe_id}/delete")
async def delete_recipe(recipe_id: str, state: AppState = Depends(get_session_state)):
    await state.delete_recipe(recipe_id)
    return _back()


@router.post("/import")
async def import_recipes(file: UploadFile = File(...), state: AppState = Depends(get_session_state)):
    raw = await file.read()
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.info("Rejected non UTF-8 upload %s", file.filename)
        state.import_error = "No se pudo leer el archivo. Debe estar en UTF-8."
        return _back()
    await state.import_recipes(text)
    return _back()
