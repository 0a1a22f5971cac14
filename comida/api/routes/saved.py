from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse

from comida.api.context import get_session_state
from comida.logic.state.app_state import AppState

router = APIRouter(prefix="/saved")


@router.post("/{menu_id}/load")
def load_saved_menu(menu_id: str, state: AppState = Depends(get_session_state)):
    if state.load_saved_menu(menu_id):
        return RedirectResponse(url="/?tab=generator", status_code=303)
    state.saved_menus.report("Ese menú ya no existe.")
    return RedirectResponse(url="/?tab=saved", status_code=303)


@router.post("/{menu_id}/delete")
async def delete_saved_menu(menu_id: str, state: AppState = Depends(get_session_state)):
    await state.delete_saved_menu(menu_id)
    return RedirectResponse(url="/?tab=saved", status_code=303)
