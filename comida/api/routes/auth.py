from fastapi import APIRouter, Depends, Form
from fastapi.responses import RedirectResponse

from comida.api.context import AppContext, get_client_id, get_ctx, get_state
from comida.logic.state.app_state import AppState

router = APIRouter()


@router.post("/login")
async def login(display_name: str = Form(default=""), access_code: str = Form(default=""),
                state: AppState = Depends(get_state)):
    await state.login(display_name, access_code)
    return RedirectResponse(url="/", status_code=303)


@router.post("/logout")
async def logout(client_id: str = Depends(get_client_id), ctx: AppContext = Depends(get_ctx)):
    state = ctx.registry.find(client_id)
    if state is not None:
        await state.logout()
    else:
        await ctx.session.logout(client_id)
    ctx.registry.drop(client_id)
    return RedirectResponse(url="/", status_code=303)
