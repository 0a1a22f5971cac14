from fastapi import (
    FastAPI,
    Request,
    Query,
    Form,
    Depends,
    HTTPException,
)
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from datetime import datetime, timedelta, date as _date
from pathlib import Path
from typing import Optional
from uuid import uuid4
import logging

from comida.api.context import AppContext, get_client_id, get_ctx, get_session_state
from comida.domain.Menu import sorted_days
from comida.infra.pdf_utils import generate_pdf_for_menu
from comida.logic.planning.dates import date_range_bounds, format_date_range, format_display_date
from comida.logic.planning.swap import swap_candidates
from comida.logic.state.app_state import AppState, ResourceStatus
from comida.utilities.config import DEFAULT_MENU_DAYS, MAX_MENU_DAYS, TEMPLATES_DIR
from comida.utilities.constants import MEAL_TYPE_LABELS, RECIPE_CATEGORIES, UNCLASSIFIED
from comida.domain.Profile import ActivityLevel, Gender

# Routers
from comida.api.routes import auth, menus, profiles, recipes, saved
from comida.api.api_ai import router as ai_router

# Logging
logger = logging.getLogger("comida_app")

CLIENT_COOKIE = "comida_client"
TABS = ("generator", "profiles", "saved", "recipes")

# Initialize FastAPI app
app = FastAPI(title="ComidaACasa")
app.state.ctx = AppContext()

# Include routers
app.include_router(auth.router)
app.include_router(profiles.router)
app.include_router(recipes.router)
app.include_router(menus.router)
app.include_router(saved.router)
app.include_router(ai_router)

# Static files
static_dir = (Path(__file__).parent.parent / 'static').resolve()
app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")

# Templates
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["display_date"] = format_display_date
templates.env.globals["meal_labels"] = MEAL_TYPE_LABELS


@app.middleware("http")
async def client_cookie(request: Request, call_next):
    """Give every browser a client id; application state is kept per client."""
    client_id = request.cookies.get(CLIENT_COOKIE)
    is_new = not client_id
    if is_new:
        client_id = uuid4().hex
    request.state.client_id = client_id
    response = await call_next(request)
    if is_new:
        response.set_cookie(CLIENT_COOKIE, client_id, httponly=True, samesite="lax")
    return response


@app.on_event("shutdown")
def _close_client_states():
    app.state.ctx.registry.close_all()
    logger.info("Client states closed")


def _ts() -> int:
    """Cache-busting timestamp for static assets."""
    return int(datetime.now().timestamp())


def _range_label(plan) -> str:
    bounds = date_range_bounds(plan)
    return format_date_range(*bounds) if bounds else ""


def _swap_categories(recipes) -> list:
    """Categories present among the recipes, in the order of the category list."""
    present = {r.category for r in recipes}
    return [c for c in RECIPE_CATEGORIES + (UNCLASSIFIED,) if c in present]


# -------------------- UI PAGES --------------------
@app.get("/", response_class=HTMLResponse)
async def main_page(request: Request, tab: str = Query(default="generator"), edit: Optional[str] = Query(default=None),
                    candidate: Optional[str] = Query(default=None), swap_category: Optional[str] = Query(default=None),
                    ctx: AppContext = Depends(get_ctx), client_id: str = Depends(get_client_id)):
    if not ctx.configured:
        return templates.TemplateResponse(request, "config_error.html", {"time": _ts()})
    state = ctx.registry.find(client_id)
    if ctx.session.current_user(client_id) is None:
        # Anonymous visitors keep no state; a failed login leaves its message for this one render
        auth_error = state.auth_error if state is not None else None
        ctx.registry.drop(client_id)
        return templates.TemplateResponse(request, "login.html", {"auth_error": auth_error, "time": _ts()})
    state = ctx.registry.get(client_id)
    await state.ensure_loaded()

    if tab not in TABS:
        tab = "generator"
    plan = state.menu.data
    days = sorted_days(plan)
    shopping = state.shopping_list.data
    today = _date.today()
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "state": state,
            "tab": tab,
            "plan": plan,
            "days": days,
            "has_breakfast": any(plan[d].breakfast is not None for d in days),
            "range_label": _range_label(plan),
            "shopping_groups": shopping.grouped() if shopping is not None else {},
            "editing": state.find_profile(edit) if edit else None,
            "swap_day": plan[state.swap_target[0]] if state.swap_target and plan else None,
            "swap_categories": _swap_categories(state.recipes.data),
            "swap_category": swap_category,
            "swap_options": swap_candidates(state.recipes.data, swap_category) if swap_category else [],
            "candidate": state.find_recipe(candidate) if candidate and state.swap_target else None,
            "categories": RECIPE_CATEGORIES + (UNCLASSIFIED,),
            "genders": [g.value for g in Gender],
            "activity_levels": [a.value for a in ActivityLevel],
            "today": today.isoformat(),
            "default_start": (today + timedelta(days=1)).isoformat(),
            "default_days": DEFAULT_MENU_DAYS,
            "max_days": MAX_MENU_DAYS,
            "Status": ResourceStatus,
            "time": _ts(),
        }
    )


@app.post("/dismiss")
def dismiss_error(tab: str = Form(...), client_id: str = Depends(get_client_id), ctx: AppContext = Depends(get_ctx)):
    state = ctx.registry.find(client_id)
    if state is not None:
        state.dismiss_error(tab)
    return RedirectResponse(url=f"/?tab={tab}" if tab in TABS else "/", status_code=303)


# -------------------- Print / export --------------------
@app.get("/menu/print", response_class=HTMLResponse)
def print_menu(request: Request, state: AppState = Depends(get_session_state)):
    plan = state.menu.data
    if not plan:
        raise HTTPException(status_code=404, detail="No menu to print")
    days = sorted_days(plan)
    return templates.TemplateResponse(
        request,
        "print_menu.html",
        {
            "plan": plan,
            "days": days,
            "has_breakfast": any(plan[d].breakfast is not None for d in days),
            "range_label": _range_label(plan),
        }
    )


@app.get("/menu/shopping-list/print", response_class=HTMLResponse)
def print_shopping_list(request: Request, state: AppState = Depends(get_session_state)):
    shopping = state.shopping_list.data
    if shopping is None:
        raise HTTPException(status_code=404, detail="No shopping list to print")
    return templates.TemplateResponse(
        request,
        "print_shopping_list.html",
        {"groups": shopping.grouped(only_unchecked=True)}
    )


@app.get("/menu/export_pdf")
def export_menu_pdf(state: AppState = Depends(get_session_state)):
    plan = state.menu.data
    if not plan:
        raise HTTPException(status_code=404, detail="No menu to export")
    days = sorted_days(plan)
    pdf_bytes = generate_pdf_for_menu(plan)
    filename = f"menu_{days[0]}_{days[-1]}.pdf"
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
