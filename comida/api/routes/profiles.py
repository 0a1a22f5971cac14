import logging

from fastapi import APIRouter, Depends, Form
from fastapi.responses import RedirectResponse
from pydantic import ValidationError

from comida.api.context import get_session_state
from comida.domain.Profile import Profile
from comida.logic.state.app_state import AppState
from comida.utilities.validators import ProfileInput

router = APIRouter(prefix="/profiles")
logger = logging.getLogger(__name__)

INVALID_PROFILE_MESSAGE = "Revisa los datos del perfil: nombre y edad son obligatorios."


def _back() -> RedirectResponse:
    return RedirectResponse(url="/?tab=profiles", status_code=303)


def _profile_from_form(name, age, gender, activity_level, notes, profile_id: str = "") -> Profile:
    data = ProfileInput(name=name, age=age, gender=gender, activity_level=activity_level, notes=notes)
    return Profile(id=profile_id, **data.model_dump())


@router.post("")
async def create_profile(name: str = Form(default=""), age: str = Form(default=""), gender: str = Form(default=""),
                         activity_level: str = Form(default=""), notes: str = Form(default=""),
                         state: AppState = Depends(get_session_state)):
    try:
        profile = _profile_from_form(name, age, gender, activity_level, notes)
    except ValidationError as e:
        logger.info("Rejected profile form: %s", e.errors())
        state.profiles.report(INVALID_PROFILE_MESSAGE)
        return _back()
    await state.add_profile(profile)
    return _back()


@router.post("/{profile_id}")
async def update_profile(profile_id: str, name: str = Form(default=""), age: str = Form(default=""),
                         gender: str = Form(default=""), activity_level: str = Form(default=""),
                         notes: str = Form(default=""), state: AppState = Depends(get_session_state)):
    if state.find_profile(profile_id) is None:
        state.profiles.report("Ese perfil ya no existe.")
        return _back()
    try:
        profile = _profile_from_form(name, age, gender, activity_level, notes, profile_id=profile_id)
    except ValidationError:
        state.profiles.report(INVALID_PROFILE_MESSAGE)
        return RedirectResponse(url=f"/?tab=profiles&edit={profile_id}", status_code=303)
    await state.update_profile(profile)
    return _back()


@router.post("/{profile_id}/delete")
async def delete_profile(profile_id: str, state: AppState = Depends(get_session_state)):
    await state.delete_profile(profile_id)
    return _back()
