"""Application wiring shared by the page and JSON routers.

`app.state.ctx` holds one AppContext: the document store, the session and
generation gateways, the repositories and the per-client state registry.
Tests swap it for a context built on a temp directory and a fake gateway.
"""
import logging
from pathlib import Path
from typing import Optional

from fastapi import HTTPException, Request

from comida.events.Event_Bus import EventBus
from comida.infra.Document_Store import DocumentStore
from comida.infra.Generation_Gateway import OpenAIGenerationGateway
from comida.infra.Profile_Repository import ProfileRepository
from comida.infra.Recipe_Repository import RecipeRepository
from comida.infra.SavedMenu_Repository import SavedMenuRepository
from comida.infra.Session_Gateway import AccessCodeIdentityProvider, IdentityProvider, SessionGateway
from comida.logic.generation.service import GenerationGateway
from comida.logic.state.app_state import AppState, ClientRegistry
from comida.utilities.config import DATA_DIR, is_configured

logger = logging.getLogger(__name__)


class AppContext:
    def __init__(self, data_dir: Optional[Path] = DATA_DIR, generator: Optional[GenerationGateway] = None,
                 identity: Optional[IdentityProvider] = None, configured: Optional[bool] = None):
        self.store = DocumentStore(data_dir)
        self.bus = EventBus()
        self.session = SessionGateway(identity or AccessCodeIdentityProvider(), self.bus)
        self.generator = generator or OpenAIGenerationGateway()
        self.configured = is_configured() if configured is None else configured
        self.profiles = ProfileRepository(self.store)
        self.recipes = RecipeRepository(self.store)
        self.saved_menus = SavedMenuRepository(self.store)
        self.registry = ClientRegistry(self._new_state)
        self._open_attempted = False

    def ensure_open(self) -> None:
        """Open the store once. A failure leaves it closed, so repositories report StorageUnavailable."""
        if self._open_attempted:
            return
        self._open_attempted = True
        try:
            self.store.open()
        except (OSError, RuntimeError):
            logger.exception("Document store could not be opened")

    def _new_state(self, client_id: str) -> AppState:
        return AppState(client_id, self.session, self.profiles, self.recipes, self.saved_menus, self.generator)


def get_ctx(request: Request) -> AppContext:
    ctx: AppContext = request.app.state.ctx
    ctx.ensure_open()
    return ctx


def get_client_id(request: Request) -> str:
    client_id = getattr(request.state, "client_id", None)
    if not client_id:
        raise HTTPException(status_code=400, detail="Missing client id")
    return client_id


def get_state(request: Request) -> AppState:
    """State for the client, created on first use. Only the login route creates state without a session."""
    return get_ctx(request).registry.get(get_client_id(request))


def _session_state(request: Request) -> Optional[AppState]:
    ctx = get_ctx(request)
    client_id = get_client_id(request)
    if ctx.session.current_user(client_id) is None:
        return None
    return ctx.registry.get(client_id)


async def get_session_state(request: Request) -> AppState:
    """State of a logged-in client, for page routes; anonymous clients are sent to the login page."""
    state = _session_state(request)
    if state is None:
        raise HTTPException(status_code=303, headers={"Location": "/"})
    await state.ensure_loaded()
    return state


def get_user_state(request: Request) -> AppState:
    """State of a logged-in client, for JSON routes (401 otherwise)."""
    state = _session_state(request)
    if state is None:
        raise HTTPException(status_code=401, detail="No hay ninguna sesión iniciada.")
    return state
