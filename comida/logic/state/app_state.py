"""Per-client application state.

One AppState exists per browser client. It holds the logged-in user, the
user's collections, the active menu and the views derived from it, and it is
the only place where persistence and generation calls meet. Every operation
catches domain errors and stores the Spanish message on the relevant resource;
none of them raise to the web layer.

Each resource follows a fixed transition table:

    IDLE    -> LOADING
    LOADING -> LOADED | ERROR | LOADING
    LOADED  -> LOADING | IDLE
    ERROR   -> LOADING | IDLE

reset() returns to IDLE from any state and invalidates in-flight requests, so a
response that arrives after logout is dropped.
"""
import asyncio
import logging
from datetime import date
from enum import Enum
from typing import Any, Callable, Dict, Generic, List, Optional, Tuple, TypeVar, Union

from comida.domain.Menu import MealDetail, MenuPlan, SavedMenu
from comida.domain.Profile import Profile
from comida.domain.SessionUser import SessionUser
from comida.domain.ShoppingList import ShoppingList
from comida.domain.UserRecipe import UserRecipe
from comida.domain.errors import AuthFailure, ComidaError, MalformedInput
from comida.infra.Profile_Repository import ProfileRepository
from comida.infra.Recipe_Repository import RecipeRepository
from comida.infra.SavedMenu_Repository import SavedMenuRepository
from comida.infra.Session_Gateway import SessionGateway
from comida.logic.generation import service
from comida.logic.importing.csv_recipes import parse_recipes_csv
from comida.logic.planning.swap import balance_advice, confirm_swap, meal_from_recipe
from comida.utilities.constants import MEAL_TYPES

logger = logging.getLogger(__name__)

T = TypeVar("T")

LOAD_ERROR_MESSAGE = "No se pudieron cargar tus datos."
NOT_LOGGED_IN_MESSAGE = "Tu sesión ha caducado. Vuelve a iniciar sesión."
NO_MENU_MESSAGE = "Primero genera o carga un menú."
EMPTY_IMPORT_MESSAGE = "No se encontraron recetas válidas en el archivo."
INVALID_REQUEST_MESSAGE = "Revisa la fecha de inicio y el número de días."


class ResourceStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


_TRANSITIONS = {
    ResourceStatus.IDLE: {ResourceStatus.LOADING},
    ResourceStatus.LOADING: {ResourceStatus.LOADED, ResourceStatus.ERROR, ResourceStatus.LOADING},
    ResourceStatus.LOADED: {ResourceStatus.LOADING, ResourceStatus.IDLE},
    ResourceStatus.ERROR: {ResourceStatus.LOADING, ResourceStatus.IDLE},
}


class InvalidTransition(RuntimeError):
    pass


class Resource(Generic[T]):
    """A piece of view state with a load status, its data and a user-facing error.

    Requests overlap freely: the resource stays LOADING until the last pending
    request settles, and the data of the last successful response wins.
    """

    def __init__(self, name: str, empty: Callable[[], T]):
        self.name = name
        self._empty = empty
        self.status = ResourceStatus.IDLE
        self.data: T = empty()
        self.error: Optional[str] = None
        self._epoch = 0
        self._pending = 0
        self._last_failed = False

    def _move(self, new_status: ResourceStatus) -> None:
        if new_status not in _TRANSITIONS[self.status]:
            raise InvalidTransition(f"{self.name}: {self.status.value} -> {new_status.value}")
        self.status = new_status

    @property
    def is_loading(self) -> bool:
        return self.status == ResourceStatus.LOADING

    def begin(self) -> int:
        '''Start a request. Returns the ticket to settle it with.'''
        self._move(ResourceStatus.LOADING)
        self._pending += 1
        return self._epoch

    def _settle(self, ticket: int) -> bool:
        if ticket != self._epoch or self._pending == 0:
            logger.debug("Dropping stale %s response", self.name)
            return False
        self._pending -= 1
        return True

    def _finish(self) -> None:
        if self._pending == 0:
            self._move(ResourceStatus.ERROR if self._last_failed else ResourceStatus.LOADED)

    def succeed(self, ticket: int, data: T) -> bool:
        if not self._settle(ticket):
            return False
        self.data = data
        self.error = None
        self._last_failed = False
        self._finish()
        return True

    def fail(self, ticket: int, message: str) -> bool:
        '''Record a failed request. The current data is left untouched.'''
        if not self._settle(ticket):
            return False
        self.error = message
        self._last_failed = True
        self._finish()
        return True

    def replace(self, data: T) -> None:
        """Local edit of already-loaded data (no request, no status change)."""
        self.data = data

    def report(self, message: str) -> None:
        """Show an error banner for a failed mutation without touching the load status."""
        self.error = message

    def dismiss(self) -> None:
        self.error = None
        if self.status == ResourceStatus.ERROR:
            self._move(ResourceStatus.IDLE)
            self._last_failed = False

    def reset(self) -> None:
        self._epoch += 1
        self._pending = 0
        self._last_failed = False
        self.status = ResourceStatus.IDLE
        self.data = self._empty()
        self.error = None

    def __repr__(self) -> str:
        return f"<Resource {self.name} {self.status.value}>"


class AppState:
    def __init__(self, client_id: str, session: SessionGateway, profiles_repo: ProfileRepository,
                 recipes_repo: RecipeRepository, menus_repo: SavedMenuRepository, generator: service.GenerationGateway):
        self.client_id = client_id
        self._session = session
        self._profiles_repo = profiles_repo
        self._recipes_repo = recipes_repo
        self._menus_repo = menus_repo
        self._generator = generator

        self.user: Optional[SessionUser] = session.current_user(client_id)
        self.profiles: Resource[List[Profile]] = Resource("profiles", list)
        self.recipes: Resource[List[UserRecipe]] = Resource("recipes", list)
        self.saved_menus: Resource[List[SavedMenu]] = Resource("saved_menus", list)
        self.menu: Resource[Optional[MenuPlan]] = Resource("menu", lambda: None)
        self.recipe_detail: Resource[Any] = Resource("recipe_detail", lambda: None)
        self.shopping_list: Resource[Optional[ShoppingList]] = Resource("shopping_list", lambda: None)

        self.swap_target: Optional[Tuple[str, str]] = None
        self.swap_advice: Optional[str] = None
        self.import_error: Optional[str] = None
        self.import_notice: Optional[str] = None
        self.auth_error: Optional[str] = None
        # Most recent caught failure, for callers that need its kind (JSON routes)
        self.last_error: Optional[ComidaError] = None

        self._unsubscribe: Optional[Callable[[], None]] = session.subscribe(self._on_session_changed)

    def _record(self, error: ComidaError) -> str:
        self.last_error = error
        return error.user_message

    # -------------------- Session --------------------
    @property
    def is_logged_in(self) -> bool:
        return self.user is not None

    @property
    def collections(self) -> Tuple[Resource, Resource, Resource]:
        return self.profiles, self.recipes, self.saved_menus

    async def _on_session_changed(self, event_name: str, payload: Dict[str, Any]) -> None:
        if payload.get("client_id") != self.client_id:
            return
        user = payload.get("user")
        if user is None:
            self.clear()
            return
        self.clear()
        self.user = user
        await self.load_collections()

    async def login(self, display_name: str, access_code: str) -> bool:
        self.auth_error = None
        try:
            await self._session.login(self.client_id, display_name, access_code)
        except AuthFailure as e:
            logger.info("Login failed: %s", e)
            self.auth_error = self._record(e)
            return False
        return True

    async def logout(self) -> None:
        try:
            await self._session.logout(self.client_id)
        except AuthFailure as e:
            self.auth_error = self._record(e)
        self.clear()

    def clear(self) -> None:
        """Drop everything that belongs to the user (logout or missing session)."""
        self.user = None
        for resource in (*self.collections, self.menu, self.recipe_detail, self.shopping_list):
            resource.reset()
        self.swap_target = None
        self.swap_advice = None
        self.import_error = None
        self.import_notice = None
        self.last_error = None

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def load_collections(self) -> bool:
        """Fan out the three reads and join them; if any fails, all three fail together."""
        if self.user is None:
            return False
        uid = self.user.uid
        tickets = [resource.begin() for resource in self.collections]
        try:
            results = await asyncio.gather(
                asyncio.to_thread(self._profiles_repo.list_all, uid),
                asyncio.to_thread(self._recipes_repo.list_all, uid),
                asyncio.to_thread(self._menus_repo.list_all, uid),
            )
        except ComidaError as e:
            logger.warning("Initial load failed for %s: %s", uid, e)
            self._record(e)
            for resource, ticket in zip(self.collections, tickets):
                resource.fail(ticket, LOAD_ERROR_MESSAGE)
            return False
        for resource, ticket, data in zip(self.collections, tickets, results):
            resource.succeed(ticket, data)
        return True

    async def ensure_loaded(self) -> None:
        """Load the collections when any of them is not loaded (first visit or a dismissed load error)."""
        if self.user is None:
            self.user = self._session.current_user(self.client_id)
        if self.user is None or any(r.is_loading for r in self.collections):
            return
        if any(r.status == ResourceStatus.IDLE for r in self.collections):
            await self.load_collections()

    def _uid(self, resource: Optional[Resource] = None) -> Optional[str]:
        if self.user is None:
            if resource is not None:
                resource.report(NOT_LOGGED_IN_MESSAGE)
            return None
        return self.user.uid

    # -------------------- Profiles --------------------
    async def add_profile(self, profile: Profile) -> bool:
        uid = self._uid(self.profiles)
        if uid is None:
            return False
        try:
            saved = await asyncio.to_thread(self._profiles_repo.add, uid, profile)
        except ComidaError as e:
            self.profiles.report(self._record(e))
            return False
        self.profiles.replace(self.profiles.data + [saved])
        return True

    async def update_profile(self, profile: Profile) -> bool:
        uid = self._uid(self.profiles)
        if uid is None:
            return False
        try:
            await asyncio.to_thread(self._profiles_repo.update, uid, profile)
        except ComidaError as e:
            self.profiles.report(self._record(e))
            return False
        self.profiles.replace([profile if p.id == profile.id else p for p in self.profiles.data])
        return True

    async def delete_profile(self, profile_id: str) -> bool:
        uid = self._uid(self.profiles)
        if uid is None:
            return False
        try:
            await asyncio.to_thread(self._profiles_repo.delete, uid, profile_id)
        except ComidaError as e:
            self.profiles.report(self._record(e))
            return False
        self.profiles.replace([p for p in self.profiles.data if p.id != profile_id])
        return True

    def find_profile(self, profile_id: str) -> Optional[Profile]:
        return next((p for p in self.profiles.data if p.id == profile_id), None)

    # -------------------- Recipes --------------------
    async def add_recipe(self, recipe: UserRecipe) -> bool:
        uid = self._uid(self.recipes)
        if uid is None:
            return False
        try:
            saved = await asyncio.to_thread(self._recipes_repo.add, uid, recipe)
        except ComidaError as e:
            self.recipes.report(self._record(e))
            return False
        self.recipes.replace(self.recipes.data + [saved])
        return True

    async def delete_recipe(self, recipe_id: str) -> bool:
        uid = self._uid(self.recipes)
        if uid is None:
            return False
        try:
            await asyncio.to_thread(self._recipes_repo.delete, uid, recipe_id)
        except ComidaError as e:
            self.recipes.report(self._record(e))
            return False
        self.recipes.replace([r for r in self.recipes.data if r.id != recipe_id])
        return True

    async def import_recipes(self, csv_text: str) -> int:
        """Parse and persist a CSV batch. Returns the number imported (0 on any failure)."""
        self.import_error = None
        self.import_notice = None
        uid = self._uid()
        if uid is None:
            self.import_error = NOT_LOGGED_IN_MESSAGE
            return 0
        try:
            parsed = parse_recipes_csv(csv_text)
        except MalformedInput as e:
            self.import_error = self._record(e)
            return 0
        if not parsed:
            self.import_error = EMPTY_IMPORT_MESSAGE
            return 0
        try:
            saved = await asyncio.to_thread(self._recipes_repo.add_many, uid, parsed)
        except ComidaError as e:
            self.import_error = self._record(e)
            return 0
        self.recipes.replace(self.recipes.data + saved)
        self.import_notice = f"Se han importado {len(saved)} recetas."
        return len(saved)

    def find_recipe(self, recipe_id: str) -> Optional[UserRecipe]:
        return next((r for r in self.recipes.data if r.id == recipe_id), None)

    # -------------------- Menu generation --------------------
    def _reset_menu_views(self) -> None:
        self.recipe_detail.reset()
        self.shopping_list.reset()
        self.swap_target = None
        self.swap_advice = None

    async def generate_menu(self, start: Union[str, date], days: int, preferences: str = "",
                            include_breakfasts: bool = False) -> bool:
        """Generate a new active menu. On failure the previous menu stays as it was."""
        if self._uid(self.menu) is None:
            return False
        ticket = self.menu.begin()
        try:
            plan = await asyncio.to_thread(
                service.generate_menu_plan, self._generator, start, days, preferences,
                list(self.profiles.data), list(self.recipes.data), include_breakfasts,
            )
        except ComidaError as e:
            logger.warning("Menu generation failed: %s", e)
            self.menu.fail(ticket, self._record(e))
            return False
        except ValueError as e:
            logger.warning("Invalid menu request: %s", e)
            self.menu.fail(ticket, INVALID_REQUEST_MESSAGE)
            return False
        if self.menu.succeed(ticket, plan):
            self._reset_menu_views()
        return True

    async def show_recipe(self, dish_name: str) -> bool:
        if self._uid(self.recipe_detail) is None:
            return False
        ticket = self.recipe_detail.begin()
        try:
            detail = await asyncio.to_thread(service.get_recipe_details, self._generator, dish_name, list(self.profiles.data))
        except (ComidaError, ValueError) as e:
            logger.warning("Recipe details failed for %s: %s", dish_name, e)
            message = self._record(e) if isinstance(e, ComidaError) else "Indica el nombre del plato."
            self.recipe_detail.fail(ticket, message)
            return False
        return self.recipe_detail.succeed(ticket, detail)

    def close_recipe(self) -> None:
        self.recipe_detail.reset()

    async def build_shopping_list(self) -> bool:
        if self._uid(self.shopping_list) is None:
            return False
        ticket = self.shopping_list.begin()
        if not self.menu.data:
            self.shopping_list.fail(ticket, NO_MENU_MESSAGE)
            return False
        try:
            items = await asyncio.to_thread(service.generate_shopping_list, self._generator, self.menu.data, list(self.profiles.data))
        except ComidaError as e:
            logger.warning("Shopping list generation failed: %s", e)
            self.shopping_list.fail(ticket, self._record(e))
            return False
        return self.shopping_list.succeed(ticket, ShoppingList(items))

    def toggle_shopping_item(self, index: int) -> bool:
        if self.shopping_list.data is None:
            return False
        try:
            self.shopping_list.data.toggle(index)
        except IndexError:
            return False
        return True

    def close_shopping_list(self) -> None:
        self.shopping_list.reset()

    # -------------------- Swap --------------------
    def begin_swap(self, day: str, meal_type: str) -> bool:
        plan = self.menu.data
        if not plan or day not in plan or meal_type not in MEAL_TYPES:
            return False
        if plan[day].slot(meal_type) is None:
            return False
        self.swap_target = (day, meal_type)
        self.swap_advice = None
        return True

    def preview_swap(self, recipe_id: str) -> Optional[str]:
        '''Advice for swapping the current target with the recipe; None when fine.'''
        recipe = self.find_recipe(recipe_id)
        if self.swap_target is None or recipe is None or not self.menu.data:
            return None
        day, meal_type = self.swap_target
        self.swap_advice = balance_advice(self.menu.data[day], meal_type, meal_from_recipe(recipe))
        return self.swap_advice

    def confirm_swap(self, recipe_id: str) -> bool:
        recipe = self.find_recipe(recipe_id)
        if self.swap_target is None or recipe is None or not self.menu.data:
            return False
        day, meal_type = self.swap_target
        try:
            plan = confirm_swap(self.menu.data, day, meal_type, meal_from_recipe(recipe))
        except ValueError as e:
            logger.warning("Swap rejected: %s", e)
            return False
        self.menu.replace(plan)
        # The list no longer matches the menu
        self.shopping_list.reset()
        self.swap_target = None
        self.swap_advice = None
        return True

    def cancel_swap(self) -> None:
        self.swap_target = None
        self.swap_advice = None

    def swap_meal(self, day: str, meal_type: str, new_meal: MealDetail) -> Optional[str]:
        """Direct swap with an arbitrary dish. Returns the balance advice, if any."""
        plan = self.menu.data
        if not plan or day not in plan:
            raise ValueError(f"Day {day} is not part of the menu")
        advice = balance_advice(plan[day], meal_type, new_meal)
        self.menu.replace(confirm_swap(plan, day, meal_type, new_meal))
        self.shopping_list.reset()
        return advice

    # -------------------- Saved menus --------------------
    async def save_menu(self) -> bool:
        uid = self._uid(self.saved_menus)
        if uid is None:
            return False
        if not self.menu.data:
            self.saved_menus.report(NO_MENU_MESSAGE)
            return False
        try:
            saved = await asyncio.to_thread(self._menus_repo.add, uid, SavedMenu.from_plan(self.menu.data))
        except ComidaError as e:
            self.saved_menus.report(self._record(e))
            return False
        self.saved_menus.replace([saved] + self.saved_menus.data)
        return True

    def load_saved_menu(self, menu_id: str) -> bool:
        saved = next((m for m in self.saved_menus.data if m.id == menu_id), None)
        if saved is None:
            return False
        ticket = self.menu.begin()
        self.menu.succeed(ticket, dict(saved.menu_plan))
        self._reset_menu_views()
        return True

    async def delete_saved_menu(self, menu_id: str) -> bool:
        uid = self._uid(self.saved_menus)
        if uid is None:
            return False
        try:
            await asyncio.to_thread(self._menus_repo.delete, uid, menu_id)
        except ComidaError as e:
            self.saved_menus.report(self._record(e))
            return False
        self.saved_menus.replace([m for m in self.saved_menus.data if m.id != menu_id])
        return True

    # -------------------- Banners --------------------
    def dismiss_error(self, tab: str) -> None:
        targets = {
            "generator": (self.menu, self.shopping_list, self.recipe_detail),
            "profiles": (self.profiles,),
            "saved": (self.saved_menus,),
            "recipes": (self.recipes,),
        }.get(tab, ())
        for resource in targets:
            resource.dismiss()
        if tab == "recipes":
            self.import_error = None
            self.import_notice = None
        if tab == "login":
            self.auth_error = None


class ClientRegistry:
    """AppState per browser client id; nothing is shared between clients."""

    def __init__(self, factory: Callable[[str], AppState]):
        self._factory = factory
        self._states: Dict[str, AppState] = {}

    def find(self, client_id: str) -> Optional[AppState]:
        return self._states.get(client_id)

    def get(self, client_id: str) -> AppState:
        state = self._states.get(client_id)
        if state is None:
            state = self._factory(client_id)
            self._states[client_id] = state
        return state

    def drop(self, client_id: str) -> None:
        state = self._states.pop(client_id, None)
        if state is not None:
            state.close()

    def close_all(self) -> None:
        for client_id in list(self._states):
            self.drop(client_id)

    def __len__(self) -> int:
        return len(self._states)
