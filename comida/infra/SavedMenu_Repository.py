from comida.domain.Menu import SavedMenu
from comida.domain.errors import PersistenceFailure
from comida.infra.paths import SAVED_MENUS
from comida.infra.Repository_Base import UserCollectionRepository


class SavedMenuRepository(UserCollectionRepository[SavedMenu]):
    collection = SAVED_MENUS
    messages = {
        "list": "No se pudieron cargar tus menús guardados.",
        "add": "No se pudo guardar el menú.",
        "delete": "No se pudo eliminar el menú guardado.",
    }

    def _from_doc(self, doc: dict) -> SavedMenu:
        return SavedMenu.from_dict(doc)

    def _to_doc(self, entity: SavedMenu) -> dict:
        return entity.to_dict()

    def list_all(self, uid: str):
        # Newest first, as shown in the saved menus tab
        menus = super().list_all(uid)
        return sorted(menus, key=lambda m: m.created_at, reverse=True)

    def update(self, uid: str, entity: SavedMenu) -> SavedMenu:
        raise PersistenceFailure("Saved menus cannot be modified", user_message="Los menús guardados no se pueden modificar.")
