import logging
from typing import List

from comida.domain.UserRecipe import UserRecipe
from comida.infra.paths import RECIPES
from comida.infra.Repository_Base import UserCollectionRepository

logger = logging.getLogger(__name__)


class RecipeRepository(UserCollectionRepository[UserRecipe]):
    collection = RECIPES
    messages = {
        "list": "No se pudieron cargar tus recetas.",
        "add": "No se pudo guardar la receta.",
        "update": "No se pudo actualizar la receta.",
        "delete": "No se pudo eliminar la receta.",
        "import": "No se pudieron importar las recetas. No se ha guardado ninguna.",
    }

    def _from_doc(self, doc: dict) -> UserRecipe:
        return UserRecipe.from_dict(doc)

    def _to_doc(self, entity: UserRecipe) -> dict:
        return entity.to_dict()

    def add_many(self, uid: str, recipes: List[UserRecipe]) -> List[UserRecipe]:
        """Persist the whole batch or nothing. Returns the recipes with their new ids."""
        if not recipes:
            return []
        docs = [self._to_doc(r) for r in recipes]
        ids = self._run("import", lambda store: store.add_many(uid, self.collection, docs))
        logger.info("Imported %d recipes for %s", len(ids), uid)
        return [r.model_copy(update={"id": doc_id}) for r, doc_id in zip(recipes, ids)]
