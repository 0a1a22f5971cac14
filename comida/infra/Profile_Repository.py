from comida.domain.Profile import Profile
from comida.infra.paths import PROFILES
from comida.infra.Repository_Base import UserCollectionRepository


class ProfileRepository(UserCollectionRepository[Profile]):
    collection = PROFILES
    messages = {
        "list": "No se pudieron cargar los perfiles.",
        "add": "No se pudo guardar el perfil.",
        "update": "No se pudo actualizar el perfil.",
        "delete": "No se pudo eliminar el perfil.",
    }

    def _from_doc(self, doc: dict) -> Profile:
        return Profile.from_dict(doc)

    def _to_doc(self, entity: Profile) -> dict:
        return entity.to_dict()
