from pathlib import Path

from comida.utilities.config import DATA_DIR

# Per-user collections: <data_dir>/users/<uid>/<collection>.json
USERS_DIR_NAME = 'users'
PROFILES = 'profiles'
RECIPES = 'recipes'
SAVED_MENUS = 'savedMenus'
COLLECTIONS = (PROFILES, RECIPES, SAVED_MENUS)


def user_dir(uid: str, data_dir: Path = DATA_DIR) -> Path:
    if not uid or '/' in uid or '\\' in uid or uid in ('.', '..'):
        raise ValueError(f"Invalid user id: {uid!r}")
    return Path(data_dir) / USERS_DIR_NAME / uid


def collection_file(uid: str, collection: str, data_dir: Path = DATA_DIR) -> Path:
    if collection not in COLLECTIONS:
        raise ValueError(f"Unknown collection: {collection}")
    return user_dir(uid, data_dir) / f'{collection}.json'


__all__ = ['USERS_DIR_NAME', 'PROFILES', 'RECIPES', 'SAVED_MENUS', 'COLLECTIONS', 'user_dir', 'collection_file']
