"""CSV import of family recipes.

Expected layout (UTF-8, comma separated, header required)::

    nombre,ingredientes,categoría
    Lentejas,"Lentejas, chorizo, patata",Legumbres

`categoría` is optional; unknown or missing values become 'Sin Clasificar'.
"""
import csv
import logging
from typing import List, Optional

from comida.domain.UserRecipe import UserRecipe, normalize_category
from comida.domain.errors import MalformedInput

logger = logging.getLogger(__name__)

NAME_COLUMN = "nombre"
INGREDIENTS_COLUMN = "ingredientes"
CATEGORY_COLUMNS = ("categoría", "categoria")

MISSING_COLUMNS_MESSAGE = 'El CSV debe tener las columnas "nombre" e "ingredientes".'


def _clean_cell(value: str) -> str:
    return value.replace("\ufeff", "").strip().strip('"').strip()


def _cell(row: List[str], index: Optional[int]) -> str:
    if index is None or index >= len(row):
        return ""
    return _clean_cell(row[index])


def parse_recipes_csv(text: str) -> List[UserRecipe]:
    """Parse CSV text into unsaved UserRecipe records (empty ids).

    Raises:
        MalformedInput: header lacks `nombre` or `ingredientes`
    """
    lines = (text or "").lstrip("\ufeff").splitlines()
    while lines and not lines[0].strip():
        lines.pop(0)
    if not lines:
        return []

    rows = csv.reader(lines, skipinitialspace=True)
    header = [_clean_cell(h).lower() for h in next(rows)]
    if NAME_COLUMN not in header or INGREDIENTS_COLUMN not in header:
        raise MalformedInput("missing required column", user_message=MISSING_COLUMNS_MESSAGE)

    name_idx = header.index(NAME_COLUMN)
    ingredients_idx = header.index(INGREDIENTS_COLUMN)
    category_idx = next((header.index(c) for c in CATEGORY_COLUMNS if c in header), None)

    recipes: List[UserRecipe] = []
    dropped = 0
    for row in rows:
        name = _cell(row, name_idx)
        ingredients = _cell(row, ingredients_idx)
        if not name or not ingredients:
            dropped += 1
            continue
        recipes.append(UserRecipe(
            name=name,
            ingredients=ingredients,
            category=normalize_category(_cell(row, category_idx)),
        ))
    if dropped:
        logger.debug("Skipped %d CSV rows without name or ingredients", dropped)
    return recipes
