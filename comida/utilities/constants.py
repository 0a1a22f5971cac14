from typing import Final

DATE_KEY_FORMAT: Final[str] = "%Y-%m-%d"

RECIPE_CATEGORIES: Final[tuple[str, ...]] = (
    "Arroces",
    "Carnes",
    "Pescados",
    "Pastas",
    "Legumbres",
    "Verduras y Ensaladas",
    "Cremas y Sopas",
    "Otros",
)
UNCLASSIFIED: Final[str] = "Sin Clasificar"
BREAKFAST_CATEGORY: Final[str] = "Desayuno"
MAIN_DISH_CATEGORY: Final[str] = "Plato Principal"

# Categories the model may assign to a generated meal
MEAL_CATEGORIES: Final[tuple[str, ...]] = RECIPE_CATEGORIES + (BREAKFAST_CATEGORY,)

# Two of these on the same day is flagged when swapping
HEAVY_CATEGORIES: Final[frozenset[str]] = frozenset(
    {"Carnes", "Pescados", "Legumbres", "Pastas", "Arroces"}
)

MEAL_TYPES: Final[tuple[str, ...]] = ("breakfast", "lunch", "dinner")
MEAL_TYPE_LABELS: Final[dict[str, str]] = {
    "breakfast": "desayuno",
    "lunch": "comida",
    "dinner": "cena",
}

SUPERMARKET_SECTIONS: Final[tuple[str, ...]] = (
    "Frutas y Verduras",
    "Carnicería",
    "Pescadería",
    "Lácteos y Huevos",
    "Panadería",
    "Congelados",
    "Bebidas",
    "Despensa",
    "Especias y Condimentos",
)
DEFAULT_SECTION: Final[str] = "Otros"

WEEKDAY_NAMES_ES: Final[tuple[str, ...]] = (
    "lunes", "martes", "miércoles", "jueves", "viernes", "sábado", "domingo",
)
MONTH_NAMES_ES: Final[tuple[str, ...]] = (
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
)

CHEF_PREAMBLE: Final[str] = (
    "You are a professional chef and nutritionist specializing in Spanish cuisine. "
    "Your responses must be exclusively in Spanish from Spain."
)
SHOPPER_PREAMBLE: Final[str] = (
    "You are an expert grocery shopper. Your responses must be exclusively in Spanish from Spain."
)
