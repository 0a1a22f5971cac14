"""ShoppingList aggregate: generated items plus the client-only checked flags."""
from typing import Dict, List, Tuple
from pydantic import BaseModel, field_validator

from comida.utilities.constants import DEFAULT_SECTION


class ShoppingListItem(BaseModel):
    ingredient: str
    quantity: str
    unit: str = ""
    category: str = DEFAULT_SECTION
    checked: bool = False

    @field_validator("quantity", mode="before")
    @classmethod
    def quantity_as_text(cls, v):
        # Keep range notation ("1-2"); whole floats drop their ".0", other numbers keep every digit
        if isinstance(v, bool):
            raise ValueError("quantity must be a number or text")
        if isinstance(v, float) and v.is_integer():
            return str(int(v))
        if isinstance(v, (int, float)):
            return str(v)
        return v

    @field_validator("category", mode="before")
    @classmethod
    def default_category(cls, v):
        return v.strip() if isinstance(v, str) and v.strip() else DEFAULT_SECTION


class ShoppingList:
    def __init__(self, items: List[ShoppingListItem] = None):
        self.items: List[ShoppingListItem] = [item.model_copy(update={"checked": False}) for item in (items or [])]

    def toggle(self, index: int) -> ShoppingListItem:
        '''
        Flips the checked flag of the item at index.
        '''
        if not 0 <= index < len(self.items):
            raise IndexError(f"No shopping list item at position {index}")
        item = self.items[index]
        self.items[index] = item.model_copy(update={"checked": not item.checked})
        return self.items[index]

    def grouped(self, only_unchecked: bool = False) -> Dict[str, List[Tuple[int, ShoppingListItem]]]:
        '''
        (position, item) pairs grouped by supermarket section, sections sorted alphabetically.
        '''
        groups: Dict[str, List[Tuple[int, ShoppingListItem]]] = {}
        for index, item in enumerate(self.items):
            if only_unchecked and item.checked:
                continue
            groups.setdefault(item.category or DEFAULT_SECTION, []).append((index, item))
        return {category: groups[category] for category in sorted(groups)}

    def get_items(self) -> List[ShoppingListItem]:
        return self.items

    def __len__(self) -> int:
        return len(self.items)

    def __str__(self) -> str:
        items_str = ",\n\t".join(f"{i.ingredient} - {i.quantity} {i.unit}" for i in self.items)
        return f"Shopping List Items:\n\t{items_str}"

    def __repr__(self) -> str:
        return self.__str__()
