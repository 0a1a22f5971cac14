import unittest

from pydantic import ValidationError

from comida.domain.Menu import DayMeals, MealDetail, SavedMenu, meal_names, plan_from_dict, plan_to_dict
from comida.domain.Profile import Profile
from comida.domain.Recipe import RecipeDetail
from comida.domain.ShoppingList import ShoppingList, ShoppingListItem
from comida.domain.UserRecipe import UserRecipe
from comida.tests.fakes import RECIPE_JSON, menu_json


class TestProfile(unittest.TestCase):

    def test_summary(self):
        profile = Profile(name=" Ana ", age=45, gender="Mujer", activityLevel="Moderado", notes="menopausia")
        self.assertEqual(profile.summary(), "Ana (45 años, Mujer, Nivel de actividad: Moderado, Notas: menopausia)")
        self.assertEqual(profile.summary(with_notes=False), "Ana (45 años, Mujer, Nivel de actividad: Moderado)")

    def test_rejects_unknown_values(self):
        with self.assertRaises(ValidationError):
            Profile(name="Ana", age=45, gender="Mujer", activity_level="Extremo")
        with self.assertRaises(ValidationError):
            Profile(name="Ana", age=0, gender="Mujer", activity_level="Bajo")

    def test_dict_round_trip_keeps_id_out(self):
        profile = Profile(id="p1", name="Luis", age=16, gender="Hombre", activity_level="Muy Alto")
        doc = profile.to_dict()
        self.assertNotIn("id", doc)
        self.assertEqual(Profile.from_dict({**doc, "id": "p1"}), profile)


class TestUserRecipe(unittest.TestCase):

    def test_category_normalized(self):
        self.assertEqual(UserRecipe(name="Paella", ingredients="arroz", category="arroces").category, "Arroces")
        self.assertEqual(UserRecipe(name="Flan", ingredients="huevos", category="Postres").category, "Sin Clasificar")
        self.assertEqual(UserRecipe(name="Flan", ingredients="huevos").category, "Sin Clasificar")

    def test_summary(self):
        recipe = UserRecipe(name="Fabada", ingredients="fabes, compango")
        self.assertEqual(recipe.summary(), "Fabada (Ingredientes: fabes, compango)")


class TestMenu(unittest.TestCase):

    def test_plain_string_meal(self):
        day = DayMeals(lunch="Paella", dinner={"name": "Tortilla", "category": "Huevos"})
        self.assertEqual(day.lunch, MealDetail(name="Paella", category="Plato Principal"))
        self.assertIsNone(day.breakfast)
        self.assertEqual([m.name for m in day.meals()], ["Paella", "Tortilla"])

    def test_meals_are_immutable(self):
        meal = MealDetail(name="Paella", category="Arroces")
        with self.assertRaises(ValidationError):
            meal.name = "Fideuá"

    def test_unknown_slot(self):
        day = DayMeals(lunch="Paella", dinner="Tortilla")
        with self.assertRaises(ValueError):
            day.slot("merienda")

    def test_meal_names_in_calendar_order(self):
        plan = plan_from_dict(menu_json("2025-09-01", 2, breakfast=True))
        self.assertEqual(meal_names(plan), [
            "Tostada con tomate 1", "Lentejas estofadas 1", "Merluza al horno 1",
            "Tostada con tomate 2", "Lentejas estofadas 2", "Merluza al horno 2",
        ])

    def test_saved_menu_from_plan(self):
        plan = plan_from_dict(menu_json("2025-09-29", 5))
        saved = SavedMenu.from_plan(plan)
        self.assertEqual(saved.start_date, "2025-09-29")
        self.assertEqual(saved.end_date, "2025-10-03")
        self.assertTrue(saved.created_at)
        self.assertEqual(saved.to_dict()["menu_plan"], plan_to_dict(plan))
        with self.assertRaises(ValueError):
            SavedMenu.from_plan({})


class TestRecipeDetail(unittest.TestCase):

    def test_aliases(self):
        recipe = RecipeDetail.model_validate(RECIPE_JSON)
        self.assertEqual(recipe.nutritional_info.carbohydrates, "180 g")
        dumped = recipe.model_dump(by_alias=True)
        self.assertIn("nutritionalInfo", dumped)
        self.assertIn("motivationalComment", dumped)

    def test_negative_calories(self):
        with self.assertRaises(ValidationError):
            RecipeDetail.model_validate({**RECIPE_JSON, "calories": -1})


class TestShoppingList(unittest.TestCase):

    def setUp(self):
        self.shopping = ShoppingList([
            ShoppingListItem(ingredient="Merluza", quantity="1-2", unit="kg", category="Pescadería"),
            ShoppingListItem(ingredient="Zanahorias", quantity=4, unit="uds", category="Frutas y Verduras"),
            ShoppingListItem(ingredient="Sal", quantity=0.5, unit="pizca", category=" "),
            ShoppingListItem(ingredient="Cebollas", quantity="2", unit="uds", category="Frutas y Verduras", checked=True),
        ])

    def test_items_start_unchecked(self):
        self.assertEqual(len(self.shopping), 4)
        self.assertFalse(any(i.checked for i in self.shopping.get_items()))

    def test_quantity_and_category_defaults(self):
        items = self.shopping.get_items()
        self.assertEqual(items[1].quantity, "4")
        self.assertEqual(items[2].quantity, "0.5")
        self.assertEqual(items[2].category, "Otros")

    def test_numeric_quantities_keep_precision(self):
        cases = {1250000: "1250000", 1234.5678: "1234.5678", 0.125: "0.125", 2.0: "2", 250: "250"}
        for raw, text in cases.items():
            item = ShoppingListItem(ingredient="Harina", quantity=raw, unit="g")
            self.assertEqual(item.quantity, text)
        with self.assertRaises(ValidationError):
            ShoppingListItem(ingredient="Harina", quantity=True, unit="g")

    def test_toggle(self):
        self.assertTrue(self.shopping.toggle(0).checked)
        self.assertFalse(self.shopping.toggle(0).checked)
        with self.assertRaises(IndexError):
            self.shopping.toggle(4)
        with self.assertRaises(IndexError):
            self.shopping.toggle(-1)

    def test_grouped(self):
        groups = self.shopping.grouped()
        self.assertEqual(list(groups), ["Frutas y Verduras", "Otros", "Pescadería"])
        self.assertEqual([index for index, _ in groups["Frutas y Verduras"]], [1, 3])

        self.shopping.toggle(0)
        self.shopping.toggle(2)
        unchecked = self.shopping.grouped(only_unchecked=True)
        self.assertEqual(list(unchecked), ["Frutas y Verduras"])


if __name__ == '__main__':
    unittest.main()
