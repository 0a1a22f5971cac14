import unittest

from comida.domain.Menu import MealDetail, plan_from_dict
from comida.domain.UserRecipe import UserRecipe
from comida.logic.planning.swap import balance_advice, confirm_swap, meal_from_recipe, swap_candidates
from comida.tests.fakes import menu_json


class TestConfirmSwap(unittest.TestCase):

    def setUp(self):
        self.plan = plan_from_dict(menu_json("2025-09-01", 7, breakfast=True))
        self.days = sorted(self.plan)
        self.new_meal = MealDetail(name="Cocido madrileño", category="Legumbres")

    def test_only_target_slot_changes(self):
        target = self.days[2]
        before = dict(self.plan)
        swapped = confirm_swap(self.plan, target, "lunch", self.new_meal)

        self.assertIsNot(swapped, self.plan)
        self.assertEqual(swapped[target].lunch, self.new_meal)
        self.assertIs(swapped[target].dinner, self.plan[target].dinner)
        self.assertIs(swapped[target].breakfast, self.plan[target].breakfast)
        for day in self.days:
            if day != target:
                self.assertIs(swapped[day], self.plan[day])
        # The original plan is untouched
        self.assertEqual(self.plan, before)
        self.assertEqual(self.plan[target].lunch.name, "Lentejas estofadas 3")

    def test_unknown_day_or_meal_type(self):
        with self.assertRaises(ValueError):
            confirm_swap(self.plan, "2030-01-01", "lunch", self.new_meal)
        with self.assertRaises(ValueError):
            confirm_swap(self.plan, self.days[0], "merienda", self.new_meal)


class TestBalanceAdvice(unittest.TestCase):

    def setUp(self):
        self.day = plan_from_dict(menu_json("2025-09-01", 1, lunch_category="Legumbres", dinner_category="Pescados"))["2025-09-01"]

    def test_same_heavy_category_as_dinner(self):
        advice = balance_advice(self.day, "lunch", MealDetail(name="Salmón a la plancha", category="Pescados"))
        self.assertTrue(advice)
        self.assertIn("pescados", advice)
        self.assertIn("cena", advice)

    def test_same_heavy_category_as_lunch(self):
        advice = balance_advice(self.day, "dinner", MealDetail(name="Fabada", category="Legumbres"))
        self.assertIn("comida", advice)

    def test_distinct_category(self):
        self.assertIsNone(balance_advice(self.day, "lunch", MealDetail(name="Arroz negro", category="Arroces")))

    def test_same_light_category(self):
        day = plan_from_dict(menu_json("2025-09-01", 1, lunch_category="Verduras y Ensaladas",
                                       dinner_category="Verduras y Ensaladas"))["2025-09-01"]
        self.assertIsNone(balance_advice(day, "lunch", MealDetail(name="Ensalada", category="Verduras y Ensaladas")))

    def test_breakfast_compares_with_lunch(self):
        self.assertIsNotNone(balance_advice(self.day, "breakfast", MealDetail(name="Hummus", category="Legumbres")))


class TestSwapCandidates(unittest.TestCase):

    def test_filter_and_sort(self):
        recipes = [
            UserRecipe(id="1", name="paella", ingredients="arroz", category="Arroces"),
            UserRecipe(id="2", name="Arroz al horno", ingredients="arroz", category="arroces"),
            UserRecipe(id="3", name="Filete", ingredients="ternera", category="Carnes"),
        ]
        self.assertEqual([r.id for r in swap_candidates(recipes, "Arroces")], ["2", "1"])
        self.assertEqual(len(swap_candidates(recipes)), 3)
        self.assertEqual(meal_from_recipe(recipes[2]), MealDetail(name="Filete", category="Carnes"))
