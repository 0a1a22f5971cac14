import shutil
import tempfile
import unittest
from pathlib import Path

from fastapi.testclient import TestClient

from comida.api.api_run import app
from comida.domain.errors import GenerationFailure
from comida.tests.fakes import ACCESS_CODE, RECIPE_JSON, SHOPPING_JSON, FakeGateway, make_context, menu_json


class TestJsonApi(unittest.TestCase):

    def setUp(self):
        self.tmp = Path(tempfile.mkdtemp())
        self.gateway = FakeGateway()
        self._previous_ctx = app.state.ctx
        self.ctx = make_context(self.tmp, self.gateway)
        app.state.ctx = self.ctx
        self.client = TestClient(app)
        self.client.post("/login", data={"display_name": "Ana", "access_code": ACCESS_CODE})

    def tearDown(self):
        self.ctx.registry.close_all()
        app.state.ctx = self._previous_ctx
        shutil.rmtree(self.tmp, ignore_errors=True)

    def generate(self, start="2025-09-01", days=3, **extra):
        self.gateway.queue(menu_json(start, days, breakfast=extra.get("include_breakfasts", False)))
        return self.client.post("/api/menu/generate", json={"start_date": start, "days": days, **extra})

    def test_requires_session(self):
        anonymous = TestClient(app)
        self.assertEqual(anonymous.get("/api/menu").status_code, 401)
        self.assertEqual(anonymous.post("/api/shopping-list").status_code, 401)
        self.assertEqual(len(self.ctx.registry), 1)

    def test_generate_menu(self):
        resp = self.generate(days=2, include_breakfasts=True)
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["status"], "loaded")
        self.assertEqual(sorted(data["menu"]), ["2025-09-01", "2025-09-02"])
        self.assertEqual(data["menu"]["2025-09-01"]["breakfast"]["category"], "Desayuno")

        current = self.client.get("/api/menu").json()
        self.assertEqual(current["menu"], data["menu"])

    def test_menu_not_found_before_generation(self):
        self.assertEqual(self.client.get("/api/menu").status_code, 404)

    def test_invalid_request_rejected(self):
        resp = self.client.post("/api/menu/generate", json={"start_date": "2025-09-01", "days": 0})
        self.assertEqual(resp.status_code, 422)
        self.assertEqual(self.gateway.calls, [])

    def test_bad_generation_maps_to_502(self):
        self.generate()
        self.gateway.queue("```json\n{ roto")
        resp = self.client.post("/api/menu/generate", json={"start_date": "2025-10-01", "days": 2})
        self.assertEqual(resp.status_code, 502)
        self.assertIn("formato", resp.json()["detail"])
        # Previous menu still active
        self.assertIn("2025-09-03", self.client.get("/api/menu").json()["menu"])

    def test_service_failure_maps_to_502(self):
        self.gateway.queue(GenerationFailure("timeout"))
        resp = self.client.post("/api/menu/generate", json={"start_date": "2025-09-01", "days": 2})
        self.assertEqual(resp.status_code, 502)
        self.assertEqual(resp.json()["detail"], GenerationFailure.default_message)

    def test_swap_advice_and_swap(self):
        self.generate()
        payload = {"date": "2025-09-02", "meal_type": "dinner", "name": "Cocido", "category": "Legumbres"}
        advice = self.client.post("/api/menu/swap/advice", json=payload).json()["advice"]
        self.assertIn("legumbres", advice)
        self.assertIn("comida", advice)

        resp = self.client.post("/api/menu/swap", json=payload)
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["menu"]["2025-09-02"]["dinner"], {"name": "Cocido", "category": "Legumbres"})
        self.assertEqual(data["menu"]["2025-09-01"]["dinner"]["name"], "Merluza al horno 1")
        self.assertTrue(data["advice"])

    def test_swap_free_form_defaults_to_main_dish(self):
        self.generate()
        resp = self.client.post("/api/menu/swap", json={"date": "2025-09-01", "meal_type": "lunch", "name": "Tortilla"})
        self.assertEqual(resp.json()["menu"]["2025-09-01"]["lunch"]["category"], "Plato Principal")
        self.assertIsNone(resp.json()["advice"])

    def test_swap_rejections(self):
        self.generate()
        self.assertEqual(self.client.post("/api/menu/swap", json={"date": "2030-01-01", "meal_type": "lunch",
                                                                  "name": "X"}).status_code, 400)
        self.assertEqual(self.client.post("/api/menu/swap", json={"date": "2025-09-01", "meal_type": "merienda",
                                                                  "name": "X"}).status_code, 422)
        self.assertEqual(self.client.post("/api/menu/swap", json={"date": "2025-09-01", "meal_type": "lunch",
                                                                  "recipe_id": "nope"}).status_code, 404)
        self.assertEqual(self.client.post("/api/menu/swap/advice", json={"date": "2030-01-01", "meal_type": "lunch",
                                                                         "name": "X"}).status_code, 404)

    def test_recipe_details(self):
        self.gateway.queue(RECIPE_JSON)
        resp = self.client.post("/api/recipe-details", json={"dish_name": "Lentejas estofadas"})
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["calories"], 1450)
        self.assertEqual(data["nutritionalInfo"]["fats"], "40 g")
        self.assertIn("motivationalComment", data)

    def test_shopping_list_and_toggle(self):
        self.assertEqual(self.client.post("/api/shopping-list").status_code, 400)
        self.generate()
        self.gateway.queue(SHOPPING_JSON)
        data = self.client.post("/api/shopping-list").json()
        self.assertEqual(data["count"], 4)
        self.assertEqual(data["items"][3]["category"], "Otros")

        toggled = self.client.post("/api/shopping-list/2/toggle").json()
        self.assertTrue(toggled["items"][2]["checked"])
        self.assertEqual(self.client.post("/api/shopping-list/9/toggle").status_code, 404)

    def test_import_recipes(self):
        resp = self.client.post("/api/recipes/import", json={"csv_text": "nombre,ingredientes\nPaella,arroz\nPisto,verduras"})
        self.assertEqual(resp.json(), {"imported": 2, "total": 2})

        bad = self.client.post("/api/recipes/import", json={"csv_text": "titulo,ingredientes\nPaella,arroz"})
        self.assertEqual(bad.status_code, 400)
        self.assertIn('"nombre" e "ingredientes"', bad.json()["detail"])


if __name__ == '__main__':
    unittest.main()
