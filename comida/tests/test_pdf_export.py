import unittest

from comida.domain.Menu import plan_from_dict
from comida.infra.pdf_utils import generate_pdf_for_menu
from comida.tests.fakes import menu_json


class TestPdfExport(unittest.TestCase):

    def test_menu_pdf(self):
        pdf = generate_pdf_for_menu(plan_from_dict(menu_json("2025-09-01", 7)))
        self.assertTrue(pdf.startswith(b"%PDF"))
        self.assertGreater(len(pdf), 1000)

    def test_breakfast_and_markup_in_names(self):
        menu = menu_json("2025-09-01", 2, breakfast=True)
        menu["2025-09-01"]["lunch"]["name"] = "Pollo <al> ajillo & patatas"
        pdf = generate_pdf_for_menu(plan_from_dict(menu))
        self.assertTrue(pdf.startswith(b"%PDF"))

    def test_empty_menu(self):
        with self.assertRaises(ValueError):
            generate_pdf_for_menu({})


if __name__ == '__main__':
    unittest.main()
