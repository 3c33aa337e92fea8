"""Tests for combination-name expansion and search term generation."""

import unittest

from medgames.models.types import ER, IR, MedicationMention
from medgames.resolution.combinations import expand
from medgames.resolution.search_terms import generate


class ExpandTests(unittest.TestCase):
    def test_single_name_passes_through(self):
        self.assertEqual(expand("metformin"), ["metformin"])

    def test_slash_combination(self):
        variants = expand("lisinopril/hydrochlorothiazide")
        self.assertEqual(variants[0], "lisinopril/hydrochlorothiazide")
        for expected in [
            "hydrochlorothiazide/lisinopril",
            "lisinopril hydrochlorothiazide",
            "hydrochlorothiazide lisinopril",
            "lisinopril-hydrochlorothiazide",
            "hydrochlorothiazide-lisinopril",
            "lisinopril",
            "hydrochlorothiazide",
        ]:
            self.assertIn(expected, variants)
        self.assertEqual(len(variants), len(set(variants)))

    def test_word_separators(self):
        for name in ["amlodipine and benazepril", "amlodipine & benazepril"]:
            with self.subTest(name=name):
                variants = expand(name)
                self.assertEqual(variants[0], name)
                self.assertIn("amlodipine/benazepril", variants)
                self.assertIn("benazepril amlodipine", variants)
                self.assertIn("benazepril", variants)

    def test_three_components_pass_through(self):
        self.assertEqual(expand("a/b/c"), ["a/b/c"])
        self.assertEqual(expand("a and b and c"), ["a and b and c"])


class GenerateTests(unittest.TestCase):
    def test_ir_without_delivery(self):
        mention = MedicationMention(name="metformin", formulation=IR)
        self.assertEqual(generate(mention), ["metformin immediate release", "metformin ir", "metformin"])

    def test_er_without_delivery(self):
        mention = MedicationMention(name="metformin", formulation=ER)
        self.assertEqual(generate(mention), [
            "metformin extended release",
            "metformin er",
            "metformin xl",
            "metformin xr",
            "metformin sustained release",
            "metformin sr",
            "metformin",
        ])

    def test_inhaler_terms(self):
        mention = MedicationMention(name="albuterol", formulation=IR, delivery_method="inhaler")
        self.assertEqual(generate(mention), [
            "albuterol inhaler immediate release",
            "albuterol inhaler ir",
            "albuterol inhaler",
            "albuterol inhalation",
            "albuterol metered dose inhaler",
            "albuterol mdi",
            "albuterol immediate release",
            "albuterol ir",
            "albuterol",
        ])

    def test_er_with_delivery(self):
        terms = generate(MedicationMention(name="nifedipine", formulation=ER, delivery_method="tablet"))
        self.assertEqual(terms[:5], [
            "nifedipine tablet extended release",
            "nifedipine tablet er",
            "nifedipine tablet xl",
            "nifedipine tablet xr",
            "nifedipine tablet",
        ])

    def test_handihaler_and_respimat(self):
        mention = MedicationMention(
            name="tiotropium",
            formulation=IR,
            delivery_method="HandiHaler",
            full_context="Switching from Respimat to tiotropium via HandiHaler",
        )
        terms = generate(mention)
        self.assertIn("tiotropium dry powder inhaler", terms)
        self.assertIn("tiotropium dpi", terms)
        self.assertLess(terms.index("tiotropium respimat"), terms.index("tiotropium"))
        self.assertEqual(terms[-1], "tiotropium")

    def test_combination_terms_are_unique_and_ordered(self):
        terms = generate(MedicationMention(name="amlodipine/benazepril", formulation=IR))
        self.assertEqual(terms[0], "amlodipine/benazepril immediate release")
        self.assertEqual(len(terms), len(set(terms)))
        self.assertLess(terms.index("amlodipine/benazepril"),
                        terms.index("benazepril/amlodipine immediate release"))
        self.assertEqual(terms[-1], "benazepril")

    def test_whitespace_and_case_normalised(self):
        terms = generate(MedicationMention(name="Metformin  Hydrochloride ", formulation=IR))
        self.assertEqual(terms, [
            "metformin hydrochloride immediate release",
            "metformin hydrochloride ir",
            "metformin hydrochloride",
        ])


if __name__ == "__main__":
    unittest.main()
