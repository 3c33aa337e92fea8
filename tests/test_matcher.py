"""Tests for strict and relaxed candidate matching."""

import unittest

from medgames.models.types import ER, IR, MedicationMention
from medgames.resolution.matcher import match_relaxed, match_strict
from stubs import record

METFORMIN_IR = MedicationMention(name="metformin", formulation=IR, full_context="Metformin 500mg twice daily")
METFORMIN_ER = MedicationMention(name="metformin", formulation=ER, full_context="Metformin ER 500mg daily")
ALBUTEROL_INHALER = MedicationMention(name="albuterol", formulation=IR, delivery_method="inhaler")
TIOTROPIUM = MedicationMention(
    name="tiotropium", formulation=IR, delivery_method="handihaler",
    full_context="Tiotropium 18mcg via HandiHaler",
)


class StrictMatchTests(unittest.TestCase):
    def test_plain_match(self):
        result = match_strict(METFORMIN_IR, record("Metformin Hydrochloride Tablets"))
        self.assertTrue(result.accept)
        self.assertEqual(result.reason, "appropriate match")

    def test_rejects_when_no_component_in_title(self):
        result = match_strict(METFORMIN_IR, record("Lisinopril Tablets"))
        self.assertFalse(result.accept)
        self.assertTrue(result.reason.startswith("no component match"))

    def test_rejects_veterinary_products(self):
        for candidate in [
            record("Metformin Veterinary Tablets"),
            record("Metformin Tablets (Animal Health)"),
            record("Metformin Tablets", labeler="Zyvet Animal Health"),
        ]:
            with self.subTest(title=candidate.title, labeler=candidate.labeler):
                result = match_strict(METFORMIN_IR, candidate)
                self.assertFalse(result.accept)
                self.assertTrue(result.reason.startswith("non-human product"))

    def test_veterinary_checked_before_formulation(self):
        result = match_strict(METFORMIN_IR, record("Metformin ER Veterinary"))
        self.assertTrue(result.reason.startswith("non-human product"))

    def test_ir_mention_rejects_er_label(self):
        result = match_strict(METFORMIN_IR, record("Metformin Hydrochloride Extended-Release Tablets"))
        self.assertFalse(result.accept)
        self.assertEqual(result.reason, "formulation conflict: got ER label, need IR")

    def test_er_mention_rejects_ir_label(self):
        result = match_strict(METFORMIN_ER, record("Metformin Immediate Release Tablets"))
        self.assertFalse(result.accept)
        self.assertEqual(result.reason, "formulation conflict: got IR label, need ER")

    def test_er_mention_accepts_unlabelled_formulation(self):
        self.assertTrue(match_strict(METFORMIN_ER, record("Metformin Hydrochloride Tablets")).accept)

    def test_combination_in_any_order(self):
        mention = MedicationMention(name="lisinopril/hydrochlorothiazide", formulation=IR)
        self.assertTrue(match_strict(mention, record("Hydrochlorothiazide and Lisinopril Tablets")).accept)

    def test_inhaler_delivery_mismatch(self):
        for title in ["Albuterol Sulfate Tablets", "Albuterol Sulfate Syrup Capsule", "Albuterol Sulfate Solution"]:
            with self.subTest(title=title):
                result = match_strict(ALBUTEROL_INHALER, record(title))
                self.assertFalse(result.accept)
                self.assertTrue(result.reason.startswith("delivery-method mismatch"))

    def test_inhalation_solution_is_fine_for_inhaler(self):
        self.assertTrue(match_strict(ALBUTEROL_INHALER, record("Albuterol Sulfate Inhalation Solution")).accept)

    def test_unrequested_olodaterol(self):
        result = match_strict(TIOTROPIUM, record("Tiotropium and Olodaterol Inhalation Spray"))
        self.assertFalse(result.accept)
        self.assertTrue(result.reason.startswith("unrequested combination ingredient"))

    def test_requested_olodaterol(self):
        mention = MedicationMention(
            name="tiotropium", formulation=IR, full_context="tiotropium/olodaterol respimat 2 puffs daily",
        )
        self.assertTrue(match_strict(mention, record("Tiotropium and Olodaterol Inhalation Spray")).accept)


class RelaxedMatchTests(unittest.TestCase):
    def test_skips_delivery_check(self):
        result = match_relaxed(ALBUTEROL_INHALER, record("Albuterol Sulfate Tablets"))
        self.assertTrue(result.accept)

    def test_first_segment_is_enough(self):
        mention = MedicationMention(name="amlodipine/benazepril", formulation=IR)
        self.assertTrue(match_relaxed(mention, record("Amlodipine Besylate Tablets")).accept)
        hyphenated = MedicationMention(name="sacubitril-valsartan", formulation=IR)
        self.assertTrue(match_relaxed(hyphenated, record("Sacubitril Tablets")).accept)

    def test_formulation_never_relaxed(self):
        result = match_relaxed(ALBUTEROL_INHALER, record("Albuterol Sulfate Extended-Release Tablets"))
        self.assertFalse(result.accept)
        self.assertEqual(result.reason, "formulation conflict: got ER label, need IR")

        result = match_relaxed(METFORMIN_ER, record("Metformin Immediate-Release Tablets"))
        self.assertFalse(result.accept)

    def test_still_rejects_veterinary(self):
        self.assertFalse(match_relaxed(METFORMIN_IR, record("Metformin Canine Chewables")).accept)

    def test_still_rejects_unrequested_ingredient(self):
        self.assertFalse(match_relaxed(TIOTROPIUM, record("Tiotropium and Olodaterol Inhalation Spray")).accept)

    def test_requires_name(self):
        result = match_relaxed(METFORMIN_IR, record("Glucophage"))
        self.assertFalse(result.accept)
        self.assertTrue(result.reason.startswith("no name match"))


if __name__ == "__main__":
    unittest.main()
