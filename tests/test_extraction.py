"""Tests for pattern-based medication extraction."""

import unittest

from medgames.models.types import ER, IR
from medgames.resolution.extraction import extract_medication_mentions, mention_context


class ExtractionTests(unittest.TestCase):
    def test_known_medication_defaults_to_ir(self):
        mentions = extract_medication_mentions("Patient takes Metformin 500mg twice daily with meals.")
        self.assertEqual([m.name for m in mentions], ["metformin"])
        self.assertEqual(mentions[0].formulation, IR)
        self.assertIn("metformin 500mg", mentions[0].full_context)

    def test_explicit_extended_release(self):
        mentions = extract_medication_mentions("Started nifedipine XL 30mg once daily.")
        self.assertEqual([m.name for m in mentions], ["nifedipine"])
        self.assertEqual(mentions[0].formulation, ER)

    def test_drug_class_suffixes(self):
        mentions = extract_medication_mentions("Takes ramipril 5mg and rosuvastatin 20mg.")
        self.assertEqual([m.name for m in mentions], ["ramipril", "rosuvastatin"])

    def test_known_names_come_first_and_are_not_repeated(self):
        mentions = extract_medication_mentions(
            "Lisinopril 10mg daily. Also ramipril was stopped. Lisinopril refilled today."
        )
        self.assertEqual([m.name for m in mentions], ["lisinopril", "ramipril"])

    def test_no_medications(self):
        self.assertEqual(extract_medication_mentions("Patient walks 30 minutes every day."), [])
        self.assertEqual(extract_medication_mentions(""), [])


class ContextTests(unittest.TestCase):
    def test_window_around_first_occurrence(self):
        text = "x" * 100 + "Warfarin 5mg" + "y" * 100
        context = mention_context(text, "warfarin")
        self.assertEqual(context, "x" * 50 + "warfarin 5mg" + "y" * 46)

    def test_missing_name(self):
        self.assertEqual(mention_context("aspirin daily", "ibuprofen"), "")


if __name__ == "__main__":
    unittest.main()
