"""Tests for the pipeline system behind the CLI and web interface."""

import json
import unittest

from pydantic import ValidationError

from main import PatientEducationSystem, _accepted
from medgames.llm.client import MistralContentGenerator
from medgames.models.types import IR, SearchLogEntry
from medgames.resolution.orchestrator import MedicationResolver
from stubs import FakeMistral, StubSearchClient, record

PATIENT = "68 year old with type 2 diabetes on metformin 500mg twice daily."

GAMES = {"games": [{"type": "truefalse", "title": "True or False", "difficulty": "beginner", "questions": []}]}


def metformin_labels(query):
    return [record("Metformin Hydrochloride Tablets", set_id="set-metformin")] if "metformin" in query else []


def build(generator=None):
    resolver = MedicationResolver(StubSearchClient(metformin_labels), request_delay=0)
    return PatientEducationSystem(resolver, generator)


class RequestValidationTests(unittest.TestCase):
    def test_valid_request(self):
        request = PatientEducationSystem.validate_request(PATIENT, "advanced")
        self.assertEqual(request.difficulty_level, "advanced")

    def test_too_short(self):
        with self.assertRaises(ValidationError):
            PatientEducationSystem.validate_request("metformin")

    def test_unknown_level(self):
        with self.assertRaises(ValidationError):
            PatientEducationSystem.validate_request(PATIENT, "expert")


class ExtractionFallbackTests(unittest.TestCase):
    def test_pattern_extraction_without_generator(self):
        mentions = build().extract_medications(PATIENT)
        self.assertEqual([m.name for m in mentions], ["metformin"])

    def test_pattern_extraction_when_llm_finds_nothing(self):
        generator = MistralContentGenerator(FakeMistral(json.dumps({"medications": []})))
        mentions = build(generator).extract_medications(PATIENT)
        self.assertEqual([m.name for m in mentions], ["metformin"])


class PipelineTests(unittest.TestCase):
    def test_games_need_a_generator(self):
        response = build().generate_games(PATIENT)
        self.assertFalse(response["success"])
        self.assertEqual([r["setId"] for r in response["dailyMedResults"]], ["set-metformin"])
        self.assertEqual(response["processingSteps"][2]["status"], "error")
        self.assertNotIn("games", response)

    def test_beginner_games(self):
        extraction = json.dumps({"medications": [
            {"name": "metformin", "dosage": "500mg", "formulation": "IR", "fullContext": PATIENT},
        ]})
        response = build(MistralContentGenerator(FakeMistral(extraction, json.dumps(GAMES)))).generate_games(PATIENT)
        self.assertTrue(response["success"])
        self.assertEqual(response["games"], GAMES["games"])
        self.assertEqual(response["searchLog"][0]["searchTerm"], "metformin immediate release")

    def test_modules_for_all_levels(self):
        fake = FakeMistral(
            json.dumps({"medications": []}),
            json.dumps({"suggestedStartingLevel": "intermediate"}),
            json.dumps(GAMES),
        )
        response = build(MistralContentGenerator(fake)).generate_modules(PATIENT)

        self.assertTrue(response["success"])
        self.assertEqual([m["level"] for m in response["modules"]], ["beginner", "intermediate", "advanced"])
        self.assertEqual(response["assessment"]["suggestedStartingLevel"], "intermediate")
        self.assertEqual([s["status"] for s in response["processingSteps"]], ["complete"] * 4)

    def test_module_failure_is_reported(self):
        fake = FakeMistral(
            json.dumps({"medications": []}),
            json.dumps({}),
            json.dumps({"not_games": True}),
        )
        response = build(MistralContentGenerator(fake)).generate_modules(PATIENT, "advanced")
        self.assertFalse(response["success"])
        self.assertEqual(response["processingSteps"][3]["status"], "error")
        self.assertEqual(response["assessment"]["suggestedStartingLevel"], "beginner")


class SimplifyTests(unittest.TestCase):
    def test_simplify_with_generator(self):
        fake = FakeMistral("Take this medicine with food.")
        self.assertEqual(build(MistralContentGenerator(fake)).simplify("Administer with meals."),
                         "Take this medicine with food.")

    def test_simplify_without_generator(self):
        self.assertEqual(build().simplify("Administer with meals."), "Administer with meals.")


class LogStatusTests(unittest.TestCase):
    def entry(self, **kwargs):
        return SearchLogEntry(medication="metformin", search_term="metformin", requested_formulation=IR, **kwargs)

    def test_accepted_after_rejecting_first_candidate(self):
        entry = self.entry(
            found=True,
            result_title="Metformin Hydrochloride Tablets",
            rejected_reasons=["Metformin Extended-Release Tablets: formulation conflict: got ER label, need IR"],
        )
        self.assertTrue(_accepted(entry))

    def test_all_rejected(self):
        entry = self.entry(
            found=True,
            result_title="Metformin Extended-Release Tablets",
            rejected_reasons=["Metformin Extended-Release Tablets: formulation conflict: got ER label, need IR"],
        )
        self.assertFalse(_accepted(entry))

    def test_no_results(self):
        self.assertFalse(_accepted(self.entry(found=False, error="No results found in DailyMed database")))


if __name__ == "__main__":
    unittest.main()
