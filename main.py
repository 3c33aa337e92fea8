#!/usr/bin/env python3
"""
Patient Medication Games - Command Line Interface

This script runs the patient education pipeline:
1. Medication extraction from patient text (Mistral, with a pattern fallback)
2. Resolution of each medication against DailyMed drug labels
3. Learning level assessment
4. Generation of tiered educational games
5. Plain-language rewriting of medical text
"""

import json
import argparse
import sys
from pathlib import Path
from dataclasses import asdict
from typing import List, Literal, Optional, Dict, Any

from pydantic import BaseModel, Field, ValidationError

from medgames.config import ConfigError, load_settings
from medgames.data.dailymed import DailyMedClient
from medgames.llm.client import GenerationError, MistralContentGenerator
from medgames.models.types import MedicationMention, ProcessingStep, ResolutionResult, SearchLogEntry
from medgames.resolution.extraction import extract_medication_mentions
from medgames.resolution.orchestrator import MedicationResolver


class PatientRequest(BaseModel):
    patient_info: str = Field(min_length=10)
    difficulty_level: Literal["auto", "beginner", "intermediate", "advanced"] = "auto"


class PatientEducationSystem:
    """Main pipeline orchestrator."""

    def __init__(self, resolver: MedicationResolver, generator: Optional[MistralContentGenerator] = None):
        """
        Initialize the system.

        Args:
            resolver: Medication resolver bound to a search client
            generator: Optional LLM collaborator; without it extraction falls
                back to pattern matching and games cannot be generated
        """
        self.resolver = resolver
        self.generator = generator

    @staticmethod
    def validate_request(patient_info: str, difficulty_level: str = "auto") -> PatientRequest:
        return PatientRequest(patient_info=patient_info, difficulty_level=difficulty_level)

    def extract_medications(self, patient_info: str) -> List[MedicationMention]:
        """
        Extract medication mentions, preferring the LLM.

        Args:
            patient_info: Patient free text

        Returns:
            List of MedicationMention
        """
        mentions: List[MedicationMention] = []
        if self.generator:
            mentions = self.generator.extract_medications(patient_info)
        if not mentions:
            mentions = extract_medication_mentions(patient_info)
        return mentions

    def resolve(self, patient_info: str, validate: bool = False) -> ResolutionResult:
        """
        Extract and resolve medications.

        Args:
            patient_info: Patient free text
            validate: Ask the LLM to check matches and retry with corrected terms

        Returns:
            ResolutionResult
        """
        mentions = self.extract_medications(patient_info)
        print(f"💊 Found {len(mentions)} medication mention(s): {[m.name for m in mentions]}")

        if validate and self.generator:
            result, report = self.resolver.resolve_with_validation(patient_info, mentions, self.generator)
            if not report.validated:
                print(f"⚠️  Validation issues: {report.issues}")
            return result
        return self.resolver.resolve_all(mentions)

    def simplify(self, text: str) -> str:
        """Plain-language rewrite of medical text; unchanged without a generator."""
        if not self.generator:
            return text
        return self.generator.simplify_text(text)

    def generate_games(self, patient_info: str) -> Dict[str, Any]:
        """
        Resolve medications and generate beginner-level games.

        Returns:
            Response dictionary with games, resolved labels, search log and steps
        """
        steps = [
            ProcessingStep("parse", "complete", "Patient information parsed successfully"),
            ProcessingStep("dailymed", "processing", "Searching for medications..."),
            ProcessingStep("games", "pending", "Generating educational games..."),
        ]

        resolution = self.resolve(patient_info)
        steps[1] = ProcessingStep("dailymed", "complete",
                                  f"Found {len(resolution.results)} medications in database")

        response = {
            "dailyMedResults": [r.to_dict() for r in resolution.results],
            "searchLog": [e.to_dict() for e in resolution.log],
        }

        if not self.generator:
            steps[2] = ProcessingStep("games", "error", "No Mistral API key configured")
            response.update(success=False, message="Game generation requires a Mistral API key",
                            processingSteps=[s.to_dict() for s in steps])
            return response

        try:
            games = self.generator.generate_games_for_level(patient_info, resolution.results, "beginner")
        except GenerationError as e:
            steps[2] = ProcessingStep("games", "error", "Could not create educational games")
            response.update(success=False, message=f"Failed to generate educational games: {e}",
                            processingSteps=[s.to_dict() for s in steps])
            return response

        steps[2] = ProcessingStep("games", "complete", f"Generated {len(games)} educational games")
        response.update(success=True, message=f"Successfully generated {len(games)} educational games",
                        games=games, processingSteps=[s.to_dict() for s in steps])
        return response

    def generate_modules(self, patient_info: str, difficulty_level: str = "auto") -> Dict[str, Any]:
        """
        Resolve medications, assess the patient and generate learning modules.

        Args:
            patient_info: Patient free text
            difficulty_level: auto for all three levels, or a single level

        Returns:
            Response dictionary with modules, assessment, resolved labels, search log and steps
        """
        steps = [
            ProcessingStep("parse", "complete", "Patient information parsed successfully"),
            ProcessingStep("dailymed", "processing", "Querying DailyMed database..."),
            ProcessingStep("assess", "pending", "Assessing learning level..."),
            ProcessingStep("modules", "pending", "Generating learning modules..."),
        ]

        resolution = self.resolve(patient_info)
        steps[1] = ProcessingStep("dailymed", "complete",
                                  f"Found {len(resolution.results)} medications in database")

        response = {
            "dailyMedResults": [r.to_dict() for r in resolution.results],
            "searchLog": [e.to_dict() for e in resolution.log],
        }

        if not self.generator:
            steps[2] = ProcessingStep("assess", "error", "No Mistral API key configured")
            steps[3] = ProcessingStep("modules", "error", "No Mistral API key configured")
            response.update(success=False, message="Module generation requires a Mistral API key",
                            processingSteps=[s.to_dict() for s in steps])
            return response

        assessment = self.generator.assess_learning_level(patient_info, resolution.results)
        steps[2] = ProcessingStep("assess", "complete",
                                  f"Recommended starting level: {assessment.suggested_starting_level}")

        requested = None if difficulty_level == "auto" else difficulty_level
        try:
            modules = self.generator.generate_modules(patient_info, resolution.results, requested)
        except GenerationError as e:
            steps[3] = ProcessingStep("modules", "error", "Could not create learning modules")
            response.update(success=False, message=f"Failed to generate learning modules: {e}",
                            assessment=assessment.to_dict(), processingSteps=[s.to_dict() for s in steps])
            return response

        steps[3] = ProcessingStep("modules", "complete", f"Generated {len(modules)} learning modules")
        response.update(
            success=True,
            message=f"Successfully generated {len(modules)} learning modules",
            modules=[m.to_dict() for m in modules],
            assessment=assessment.to_dict(),
            processingSteps=[s.to_dict() for s in steps],
        )
        return response


def build_system(mistral_key: Optional[str] = None, delay: Optional[float] = None,
                 verify_dosage: bool = False) -> PatientEducationSystem:
    """Wire the DailyMed client, resolver and optional Mistral generator from settings."""
    settings = load_settings()
    client = DailyMedClient(base_url=settings.dailymed_base_url, timeout=settings.timeout)
    resolver = MedicationResolver(
        client,
        request_delay=settings.request_delay if delay is None else delay,
        verify_dosage=verify_dosage,
    )

    api_key = mistral_key or settings.mistral_api_key
    generator = MistralContentGenerator.from_api_key(api_key, model=settings.mistral_model) if api_key else None
    return PatientEducationSystem(resolver, generator)


def _read_patient_info(args) -> str:
    if args.file:
        return Path(args.file).read_text(encoding="utf-8")
    if args.text:
        return args.text
    return sys.stdin.read()


def _accepted(entry: SearchLogEntry) -> bool:
    """True if the entry names a title that was not rejected on that attempt."""
    if not (entry.found and entry.result_title):
        return False
    return not any(r.startswith(f"{entry.result_title}:") for r in entry.rejected_reasons)


def _print_log(resolution: ResolutionResult):
    for entry in resolution.log:
        status = "✅" if _accepted(entry) else "❌"
        print(f"  {status} [{entry.medication}] {entry.search_term}"
              + (f" -> {entry.result_title}" if entry.result_title else ""))
        for reason in entry.rejected_reasons:
            print(f"      ↳ rejected {reason}")
        if entry.error:
            print(f"      ⚠️  {entry.error}")


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(description="Patient Medication Games")
    parser.add_argument("command", choices=["extract", "resolve", "simplify", "games", "modules"],
                        help="Command to run")
    parser.add_argument("--text", help="Patient information text")
    parser.add_argument("--file", help="Read patient information from a file")
    parser.add_argument("--level", default="auto",
                        choices=["auto", "beginner", "intermediate", "advanced"],
                        help="Difficulty level for the modules command")
    parser.add_argument("--mistral-key", help="Mistral API key (or set MISTRAL_API_KEY env var)")
    parser.add_argument("--delay", type=float, help="Seconds between DailyMed requests")
    parser.add_argument("--validate", action="store_true",
                        help="Validate matches with Mistral and retry with corrected terms")
    parser.add_argument("--verify-dosage", action="store_true",
                        help="Re-check ER mentions against available dose strengths")
    parser.add_argument("--output", help="Write the JSON result to this file")

    args = parser.parse_args()

    try:
        system = build_system(args.mistral_key, args.delay, args.verify_dosage)
        request = system.validate_request(_read_patient_info(args), args.level)
    except ConfigError as e:
        print(f"❌ Configuration error: {e}")
        return 1
    except ValidationError as e:
        print(f"❌ Invalid patient information: {e.errors()[0]['msg']}")
        return 1

    if system.generator is None:
        print("⚠️  No Mistral API key - using pattern-based extraction only")

    try:
        if args.command == "extract":
            mentions = system.extract_medications(request.patient_info)
            output = [asdict(m) for m in mentions]
            for m in mentions:
                print(f"  - {m.name} ({m.formulation}, {m.delivery_method or 'unspecified'}) {m.dosage}")

        elif args.command == "resolve":
            resolution = system.resolve(request.patient_info, validate=args.validate)
            print(f"📊 Resolved {len(resolution.results)} medication(s)")
            _print_log(resolution)
            output = resolution.to_dict()

        elif args.command == "simplify":
            simplified = system.simplify(request.patient_info)
            output = {"original": request.patient_info, "simplified": simplified}
            print(f"📝 {simplified}")

        elif args.command == "games":
            output = system.generate_games(request.patient_info)
            print(f"{'✅' if output['success'] else '❌'} {output['message']}")

        else:
            output = system.generate_modules(request.patient_info, request.difficulty_level)
            print(f"{'✅' if output['success'] else '❌'} {output['message']}")

    except Exception as e:
        print(f"❌ Error: {e}")
        return 1

    if args.output:
        with open(args.output, "w") as f:
            json.dump(output, f, indent=2)
        print(f"💾 Saved result to {args.output}")
    elif args.command in ("games", "modules"):
        print(json.dumps(output, indent=2))

    return 0


if __name__ == "__main__":
    exit(main())
