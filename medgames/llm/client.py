"""Medication extraction, validation and game generation using the Mistral API."""

import json
import logging
from typing import Any, Dict, List, Literal, Optional, Sequence

from mistralai import Mistral
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..models.types import (
    ER,
    IR,
    GameModule,
    LearningAssessment,
    MedicationMention,
    ResolvedMedicationDetails,
    ValidationReport,
)
from ..resolution.formulation import classify
from . import prompts

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "mistral-small-latest"


class MistralError(Exception):
    """The Mistral API call failed or returned unusable content."""


class GenerationError(MistralError):
    """Game content could not be generated."""


class ExtractedMedication(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = ""
    dosage: Optional[str] = ""
    formulation: Optional[str] = IR
    delivery_method: Optional[str] = Field("", alias="deliveryMethod")
    full_context: Optional[str] = Field("", alias="fullContext")


class ExtractionPayload(BaseModel):
    medications: List[ExtractedMedication] = Field(default_factory=list)


class ValidationPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    validated: bool = False
    issues: List[str] = Field(default_factory=list)
    corrected_search_terms: List[str] = Field(default_factory=list, alias="correctedSearchTerms")


class AssessmentPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    patient_conditions: List[str] = Field(default_factory=list, alias="patientConditions")
    medication_familiarity: Literal["new", "some", "experienced"] = Field("new", alias="medicationFamiliarity")
    time_constraints: Literal["limited", "moderate", "extended"] = Field("limited", alias="timeConstraints")
    preferred_learning_style: Literal["visual", "text", "interactive"] = Field(
        "interactive", alias="preferredLearningStyle"
    )
    suggested_starting_level: Literal["beginner", "intermediate", "advanced"] = Field(
        "beginner", alias="suggestedStartingLevel"
    )


def mention_from_extraction(med: ExtractedMedication) -> MedicationMention:
    """
    Convert one LLM extraction into a mention.

    ER is only kept when the extracted context itself carries an explicit
    extended-release cue.
    """
    context = med.full_context or ""
    formulation = ER if (med.formulation or "").upper() == ER and classify(context) == ER else IR
    return MedicationMention(
        name=(med.name or "").strip().lower(),
        dosage=med.dosage or "",
        formulation=formulation,
        delivery_method=(med.delivery_method or "").strip().lower(),
        full_context=context,
    )


class MistralContentGenerator:
    """LLM collaborator for extraction, validation, assessment and game content."""

    def __init__(self, client: Mistral, model: str = DEFAULT_MODEL):
        """
        Initialize the generator.

        Args:
            client: Mistral client instance
            model: Chat model name
        """
        self.client = client
        self.model = model

    @classmethod
    def from_api_key(cls, api_key: str, model: str = DEFAULT_MODEL) -> "MistralContentGenerator":
        return cls(Mistral(api_key=api_key), model=model)

    def _chat(
        self,
        prompt: str,
        system: Optional[str] = None,
        temperature: float = 0.1,
        max_tokens: int = 1500,
        json_mode: bool = True,
    ) -> str:
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        kwargs: Dict[str, Any] = {}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            response = self.client.chat.complete(
                model=self.model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
                **kwargs,
            )
            return response.choices[0].message.content or ""
        except Exception as e:
            raise MistralError(f"Mistral API error: {str(e)}") from e

    def _chat_json(self, prompt: str, system: str, **kwargs) -> Any:
        content = self._chat(prompt, system=system, **kwargs)
        try:
            return json.loads(content or "{}")
        except json.JSONDecodeError as e:
            raise MistralError("Mistral returned invalid JSON") from e

    def extract_medications(self, patient_info: str) -> List[MedicationMention]:
        """
        Extract medication mentions from patient text.

        Args:
            patient_info: Patient free text

        Returns:
            List of MedicationMention, empty if extraction fails
        """
        try:
            data = self._chat_json(
                prompts.extraction_prompt(patient_info),
                system=f"You are a medical information extraction specialist. Respond only with valid JSON. {prompts.IR_DEFAULT_RULE}",
                temperature=0.1,
                max_tokens=1500,
            )
            payload = ExtractionPayload.model_validate(data)
        except (MistralError, ValidationError) as e:
            logger.error("Error extracting medications: %s", e)
            return []

        mentions = [mention_from_extraction(med) for med in payload.medications]
        return [m for m in mentions if m.name]

    def validate_matches(
        self,
        patient_info: str,
        mentions: Sequence[MedicationMention],
        results: Sequence[ResolvedMedicationDetails],
    ) -> ValidationReport:
        """
        Ask the LLM whether the resolved labels match the patient's medications.

        Returns:
            ValidationReport; a failed call reports not validated
        """
        try:
            data = self._chat_json(
                prompts.validation_prompt(patient_info, mentions, results),
                system="You are a medical validation specialist. Respond only with valid JSON.",
                temperature=0.1,
                max_tokens=800,
            )
            payload = ValidationPayload.model_validate(data)
        except (MistralError, ValidationError) as e:
            logger.error("Error validating medication matches: %s", e)
            return ValidationReport(validated=False, issues=["Validation failed due to technical error"])

        return ValidationReport(
            validated=payload.validated,
            issues=payload.issues,
            corrected_search_terms=payload.corrected_search_terms,
        )

    def assess_learning_level(
        self,
        patient_info: str,
        results: Sequence[ResolvedMedicationDetails],
    ) -> LearningAssessment:
        """Recommend a starting difficulty; falls back to a beginner profile."""
        try:
            data = self._chat_json(
                prompts.assessment_prompt(prompts.build_medical_context(patient_info, results)),
                system="You are a healthcare education specialist. Respond only with valid JSON.",
                temperature=0.3,
                max_tokens=500,
            )
            payload = AssessmentPayload.model_validate(data)
        except (MistralError, ValidationError) as e:
            logger.error("Error assessing patient learning level: %s", e)
            return LearningAssessment()

        return LearningAssessment(
            patient_conditions=payload.patient_conditions,
            medication_familiarity=payload.medication_familiarity,
            time_constraints=payload.time_constraints,
            preferred_learning_style=payload.preferred_learning_style,
            suggested_starting_level=payload.suggested_starting_level,
        )

    def generate_games_for_level(
        self,
        patient_info: str,
        results: Sequence[ResolvedMedicationDetails],
        level: str,
    ) -> List[Dict[str, Any]]:
        """
        Generate the six game types for one difficulty level.

        Args:
            patient_info: Patient free text
            results: Resolved medication labels
            level: beginner | intermediate | advanced

        Returns:
            List of game dicts as returned by the model

        Raises:
            GenerationError: If the call fails or the response has no games list
        """
        if level not in prompts.LEVELS:
            raise ValueError(f"Unknown difficulty level: {level}")

        try:
            data = self._chat_json(
                prompts.games_prompt(prompts.build_medical_context(patient_info, results), level),
                system="You are a healthcare education specialist who creates educational games for patients. Respond only with valid JSON.",
                temperature=0.7,
                max_tokens=4000,
            )
        except MistralError as e:
            raise GenerationError(f"Failed to generate {level}-level educational games") from e

        games = data.get("games") if isinstance(data, dict) else None
        if not isinstance(games, list):
            raise GenerationError("Invalid response format from Mistral: missing games list")
        return games

    def generate_modules(
        self,
        patient_info: str,
        results: Sequence[ResolvedMedicationDetails],
        level: Optional[str] = None,
    ) -> List[GameModule]:
        """One module for the requested level, or all three when level is None."""
        levels = [level] if level else list(prompts.LEVELS)
        modules = []
        for lvl in levels:
            games = self.generate_games_for_level(patient_info, results, lvl)
            modules.append(GameModule(
                level=lvl,
                title=prompts.MODULE_TITLES[lvl],
                description=prompts.MODULE_DESCRIPTIONS[lvl],
                estimated_time=prompts.ESTIMATED_TIMES[lvl],
                games=games,
            ))
        return modules

    def simplify_text(self, text: str) -> str:
        """Rewrite medical text in plain language; returns the input on failure."""
        try:
            simplified = self._chat(
                f"Please simplify this medical text for patient education:\n\n{text}",
                system=prompts.SIMPLIFY_SYSTEM,
                temperature=0.3,
                max_tokens=1000,
                json_mode=False,
            )
        except MistralError as e:
            logger.error("Error simplifying medical text: %s", e)
            return text
        return simplified or text
