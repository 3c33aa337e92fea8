"""Data models and types for the patient medication games pipeline."""

from dataclasses import dataclass, field, asdict
from typing import Optional, List, Dict, Any

IR = "IR"
ER = "ER"

UNSPECIFIED_DELIVERY = "unspecified"


@dataclass(frozen=True)
class MedicationMention:
    """
    A medication reference extracted from patient text.
    """
    name: str                       # lowercased drug name, "/" for combinations
    dosage: str = ""
    formulation: str = IR           # IR | ER
    delivery_method: str = ""       # inhaler, handihaler, tablet...
    full_context: str = ""          # sentence or phrase around the mention


@dataclass(frozen=True)
class SearchCandidateRecord:
    """
    One ranked row returned by the drug-label search service.
    """
    set_id: str
    title: str
    generic_name: Optional[str] = None
    brand_name: Optional[str] = None
    labeler: Optional[str] = None


@dataclass
class ResolvedMedicationDetails:
    """
    An accepted search candidate enriched with reference text.
    """
    set_id: str
    title: str
    generic_name: Optional[str]
    brand_name: Optional[str]
    labeler: Optional[str]
    active_ingredients: List[str]
    indications: str
    dosage_and_administration: str
    contraindications: str
    warnings_and_precautions: str
    adverse_reactions: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "setId": self.set_id,
            "title": self.title,
            "genericName": self.generic_name,
            "brandName": self.brand_name,
            "labeler": self.labeler,
            "activeIngredients": list(self.active_ingredients),
            "indications": self.indications,
            "dosageAndAdministration": self.dosage_and_administration,
            "contraindications": self.contraindications,
            "warningsAndPrecautions": self.warnings_and_precautions,
            "adverseReactions": self.adverse_reactions,
        }


@dataclass
class SearchLogEntry:
    """
    Audit record for a single search attempt.
    """
    medication: str
    search_term: str                # or SEARCH_FAILED / PROCESSING_ERROR
    found: bool
    requested_formulation: str
    delivery_method: str = UNSPECIFIED_DELIVERY
    result_title: Optional[str] = None
    error: Optional[str] = None
    rejected_reasons: List[str] = field(default_factory=list)
    note: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "medication": self.medication,
            "searchTerm": self.search_term,
            "found": self.found,
            "resultTitle": self.result_title,
            "error": self.error,
            "rejectedReasons": list(self.rejected_reasons),
            "requestedFormulation": self.requested_formulation,
            "deliveryMethod": self.delivery_method,
            "note": self.note,
        }


@dataclass(frozen=True)
class MatchResult:
    accept: bool
    reason: str


@dataclass
class ResolutionResult:
    """
    Resolved medications plus the full, ordered search log.
    """
    results: List[ResolvedMedicationDetails] = field(default_factory=list)
    log: List[SearchLogEntry] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "results": [r.to_dict() for r in self.results],
            "searchLog": [entry.to_dict() for entry in self.log],
        }


@dataclass
class ValidationReport:
    validated: bool
    issues: List[str] = field(default_factory=list)
    corrected_search_terms: List[str] = field(default_factory=list)


@dataclass
class LearningAssessment:
    """
    LLM recommendation of where a patient should start.
    """
    patient_conditions: List[str] = field(default_factory=list)
    medication_familiarity: str = "new"             # new | some | experienced
    time_constraints: str = "limited"               # limited | moderate | extended
    preferred_learning_style: str = "interactive"   # visual | text | interactive
    suggested_starting_level: str = "beginner"      # beginner | intermediate | advanced

    def to_dict(self) -> Dict[str, Any]:
        return {
            "patientConditions": list(self.patient_conditions),
            "medicationFamiliarity": self.medication_familiarity,
            "timeConstraints": self.time_constraints,
            "preferredLearningStyle": self.preferred_learning_style,
            "suggestedStartingLevel": self.suggested_starting_level,
        }


@dataclass
class GameModule:
    level: str
    title: str
    description: str
    estimated_time: str
    games: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level,
            "title": self.title,
            "description": self.description,
            "estimatedTime": self.estimated_time,
            "games": self.games,
        }


@dataclass
class ProcessingStep:
    step: str
    status: str     # pending | processing | complete | error
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
