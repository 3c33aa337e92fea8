"""Accept/reject decisions for search candidates."""

from typing import Optional

from ..models.types import ER, IR, MatchResult, MedicationMention, SearchCandidateRecord
from .combinations import expand
from .formulation import is_extended_release_label, is_immediate_release_label

VETERINARY_KEYWORDS = (
    "zyvet", "animal health", "veterinary", "pet", "canine", "feline",
    "bovine", "equine", "porcine", "avian", "animal", "vet",
)

INHALED_DELIVERY = ("inhaler", "handihaler")

# mention name -> ingredient that must be asked for explicitly
UNREQUESTED_COMBINATIONS = {
    "tiotropium": "olodaterol",
}

APPROPRIATE_MATCH = "appropriate match"


def is_veterinary(title: str, labeler: Optional[str] = None) -> bool:
    """True if the title or labeler looks like an animal-health product."""
    title = (title or "").lower()
    labeler = (labeler or "").lower()
    return any(k in title or k in labeler for k in VETERINARY_KEYWORDS)


def _formulation_conflict(mention: MedicationMention, title: str) -> Optional[str]:
    if mention.formulation == ER and is_immediate_release_label(title):
        return "formulation conflict: got IR label, need ER"
    if mention.formulation == IR and is_extended_release_label(title):
        return "formulation conflict: got ER label, need IR"
    return None


def _unrequested_ingredient(mention: MedicationMention, title: str) -> Optional[str]:
    ingredient = UNREQUESTED_COMBINATIONS.get(mention.name.lower())
    if not ingredient:
        return None
    if ingredient in (mention.full_context or "").lower():
        return None
    if ingredient in title:
        return f"unrequested combination ingredient: contains {ingredient} but patient info doesn't mention it"
    return None


def match_strict(mention: MedicationMention, candidate: SearchCandidateRecord) -> MatchResult:
    """
    Check a candidate against every name, species, delivery and formulation rule.

    Args:
        mention: The medication being resolved
        candidate: One search result

    Returns:
        MatchResult with the first rejection reason, or an accept
    """
    title = (candidate.title or "").lower()
    name = mention.name.lower()
    delivery = (mention.delivery_method or "").lower()

    if not any(component.lower() in title for component in expand(name)):
        return MatchResult(False, f"no component match: doesn't contain any component of {name}")

    if is_veterinary(title, candidate.labeler):
        return MatchResult(False, "non-human product: veterinary/animal health product")

    if delivery in INHALED_DELIVERY:
        if "solution" in title and "inhalation" not in title:
            return MatchResult(False, "delivery-method mismatch: solution not appropriate for inhaler delivery")
        if "tablet" in title or "capsule" in title:
            return MatchResult(False, "delivery-method mismatch: tablet/capsule not appropriate for inhaler delivery")

    reason = _unrequested_ingredient(mention, title)
    if reason:
        return MatchResult(False, reason)

    reason = _formulation_conflict(mention, title)
    if reason:
        return MatchResult(False, reason)

    return MatchResult(True, APPROPRIATE_MATCH)


def match_relaxed(mention: MedicationMention, candidate: SearchCandidateRecord) -> MatchResult:
    """
    Looser fallback check used once every strict search term is exhausted.

    Only the drug name (or its first "/" or "-" segment) has to appear in the
    title. Species, unrequested-ingredient and formulation rules are unchanged.
    """
    title = (candidate.title or "").lower()
    name = mention.name.lower()
    segments = {name, name.split("/")[0].strip(), name.split("-")[0].strip()}

    if is_veterinary(title, candidate.labeler):
        return MatchResult(False, "non-human product: veterinary/animal health product")

    if not any(segment and segment in title for segment in segments):
        return MatchResult(False, f"no name match: doesn't contain {name}")

    reason = _unrequested_ingredient(mention, title)
    if reason:
        return MatchResult(False, reason)

    reason = _formulation_conflict(mention, title)
    if reason:
        return MatchResult(False, reason)

    return MatchResult(True, f"relaxed match: {mention.formulation} formulation preserved")
