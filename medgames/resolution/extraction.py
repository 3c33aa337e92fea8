"""Pattern-based medication extraction from patient free text."""

import re
from typing import List

from ..models.types import MedicationMention
from .formulation import classify

KNOWN_MEDICATIONS = [
    "metformin", "insulin", "lisinopril", "atorvastatin", "amlodipine",
    "hydrochlorothiazide", "aspirin", "warfarin", "gabapentin", "simvastatin",
    "losartan", "omeprazole", "levothyroxine", "acetaminophen", "ibuprofen",
]

MEDICATION_PATTERNS = [re.compile(re.escape(name), re.IGNORECASE) for name in KNOWN_MEDICATIONS]

SUFFIX_PATTERNS = [
    re.compile(r"\w+pril\b", re.IGNORECASE),     # ACE inhibitors
    re.compile(r"\w+statin\b", re.IGNORECASE),   # statins
    re.compile(r"\w+zide\b", re.IGNORECASE),     # diuretics
    re.compile(r"\w+pine\b", re.IGNORECASE),     # calcium channel blockers
]

CONTEXT_WINDOW = 50


def mention_context(text: str, name: str, window: int = CONTEXT_WINDOW) -> str:
    """Lower-cased text around the first occurrence of name."""
    lowered = text.lower()
    position = lowered.find(name)
    if position < 0:
        return ""
    return lowered[max(0, position - window): position + len(name) + window]


def extract_medication_mentions(patient_info: str) -> List[MedicationMention]:
    """
    Find medication mentions without an LLM.

    Args:
        patient_info: Patient free text

    Returns:
        De-duplicated mentions in order of discovery
    """
    found = {}
    for pattern in MEDICATION_PATTERNS + SUFFIX_PATTERNS:
        for match in pattern.finditer(patient_info or ""):
            name = match.group(0).lower()
            if name in found:
                continue
            context = mention_context(patient_info, name)
            found[name] = MedicationMention(
                name=name,
                formulation=classify(context),
                full_context=context,
            )
    return list(found.values())
