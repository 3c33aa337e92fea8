"""Immediate-release vs extended-release classification."""

import re
from typing import List, Sequence, Tuple

from ..models.types import IR, ER, MedicationMention, SearchCandidateRecord

# Only explicit wording counts. Anything else is IR.
ER_RE = re.compile(
    r"\b(extended[\s-]release|sustained[\s-]release|long-acting|er|xr|xl|la|sr)\b",
    re.IGNORECASE,
)
IR_RE = re.compile(r"\b(immediate[\s-]release|ir)\b", re.IGNORECASE)

DOSE_RE = re.compile(r"\d+(?:\.\d+)?")
COMBINATION_DOSE_RE = re.compile(r"(\d+(?:\.\d+)?)/(\d+(?:\.\d+)?)")


def _dose_pattern(dose: str):
    # "5" must not match inside "25", "500" or "2.5"
    return re.compile(rf"(?<![\d.]){re.escape(dose)}(?!\.?\d)", re.IGNORECASE)


def classify(context: str) -> str:
    """
    Decide the formulation of a mention from its surrounding text.

    Args:
        context: Text around the medication mention

    Returns:
        "ER" if an extended-release cue is present as a whole word, otherwise "IR"
    """
    if context and ER_RE.search(context):
        return ER
    return IR


def is_extended_release_label(title: str) -> bool:
    return bool(title and ER_RE.search(title))


def is_immediate_release_label(title: str) -> bool:
    return bool(title and IR_RE.search(title))


def extract_dosage_numbers(dosage: str) -> List[str]:
    """
    Turn a free-text dosage into strings likely to appear in label titles.

    Args:
        dosage: Dosage text, e.g. "500mg twice daily" or "49/51mg"

    Returns:
        Ordered, de-duplicated list of dose patterns
    """
    patterns: List[str] = []
    for number in DOSE_RE.findall(dosage or ""):
        patterns.extend([f"{number}mg", f"{number} mg", number])

    combo = COMBINATION_DOSE_RE.search(dosage or "")
    if combo:
        first, second = combo.groups()
        patterns.extend([f"{first}/{second}", f"{first} / {second}", f"{first}-{second}"])

    return list(dict.fromkeys(patterns))


def check_dosage_availability(
    mention: MedicationMention,
    candidates: Sequence[SearchCandidateRecord],
) -> Tuple[str, str]:
    """
    Re-check an ER mention against the dose strengths seen in label titles.

    The check may move ER back to IR when the requested dose is only listed
    on non-ER labels. It never moves IR to ER.

    Args:
        mention: The mention whose formulation is being checked
        candidates: Search results for the bare drug name

    Returns:
        Tuple of (formulation, reasoning)
    """
    if mention.formulation != ER:
        return IR, "IR is the default formulation"

    doses = extract_dosage_numbers(mention.dosage)
    if not doses:
        return ER, "no dosage to check, keeping explicit ER"
    patterns = [_dose_pattern(dose) for dose in doses]

    er_available = False
    ir_available = False
    for candidate in candidates:
        title = (candidate.title or "").lower()
        if not any(pattern.search(title) for pattern in patterns):
            continue
        if is_extended_release_label(title):
            er_available = True
        else:
            ir_available = True

    if er_available:
        return ER, "ER explicitly requested and available"
    if ir_available:
        return IR, "ER requested but dose only found on non-ER labels, defaulting to IR"
    return ER, "dose not found in any label, keeping explicit ER"
