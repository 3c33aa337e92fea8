"""Search term generation, most specific first."""

import re
from typing import List

from ..models.types import ER, MedicationMention
from .combinations import expand

ER_SUFFIXES = ("extended release", "er", "xl", "xr")
ER_PLAIN_SUFFIXES = ER_SUFFIXES + ("sustained release", "sr")
IR_SUFFIXES = ("immediate release", "ir")

DELIVERY_ALIASES = {
    "inhaler": ("inhalation", "metered dose inhaler", "MDI"),
    "handihaler": ("dry powder inhaler", "DPI"),
}

_WS_RE = re.compile(r"\s+")


def normalize_term(term: str) -> str:
    return _WS_RE.sub(" ", term).strip().lower()


def generate(mention: MedicationMention) -> List[str]:
    """
    Build the ordered list of search strings for a mention.

    Args:
        mention: Classified medication mention

    Returns:
        Lower-cased, de-duplicated search terms, most specific first
    """
    delivery = (mention.delivery_method or "").strip().lower()
    is_er = mention.formulation == ER
    mentions_respimat = "respimat" in (mention.full_context or "").lower()

    terms = []
    for drug in expand(mention.name.lower()):
        if delivery:
            for suffix in (ER_SUFFIXES if is_er else IR_SUFFIXES):
                terms.append(f"{drug} {delivery} {suffix}")
            terms.append(f"{drug} {delivery}")

            for alias in DELIVERY_ALIASES.get(delivery, ()):
                terms.append(f"{drug} {alias}")

        for suffix in (ER_PLAIN_SUFFIXES if is_er else IR_SUFFIXES):
            terms.append(f"{drug} {suffix}")

        if mentions_respimat:
            terms.append(f"{drug} respimat")

        terms.append(drug)

    return list(dict.fromkeys(normalize_term(t) for t in terms))
