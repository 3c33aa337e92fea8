"""Textual variants of combination drug names."""

from typing import List

WORD_SEPARATORS = (" and ", " & ")


def _pair_variants(first: str, second: str) -> List[str]:
    return [
        f"{first}/{second}",
        f"{second}/{first}",
        f"{first} {second}",
        f"{second} {first}",
        f"{first}-{second}",
        f"{second}-{first}",
        first,
        second,
    ]


def expand(name: str) -> List[str]:
    """
    Expand a possibly-combined drug name into equivalent spellings.

    "amlodipine/benazepril" also yields the swapped order, space- and
    dash-joined forms and each component alone. Names with more than two
    components, or no separator, come back unchanged.

    Args:
        name: Drug name

    Returns:
        Ordered, de-duplicated list starting with the original name
    """
    variants = [name]

    if "/" in name:
        parts = [part.strip() for part in name.split("/")]
        if len(parts) == 2 and all(parts):
            variants.extend(_pair_variants(*parts))
    else:
        for separator in WORD_SEPARATORS:
            if separator in name:
                parts = [part.strip() for part in name.split(separator)]
                if len(parts) == 2 and all(parts):
                    variants.extend(_pair_variants(*parts))
                break

    return list(dict.fromkeys(variants))
