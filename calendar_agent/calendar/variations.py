"""Name variation generation for fuzzy calendar search."""

import math
from typing import List

COMPANY_SUFFIXES = [" Inc", " LLC", " Ltd", " Corp", " Co"]

# Single words longer than this also get a leading-substring variant
PARTIAL_MATCH_MIN_LENGTH = 5
PARTIAL_MATCH_RATIO = 0.7

# Suffixes are only appended to short queries
SUFFIX_MAX_WORDS = 2
SUFFIX_MAX_LENGTH = 15


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:].lower()


def generate_name_variations(raw_text: str) -> List[str]:
    """
    Generate textual variants of a company or person name.

    Variants are produced in a fixed rule order and deduplicated keeping the
    first occurrence, so the result is deterministic for identical input.

    Args:
        raw_text: Search term as typed by the user

    Returns:
        Ordered list of unique variants, starting with the trimmed original
    """
    original = (raw_text or "").strip()
    if not original:
        return [""]
    words = original.split()

    variations = [
        original,
        original.lower(),
        original.upper(),
        "".join(words),
        "-".join(words),
        ".".join(words),
    ]

    if len(words) > 1:
        variations.append(words[0].lower() + "".join(_capitalize(w) for w in words[1:]))
        variations.append("".join(_capitalize(w) for w in words))
        variations.append("".join(w[0] for w in words).upper())

    if len(original) > PARTIAL_MATCH_MIN_LENGTH and " " not in original:
        variations.append(original[: math.ceil(len(original) * PARTIAL_MATCH_RATIO)])

    for suffix in COMPANY_SUFFIXES:
        if original.endswith(suffix):
            variations.append(original[: -len(suffix)])
        elif len(words) <= SUFFIX_MAX_WORDS and len(original) < SUFFIX_MAX_LENGTH:
            variations.append(original + suffix)

    return list(dict.fromkeys(variations))
