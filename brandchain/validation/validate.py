"""
Word validation for brand chain.

Combines the brand lookup and the letter-chain rule into one verdict:
1. Empty input is rejected
2. The word must resolve exactly against the brand dictionary
   (a near miss is rejected with a suggestion, never auto-accepted)
3. The word must start with the last letter of the previous word

The async variant consults the external lookup, but only when the local
dictionary had no match at all.
"""

import logging
from typing import Awaitable, Callable, List, Optional

from .chain import continues_chain, last_letter
from .lookup import lookup_exists_async
from .matching import FUZZY_RATIO, MAX_DISTANCE, resolve
from .models import Brand, LookupResult, ValidationResult

logger = logging.getLogger(__name__)


# Rejection codes
EMPTY_WORD = "EMPTY_WORD"
NOT_A_BRAND = "NOT_A_BRAND"
FUZZY_MATCH = "FUZZY_MATCH"
WRONG_LETTER = "WRONG_LETTER"

Lookup = Callable[[str], Awaitable[LookupResult]]


def _wrong_letter(previous_word: Optional[str], source: Optional[str] = None) -> ValidationResult:
    required = last_letter(previous_word)
    return ValidationResult(
        valid=False,
        code=WRONG_LETTER,
        error=f'Word must start with "{required.upper()}"',
        source=source,
        required_letter=required,
    )


def validate(
    word: str,
    brands: List[Brand],
    previous_word: Optional[str] = None,
    max_distance: int = MAX_DISTANCE,
    ratio: float = FUZZY_RATIO,
) -> ValidationResult:
    """
    Validate a word against the local dictionary and the chain rule.

    Args:
        word: Word submitted by the player
        brands: Normalized brand dictionary
        previous_word: Last accepted word, or None/"" on the first move
        max_distance: Static ceiling on the fuzzy edit distance
        ratio: Proportional fuzzy allowance per character

    Returns:
        ValidationResult with `valid`, a rejection `code`, and a message
    """
    if not word or not isinstance(word, str) or not word.strip():
        return ValidationResult(valid=False, code=EMPTY_WORD, error="Please enter a word")

    trimmed = word.strip()
    outcome = resolve(trimmed, brands, max_distance=max_distance, ratio=ratio)

    if outcome.confidence == "none":
        return ValidationResult(
            valid=False,
            code=NOT_A_BRAND,
            error=f'"{trimmed}" is not a recognized brand',
        )

    if outcome.confidence == "fuzzy":
        # Fuzzy hits are never accepted, so the chain rule is not consulted
        return ValidationResult(
            valid=False,
            code=FUZZY_MATCH,
            error=f'Did you mean "{outcome.brand.name}"?',
            suggestion=outcome.brand.name,
        )

    if not continues_chain(trimmed, previous_word):
        return _wrong_letter(previous_word)

    return ValidationResult(valid=True, brand=outcome.brand.name, source="database")


async def validate_async(
    word: str,
    brands: List[Brand],
    previous_word: Optional[str] = None,
    lookup: Optional[Lookup] = None,
    max_distance: int = MAX_DISTANCE,
    ratio: float = FUZZY_RATIO,
) -> ValidationResult:
    """
    Validate a word, falling back to an external lookup on a local miss.

    The fallback runs only for NOT_A_BRAND rejections. If the external
    source knows the word, the chain rule is re-applied and the canonical
    title becomes the accepted brand. Lookup failures leave the local
    rejection unchanged.
    """
    result = validate(word, brands, previous_word, max_distance=max_distance, ratio=ratio)
    if result.code != NOT_A_BRAND:
        return result

    lookup = lookup or lookup_exists_async
    trimmed = word.strip()
    try:
        found = await lookup(trimmed)
    except Exception as e:
        logger.warning(f"External lookup for '{trimmed}' failed: {e}")
        return result

    if not found.exists:
        if found.error:
            logger.debug(f"External lookup for '{trimmed}' unavailable: {found.error}")
        return result

    if not continues_chain(trimmed, previous_word):
        return _wrong_letter(previous_word, source="external")

    return ValidationResult(
        valid=True,
        brand=found.canonical_title or trimmed,
        source="external",
    )
