"""Brand lookup against the static dictionary, exact first then fuzzy."""

from typing import Any, Iterable, List, Optional

from .models import Brand, MatchOutcome


# Fuzzy matching defaults
MAX_DISTANCE = 2  # Static ceiling on allowed edits
FUZZY_RATIO = 0.4  # Allowed edits per character of the candidate


def edit_distance(a: str, b: str) -> int:
    """
    Case-insensitive Levenshtein distance between two strings.

    Insertions, deletions and substitutions each cost 1. Uses a single
    rolling row sized to the shorter string.
    """
    a = a.lower()
    b = b.lower()

    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current.append(min(
                previous[j] + 1,         # deletion
                current[j - 1] + 1,      # insertion
                previous[j - 1] + cost,  # substitution
            ))
        previous = current

    return previous[-1]


def brand_name(entry: Any) -> Optional[str]:
    """Get the display name of a raw dictionary entry (string or mapping with 'name')."""
    if isinstance(entry, Brand):
        return entry.name
    if isinstance(entry, str):
        name = entry
    elif isinstance(entry, dict):
        name = entry.get("name")
    else:
        name = getattr(entry, "name", None)

    if not isinstance(name, str) or not name.strip():
        return None
    return name.strip()


def normalize_brands(entries: Iterable[Any]) -> List[Brand]:
    """
    Convert raw dictionary entries to Brand records, keeping their order.

    Entries without a usable name are skipped.
    """
    brands: List[Brand] = []
    for entry in entries:
        if isinstance(entry, Brand):
            brands.append(entry)
            continue
        name = brand_name(entry)
        if name is None:
            continue
        brands.append(Brand(name=name, raw=entry))
    return brands


def fuzzy_threshold(candidate: str, max_distance: int = MAX_DISTANCE, ratio: float = FUZZY_RATIO) -> int:
    """Allowed edit distance for a candidate: grows with length, capped at max_distance."""
    return min(max_distance, max(1, int(len(candidate) * ratio)))


def resolve(
    candidate: str,
    brands: List[Brand],
    max_distance: int = MAX_DISTANCE,
    ratio: float = FUZZY_RATIO,
) -> MatchOutcome:
    """
    Resolve a candidate word against the brand dictionary.

    An exact (case-insensitive) match always wins over a fuzzy one. Among
    fuzzy matches the smallest distance wins; ties go to the entry that
    comes first in the dictionary.

    Args:
        candidate: Word submitted by the player
        brands: Normalized brand dictionary
        max_distance: Static ceiling on the fuzzy edit distance
        ratio: Proportional allowance per character of the candidate

    Returns:
        MatchOutcome with confidence "exact", "fuzzy" or "none"
    """
    if not candidate or not isinstance(candidate, str) or not candidate.strip():
        return MatchOutcome(confidence="none")

    term = candidate.strip()
    lowered = term.lower()

    for brand in brands:
        if brand.name.lower() == lowered:
            return MatchOutcome(confidence="exact", brand=brand, distance=0)

    threshold = fuzzy_threshold(term, max_distance, ratio)
    best: Optional[Brand] = None
    best_distance = threshold + 1

    for brand in brands:
        distance = edit_distance(term, brand.name)
        # Strict comparison keeps the first-seen entry on ties
        if distance < best_distance:
            best = brand
            best_distance = distance

    if best is None:
        return MatchOutcome(confidence="none")

    return MatchOutcome(confidence="fuzzy", brand=best, distance=best_distance)
