"""Word validation for brandchain."""

from .validate import validate, validate_async, EMPTY_WORD, NOT_A_BRAND, FUZZY_MATCH, WRONG_LETTER
from .models import Brand, MatchOutcome, LookupResult, ValidationResult, MatchSource, Confidence
from .chain import continues_chain, last_letter, first_letter
from .matching import edit_distance, resolve, normalize_brands, fuzzy_threshold, brand_name
from .lookup import lookup_exists, lookup_exists_async, match_title
from .data import load_brands, get_brands

__all__ = [
    # Main validation
    "validate",
    "validate_async",
    "EMPTY_WORD",
    "NOT_A_BRAND",
    "FUZZY_MATCH",
    "WRONG_LETTER",
    # Models
    "Brand",
    "MatchOutcome",
    "LookupResult",
    "ValidationResult",
    "MatchSource",
    "Confidence",
    # Chain rule
    "continues_chain",
    "last_letter",
    "first_letter",
    # Matching
    "edit_distance",
    "resolve",
    "normalize_brands",
    "fuzzy_threshold",
    "brand_name",
    # External lookup
    "lookup_exists",
    "lookup_exists_async",
    "match_title",
    # Dictionary
    "load_brands",
    "get_brands",
]
