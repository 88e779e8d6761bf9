"""Data models for brand validation."""

from typing import Any, Literal, Optional
from pydantic import BaseModel, Field


MatchSource = Literal["database", "external"]
Confidence = Literal["exact", "fuzzy", "none"]


class Brand(BaseModel):
    """A dictionary entry normalized to a display name."""
    name: str = Field(..., min_length=1)
    raw: Any = None  # Original entry as loaded (string or mapping)


class MatchOutcome(BaseModel):
    """Result of resolving a candidate word against the brand dictionary."""
    confidence: Confidence
    brand: Optional[Brand] = None
    distance: Optional[int] = Field(None, ge=0)


class LookupResult(BaseModel):
    """Result of an external existence check."""
    exists: bool = False
    canonical_title: Optional[str] = None
    error: Optional[str] = None


class ValidationResult(BaseModel):
    """Full verdict for one submitted word."""
    valid: bool
    code: Optional[str] = None  # EMPTY_WORD, NOT_A_BRAND, FUZZY_MATCH, WRONG_LETTER
    error: Optional[str] = None
    brand: Optional[str] = None
    suggestion: Optional[str] = None
    source: Optional[MatchSource] = None
    required_letter: Optional[str] = None
