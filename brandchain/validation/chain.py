"""Letter-chain rule: each word starts with the last letter of the previous one."""

import re
from typing import Optional


_PUNCTUATION = re.compile(r'[^\w\s]')


def last_letter(word: str) -> str:
    """
    Return the last significant character of `word`, lowercased.

    Punctuation is stripped, word characters (letters, digits, underscore)
    are kept. Returns an empty string for empty, non-string or
    punctuation-only input.
    """
    if not word or not isinstance(word, str):
        return ""

    cleaned = _PUNCTUATION.sub("", word.strip()).strip()
    if not cleaned:
        return ""

    return cleaned[-1].lower()


def first_letter(word: str) -> str:
    """Return the first character of `word` after leading whitespace, lowercased."""
    if not word or not isinstance(word, str):
        return ""

    trimmed = word.lstrip()
    return trimmed[0].lower() if trimmed else ""


def continues_chain(candidate: str, previous: Optional[str]) -> bool:
    """
    Check whether `candidate` may legally follow `previous`.

    The first move (no previous word) is unconstrained. A previous word with
    no significant characters (e.g. only punctuation) imposes no constraint
    either.
    """
    if not previous or not isinstance(previous, str) or not previous.strip():
        return True

    if not candidate or not isinstance(candidate, str):
        return False

    required = last_letter(previous)
    if not required:
        return True

    return first_letter(candidate) == required
