"""External brand existence check backed by the Wikipedia search API.

Used only when the local dictionary has no match at all. Every failure
(network error, timeout, non-2xx status, malformed payload) is reported as
"does not exist" so callers never have to handle exceptions from here.
"""

import asyncio
import logging
from typing import Any, List, Optional

import requests

from .models import LookupResult

logger = logging.getLogger(__name__)


WIKIPEDIA_API_URL = "https://en.wikipedia.org/w/api.php"
DEFAULT_LIMIT = 5
DEFAULT_TIMEOUT = 5.0  # seconds
USER_AGENT = "brandchain/0.1 (word chain brand game)"


def _titles_match(title: str, term: str) -> bool:
    """Accept exact or substring matches in either direction, ignoring case."""
    title = title.lower()
    term = term.lower()
    return title == term or term in title or title in term


def match_title(term: str, titles: List[str]) -> Optional[str]:
    """Return the first title accepted for `term`, or None."""
    for title in titles:
        if isinstance(title, str) and title and _titles_match(title, term):
            return title
    return None


def _extract_titles(data: Any) -> Optional[List[str]]:
    """Pull result titles out of a search response; None if the shape is wrong."""
    if not isinstance(data, dict):
        return None
    query = data.get("query")
    if not isinstance(query, dict):
        return None
    results = query.get("search")
    if not isinstance(results, list):
        return None
    return [r.get("title") for r in results if isinstance(r, dict)]


def lookup_exists(
    term: str,
    endpoint: str = WIKIPEDIA_API_URL,
    limit: int = DEFAULT_LIMIT,
    timeout: float = DEFAULT_TIMEOUT,
) -> LookupResult:
    """
    Check whether `term` names something known to the external source.

    Args:
        term: Brand name to look up
        endpoint: Search API URL
        limit: Maximum number of search results to request
        timeout: Request timeout in seconds

    Returns:
        LookupResult; `exists` is False on any failure, with `error` set
    """
    if not term or not isinstance(term, str) or not term.strip():
        return LookupResult(exists=False, error="Invalid brand name")

    search_term = term.strip()
    params = {
        "action": "query",
        "list": "search",
        "srsearch": search_term,
        "format": "json",
        "srlimit": str(limit),
    }

    try:
        response = requests.get(
            endpoint,
            params=params,
            headers={"User-Agent": USER_AGENT},
            timeout=timeout,
        )
    except requests.RequestException as e:
        logger.warning(f"Brand lookup failed for '{search_term}': {e}")
        return LookupResult(exists=False, error="Network error")

    if not response.ok:
        logger.warning(f"Brand lookup for '{search_term}' returned HTTP {response.status_code}")
        return LookupResult(exists=False, error="Lookup request failed")

    try:
        data = response.json()
    except ValueError:
        logger.warning(f"Brand lookup for '{search_term}' returned malformed JSON")
        return LookupResult(exists=False, error="Malformed response")

    titles = _extract_titles(data)
    if titles is None:
        return LookupResult(exists=False, error="No results found")

    title = match_title(search_term, titles)
    if title is None:
        logger.debug(f"No matching title for '{search_term}' in {titles}")
        return LookupResult(exists=False)

    return LookupResult(exists=True, canonical_title=title)


async def lookup_exists_async(
    term: str,
    endpoint: str = WIKIPEDIA_API_URL,
    limit: int = DEFAULT_LIMIT,
    timeout: float = DEFAULT_TIMEOUT,
) -> LookupResult:
    """Run `lookup_exists` in a worker thread, bounded by `timeout`."""
    try:
        return await asyncio.wait_for(
            asyncio.to_thread(lookup_exists, term, endpoint, limit, timeout),
            timeout=timeout,
        )
    except asyncio.TimeoutError:
        logger.warning(f"Brand lookup for '{term}' timed out after {timeout}s")
        return LookupResult(exists=False, error="Lookup timed out")
