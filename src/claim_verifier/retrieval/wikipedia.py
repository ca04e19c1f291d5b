"""MediaWiki search and extract client.

Runs full-text search for a claim and fetches the lead-section plain text
of individual pages. Every failure surfaces as RetrievalError.
"""

from typing import Any, Dict, List, Optional, Protocol

import httpx
from pydantic import ValidationError

from ..config import Settings, get_settings
from ..errors import RetrievalError
from ..log import get_logger
from ..schemas.evidence import SearchHit

logger = get_logger("wikipedia")

class EvidenceSource(Protocol):
    async def search(self, claim: str, language: str, limit: int) -> List[SearchHit]:
        ...

    async def fetch_content(self, page_id: int, language: str) -> str:
        ...

    def page_url(self, page_id: int, language: str) -> str:
        ...

class WikipediaClient:
    def __init__(self, http: httpx.AsyncClient, settings: Optional[Settings] = None):
        self.http = http
        self.settings = settings or get_settings()

    def api_url(self, language: str) -> str:
        return self.settings.WIKI_API_URL.format(language=language)

    def page_url(self, page_id: int, language: str) -> str:
        return self.settings.WIKI_PAGE_URL.format(language=language, page_id=page_id)

    async def _query(self, language: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Performs one GET against the API and returns the `query` object.
        Raises RetrievalError on transport errors, non-2xx, bad JSON or API errors.
        """
        url = self.api_url(language)
        try:
            resp = await self.http.get(url, params={**params, "format": "json"})
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise RetrievalError(f"Wikipedia request failed: {e.response.status_code}") from e
        except httpx.RequestError as e:
            raise RetrievalError(f"Wikipedia unreachable: {e}") from e

        try:
            data = resp.json()
        except ValueError as e:
            raise RetrievalError("Wikipedia returned malformed JSON") from e

        if not isinstance(data, dict):
            raise RetrievalError("Wikipedia returned an unexpected payload")
        if "error" in data:
            error = data["error"]
            info = error.get("info") if isinstance(error, dict) else error
            raise RetrievalError(f"Wikipedia API error: {info}")

        query = data.get("query") or {}
        if not isinstance(query, dict):
            raise RetrievalError("Wikipedia returned an unexpected payload")
        return query

    async def search(self, claim: str, language: str, limit: int) -> List[SearchHit]:
        """
        Full-text search. An empty hit list is a valid outcome.
        """
        query = await self._query(language, {
            "action": "query",
            "list": "search",
            "srsearch": claim,
            "srlimit": limit,
            "srprop": "snippet",
        })

        results = query.get("search") or []
        if not isinstance(results, list):
            raise RetrievalError("Malformed search results")

        try:
            hits = [
                SearchHit(
                    title=r["title"],
                    snippet=r.get("snippet") or "",
                    page_id=r["pageid"],
                    rank=rank,
                )
                for rank, r in enumerate(results)
            ]
        except (KeyError, TypeError, AttributeError, ValidationError) as e:
            raise RetrievalError(f"Malformed search result: {e}") from e

        logger.info(f"Found {len(hits)} Wikipedia articles for language '{language}'")
        return hits

    async def fetch_content(self, page_id: int, language: str) -> str:
        """
        Lead-section plain text for a page. Missing extracts yield "".
        """
        query = await self._query(language, {
            "action": "query",
            "pageids": page_id,
            "prop": "extracts",
            "exintro": "true",
            "explaintext": "true",
        })

        pages = query.get("pages") or {}
        page = pages.get(str(page_id)) if isinstance(pages, dict) else None
        extract = page.get("extract") if isinstance(page, dict) else None
        return extract if isinstance(extract, str) else ""
