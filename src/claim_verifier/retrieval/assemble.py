import asyncio
import html
import re
from typing import List, Sequence

from ..errors import RetrievalError
from ..log import get_logger
from ..schemas.evidence import EvidenceItem, SearchHit
from .wikipedia import EvidenceSource

logger = get_logger("assemble")

_TAG_RE = re.compile(r"<[^>]*>")

def strip_markup(text: str) -> str:
    """
    Removes HTML tags (search snippets wrap matches in <span class="searchmatch">)
    and decodes entities such as &quot;.
    """
    return html.unescape(_TAG_RE.sub("", text or ""))

async def _content_or_empty(source: EvidenceSource, hit: SearchHit, language: str) -> str:
    try:
        return await source.fetch_content(hit.page_id, language)
    except RetrievalError as e:
        logger.warning(f"Content fetch failed for page {hit.page_id} ({hit.title!r}): {e}")
        return ""

async def assemble_evidence(
    hits: Sequence[SearchHit],
    source: EvidenceSource,
    language: str,
    limit: int,
    max_chars: int,
) -> List[EvidenceItem]:
    """
    Turns ranked search hits into indexed evidence.

    Content for the top `limit` hits is fetched concurrently; a failed fetch
    degrades to empty content. Index i always refers to the (i+1)-th ranked hit.
    """
    selected = list(hits)[:limit]
    if not selected:
        return []

    contents = await asyncio.gather(
        *(_content_or_empty(source, hit, language) for hit in selected)
    )

    return [
        EvidenceItem(
            index=index,
            title=hit.title,
            snippet=strip_markup(hit.snippet),
            content=content[:max_chars],
            url=source.page_url(hit.page_id, language),
        )
        for index, (hit, content) in enumerate(zip(selected, contents))
    ]
