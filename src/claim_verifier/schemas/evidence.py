"""Pydantic schemas for evidence and retrieval data.

Defines SearchHit (raw ranked search result) and EvidenceItem
(normalized, indexed evidence handed to the synthesizer).
"""

from pydantic import BaseModel, ConfigDict, Field

class SearchHit(BaseModel):
    title: str
    snippet: str = ""  # raw, may contain markup
    page_id: int
    rank: int

class EvidenceItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int = Field(..., ge=0)
    title: str
    snippet: str
    content: str
    url: str
