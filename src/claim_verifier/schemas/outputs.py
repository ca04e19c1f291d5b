from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class Verdict(str, Enum):
    SUPPORTED = "Supported"
    REFUTED = "Refuted"
    NOT_ENOUGH_INFO = "Not Enough Info"


class VerdictPayload(BaseModel):
    """
    Arguments of the verdict tool call.
    Pass ``context={"evidence_count": n}`` to model_validate* to also check
    that every cited index points into the evidence list.
    Strict: tool arguments are not coerced (no "0.9" or true for numbers).
    """
    model_config = ConfigDict(strict=True)

    verdict: Verdict
    explanation: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    relevant_citations: List[int]

    @field_validator("relevant_citations")
    @classmethod
    def validate_indices(cls, value: List[int], info: ValidationInfo) -> List[int]:
        negative = [i for i in value if i < 0]
        if negative:
            raise ValueError(f"citation indices must be non-negative -> {negative!r}")

        count = (info.context or {}).get("evidence_count")
        if count is not None:
            out_of_range = [i for i in value if i >= count]
            if out_of_range:
                raise ValueError(
                    f"citation indices {out_of_range!r} outside evidence range [0, {count})"
                )
        return value


class Citation(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    snippet: str
    url: str
    confidence: float


class VerificationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    transcript: str
    verdict: Verdict
    explanation: str
    confidence: float
    citations: List[Citation]


class TranscriptionResult(BaseModel):
    text: str
    language: Optional[str] = None
