from typing import List, Sequence

from ..errors import MappingError
from ..schemas.evidence import EvidenceItem
from ..schemas.outputs import Citation, VerdictPayload


def map_citations(payload: VerdictPayload, evidence: Sequence[EvidenceItem]) -> List[Citation]:
    """
    Resolves cited indices into citations, in citation order.
    Every citation carries the payload-level confidence.
    An index outside [0, len(evidence)) rejects the whole mapping.
    """
    citations = []
    for index in payload.relevant_citations:
        if not 0 <= index < len(evidence):
            raise MappingError(
                f"Citation index {index} outside evidence range [0, {len(evidence)})"
            )
        item = evidence[index]
        citations.append(Citation(
            title=item.title,
            snippet=item.snippet,
            url=item.url,
            confidence=payload.confidence,
        ))
    return citations
