from typing import Optional

import httpx

from ..config import Settings, get_settings
from ..llm.client import ChatModel, LLMClient
from ..llm.localize import localize
from ..llm.prompts import DEFAULT_LANGUAGE
from ..llm.synthesize import synthesize
from ..log import get_logger
from ..mlops.tracing import tracer
from ..retrieval.assemble import assemble_evidence
from ..retrieval.wikipedia import WikipediaClient
from ..schemas.outputs import VerificationResult
from .citations import map_citations

logger = get_logger("pipeline")

class ClaimVerifier:
    """
    Retrieval -> assembly -> synthesis -> (optional) localization -> citation mapping.
    Holds no per-request state; every verify() call opens its own HTTP client.
    """

    def __init__(
        self,
        llm: ChatModel,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.llm = llm
        self.settings = settings or get_settings()
        self.transport = transport

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "ClaimVerifier":
        """Raises ConfigurationError when the LLM credentials are missing."""
        settings = settings or get_settings()
        return cls(LLMClient.from_settings(settings), settings)

    async def aclose(self) -> None:
        await self.llm.aclose()

    def _http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.settings.HTTP_TIMEOUT_SECONDS,
            follow_redirects=True,
            headers={"User-Agent": self.settings.WIKI_USER_AGENT},
            limits=httpx.Limits(max_connections=self.settings.SEARCH_LIMIT + 2),
            transport=self.transport,
        )

    async def verify(self, claim: str, language: Optional[str] = None) -> VerificationResult:
        language = language or DEFAULT_LANGUAGE.value
        settings = self.settings
        logger.info(f"Verifying claim: {claim!r} (language: {language})")

        # 1. Evidence
        async with self._http_client() as http:
            source = WikipediaClient(http, settings)
            with tracer.span("retrieval.evidence", span_type="RETRIEVER", inputs={"claim": claim, "language": language}):
                hits = await source.search(claim, language, settings.SEARCH_LIMIT)
                evidence = await assemble_evidence(
                    hits,
                    source,
                    language,
                    limit=settings.SEARCH_LIMIT,
                    max_chars=settings.CONTENT_MAX_CHARS,
                )
                tracer.trace_retrieval(
                    language=language,
                    hit_count=len(hits),
                    evidence_count=len(evidence),
                    empty_content_count=sum(1 for e in evidence if not e.content),
                )
        logger.info(f"Assembled {len(evidence)} evidence items")

        # 2. Verdict
        with tracer.span("synthesis.verdict", span_type="LLM", attributes={"model": settings.MODEL_VERDICT}):
            payload = await synthesize(claim, evidence, language, self.llm, model=settings.MODEL_VERDICT)

        # 3. Translation (no-op for the default language)
        with tracer.span("localization.explanation", span_type="LLM", attributes={"model": settings.MODEL_TRANSLATION}):
            payload = await localize(payload, language, self.llm, model=settings.MODEL_TRANSLATION)

        # 4. Citations
        citations = map_citations(payload, evidence)

        return VerificationResult(
            transcript=claim,
            verdict=payload.verdict,
            explanation=payload.explanation,
            confidence=payload.confidence,
            citations=citations,
        )
