"""Verdict synthesis through a forced tool call.

Builds the language-keyed system/user prompt pair, forces the model to call
`verify_claim_with_evidence`, and validates the call's arguments as a
VerdictPayload. The tool output is treated like any untrusted wire payload.
"""

from typing import List, Sequence

from pydantic import ValidationError

from ..errors import LLMCallError, SynthesisError
from ..log import get_logger
from ..schemas.evidence import EvidenceItem
from ..schemas.outputs import Verdict, VerdictPayload
from .client import ChatModel, Message
from .prompts import LanguageProfile, get_profile

logger = get_logger("synthesize")

TOOL_NAME = "verify_claim_with_evidence"

VERIFY_TOOL = {
    "type": "function",
    "function": {
        "name": TOOL_NAME,
        "description": (
            "Verify a claim based on provided evidence and determine if it's "
            "Supported, Refuted, or if there's Not Enough Info"
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "verdict": {
                    "type": "string",
                    "enum": [v.value for v in Verdict],
                    "description": "The verification verdict",
                },
                "explanation": {
                    "type": "string",
                    "description": "A clear explanation of why the claim has this verdict, citing specific evidence",
                },
                "confidence": {
                    "type": "number",
                    "description": "Confidence score between 0 and 1",
                },
                "relevant_citations": {
                    "type": "array",
                    "items": {"type": "integer"},
                    "description": "Indices of the most relevant evidence items (0-based)",
                },
            },
            "required": ["verdict", "explanation", "confidence", "relevant_citations"],
        },
    },
}


def render_evidence(evidence: Sequence[EvidenceItem], profile: LanguageProfile) -> str:
    if not evidence:
        return profile.no_evidence
    return "\n\n".join(
        profile.evidence_template.format(
            index=item.index,
            title=item.title,
            content=item.content,
            url=item.url,
        )
        for item in evidence
    )


def build_messages(claim: str, evidence: Sequence[EvidenceItem], language: str) -> List[Message]:
    profile = get_profile(language)
    user_message = profile.user_template.format(
        claim=claim,
        evidence=render_evidence(evidence, profile),
        tool_name=TOOL_NAME,
    )
    return [
        {"role": "system", "content": profile.system_prompt},
        {"role": "user", "content": user_message},
    ]


async def synthesize(
    claim: str,
    evidence: Sequence[EvidenceItem],
    language: str,
    llm: ChatModel,
    model: str,
) -> VerdictPayload:
    """
    Asks the model for a verdict over `evidence` and returns the validated payload.

    Raises:
        SynthesisError: the call failed, no tool call came back, or its
            arguments are not a valid VerdictPayload for this evidence list.
    """
    messages = build_messages(claim, evidence, language)

    try:
        arguments = await llm.call_tool(messages, VERIFY_TOOL, model=model)
    except LLMCallError as e:
        raise SynthesisError(f"AI verification failed: {e}") from e

    if arguments is None:
        raise SynthesisError("No tool call in AI response")

    try:
        payload = VerdictPayload.model_validate_json(
            arguments, context={"evidence_count": len(evidence)}
        )
    except ValidationError as e:
        logger.error(f"Rejected verdict arguments: {e}")
        raise SynthesisError(f"AI returned an invalid verdict ({e.error_count()} validation errors)") from e

    logger.info(f"Verdict: {payload.verdict.value} (confidence {payload.confidence:.2f})")
    return payload
