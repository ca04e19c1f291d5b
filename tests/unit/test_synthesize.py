import json

import pytest

from claim_verifier.errors import LLMCallError, SynthesisError
from claim_verifier.llm.synthesize import TOOL_NAME, VERIFY_TOOL, build_messages, synthesize
from claim_verifier.schemas.evidence import EvidenceItem
from claim_verifier.schemas.outputs import Verdict
from conftest import FakeLLM


@pytest.fixture
def evidence():
    return [
        EvidenceItem(index=0, title="Solar System", snippet="s0", content="Earth orbits the Sun.", url="https://en.wikipedia.org/?curid=123"),
        EvidenceItem(index=1, title="Heliocentrism", snippet="s1", content="The Sun is at the center.", url="https://en.wikipedia.org/?curid=456"),
    ]


def _args(**overrides):
    args = {
        "verdict": "Supported",
        "explanation": "Evidence [0] says so.",
        "confidence": 0.9,
        "relevant_citations": [0, 1],
    }
    args.update(overrides)
    return args


def test_user_message_lists_evidence_in_index_order(evidence):
    """
    WHY: The index printed next to each evidence item is the only link the model has back to evidence.
    HOW: Build messages for two evidence items.
    EXPECTED: [0] precedes [1], each with title, content and url; the claim and tool name are present.
    """
    system, user = build_messages("The Earth orbits the Sun", evidence, "en")

    assert system["role"] == "system"
    assert "Supported" in system["content"] and "Not Enough Info" in system["content"]
    assert user["role"] == "user"
    assert 'Claim: "The Earth orbits the Sun"' in user["content"]
    assert TOOL_NAME in user["content"]

    first = user["content"].index("[0] Solar System")
    second = user["content"].index("[1] Heliocentrism")
    assert first < second
    assert "Earth orbits the Sun." in user["content"]
    assert "URL: https://en.wikipedia.org/?curid=456" in user["content"]


def test_language_specific_and_fallback_templates(evidence):
    _, user_ar = build_messages("claim", evidence, "ar")
    assert "الادعاء" in user_ar["content"]
    assert "الرابط: https://en.wikipedia.org/?curid=123" in user_ar["content"]

    _, user_he = build_messages("claim", evidence, "he")
    assert "טענה" in user_he["content"]

    # Unrecognized language codes use the default (English) profile
    assert build_messages("claim", evidence, "fr") == build_messages("claim", evidence, "en")


def test_claim_with_braces_is_rendered_verbatim():
    _, user = build_messages("Set {x} is empty", [], "en")
    assert 'Claim: "Set {x} is empty"' in user["content"]


def test_tool_schema_matches_verdict_payload():
    params = VERIFY_TOOL["function"]["parameters"]
    assert VERIFY_TOOL["function"]["name"] == TOOL_NAME
    assert params["properties"]["verdict"]["enum"] == ["Supported", "Refuted", "Not Enough Info"]
    assert set(params["required"]) == {"verdict", "explanation", "confidence", "relevant_citations"}


@pytest.mark.asyncio
async def test_synthesize_parses_tool_arguments(evidence):
    llm = FakeLLM(tool_arguments=_args())
    payload = await synthesize("The Earth orbits the Sun", evidence, "en", llm, model="m")

    assert payload.verdict == Verdict.SUPPORTED
    assert payload.confidence == 0.9
    assert payload.relevant_citations == [0, 1]

    call = llm.tool_calls[0]
    assert call["tool"] is VERIFY_TOOL
    assert call["model"] == "m"


@pytest.mark.asyncio
async def test_synthesize_with_zero_evidence_still_calls_model():
    """
    WHY: An empty search must still produce a verdict (typically Not Enough Info).
    HOW: Synthesize with [] evidence.
    EXPECTED: The model is invoked once and the payload is returned with no citations.
    """
    llm = FakeLLM(tool_arguments=_args(verdict="Not Enough Info", confidence=0.3, relevant_citations=[]))
    payload = await synthesize("The sky is green", [], "en", llm, model="m")

    assert len(llm.tool_calls) == 1
    assert "(no evidence found)" in llm.tool_calls[0]["messages"][1]["content"]
    assert payload.verdict == Verdict.NOT_ENOUGH_INFO
    assert payload.relevant_citations == []


@pytest.mark.asyncio
async def test_synthesize_is_deterministic_for_deterministic_model(evidence):
    llm = FakeLLM(tool_arguments=_args())
    first = await synthesize("claim", evidence, "en", llm, model="m")
    second = await synthesize("claim", evidence, "en", llm, model="m")

    assert first == second
    assert llm.tool_calls[0]["messages"] == llm.tool_calls[1]["messages"]


@pytest.mark.asyncio
@pytest.mark.parametrize("tool_arguments, message", [
    (None, "No tool call"),
    ("{not json", "invalid verdict"),
    (json.dumps(_args(verdict="Maybe")), "invalid verdict"),
    (json.dumps(_args(confidence=1.5)), "invalid verdict"),
    (json.dumps({"verdict": "Supported"}), "invalid verdict"),
    (json.dumps(_args(relevant_citations=[0, 2])), "invalid verdict"),
    (json.dumps(_args(relevant_citations=[-1])), "invalid verdict"),
    (json.dumps({"verdict": "Supported", "explanation": "x", "confidence": 0.9}), "invalid verdict"),
    (json.dumps(_args(confidence=True)), "invalid verdict"),
    (json.dumps(_args(confidence="0.9")), "invalid verdict"),
    (json.dumps(_args(relevant_citations=["0"])), "invalid verdict"),
])
async def test_synthesize_rejects_bad_tool_output(evidence, tool_arguments, message):
    """
    WHY: Tool output is untrusted; anything off-contract must abort the request.
    HOW: Feed missing tool calls, broken JSON, bad enum, out-of-range confidence, missing fields, coerced types and bad indices.
    EXPECTED: SynthesisError every time.
    """
    llm = FakeLLM(tool_arguments=tool_arguments)
    with pytest.raises(SynthesisError, match=message):
        await synthesize("claim", evidence, "en", llm, model="m")


@pytest.mark.asyncio
async def test_synthesize_wraps_upstream_failure(evidence):
    llm = FakeLLM(tool_arguments=LLMCallError("AI request failed: 429", status_code=429))
    with pytest.raises(SynthesisError, match="429"):
        await synthesize("claim", evidence, "en", llm, model="m")
    assert len(llm.tool_calls) == 1
