"""Markdown rendering of verification results for the terminal.

Produces a scannable layout (verdict, explanation, sources, metrics)
that the CLI prints through rich.
"""

from __future__ import annotations

from typing import List, Optional

from claim_verifier.schemas.outputs import Citation, Verdict, VerificationResult

VERDICT_BADGES = {
    Verdict.SUPPORTED: "✅ Supported",
    Verdict.REFUTED: "❌ Refuted",
    Verdict.NOT_ENOUGH_INFO: "❔ Not Enough Info",
}


def _citation_list(citations: List[Citation]) -> str:
    return "\n".join(
        f"{i+1}. **{c.title}** ({c.url})\n   {c.snippet.strip()}"
        for i, c in enumerate(citations)
    )


def render_result_to_markdown(result: VerificationResult, elapsed_seconds: Optional[float] = None) -> str:
    """
    Sections separated by one blank line:
      - Claim
      - Verdict badge
      - Explanation
      - Sources (numbered) or N/A
      - Metrics (when elapsed_seconds is given)
    """
    blocks = [
        f"**Claim**\n> {result.transcript}",
        f"**Verdict**\n{VERDICT_BADGES[result.verdict]}",
        f"**Explanation**\n{result.explanation.strip()}",
    ]

    if result.citations:
        blocks.append("**Sources**\n" + _citation_list(result.citations))
    else:
        blocks.append("**Sources**\n- **N/A**")

    if elapsed_seconds is not None:
        blocks.append(
            "**Metrics**\n"
            f"- Processing time: {elapsed_seconds:.2f}s\n"
            f"- Confidence: {round(result.confidence * 100)}%\n"
            f"- Sources found: {len(result.citations)}"
        )

    return "\n\n".join(blocks)
