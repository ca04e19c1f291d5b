import asyncio
import json
import os
from typing import Any, Dict, List, Optional

import httpx
import pytest
from dotenv import load_dotenv

# Settings are read at import time by several modules, so defaults must exist
# before the package is imported. Tracing stays off in tests.
os.environ.setdefault("LLM_API_KEY", "test-llm-key")
os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")
os.environ["MLFLOW_ENABLE_TRACING"] = "false"


@pytest.fixture(scope="session", autouse=True)
def _load_env():
    # Load .env once per session without overriding the test defaults above
    load_dotenv(override=False)

def _truthy(v: str | None) -> bool:
    return v is not None and v.strip().lower() not in ("", "0", "false", "no")

@pytest.fixture(scope="session")
def allow_integration(_load_env) -> bool:
    return _truthy(os.getenv("RUN_INTEGRATION_TESTS"))


class FakeLLM:
    """
    Stand-in for LLMClient. `tool_arguments` may be a JSON string, a dict
    (serialized on use), None (no tool call) or an exception to raise.
    `translation` works the same way for plain completions.
    """

    def __init__(self, tool_arguments: Any = None, translation: Any = ""):
        self.tool_arguments = tool_arguments
        self.translation = translation
        self.tool_calls: List[Dict[str, Any]] = []
        self.completions: List[Dict[str, Any]] = []
        self.closed = False

    async def call_tool(self, messages, tool, model):
        self.tool_calls.append({"messages": messages, "tool": tool, "model": model})
        if isinstance(self.tool_arguments, Exception):
            raise self.tool_arguments
        if isinstance(self.tool_arguments, dict):
            return json.dumps(self.tool_arguments)
        return self.tool_arguments

    async def complete(self, messages, model):
        self.completions.append({"messages": messages, "model": model})
        if isinstance(self.translation, Exception):
            raise self.translation
        return self.translation

    async def aclose(self):
        self.closed = True


def make_wiki_transport(
    search_results: Optional[List[Dict[str, Any]]] = None,
    extracts: Optional[Dict[int, str]] = None,
    search_status: int = 200,
    failing_pages: Optional[set] = None,
    delays: Optional[Dict[int, float]] = None,
    requests: Optional[List[httpx.Request]] = None,
) -> httpx.MockTransport:
    """
    MockTransport emulating the MediaWiki search + extracts API.
    `failing_pages` answer 500; `delays` (seconds) slow down single pages.
    """
    search_results = search_results or []
    extracts = extracts or {}
    failing_pages = failing_pages or set()
    delays = delays or {}

    async def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        params = request.url.params

        if params.get("list") == "search":
            if search_status != 200:
                return httpx.Response(search_status, text="upstream error")
            return httpx.Response(200, json={"query": {"search": search_results}})

        page_id = int(params["pageids"])
        await asyncio.sleep(delays.get(page_id, 0))
        if page_id in failing_pages:
            return httpx.Response(500, text="boom")
        page: Dict[str, Any] = {"pageid": page_id}
        if page_id in extracts:
            page["extract"] = extracts[page_id]
        return httpx.Response(200, json={"query": {"pages": {str(page_id): page}}})

    return httpx.MockTransport(handler)


@pytest.fixture
def fake_llm():
    return FakeLLM(tool_arguments={
        "verdict": "Supported",
        "explanation": "The evidence states that Earth orbits the Sun.",
        "confidence": 0.95,
        "relevant_citations": [0],
    })


@pytest.fixture
def solar_system_transport():
    return make_wiki_transport(
        search_results=[{
            "title": "Solar System",
            "snippet": 'The <span class="searchmatch">Earth</span> orbits the <span class="searchmatch">Sun</span>',
            "pageid": 123,
        }],
        extracts={123: "The Solar System is the gravitationally bound system of the Sun and the objects that orbit it, including Earth."},
    )
