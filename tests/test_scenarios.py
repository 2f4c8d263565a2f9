"""
End-to-end resolution scenarios against a mocked Gemini HTTP API.

These drive the real GeminiProvider through httpx.MockTransport, so they
cover the wire format, error classification and the retry loop together.
"""

import asyncio

import httpx

from providers.gemini_provider import GeminiProvider
from resolution.loop import ModelResolver
from resolution.types import (
    ApiRevision,
    ResolutionFailure,
    ResolutionResult,
    ResolutionState,
)

BASE_URL = "https://gemini.test"


class FakeGeminiApi:
    """Routes requests to scripted responses and records them."""

    def __init__(self, generate=None, catalogs=None):
        # (revision, model) -> (status, json)
        self.generate = generate or {}
        # revision -> list of names (without "models/")
        self.catalogs = catalogs or {}
        self.generate_calls = []
        self.list_calls = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        segments = request.url.path.strip("/").split("/")
        revision = segments[0]
        if request.method == "GET" and segments[1:] == ["models"]:
            self.list_calls.append(revision)
            if revision not in self.catalogs:
                return httpx.Response(500, json={"error": {"message": "backend error"}})
            return httpx.Response(
                200,
                json={"models": [{"name": f"models/{n}"} for n in self.catalogs[revision]]},
            )

        model = segments[2].split(":", 1)[0]
        self.generate_calls.append((revision, model))
        status, body = self.generate.get(
            (revision, model),
            (
                404,
                {
                    "error": {
                        "code": 404,
                        "message": f"models/{model} is not found for API version "
                        f"{revision}, or is not supported for generateContent.",
                        "status": "NOT_FOUND",
                    }
                },
            ),
        )
        return httpx.Response(status, json=body)


def make_resolver(api: FakeGeminiApi) -> ModelResolver:
    client = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(api))
    return ModelResolver(GeminiProvider(base_url=BASE_URL, http_client=client))


def ok(text):
    return 200, {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def test_latest_alias_resolves_on_primary():
    api = FakeGeminiApi(generate={("v1", "gemini-1.5-pro"): ok("Hello judges")})
    resolver = make_resolver(api)

    result = asyncio.run(
        resolver.resolve_and_generate("prompt", "key", "gemini-1.5-pro-latest")
    )

    assert isinstance(result, ResolutionResult)
    assert result.revision is ApiRevision.PRIMARY
    assert result.model_name == "gemini-1.5-pro"
    assert result.text == "Hello judges"
    assert api.generate_calls == [
        ("v1", "gemini-1.5-pro-latest"),
        ("v1", "gemini-1.5-pro"),
    ]


def test_invalid_key_aborts_after_one_call():
    api = FakeGeminiApi(
        generate={
            ("v1", "gemini-1.5-flash"): (
                400,
                {"error": {"code": 400, "message": "API key invalid"}},
            )
        }
    )
    resolver = make_resolver(api)

    result = asyncio.run(
        resolver.resolve_and_generate("prompt", "bad-key", "gemini-1.5-flash")
    )

    assert isinstance(result, ResolutionFailure)
    assert result.state is ResolutionState.FATAL_ABORTED
    assert result.message == "API key invalid"
    assert len(api.generate_calls) == 1
    assert api.list_calls == []


def test_exhaustion_suggests_from_primary_catalog_only():
    api = FakeGeminiApi(
        catalogs={
            "v1": ["gemini-1.5-flash-001", "gemini-1.5-flash-002"],
            "v1beta": ["gemini-1.5-flash-8b"],
        }
    )
    resolver = make_resolver(api)

    result = asyncio.run(
        resolver.resolve_and_generate("prompt", "key", "gemini-1.5-flash-preview")
    )

    assert isinstance(result, ResolutionFailure)
    assert result.state is ResolutionState.EXHAUSTED
    assert result.suggested_names == ["gemini-1.5-flash-001", "gemini-1.5-flash-002"]
    assert api.list_calls == ["v1"]
    revisions = [revision for revision, _ in api.generate_calls]
    assert revisions == sorted(revisions, key=["v1", "v1beta"].index)


def test_catalog_failure_degrades_to_no_suggestions():
    api = FakeGeminiApi()
    resolver = make_resolver(api)

    result = asyncio.run(resolver.resolve_and_generate("prompt", "key", "nope"))

    assert result.state is ResolutionState.EXHAUSTED
    assert result.suggested_names == []
    assert "not found" in result.message
    assert api.list_calls == ["v1", "v1beta"]
