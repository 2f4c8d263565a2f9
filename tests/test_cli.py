"""
Tests for the command line entry point.
"""

from unittest.mock import patch

import httpx
import pytest

import cli
from providers.gemini_provider import GeminiProvider

GENERATE_ARGS = [
    "generate",
    "--project",
    "Pitchly",
    "--problem",
    "Demo scripts take hours to write.",
    "--solution",
    "Generate a spoken script.",
    "--tech-stack",
    "Flask and Gemini",
    "--target-users",
    "hackathon teams",
]


def mock_provider(handler):
    def _build(settings):
        client = httpx.AsyncClient(
            base_url=settings.base_url, transport=httpx.MockTransport(handler)
        )
        return GeminiProvider(base_url=settings.base_url, http_client=client)

    return _build


@pytest.fixture(autouse=True)
def no_env_key(monkeypatch):
    for var in ("GEMINI_API_KEY", "GOOGLE_API_KEY", "DEFAULT_MODEL"):
        monkeypatch.delenv(var, raising=False)
        monkeypatch.delenv(f"{var}_FILE", raising=False)


def test_generate_prints_script(capsys):
    def handler(request):
        return httpx.Response(
            200, json={"candidates": [{"content": {"parts": [{"text": "Hi judges"}]}}]}
        )

    with patch.object(cli, "build_provider", mock_provider(handler)):
        code = cli.main(["--api-key", "key"] + GENERATE_ARGS)

    out = capsys.readouterr()
    assert code == 0
    assert out.out.startswith("Hi judges")
    assert "[2 words" in out.out
    assert "Success! Script generated via gemini-1.5-flash." in out.err


def test_generate_without_key_prints_fallback(capsys):
    def handler(request):
        raise AssertionError("no request expected")

    with patch.object(cli, "build_provider", mock_provider(handler)):
        code = cli.main(GENERATE_ARGS)

    out = capsys.readouterr()
    assert code == 1
    assert out.out.startswith("Introduction")
    assert "no Gemini API key found" in out.err


def test_models_lists_catalog(capsys):
    def handler(request):
        return httpx.Response(
            200, json={"models": [{"name": "models/gemini-1.5-flash-001"}]}
        )

    with patch.object(cli, "build_provider", mock_provider(handler)):
        code = cli.main(["--api-key", "key", "models", "--revision", "v1beta"])

    assert code == 0
    assert capsys.readouterr().out.strip() == "gemini-1.5-flash-001"


def test_models_without_key():
    assert cli.main(["models"]) == 2


def test_api_key_after_subcommand(capsys):
    def handler(request):
        assert request.url.params.get("key") == "late-key"
        return httpx.Response(
            200, json={"candidates": [{"content": {"parts": [{"text": "Hi judges"}]}}]}
        )

    with patch.object(cli, "build_provider", mock_provider(handler)):
        code = cli.main(GENERATE_ARGS + ["--api-key", "late-key"])

    assert code == 0
    assert capsys.readouterr().out.startswith("Hi judges")


class TestParser:
    def test_shared_options_before_subcommand(self):
        args = cli.build_parser().parse_args(
            ["--api-key", "k", "--verbose", "models"]
        )
        assert args.api_key == "k"
        assert args.verbose is True

    def test_shared_options_after_subcommand(self):
        args = cli.build_parser().parse_args(
            ["models", "--api-key", "k", "--verbose"]
        )
        assert args.api_key == "k"
        assert args.verbose is True

    def test_shared_option_defaults(self):
        args = cli.build_parser().parse_args(["models"])
        assert args.api_key is None
        assert args.verbose is False
