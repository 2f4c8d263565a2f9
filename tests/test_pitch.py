"""
Tests for the pitch package: form context, templates, timing and the
script service.
"""

import asyncio

import pytest

from config import DEFAULT_HACKATHON
from pitch.context import PitchContext, build_fallback_script, build_prompt
from pitch.service import SOURCE_FALLBACK, SOURCE_GEMINI, ScriptService
from pitch.timing import estimate_speaking_time
from resolution.cancellation import CancellationToken
from resolution.errors import FatalGenerationError, ResolutionCancelled
from resolution.loop import ModelResolver
from resolution.types import ApiRevision
from tests.fixtures.mock_provider import MockProvider

FORM = {
    "projectName": " Pitchly ",
    "problem": "Demo scripts take hours to write.",
    "solution": "Generate a spoken script from five fields.",
    "techStack": "Flask, httpx and Gemini",
    "targetUsers": "first-time hackathon teams",
    "hackathonName": "",
}


@pytest.fixture
def context():
    return PitchContext.from_form(FORM)


class TestPitchContext:
    def test_fields_trimmed_and_defaulted(self, context):
        assert context.project_name == "Pitchly"
        assert context.hackathon_name == DEFAULT_HACKATHON

    def test_custom_hackathon(self):
        ctx = PitchContext.from_form({**FORM, "hackathonName": " HackMIT "})
        assert ctx.hackathon_name == "HackMIT"

    def test_missing_required_field(self):
        with pytest.raises(ValueError, match="problem"):
            PitchContext.from_form({**FORM, "problem": "  "})


class TestTemplates:
    def test_prompt_contains_fields(self, context):
        prompt = build_prompt(context)
        assert prompt.startswith("You are a confident hackathon presenter")
        assert f"the {DEFAULT_HACKATHON} demo stage" in prompt
        assert "Project: Pitchly" in prompt
        assert "Tech Stack: Flask, httpx and Gemini" in prompt
        assert "Target Users: first-time hackathon teams" in prompt
        assert (
            "Introduction, Problem, Solution Walkthrough, Tech Stack, "
            "What We Learned, Closing Invitation" in prompt
        )
        assert "around 2 minutes" in prompt

    def test_fallback_script_sections(self, context):
        script = build_fallback_script(context)
        assert script.startswith("Introduction\nHi everyone at DemoPitch AI Hackathon")
        assert "Problem\nDemo scripts take hours to write." in script
        assert "Under the hood we combined Flask, httpx and Gemini." in script
        assert "listen to first-time hackathon teams" in script
        assert script.endswith("try it firsthand.")


class TestSpeakingTime:
    def test_short_script(self):
        timing = estimate_speaking_time("one two three")
        assert timing.words == 3
        assert timing.over_limit is False
        assert timing.label == "3 words · ~0.0 min"

    def test_over_limit(self):
        timing = estimate_speaking_time(" ".join(["word"] * 300))
        assert timing.over_limit is True
        assert round(timing.minutes, 1) == 2.3

    def test_just_under_tolerance_not_flagged(self):
        timing = estimate_speaking_time(" ".join(["word"] * 280))
        assert timing.over_limit is False


class TestScriptService:
    def test_success(self, context):
        provider = MockProvider(
            responses={(ApiRevision.PRIMARY, "gemini-1.5-flash"): "Hello judges"}
        )
        service = ScriptService(ModelResolver(provider))

        script = asyncio.run(service.generate(context, "key", "gemini-1.5-flash"))

        assert script.source == SOURCE_GEMINI
        assert script.text == "Hello judges"
        assert script.status == "Success! Script generated via gemini-1.5-flash."
        assert script.resolved_model == "gemini-1.5-flash"
        assert script.revision == "v1"
        assert script.timing.words == 2

    def test_default_api_key_used(self, context):
        provider = MockProvider(
            responses={(ApiRevision.PRIMARY, "gemini-1.5-flash"): "Hello"}
        )
        service = ScriptService(ModelResolver(provider), default_api_key="env-key")

        script = asyncio.run(service.generate(context, "", "gemini-1.5-flash"))
        assert script.source == SOURCE_GEMINI

    def test_missing_key_uses_fallback(self, context):
        provider = MockProvider()
        service = ScriptService(ModelResolver(provider))

        script = asyncio.run(service.generate(context, None, "gemini-1.5-flash"))

        assert script.used_fallback is True
        assert script.text == build_fallback_script(context)
        assert script.status.startswith(
            "Using the offline template because: no Gemini API key found."
        )
        assert provider.generate_calls == []

    def test_fatal_failure_uses_fallback(self, context):
        provider = MockProvider(
            responses={
                (ApiRevision.PRIMARY, "gemini-1.5-flash"): FatalGenerationError(
                    "Quota exceeded"
                )
            }
        )
        service = ScriptService(ModelResolver(provider))

        script = asyncio.run(service.generate(context, "key", "gemini-1.5-flash"))

        assert script.source == SOURCE_FALLBACK
        assert script.status == "Using the offline template because: Quota exceeded."

    def test_exhausted_failure_carries_suggestions(self, context):
        provider = MockProvider(
            catalogs={ApiRevision.PRIMARY: ["gemini-1.5-flash-002"]}
        )
        service = ScriptService(ModelResolver(provider))

        script = asyncio.run(service.generate(context, "key", "gemini-1.5-flash"))

        assert script.used_fallback is True
        assert script.suggested_models == ["gemini-1.5-flash-002"]
        assert "gemini-1.5-flash-002" in script.status

    def test_no_model_uses_fallback(self, context):
        provider = MockProvider()
        service = ScriptService(ModelResolver(provider))

        script = asyncio.run(service.generate(context, "key", None))

        assert script.used_fallback is True
        assert "no Gemini model requested" in script.status
        assert provider.generate_calls == []

    def test_cancelled_propagates(self, context):
        token = CancellationToken()
        token.cancel()
        service = ScriptService(ModelResolver(MockProvider()))

        with pytest.raises(ResolutionCancelled):
            asyncio.run(
                service.generate(context, "key", "gemini-1.5-flash", cancel_token=token)
            )
