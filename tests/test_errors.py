"""
Unit tests for resolution/errors.py
"""

import pytest

from resolution.errors import (
    EmptyResponseError,
    ErrorClass,
    FatalGenerationError,
    GenerationError,
    ModelUnavailableError,
    classify_error,
    generation_error_for,
)
from resolution.types import ApiRevision


class TestClassifyError:
    """Tests for classify_error."""

    @pytest.mark.parametrize(
        "message",
        [
            "models/gemini-9 is not found for API version v1",
            "Model gemini-1.5-pro-preview is NOT SUPPORTED for generateContent",
            "The requested model does not exist",
        ],
    )
    def test_retryable(self, message):
        assert classify_error(message) is ErrorClass.RETRYABLE

    @pytest.mark.parametrize(
        "message",
        [
            "API key not valid. Please pass a valid API key.",
            "Resource has been exhausted (e.g. check quota).",
            "Invalid JSON payload received.",
            "Gemini request failed: [Errno -2] Name or service not known",
            "Gemini returned an empty response",
            "",
            None,
        ],
    )
    def test_fatal(self, message):
        assert classify_error(message) is ErrorClass.FATAL


class TestGenerationErrorFor:
    """Tests for generation_error_for."""

    def test_not_found_is_retryable(self):
        error = generation_error_for(
            "model not found",
            revision=ApiRevision.PRIMARY,
            model_name="gemini-x",
            status_code=404,
        )
        assert isinstance(error, ModelUnavailableError)
        assert error.retryable is True
        assert error.context() == {
            "revision": "v1",
            "model": "gemini-x",
            "status_code": 404,
        }

    def test_auth_is_fatal(self):
        error = generation_error_for("API key invalid", status_code=400)
        assert isinstance(error, FatalGenerationError)
        assert error.retryable is False
        assert str(error) == "API key invalid"

    def test_empty_response_is_fatal(self):
        error = EmptyResponseError(revision=ApiRevision.SECONDARY, model_name="m")
        assert isinstance(error, FatalGenerationError)
        assert isinstance(error, GenerationError)
        assert error.retryable is False
        assert "empty response" in str(error)
