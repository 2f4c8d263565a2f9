"""
Google Gemini provider.

Talks to the Generative Language REST API directly with httpx, one call per
(API revision, model name) pair. Failures are raised as classified
GenerationError subclasses carrying the revision and model that failed.
"""

import logging
from typing import Any

import httpx

from resolution.cancellation import CancellationToken
from resolution.errors import (
    CatalogUnavailableError,
    EmptyResponseError,
    FatalGenerationError,
    generation_error_for,
)
from resolution.naming import strip_model_path
from resolution.types import ApiRevision

from .base import GenerativeProvider

logger = logging.getLogger(__name__)

DEFAULT_SAFETY_SETTINGS = [
    {"category": "HARM_CATEGORY_DANGEROUS_CONTENT", "threshold": "BLOCK_NONE"},
]

# Upper bound on catalog pages followed per revision
MAX_CATALOG_PAGES = 20


def extract_error_message(response: httpx.Response, default: str) -> str:
    """Pull `error.message` from a failed response, else the status text."""
    try:
        body = response.json()
    except ValueError:
        body = {}
    message = None
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict):
            message = error.get("message")
    return message or response.reason_phrase or default


def extract_text(data: Any) -> str:
    """
    Join the text parts of the first candidate.

    Raises:
        ValueError: If the body does not have the generateContent shape
    """
    if not isinstance(data, dict):
        raise ValueError("response body is not an object")
    candidates = data.get("candidates") or []
    if not isinstance(candidates, list):
        raise ValueError("candidates is not a list")
    if not candidates:
        return ""
    candidate = candidates[0]
    if not isinstance(candidate, dict):
        raise ValueError("candidate is not an object")
    content = candidate.get("content") or {}
    if not isinstance(content, dict):
        raise ValueError("candidate content is not an object")
    parts = content.get("parts") or []
    if not isinstance(parts, list):
        raise ValueError("content parts is not a list")
    texts = [
        part["text"]
        for part in parts
        if isinstance(part, dict) and isinstance(part.get("text"), str)
    ]
    return "\n".join(texts).strip()


class GeminiProvider(GenerativeProvider):
    """Provider for Google Gemini generate-content and model listing."""

    name = "gemini"

    def __init__(
        self,
        base_url: str = "https://generativelanguage.googleapis.com",
        timeout: float = 60.0,
        safety_settings: list[dict] | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize the provider.

        Args:
            base_url: API root, without the revision segment
            timeout: Per-request timeout in seconds
            safety_settings: safetySettings sent with every generate call
            http_client: Optional preconfigured client (tests use a mock transport)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.safety_settings = (
            safety_settings if safety_settings is not None else DEFAULT_SAFETY_SETTINGS
        )
        self._client = http_client

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "GeminiProvider":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def build_request_body(self, prompt: str) -> dict:
        """Build the generateContent request body."""
        return {
            "contents": [
                {
                    "role": "user",
                    "parts": [{"text": prompt}],
                }
            ],
            "safetySettings": list(self.safety_settings),
        }

    async def generate_content(
        self,
        prompt: str,
        revision: ApiRevision,
        model_name: str,
        api_key: str,
        cancel_token: CancellationToken | None = None,
    ) -> str:
        """Execute one generateContent call."""
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()

        client = self._get_client()
        path = f"/{revision.value}/models/{model_name}:generateContent"

        try:
            response = await client.post(
                path,
                params={"key": api_key},
                json=self.build_request_body(prompt),
            )
        except httpx.HTTPError as e:
            raise FatalGenerationError(
                f"Gemini request failed: {e}",
                revision=revision,
                model_name=model_name,
            ) from e

        if cancel_token is not None:
            cancel_token.raise_if_cancelled()

        if response.is_error:
            message = extract_error_message(response, "Gemini request failed")
            raise generation_error_for(
                message,
                revision=revision,
                model_name=model_name,
                status_code=response.status_code,
            )

        try:
            text = extract_text(response.json())
        except ValueError as e:
            # json.JSONDecodeError is a ValueError too
            raise FatalGenerationError(
                "Gemini returned a malformed response",
                revision=revision,
                model_name=model_name,
                status_code=response.status_code,
            ) from e

        if not text:
            raise EmptyResponseError(
                revision=revision,
                model_name=model_name,
                status_code=response.status_code,
            )
        return text

    async def list_models(self, revision: ApiRevision, api_key: str) -> list[str]:
        """Fetch every model name exposed for a revision, following pages."""
        client = self._get_client()
        names: list[str] = []
        page_token = None

        for _ in range(MAX_CATALOG_PAGES):
            params = {"key": api_key}
            if page_token:
                params["pageToken"] = page_token
            try:
                response = await client.get(f"/{revision.value}/models", params=params)
            except httpx.HTTPError as e:
                raise CatalogUnavailableError(
                    f"Gemini model listing failed: {e}", revision=revision
                ) from e

            if response.is_error:
                raise CatalogUnavailableError(
                    extract_error_message(response, "Gemini model listing failed"),
                    revision=revision,
                )

            try:
                data = response.json()
            except ValueError as e:
                raise CatalogUnavailableError(
                    "Gemini model listing returned malformed JSON", revision=revision
                ) from e

            models = (data.get("models") or []) if isinstance(data, dict) else None
            if not isinstance(models, list):
                raise CatalogUnavailableError(
                    "Gemini model listing returned a malformed response",
                    revision=revision,
                )

            for entry in models:
                name = entry.get("name") if isinstance(entry, dict) else None
                if isinstance(name, str) and name:
                    names.append(strip_model_path(name))

            page_token = data.get("nextPageToken")
            if not page_token:
                break
        else:
            logger.warning(
                f"Stopped listing {revision.value} models after {MAX_CATALOG_PAGES} pages"
            )

        logger.debug(f"Listed {len(names)} models for {revision.value}")
        return names
