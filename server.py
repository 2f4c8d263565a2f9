#!/usr/bin/env python3
"""
DemoPitch API server.

Generates two-minute hackathon demo scripts with Gemini, resolving whatever
model name the client sends into a spelling and API revision that works, and
falling back to an offline template script when nothing does.

Endpoints:
- POST /api/script   Generate a script from form fields
- GET  /api/models   Cached Gemini model catalog for a revision
- GET  /health       Liveness and version

Resolutions run on a single background event loop so the HTTP client and the
model catalog cache are shared by every request.
"""

import asyncio
import concurrent.futures
import logging
import threading
import time
from typing import Any, Coroutine

from flask import Flask, g, jsonify, request

from config import Settings, configure_logging
from pitch import PitchContext, ScriptService
from providers import GeminiProvider
from providers.base import GenerativeProvider
from resolution import (
    ApiRevision,
    CatalogCache,
    CatalogUnavailableError,
    ModelResolver,
    ResolutionCancelled,
    SupersedingTokens,
)
from version import VERSION

logger = logging.getLogger(__name__)

SESSION_HEADER = "X-Session-Id"
API_KEY_HEADER = "X-Api-Key"


class BackgroundLoop:
    """An asyncio event loop running in a daemon thread."""

    def __init__(self, name: str = "DemoPitch-Loop"):
        self.loop = asyncio.new_event_loop()
        self._thread = threading.Thread(
            target=self._run, daemon=True, name=name
        )
        self._thread.start()

    def _run(self):
        asyncio.set_event_loop(self.loop)
        self.loop.run_forever()

    def run(self, coro: Coroutine, timeout: float | None = None) -> Any:
        """
        Run a coroutine on the loop and block until it finishes.

        Raises:
            concurrent.futures.TimeoutError: If it did not finish within
                timeout seconds; the coroutine is cancelled
        """
        future = asyncio.run_coroutine_threadsafe(coro, self.loop)
        try:
            return future.result(timeout=timeout)
        except concurrent.futures.TimeoutError:
            future.cancel()
            raise

    def stop(self):
        if self.loop.is_running():
            self.loop.call_soon_threadsafe(self.loop.stop)
        self._thread.join(timeout=5)


def create_app(
    settings: Settings | None = None,
    provider: GenerativeProvider | None = None,
) -> Flask:
    """Create the API Flask application."""
    settings = settings or Settings.from_env()
    if provider is None:
        provider = GeminiProvider(
            base_url=settings.base_url,
            timeout=settings.timeout_seconds,
            safety_settings=[
                {
                    "category": "HARM_CATEGORY_DANGEROUS_CONTENT",
                    "threshold": settings.safety_threshold,
                }
            ],
        )

    catalog = CatalogCache(provider)
    resolver = ModelResolver(
        provider, catalog=catalog, default_model=settings.default_model
    )
    service = ScriptService(resolver, default_api_key=settings.api_key)
    runner = BackgroundLoop()
    tokens = SupersedingTokens()

    application = Flask(__name__)
    application.config["SETTINGS"] = settings
    application.extensions["demopitch"] = {
        "catalog": catalog,
        "resolver": resolver,
        "service": service,
        "runner": runner,
        "tokens": tokens,
    }

    @application.before_request
    def log_request():
        """Log incoming requests (never their bodies, which carry API keys)."""
        g.start_time = time.time()
        logger.info(f">>> {request.method} {request.path}")

    @application.after_request
    def log_response(response):
        elapsed_ms = int((time.time() - g.get("start_time", time.time())) * 1000)
        logger.info(f"<<< {response.status_code} {request.path} ({elapsed_ms}ms)")
        return response

    @application.errorhandler(404)
    def not_found(e):
        return jsonify({"error": f"Endpoint not found: {request.path}"}), 404

    @application.errorhandler(500)
    def internal_error(e):
        logger.error(f"Internal server error: {e}")
        return jsonify({"error": "Internal server error"}), 500

    @application.route("/health", methods=["GET"])
    def health():
        return jsonify({"status": "ok", "version": VERSION})

    @application.route("/api/script", methods=["POST"])
    def generate_script():
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({"error": "Expected a JSON object body"}), 400

        try:
            context = PitchContext.from_form(data)
        except ValueError as e:
            return jsonify({"error": str(e)}), 400

        api_key = str(data.get("apiKey") or "").strip()
        model = str(data.get("model") or "").strip() or None

        session_id = request.headers.get(SESSION_HEADER)
        token = tokens.begin(session_id) if session_id else None
        try:
            script = runner.run(
                service.generate(context, api_key, model, cancel_token=token),
                timeout=settings.request_timeout_seconds,
            )
        except ResolutionCancelled as e:
            logger.info(f"Discarding superseded script request: {e}")
            return jsonify({"error": str(e)}), 409
        except concurrent.futures.TimeoutError:
            logger.warning(
                f"Script request timed out after {settings.request_timeout_seconds}s"
            )
            return jsonify({"error": "Script generation timed out"}), 504
        finally:
            if token is not None:
                tokens.finish(session_id, token)

        return jsonify(script.to_dict())

    @application.route("/api/models", methods=["GET"])
    def list_models():
        revision_value = request.args.get("revision", ApiRevision.PRIMARY.value)
        try:
            revision = ApiRevision(revision_value)
        except ValueError:
            valid = ", ".join(r.value for r in ApiRevision)
            return (
                jsonify({"error": f"Unknown revision {revision_value!r} (expected {valid})"}),
                400,
            )

        api_key = request.headers.get(API_KEY_HEADER, "").strip() or settings.api_key
        if not api_key:
            return jsonify({"error": "no Gemini API key found"}), 401

        try:
            names = runner.run(
                catalog.get(revision, api_key),
                timeout=settings.request_timeout_seconds,
            )
        except CatalogUnavailableError as e:
            logger.warning(f"Model catalog unavailable for {revision.value}: {e}")
            return jsonify({"error": str(e)}), 502
        except concurrent.futures.TimeoutError:
            logger.warning(f"Model listing for {revision.value} timed out")
            return jsonify({"error": "Model listing timed out"}), 504

        return jsonify({"revision": revision.value, "models": list(names)})

    return application


def main():
    settings = Settings.from_env()
    configure_logging(settings.log_level)

    if not settings.api_key:
        logger.warning(
            "No GEMINI_API_KEY configured; clients must send their own key "
            "or will receive the offline template."
        )

    logger.info("=" * 60)
    logger.info(f"DemoPitch v{VERSION}")
    logger.info("=" * 60)
    logger.info(f"API server:    http://{settings.host}:{settings.port}")
    logger.info(f"Default model: {settings.default_model}")
    logger.info(f"Gemini API:    {settings.base_url}")
    logger.info("=" * 60)

    app = create_app(settings)
    app.run(host=settings.host, port=settings.port, threaded=True)


if __name__ == "__main__":
    main()
