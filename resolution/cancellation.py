"""
Cancellation tokens for in-flight resolutions.

A token is checked at every attempt boundary. Tokens wrap a threading.Event
so a request thread can cancel a resolution running on the event loop thread.
"""

import logging
import threading

from .errors import ResolutionCancelled

logger = logging.getLogger(__name__)


class CancellationToken:
    """Cooperative cancellation flag."""

    def __init__(self):
        self._event = threading.Event()
        self.reason: str | None = None

    def cancel(self, reason: str = "superseded by a newer request") -> None:
        self.reason = reason
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise ResolutionCancelled(self.reason or "resolution cancelled")


class SupersedingTokens:
    """
    Hands out one live token per key.

    Beginning a new resolution for a key cancels the token of the previous
    one, so its eventual result is discarded instead of reaching the caller.
    """

    def __init__(self):
        self._tokens: dict[str, CancellationToken] = {}
        self._lock = threading.Lock()

    def begin(self, key: str) -> CancellationToken:
        token = CancellationToken()
        with self._lock:
            previous = self._tokens.get(key)
            self._tokens[key] = token
        if previous is not None and not previous.cancelled:
            logger.info(f"Cancelling superseded resolution for session {key}")
            previous.cancel()
        return token

    def finish(self, key: str, token: CancellationToken) -> None:
        """Forget the token if it is still the live one for the key."""
        with self._lock:
            if self._tokens.get(key) is token:
                del self._tokens[key]

    def __len__(self) -> int:
        with self._lock:
            return len(self._tokens)
