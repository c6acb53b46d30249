"""Thread-safe storage for the latest retrieved tokens."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .tokens import AccessToken, IdToken, TokenPair

logger = logging.getLogger(__name__)


class TokenCache:
    """Hold the latest `TokenPair` obtained from the Authorization Server.

    The Access Token and the ID Token are kept together in a single immutable `TokenPair`, which
    is swapped as a whole. A reader always sees either no tokens at all, or both tokens from the
    same response. Last write wins.

    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._pair: TokenPair | None = None

    @property
    def latest(self) -> TokenPair | None:
        """The latest `TokenPair`, or `None`."""
        return self._pair

    @property
    def latest_access_token(self) -> AccessToken | None:
        """The latest Access Token, or `None`."""
        pair = self._pair
        return pair.access_token if pair is not None else None

    @property
    def latest_id_token(self) -> IdToken | None:
        """The latest ID Token, or `None`."""
        pair = self._pair
        return pair.id_token if pair is not None else None

    def store(self, pair: TokenPair | None) -> None:
        """Replace the stored tokens with `pair`, or clear them if `pair` is `None`."""
        with self._lock:
            self._pair = pair
        if pair is None:
            logger.debug("Stored tokens cleared")
        else:
            logger.debug("Stored new tokens")

    def clear(self) -> None:
        """Clear the stored tokens. This is a no-op when there are none."""
        self.store(None)

    def __bool__(self) -> bool:
        return self._pair is not None
