"""Frame-driven, cancellable one-shot timer for the auto-advance dwell."""
from __future__ import annotations

import itertools
from typing import Optional


class AdvanceTimer:
    """One pending deadline at most, identified by a token.

    ``schedule`` supersedes whatever was pending and ``cancel`` drops it;
    a superseded or cancelled token never fires. Time only moves through
    ``tick``, so the timer follows the frame clock rather than wall time.
    """

    def __init__(self) -> None:
        self._tokens = itertools.count(1)
        self._token: Optional[int] = None
        self._remaining = 0.0

    @property
    def pending(self) -> bool:
        return self._token is not None

    @property
    def token(self) -> Optional[int]:
        return self._token

    @property
    def remaining(self) -> float:
        return self._remaining if self._token is not None else 0.0

    def schedule(self, delay: float) -> int:
        self._token = next(self._tokens)
        self._remaining = max(0.0, float(delay))
        return self._token

    def cancel(self, token: Optional[int] = None) -> bool:
        """Drop the pending deadline; with ``token``, only if it is still current."""
        if self._token is None:
            return False
        if token is not None and token != self._token:
            return False
        self._token = None
        self._remaining = 0.0
        return True

    def tick(self, delta: float) -> bool:
        """Advance the clock; returns ``True`` exactly once when the deadline passes."""
        if self._token is None:
            return False
        self._remaining -= max(0.0, float(delta))
        if self._remaining > 0.0:
            return False
        self._token = None
        self._remaining = 0.0
        return True
