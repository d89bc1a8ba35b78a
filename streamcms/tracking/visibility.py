"""Visibility watches used by the view tracker to detect user attention."""

import logging
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)

RatioCallback = Callable[[float], None]


class VisibilityObserver(Protocol):
    """Watches one element and reports its visible area ratio (0.0 to 1.0)."""

    def observe(self, callback: RatioCallback) -> None: ...

    def disconnect(self) -> None: ...


class ManualVisibilityObserver:
    """
    Observer fed by explicit ``report`` calls.

    Useful wherever visibility is known from outside, e.g. a headless
    renderer or a test simulating scrolling.
    """

    def __init__(self, name: str = "element") -> None:
        self.name = name
        self._callback: Optional[RatioCallback] = None
        self.observe_calls = 0
        self.disconnect_calls = 0

    @property
    def connected(self) -> bool:
        return self._callback is not None

    def observe(self, callback: RatioCallback) -> None:
        self._callback = callback
        self.observe_calls += 1

    def disconnect(self) -> None:
        if self._callback is not None:
            self.disconnect_calls += 1
        self._callback = None

    def report(self, ratio: float) -> bool:
        """Report a new intersection ratio; returns False when nothing is watching."""
        if self._callback is None:
            logger.debug("Ignoring visibility report for disconnected %s", self.name)
            return False
        self._callback(ratio)
        return True
