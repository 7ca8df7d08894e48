# dartline/game/clock.py
from __future__ import annotations
from typing import Callable, Optional


class TickDriver:
    """
    Holds at most one pending frame callback.
    - request_tick(cb): schedule cb for the next pump (replaces any pending one)
    - cancel():        drop the pending callback; safe to call repeatedly
    - pump():          run the pending callback once, if any

    The callback is cleared before it runs, so a frame that wants another
    frame has to ask for it again. The host loop calls pump() once per
    display frame (see game.run) or once per sub-step (see DodgeEnv.step).
    """

    def __init__(self):
        self._pending: Optional[Callable[[], None]] = None

    @property
    def active(self) -> bool:
        return self._pending is not None

    def request_tick(self, callback: Callable[[], None]):
        self._pending = callback

    def cancel(self):
        self._pending = None

    def pump(self) -> bool:
        """Returns True if a callback ran."""
        cb = self._pending
        if cb is None:
            return False
        self._pending = None
        cb()
        return True
