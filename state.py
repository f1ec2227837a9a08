from __future__ import annotations

"""Observable application state."""

import logging
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class SpeakingState:
    """Which item, if any, is currently being narrated."""

    active_item_id: int | str | None = None

    @property
    def is_idle(self) -> bool:
        return self.active_item_id is None

    def is_speaking(self, item_id: int | str) -> bool:
        return self.active_item_id is not None and self.active_item_id == item_id


IDLE = SpeakingState()


class Listeners(Generic[T]):
    """Ordered set of change callbacks.

    A callback that raises is logged and skipped; the remaining callbacks
    are still notified.
    """

    def __init__(self) -> None:
        self._callbacks: list[Callable[[T], None]] = []

    def subscribe(self, callback: Callable[[T], None]) -> Callable[[], None]:
        """Register *callback* and return a function that removes it again."""

        self._callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    def notify(self, value: T) -> None:
        for callback in list(self._callbacks):
            try:
                callback(value)
            except Exception:
                logger.exception("State listener %r failed", callback)

    def __len__(self) -> int:
        return len(self._callbacks)
