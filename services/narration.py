"""Narration session: which item is being read aloud, and the engine calls for it.

One :class:`NarrationSession` backs one presented list of items.  Pressing an
item starts reading it, pressing the same item again silences it, and pressing
another item silences the first before starting the second.  Leaving the list
calls :meth:`NarrationSession.teardown`.

When the speaking state returns to idle on its own is governed by a
:class:`CompletionPolicy`.  The default, ``ENGINE``, relies on the speech
engine's completion callback; it falls back to ``TIMED`` for engines that
cannot report completion.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from functools import partial
from typing import Callable

from languages import Language, locale_for
from models import ItemId, Utterance
from state import IDLE, Listeners, SpeakingState
from .speech import SpeechEngine

logger = logging.getLogger(__name__)

DEFAULT_CLEAR_DELAY = 5.0


class CompletionPolicy(str, Enum):
    """How a speaking item returns to idle without user input."""

    ENGINE = "engine"
    IMMEDIATE = "immediate"
    TIMED = "timed"


class NarrationSession:
    """Serialises narration requests against a single speech engine.

    At most one item is active at a time.  Requests run one after another; a
    request still waiting behind another one is dropped when a newer request
    arrives.  Engine failures are logged and leave the session idle, so
    :meth:`activate` never raises because of the engine.
    """

    def __init__(
        self,
        engine: SpeechEngine,
        policy: CompletionPolicy | str = CompletionPolicy.ENGINE,
        clear_delay: float = DEFAULT_CLEAR_DELAY,
    ) -> None:
        policy = CompletionPolicy(policy)
        if policy is CompletionPolicy.ENGINE and not getattr(engine, "supports_completion", False):
            logger.info(
                "%s cannot report completion; clearing after %.1fs instead",
                type(engine).__name__,
                clear_delay,
            )
            policy = CompletionPolicy.TIMED
        self.engine = engine
        self.policy = policy
        self.clear_delay = clear_delay
        self._state = IDLE
        self._listeners: Listeners[SpeakingState] = Listeners()
        self._lock: asyncio.Lock | None = None
        self._requests = 0
        self._generation = 0
        self._timer: asyncio.TimerHandle | None = None

    # State -----------------------------------------------------------------
    @property
    def state(self) -> SpeakingState:
        return self._state

    @property
    def active_item_id(self) -> ItemId | None:
        return self._state.active_item_id

    def is_speaking(self, item_id: ItemId) -> bool:
        return self._state.is_speaking(item_id)

    def subscribe(self, callback: Callable[[SpeakingState], None]) -> Callable[[], None]:
        return self._listeners.subscribe(callback)

    # Requests --------------------------------------------------------------
    async def activate(self, item_id: ItemId, text: str, language: Language | str) -> SpeakingState:
        """Toggle narration of *item_id* and return the resulting state."""

        self._requests += 1
        ticket = self._requests
        if self._lock is None:
            self._lock = asyncio.Lock()
        async with self._lock:
            if ticket != self._requests:
                logger.debug("Narration request for %r superseded", item_id)
                return self._state

            if self._state.is_speaking(item_id):
                self._invalidate()
                self._stop_engine()
                self._set_state(IDLE)
                return self._state

            self._invalidate()
            self._stop_engine()
            generation = self._generation
            self._set_state(SpeakingState(item_id))

            try:
                await self.engine.configure_language(locale_for(language))
                if generation != self._generation:
                    # torn down while the engine switched locale
                    return self._state
                on_done = None
                if self.policy is CompletionPolicy.ENGINE:
                    on_done = partial(self._complete, generation)
                await self.engine.speak(text, on_done=on_done)
            except Exception:
                logger.exception("Narration of item %r failed", item_id)
                if generation == self._generation:
                    self._invalidate()
                    self._set_state(IDLE)
                return self._state

            if generation != self._generation:
                return self._state
            if self.policy is CompletionPolicy.IMMEDIATE:
                self._complete(generation)
            elif self.policy is CompletionPolicy.TIMED:
                self._timer = asyncio.get_running_loop().call_later(
                    self.clear_delay, self._complete, generation
                )
            return self._state

    async def narrate(self, utterance: Utterance) -> SpeakingState:
        return await self.activate(utterance.item_id, utterance.text, utterance.language)

    def teardown(self) -> None:
        """Silence the engine and return to idle; pending work is discarded."""

        self._invalidate()
        # drops requests still waiting for the lock
        self._requests += 1
        self._stop_engine()
        self._set_state(IDLE)

    # Internals -------------------------------------------------------------
    def _invalidate(self) -> None:
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _complete(self, generation: int) -> None:
        if generation != self._generation:
            return
        self._timer = None
        self._set_state(IDLE)

    def _stop_engine(self) -> None:
        try:
            self.engine.stop()
        except Exception as exc:
            logger.warning("Speech engine failed to stop: %s", exc)

    def _set_state(self, state: SpeakingState) -> None:
        if state == self._state:
            return
        self._state = state
        logger.debug("Speaking state: %r", state.active_item_id)
        self._listeners.notify(state)
