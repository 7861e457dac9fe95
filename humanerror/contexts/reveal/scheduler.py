"""
Character-by-character reveal state machine.

One RevealScheduler drives one display slot on an asyncio event loop:

    Idle --start(text)--> Revealing(0) --tick--> Revealing(1) ... --tick--> Done

- start() publishes the empty prefix, then every tick adds one character
- the tick that shows the last character moves the slot to Done and fires
  the finished callbacks
- start() while revealing cancels the running timer and starts over for the
  new text; cancel() returns the slot to Idle

The scheduler owns at most one timer at a time. Every start/cancel bumps a
generation counter, and a timer callback from an older generation does nothing,
so a superseded text can never write to the slot.
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from humanerror.contexts.reveal.logger import (
    log_listener_error,
    log_reveal_cancelled,
    log_reveal_finished,
    log_reveal_started,
    log_schedule_error,
)

DEFAULT_TICK_INTERVAL = 0.030


class RevealState(Enum):
    """Lifecycle state of one reveal slot."""

    IDLE = "idle"
    REVEALING = "revealing"
    DONE = "done"


@dataclass(frozen=True)
class RevealSnapshot:
    """
    What a display layer should show for one slot.

    Attributes:
        slot: Slot name (e.g., "primary", "secondary")
        state: Current RevealState
        text: Displayed prefix
        position: Number of characters displayed
        total: Length of the full text
    """

    slot: str
    state: RevealState
    text: str
    position: int
    total: int


RevealListener = Callable[[RevealSnapshot], None]


class RevealScheduler:
    """
    Timed reveal of one text, one character per tick.

    Args:
        tick_interval: Seconds between characters
        name: Slot name carried on every snapshot
        loop: Event loop to schedule on (default: the running loop at start())

    Example:
        scheduler = RevealScheduler(tick_interval=0.03)
        scheduler.subscribe(lambda snap: print(snap.text))
        scheduler.start("You have 3 months left.")
    """

    def __init__(
        self,
        tick_interval: float = DEFAULT_TICK_INTERVAL,
        name: str = "primary",
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        self.tick_interval = tick_interval
        self.name = name
        self._loop = loop

        self._listeners: List[RevealListener] = []
        self._finished_callbacks: List[RevealListener] = []

        self.state = RevealState.IDLE
        self._full_text = ""
        self._position = 0
        self._handle: Optional[asyncio.TimerHandle] = None
        self._generation = 0

    # =========================================================================
    # SUBSCRIPTIONS
    # =========================================================================

    def subscribe(self, listener: RevealListener) -> Callable[[], None]:
        """
        Receive a snapshot on every state change.

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def on_finished(self, callback: RevealListener) -> None:
        """Register a callback fired once per reveal when it reaches Done."""
        self._finished_callbacks.append(callback)

    # =========================================================================
    # STATE
    # =========================================================================

    @property
    def full_text(self) -> str:
        return self._full_text

    @property
    def displayed_text(self) -> str:
        return self._full_text[: self._position]

    @property
    def position(self) -> int:
        return self._position

    @property
    def active_timers(self) -> int:
        """Number of timers currently owned (0 or 1)."""
        return 0 if self._handle is None else 1

    def snapshot(self) -> RevealSnapshot:
        return RevealSnapshot(
            slot=self.name,
            state=self.state,
            text=self.displayed_text,
            position=self._position,
            total=len(self._full_text),
        )

    # =========================================================================
    # TRANSITIONS
    # =========================================================================

    def start(self, text: str) -> None:
        """
        Start revealing text from scratch, superseding any reveal in progress.

        Empty text returns the slot to Idle instead.
        """
        if not text:
            self.cancel()
            return

        if self.state is RevealState.REVEALING:
            log_reveal_cancelled(self.name, self._position, len(self._full_text))
        self._cancel_timer()
        self._generation += 1

        self._full_text = text
        self._position = 0
        self.state = RevealState.REVEALING
        log_reveal_started(self.name, len(text))

        self._publish()
        self._schedule_tick(self._generation)

    def cancel(self) -> None:
        """Stop any reveal and return to Idle with nothing displayed."""
        was_idle = self.state is RevealState.IDLE
        if self.state is RevealState.REVEALING:
            log_reveal_cancelled(self.name, self._position, len(self._full_text))

        self._cancel_timer()
        self._generation += 1
        self._full_text = ""
        self._position = 0
        self.state = RevealState.IDLE

        if not was_idle:
            self._publish()

    def _tick(self, generation: int) -> None:
        if generation != self._generation or self.state is not RevealState.REVEALING:
            return
        self._handle = None

        self._position += 1
        if self._position >= len(self._full_text):
            self._position = len(self._full_text)
            self.state = RevealState.DONE
            log_reveal_finished(self.name, len(self._full_text))
            self._publish()
            self._notify_finished(generation)
            return

        self._publish()
        self._schedule_tick(generation)

    # =========================================================================
    # TIMER AND CALLBACK PLUMBING
    # =========================================================================

    def _schedule_tick(self, generation: int) -> None:
        try:
            loop = self._loop or asyncio.get_running_loop()
            self._handle = loop.call_later(self.tick_interval, self._tick, generation)
        except RuntimeError as e:
            # No running loop, or the loop is closed: the reveal just stops here
            self._handle = None
            log_schedule_error(self.name, e)

    def _cancel_timer(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _publish(self) -> None:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                log_listener_error(self.name, e)

    def _notify_finished(self, generation: int) -> None:
        snapshot = self.snapshot()
        for callback in list(self._finished_callbacks):
            # A callback may have started a new reveal on this slot
            if generation != self._generation:
                return
            try:
                callback(snapshot)
            except Exception as e:
                log_listener_error(self.name, e)
