"""
Two-stage message reveal.

The primary text is revealed first. Once it is fully shown, and after a fixed
post-completion delay, the secondary text (if any) is revealed in its own slot.
Showing a new message or clearing the current one cancels every pending timer
of both slots, including the delay between them.
"""

import asyncio
from typing import Callable, Optional

from humanerror.contexts.reveal.logger import log_schedule_error
from humanerror.contexts.reveal.scheduler import (
    DEFAULT_TICK_INTERVAL,
    RevealListener,
    RevealScheduler,
    RevealSnapshot,
)

DEFAULT_SECONDARY_DELAY = 0.300


class MessageReveal:
    """
    Coordinates the primary and secondary reveal slots for one message.

    Args:
        tick_interval: Seconds between characters (both slots)
        secondary_delay: Seconds between primary Done and secondary start
        loop: Event loop to schedule on (default: the running loop)

    Example:
        reveal = MessageReveal(tick_interval=0.03, secondary_delay=0.3)
        reveal.subscribe(render)
        reveal.show_message(message)
        await reveal.wait()
    """

    def __init__(
        self,
        tick_interval: float = DEFAULT_TICK_INTERVAL,
        secondary_delay: float = DEFAULT_SECONDARY_DELAY,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        self.secondary_delay = secondary_delay
        self._loop = loop

        self.primary = RevealScheduler(tick_interval, name="primary", loop=loop)
        self.secondary = RevealScheduler(tick_interval, name="secondary", loop=loop)
        self.primary.on_finished(self._on_primary_finished)
        self.secondary.on_finished(self._on_secondary_finished)

        self._secondary_text: Optional[str] = None
        self._delay_handle: Optional[asyncio.TimerHandle] = None
        self._generation = 0
        self._done: Optional[asyncio.Future] = None

    def subscribe(self, listener: RevealListener) -> Callable[[], None]:
        """Subscribe to both slots. Snapshots carry their slot name."""
        unsubscribers = [self.primary.subscribe(listener), self.secondary.subscribe(listener)]

        def unsubscribe() -> None:
            for remove in unsubscribers:
                remove()

        return unsubscribe

    @property
    def active_timers(self) -> int:
        """Timers currently pending across both slots and the inter-slot delay."""
        delay = 0 if self._delay_handle is None else 1
        return self.primary.active_timers + self.secondary.active_timers + delay

    # =========================================================================
    # CONTROL
    # =========================================================================

    def show(self, primary_text: str, secondary_text: Optional[str] = None) -> None:
        """
        Start revealing a message, replacing whatever was showing.

        Args:
            primary_text: Main text, revealed first
            secondary_text: Optional follow-up text, revealed after the delay
        """
        self.clear()
        if not primary_text:
            return

        self._secondary_text = secondary_text or None
        try:
            self._done = self._get_loop().create_future()
        except RuntimeError as e:
            self._done = None
            log_schedule_error("sequence", e)
        self.primary.start(primary_text)

    def show_message(self, message) -> None:
        """Reveal a GeneratedMessage."""
        self.show(message.primary_text, message.secondary_text)

    def clear(self) -> None:
        """Cancel everything pending and return both slots to Idle."""
        self._generation += 1
        if self._delay_handle is not None:
            self._delay_handle.cancel()
            self._delay_handle = None

        self.primary.cancel()
        self.secondary.cancel()
        self._secondary_text = None
        self._resolve(False)

    async def wait(self) -> bool:
        """
        Wait until the current message is fully revealed.

        Returns:
            True if the sequence completed, False if it was cleared or replaced first
        """
        if self._done is None:
            return False
        return await asyncio.shield(self._done)

    # =========================================================================
    # CALLBACKS
    # =========================================================================

    def _on_primary_finished(self, snapshot: RevealSnapshot) -> None:
        if not self._secondary_text:
            self._resolve(True)
            return

        try:
            self._delay_handle = self._get_loop().call_later(
                self.secondary_delay, self._start_secondary, self._generation
            )
        except RuntimeError as e:
            self._delay_handle = None
            log_schedule_error("secondary", e)
            self._resolve(False)

    def _start_secondary(self, generation: int) -> None:
        if generation != self._generation:
            return
        self._delay_handle = None
        self.secondary.start(self._secondary_text)

    def _on_secondary_finished(self, snapshot: RevealSnapshot) -> None:
        self._resolve(True)

    def _resolve(self, completed: bool) -> None:
        if self._done is not None and not self._done.done():
            self._done.set_result(completed)

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()
