"""
Reveal Context

Responsibilities:
- Reveals text one character per tick on an asyncio event loop
- Sequences the primary and secondary messages with a post-completion delay
- Cancels superseded timers so stale text is never displayed

Owns: Reveal timing and per-slot reveal state
Never: Renders anything; display layers subscribe to snapshots
"""

from humanerror.contexts.reveal.scheduler import (
    DEFAULT_TICK_INTERVAL,
    RevealScheduler,
    RevealSnapshot,
    RevealState,
)
from humanerror.contexts.reveal.sequence import DEFAULT_SECONDARY_DELAY, MessageReveal

__all__ = [
    "DEFAULT_SECONDARY_DELAY",
    "DEFAULT_TICK_INTERVAL",
    "MessageReveal",
    "RevealScheduler",
    "RevealSnapshot",
    "RevealState",
]
