"""
DocBundle — Self-clearing transient messages.

Each slot holds one message. Setting a new message cancels the pending
clear timer of that slot and schedules a fresh one on the running loop.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable

from docbundle.models.session import TransientMessage


class TransientSlot:
    def __init__(self, name: str, ttl: float, on_clear: Callable[[], None] | None = None):
        self.name = name
        self.ttl = ttl
        self.on_clear = on_clear
        self.message: TransientMessage | None = None
        self._timer: asyncio.TimerHandle | None = None

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def set(self, message: TransientMessage | None) -> None:
        """Replace the message; a None message just clears the slot."""
        self._cancel_timer()
        self.message = message
        if message is not None:
            loop = asyncio.get_running_loop()
            self._timer = loop.call_later(self.ttl, self._expire, message)

    def clear(self) -> None:
        self._cancel_timer()
        self.message = None

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _expire(self, message: TransientMessage) -> None:
        # A replaced message cancels its timer, but guard on identity anyway
        if self.message is not message:
            return
        self._timer = None
        self.message = None
        if self.on_clear is not None:
            self.on_clear()
