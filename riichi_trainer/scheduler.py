"""
Turn Scheduler

Delayed callbacks for scripted turns, keyed by (round, turn). Every pending
callback can be canceled, and a canceled callback never runs: the wrapper
re-checks the pending table before calling through.
"""

import asyncio
import logging
from typing import Callable, Dict, Hashable, List, Optional

logger = logging.getLogger(__name__)


class TurnScheduler:
    """
    Pending-timer table on an asyncio loop.

    Scheduling a key that is already pending replaces the earlier timer.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop
        self._pending: Dict[Hashable, asyncio.TimerHandle] = {}

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def schedule(self, key: Hashable, delay: float, callback: Callable[[], None]) -> None:
        """Run `callback` after `delay` seconds unless `key` is canceled first"""
        self.cancel(key)

        def fire():
            if self._pending.get(key) is not handle:
                return
            del self._pending[key]
            callback()

        handle = self.loop.call_later(max(0.0, delay), fire)
        self._pending[key] = handle
        logger.debug(f"Scheduled {key} in {delay:.2f}s")

    def cancel(self, key: Hashable) -> bool:
        """Cancel one timer. Returns True if it was pending."""
        handle = self._pending.pop(key, None)
        if handle is None:
            return False
        handle.cancel()
        logger.debug(f"Canceled {key}")
        return True

    def cancel_all(self) -> int:
        """Cancel every pending timer, returning how many there were"""
        handles = list(self._pending.values())
        self._pending.clear()
        for handle in handles:
            handle.cancel()
        if handles:
            logger.debug(f"Canceled {len(handles)} pending turns")
        return len(handles)

    def is_pending(self, key: Hashable) -> bool:
        return key in self._pending

    @property
    def pending(self) -> List[Hashable]:
        return list(self._pending)

    def __len__(self) -> int:
        return len(self._pending)
