"""getUpdates offset bookkeeping and the bounded wait loop.

Telegram keeps unconfirmed updates server-side; requesting ``offset=N``
confirms everything below N. The feed advances its offset one update at a
time so updates that were never looked at stay queued.
"""

from __future__ import annotations

import asyncio
import logging
import math
import time
from typing import Awaitable, Callable, TypeVar

from chef.errors import TelegramError
from chef.ports import TelegramPort
from chef.telegram.models import Update

log = logging.getLogger("chef.updates")

T = TypeVar("T")

LONG_POLL_MAX_S = 30
RETRY_DELAY_S = 2.0
DRAIN_BATCH = 100
DISCOVERY_WINDOW = 100


class UpdateFeed:
    def __init__(self, telegram: TelegramPort, *, retry_delay_s: float = RETRY_DELAY_S):
        self._telegram = telegram
        self._retry_delay_s = retry_delay_s
        self.offset: int | None = None

    def _ack(self, update: Update) -> None:
        next_offset = update.update_id + 1
        if self.offset is None or next_offset > self.offset:
            self.offset = next_offset

    async def skip_backlog(self) -> None:
        """Move the offset past every update currently queued."""
        updates = await self._telegram.get_updates(offset=-1, limit=1, timeout=0)
        if updates:
            self._ack(updates[-1])

    async def drain(self) -> list[Update]:
        """Fetch and confirm everything queued, without long-polling."""
        drained: list[Update] = []
        while True:
            updates = await self._telegram.get_updates(
                offset=self.offset, limit=DRAIN_BATCH, timeout=0
            )
            if not updates:
                break
            for update in updates:
                self._ack(update)
            drained.extend(updates)
            if len(updates) < DRAIN_BATCH:
                break
        if drained and self.offset is not None:
            # Confirm the last batch server-side.
            await self._telegram.get_updates(offset=self.offset, limit=1, timeout=0)
        return drained

    async def discover_chat_id(self) -> int | None:
        """Return the chat id of the newest queued update, if any.

        Reads at the current offset so nothing gets confirmed or dropped.
        """
        updates = await self._telegram.get_updates(
            offset=self.offset, limit=DISCOVERY_WINDOW, timeout=0
        )
        for update in reversed(updates):
            if update.chat_id is not None:
                return update.chat_id
        return None

    async def wait_for(
        self,
        deadline: float,
        handle: Callable[[Update], Awaitable[T | None]],
    ) -> T | None:
        """Long-poll until ``handle`` returns a value or the deadline passes.

        ``deadline`` is on the ``time.monotonic()`` clock. Transport errors
        are logged and retried after a short sleep.
        """
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return None

            poll_s = min(LONG_POLL_MAX_S, max(1, math.ceil(remaining)))
            try:
                updates = await self._telegram.get_updates(offset=self.offset, timeout=poll_s)
            except TelegramError as e:
                log.warning(f"getUpdates failed, retrying: {e}")
                await asyncio.sleep(max(0.0, min(self._retry_delay_s, deadline - time.monotonic())))
                continue

            for update in updates:
                if time.monotonic() >= deadline:
                    return None
                self._ack(update)
                result = await handle(update)
                if result is not None:
                    return result
