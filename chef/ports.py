"""Ports (interfaces) for the Telegram transport.

The question client depends on this contract rather than on the aiohttp
implementation, so tests can swap in an in-memory chat.
"""

from __future__ import annotations

from typing import Protocol

from chef.telegram.models import Message, Update


class TelegramPort(Protocol):
    async def get_updates(
        self,
        *,
        offset: int | None = None,
        limit: int | None = None,
        timeout: int = 0,
    ) -> list[Update]: ...

    async def send_message(
        self, chat_id: int, text: str, *, reply_markup: dict | None = None
    ) -> Message: ...

    async def edit_message_text(
        self,
        chat_id: int,
        message_id: int,
        text: str,
        *,
        reply_markup: dict | None = None,
    ) -> None: ...

    async def answer_callback_query(
        self, callback_query_id: str, *, text: str | None = None
    ) -> None: ...

    async def close(self) -> None: ...
