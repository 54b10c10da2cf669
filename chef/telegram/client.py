"""HTTP client for the Telegram Bot API."""

from __future__ import annotations

import asyncio
import json
import logging

import aiohttp

from chef.config import ChefConfig
from chef.errors import (
    TelegramAPIError,
    TelegramHTTPError,
    TelegramProtocolError,
    TelegramTransportError,
)
from chef.telegram.models import Message, Update

log = logging.getLogger("chef.telegram")

ALLOWED_UPDATES = ["message", "callback_query"]


class TelegramClient:
    """JSON-over-HTTPS transport for the handful of Bot API methods chef uses."""

    def __init__(self, config: ChefConfig):
        self._bot_url = config.bot_url
        self._http_timeout_s = config.http_timeout_s
        self._session: aiohttp.ClientSession | None = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def call(
        self,
        method: str,
        payload: dict | None = None,
        *,
        long_poll_s: float = 0.0,
    ) -> object:
        """POST a Bot API method and return its ``result``.

        ``long_poll_s`` extends the HTTP timeout for getUpdates so the server
        can hold the request open.
        """
        url = f"{self._bot_url}/{method}"
        timeout = aiohttp.ClientTimeout(total=self._http_timeout_s + long_poll_s)
        session = self._get_session()
        try:
            async with session.post(url, json=payload or {}, timeout=timeout) as resp:
                status = resp.status
                text = await resp.text()
        except asyncio.TimeoutError as e:
            raise TelegramTransportError(f"Telegram {method} timed out") from e
        except aiohttp.ClientError as e:
            raise TelegramTransportError(
                f"Telegram {method} failed: {type(e).__name__}: {e}"
            ) from e

        try:
            body = json.loads(text) if text else None
        except json.JSONDecodeError:
            body = None

        if not isinstance(body, dict):
            if status >= 400:
                raise TelegramHTTPError(status, method=method, detail=text[:200])
            raise TelegramProtocolError(
                f"{method} returned a non-object body", payload_preview=text[:200]
            )

        if not body.get("ok"):
            error_code = body.get("error_code")
            raise TelegramAPIError(
                method,
                error_code=error_code if isinstance(error_code, int) else status,
                description=str(body.get("description") or "") or None,
            )
        return body.get("result")

    async def get_updates(
        self,
        *,
        offset: int | None = None,
        limit: int | None = None,
        timeout: int = 0,
    ) -> list[Update]:
        payload: dict[str, object] = {"timeout": timeout, "allowed_updates": ALLOWED_UPDATES}
        if offset is not None:
            payload["offset"] = offset
        if limit is not None:
            payload["limit"] = limit

        result = await self.call("getUpdates", payload, long_poll_s=float(timeout))
        if not isinstance(result, list):
            raise TelegramProtocolError(
                "getUpdates result is not a list", payload_preview=repr(result)[:200]
            )

        updates: list[Update] = []
        for raw in result:
            update = Update.from_dict(raw)
            if update is None:
                log.debug(f"Skipping malformed update: {raw!r}")
                continue
            updates.append(update)
        return updates

    async def send_message(
        self, chat_id: int, text: str, *, reply_markup: dict | None = None
    ) -> Message:
        payload: dict[str, object] = {"chat_id": chat_id, "text": text}
        if reply_markup:
            payload["reply_markup"] = reply_markup
        result = await self.call("sendMessage", payload)
        message = Message.from_dict(result)
        if message is None:
            raise TelegramProtocolError(
                "sendMessage returned no message", payload_preview=repr(result)[:200]
            )
        return message

    async def edit_message_text(
        self,
        chat_id: int,
        message_id: int,
        text: str,
        *,
        reply_markup: dict | None = None,
    ) -> None:
        payload: dict[str, object] = {
            "chat_id": chat_id,
            "message_id": message_id,
            "text": text,
        }
        if reply_markup is not None:
            payload["reply_markup"] = reply_markup
        await self.call("editMessageText", payload)

    async def answer_callback_query(
        self, callback_query_id: str, *, text: str | None = None
    ) -> None:
        payload: dict[str, object] = {"callback_query_id": callback_query_id}
        if text:
            payload["text"] = text
        await self.call("answerCallbackQuery", payload)
