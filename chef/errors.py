"""Chef exceptions.

Transport failures are typed so the question client can collapse them to a
"no answer" result without scraping strings.
"""

from __future__ import annotations


class ChefError(RuntimeError):
    """Base class for chef errors."""


class ChefConfigError(ChefError):
    """Missing or invalid configuration (token, chat id)."""


class TelegramError(ChefError):
    """Base class for Telegram Bot API failures."""


class TelegramHTTPError(TelegramError):
    """Non-2xx HTTP response without a usable Bot API body."""

    def __init__(self, status: int, *, method: str, detail: str | None = None):
        self.status = int(status)
        self.method = method
        self.detail = detail
        super().__init__(self.__str__())

    def __str__(self) -> str:
        detail = (self.detail or "").strip()
        if detail:
            return f"Telegram HTTP {self.status} {self.method}: {detail}"
        return f"Telegram HTTP {self.status} {self.method}"


class TelegramAPIError(TelegramError):
    """The Bot API answered with ``ok: false``."""

    def __init__(
        self,
        method: str,
        *,
        error_code: int | None = None,
        description: str | None = None,
    ):
        self.method = method
        self.error_code = error_code
        self.description = description
        super().__init__(self.__str__())

    def __str__(self) -> str:
        description = self.description or "Telegram API error"
        if self.error_code is not None:
            return f"Telegram {self.method} failed ({self.error_code}): {description}"
        return f"Telegram {self.method} failed: {description}"


class TelegramTransportError(TelegramError):
    """Connection, TLS or timeout failure talking to the Bot API."""


class TelegramProtocolError(TelegramError):
    """Malformed/invalid data from the Bot API."""

    def __init__(self, message: str, *, payload_preview: str | None = None):
        self.message = message
        self.payload_preview = payload_preview
        super().__init__(self.__str__())

    def __str__(self) -> str:
        if self.payload_preview:
            return f"Telegram protocol error: {self.message} (payload={self.payload_preview!r})"
        return f"Telegram protocol error: {self.message}"
