from __future__ import annotations

from .client import TelegramClient
from .models import CallbackQuery, Message, Update

__all__ = [
    "CallbackQuery",
    "Message",
    "TelegramClient",
    "Update",
]
