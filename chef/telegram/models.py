"""Bot API update records.

Only the fields chef correlates on are kept. Parsing is tolerant: anything
that doesn't look like a message or callback query comes back as ``None``.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Message:
    message_id: int
    chat_id: int
    text: str | None = None

    @classmethod
    def from_dict(cls, data: object) -> Message | None:
        if not isinstance(data, dict):
            return None
        chat = data.get("chat")
        message_id = data.get("message_id")
        if not isinstance(chat, dict) or not isinstance(message_id, int):
            return None
        chat_id = chat.get("id")
        if not isinstance(chat_id, int):
            return None
        text = data.get("text")
        return cls(
            message_id=message_id,
            chat_id=chat_id,
            text=text if isinstance(text, str) else None,
        )


@dataclass(frozen=True)
class CallbackQuery:
    id: str
    data: str | None
    message: Message | None

    @classmethod
    def from_dict(cls, data: object) -> CallbackQuery | None:
        if not isinstance(data, dict):
            return None
        query_id = data.get("id")
        if not isinstance(query_id, str):
            return None
        payload = data.get("data")
        return cls(
            id=query_id,
            data=payload if isinstance(payload, str) else None,
            message=Message.from_dict(data.get("message")),
        )


@dataclass(frozen=True)
class Update:
    update_id: int
    message: Message | None = None
    callback_query: CallbackQuery | None = None

    @property
    def chat_id(self) -> int | None:
        if self.message:
            return self.message.chat_id
        if self.callback_query and self.callback_query.message:
            return self.callback_query.message.chat_id
        return None

    @classmethod
    def from_dict(cls, data: object) -> Update | None:
        if not isinstance(data, dict):
            return None
        update_id = data.get("update_id")
        if not isinstance(update_id, int):
            return None
        return cls(
            update_id=update_id,
            message=Message.from_dict(data.get("message")),
            callback_query=CallbackQuery.from_dict(data.get("callback_query")),
        )
