"""Chef - ask the operator questions via Telegram.

Usage:
    async with Chef(get_chef_config()) as chef:
        idx = await chef.choice("Pick:", ["A", "B", "C"])
        ok = await chef.confirm("Proceed?")
        text = await chef.ask("Name?")

Every blocking call returns ``None`` on timeout or transport failure so
automation loops can fall back to a default with a single check.
"""

from __future__ import annotations

import logging
import time

from chef.config import ChefConfig
from chef.errors import ChefConfigError, TelegramError
from chef.keyboards import (
    CONFIRM_KEYBOARD,
    REMOVE_KEYBOARD,
    choice_keyboard,
    format_choice_text,
    format_resolved,
    option_labels,
)
from chef.models import Answer, PendingRequest, Question, QuestionKind
from chef.ports import TelegramPort
from chef.replies import resolve_callback, resolve_text
from chef.telegram.client import TelegramClient
from chef.telegram.models import Update
from chef.updates import UpdateFeed

log = logging.getLogger("chef")

DEFAULT_STOP_WORD = "lfg"
DEFAULT_COLLECT_TIMEOUT_S = 180.0


class Chef:
    """Blocking-question client bound to one bot and one chat.

    Only one question may be in flight at a time; callers serialize.
    """

    def __init__(self, config: ChefConfig, telegram: TelegramPort | None = None):
        self.config = config
        self.telegram: TelegramPort = telegram or TelegramClient(config)
        self.feed = UpdateFeed(self.telegram)
        self.chat_id: int | None = config.chat_id
        self.pending: PendingRequest | None = None

    async def __aenter__(self) -> Chef:
        try:
            await self.start()
        except BaseException:
            await self.close()
            raise
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()

    async def start(self) -> None:
        """Resolve the destination chat.

        Raises ChefConfigError if no chat has messaged the bot, and
        TelegramError if the lookup itself fails.
        """
        if self.chat_id is not None:
            return
        chat_id = await self.feed.discover_chat_id()
        if chat_id is None:
            raise ChefConfigError("No chat found. Message your bot on Telegram first.")
        self.chat_id = chat_id
        log.info(f"Using chat {chat_id}")

    async def close(self) -> None:
        await self.telegram.close()

    def _timeout(self, timeout: float | None) -> float:
        return self.config.prompt_timeout_s if timeout is None else max(0.0, float(timeout))

    async def _ready(self) -> bool:
        """Lazy start for calls that must not raise on transport failures."""
        try:
            await self.start()
        except TelegramError as e:
            log.warning(f"Could not look up a chat for the bot: {e}")
            return False
        return True

    async def _dispatch(self, text: str, keyboard: dict | None = None) -> int | None:
        """Send a message; return its id, or None if delivery failed."""
        if not await self._ready():
            return None
        try:
            message = await self.telegram.send_message(self.chat_id, text, reply_markup=keyboard)
        except TelegramError as e:
            log.warning(f"Failed to send message: {e}")
            return None
        return message.message_id

    async def _skip_backlog(self) -> None:
        try:
            await self.feed.skip_backlog()
        except TelegramError as e:
            log.warning(f"Failed to skip update backlog: {e}")

    async def _annotate(self, pending: PendingRequest, text: str) -> None:
        try:
            await self.telegram.edit_message_text(
                self.chat_id, pending.message_id, text, reply_markup=REMOVE_KEYBOARD
            )
        except TelegramError as e:
            log.warning(f"Failed to mark message {pending.message_id} as answered: {e}")

    async def _acknowledge_tap(self, callback_query_id: str) -> None:
        try:
            await self.telegram.answer_callback_query(callback_query_id)
        except TelegramError as e:
            log.debug(f"answerCallbackQuery failed: {e}")

    async def _match(self, pending: PendingRequest, update: Update) -> Answer | None:
        query = update.callback_query
        if query is not None:
            if not query.message or query.message.chat_id != self.chat_id:
                return None
            await self._acknowledge_tap(query.id)
            if query.message.message_id != pending.message_id:
                log.debug(f"Ignoring tap on stale message {query.message.message_id}")
                return None
            return resolve_callback(pending.question, query.data)

        message = update.message
        if message is None or message.chat_id != self.chat_id:
            return None
        answer = resolve_text(pending.question, message.text)
        if answer is None:
            log.debug(f"Ignoring reply that doesn't fit a {pending.question.kind.value} question")
        return answer

    async def _ask(self, question: Question, text: str, keyboard: dict | None = None) -> Answer | None:
        if not await self._ready():
            return None
        await self._skip_backlog()
        message_id = await self._dispatch(text, keyboard)
        if message_id is None:
            return None

        pending = PendingRequest(
            message_id=message_id,
            question=question,
            deadline=time.monotonic() + question.timeout_s,
        )
        self.pending = pending
        try:
            answer = await self.feed.wait_for(
                pending.deadline, lambda update: self._match(pending, update)
            )
        finally:
            self.pending = None

        if answer is None:
            log.info(f"Question timed out after {question.timeout_s:.0f}s")
            return None
        await self._annotate(pending, format_resolved(text, answer.display))
        return answer

    async def ask(self, prompt: str, timeout: float | None = None) -> str | None:
        """Send a free-text question and return the first text reply."""
        question = Question(prompt=prompt, kind=QuestionKind.TEXT, timeout_s=self._timeout(timeout))
        answer = await self._ask(question, prompt)
        return None if answer is None else str(answer.value)

    async def confirm(self, prompt: str, timeout: float | None = None) -> bool | None:
        """Send a yes/no question with buttons; typed yes/y/ok/no/n also count."""
        question = Question(
            prompt=prompt, kind=QuestionKind.CONFIRM, timeout_s=self._timeout(timeout)
        )
        answer = await self._ask(question, prompt, CONFIRM_KEYBOARD)
        return None if answer is None else bool(answer.value)

    async def choice(
        self,
        prompt: str,
        options: list[str],
        columns: int = 4,
        timeout: float | None = None,
    ) -> int | None:
        """Send a lettered list of options; return the zero-based index picked."""
        keyboard = choice_keyboard(len(options), columns)
        question = Question(
            prompt=prompt,
            kind=QuestionKind.CHOICE,
            timeout_s=self._timeout(timeout),
            options=tuple(options),
            columns=columns,
        )
        answer = await self._ask(question, format_choice_text(prompt, options), keyboard)
        return None if answer is None else int(answer.value)

    async def notify(self, message: str) -> None:
        """Fire-and-forget message. Delivery failures are logged, never raised."""
        await self._dispatch(message)

    async def question(self, prompt: str, options: list[str], recommended: int = 0) -> None:
        """Post a lettered option list with the recommended one starred; don't wait.

        Like choice(), 0 or more than 26 options raise ValueError before
        anything is sent. Delivery itself is best-effort.
        """
        option_labels(len(options))
        if not 0 <= recommended < len(options):
            recommended = 0
        await self.notify(format_choice_text(prompt, options, recommended=recommended))

    async def mark(self) -> int:
        """Confirm every queued update; returns how many were dropped."""
        if not await self._ready():
            return 0
        try:
            dropped = await self.feed.drain()
        except TelegramError as e:
            log.warning(f"Failed to mark update position: {e}")
            return 0
        return len(dropped)

    async def gather(self) -> list[str]:
        """Return texts the operator sent since the last mark/answer, without waiting."""
        if not await self._ready():
            return []
        try:
            updates = await self.feed.drain()
        except TelegramError as e:
            log.warning(f"Failed to gather messages: {e}")
            return []
        return [
            u.message.text
            for u in updates
            if u.message and u.message.chat_id == self.chat_id and u.message.text
        ]

    async def collect(
        self,
        prompt: str,
        stop_word: str = DEFAULT_STOP_WORD,
        timeout: float = DEFAULT_COLLECT_TIMEOUT_S,
    ) -> list[str]:
        """Send a prompt, then gather text replies until ``stop_word`` or timeout."""
        if not await self._ready():
            return []
        await self._skip_backlog()
        message_id = await self._dispatch(prompt)
        if message_id is None:
            return []

        question = Question(prompt=prompt, kind=QuestionKind.TEXT, timeout_s=max(0.0, timeout))
        pending = PendingRequest(
            message_id=message_id,
            question=question,
            deadline=time.monotonic() + question.timeout_s,
        )
        stop = stop_word.strip().lower()
        collected: list[str] = []

        async def handle(update: Update) -> bool | None:
            message = update.message
            if message is None or message.chat_id != self.chat_id or not message.text:
                return None
            if message.text.strip().lower() == stop:
                return True
            collected.append(message.text)
            return None

        self.pending = pending
        try:
            finished = await self.feed.wait_for(pending.deadline, handle)
        finally:
            self.pending = None

        if finished:
            count = len(collected)
            await self._annotate(
                pending, format_resolved(prompt, f"{count} message{'s' if count != 1 else ''}")
            )
        return collected
