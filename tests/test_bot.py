from __future__ import annotations

import asyncio
import time

import pytest

from chef.bot import Chef
from chef.config import ChefConfig
from chef.errors import ChefConfigError, TelegramError
from chef.keyboards import REMOVE_KEYBOARD
from chef.telegram.models import Update
from chef.updates import UpdateFeed
from tests.fakes import CHAT_ID, OTHER_CHAT_ID, FakeTelegram


class SlowTelegram(FakeTelegram):
    """Long polls come back only after ``delay_s``, with whatever is queued."""

    def __init__(self, delay_s: float) -> None:
        super().__init__()
        self.delay_s = delay_s

    async def get_updates(
        self,
        *,
        offset: int | None = None,
        limit: int | None = None,
        timeout: int = 0,
    ) -> list[Update]:
        if timeout:
            await asyncio.sleep(self.delay_s)
        return await super().get_updates(offset=offset, limit=limit, timeout=0)


def test_ask_returns_reply_and_marks_message(chef: Chef, fake: FakeTelegram) -> None:
    fake.reply_text("demo")

    result = asyncio.run(chef.ask("Project name?"))

    assert result == "demo"
    assert fake.sent[0]["text"] == "Project name?"
    assert fake.sent[0]["reply_markup"] is None
    assert fake.edits == [
        {
            "chat_id": CHAT_ID,
            "message_id": fake.sent[0]["message_id"],
            "text": "Project name?\n\n✅ demo",
            "reply_markup": REMOVE_KEYBOARD,
        }
    ]
    assert chef.pending is None


def test_ask_ignores_other_chats(chef: Chef, fake: FakeTelegram) -> None:
    fake.reply_text("intruder", chat_id=OTHER_CHAT_ID)
    fake.reply_text("mine")

    assert asyncio.run(chef.ask("Name?")) == "mine"


def test_ask_skips_messages_sent_before_the_question(chef: Chef, fake: FakeTelegram) -> None:
    fake.push_text("old answer")
    fake.push_text("older answer")
    fake.reply_text("fresh")

    assert asyncio.run(chef.ask("Name?")) == "fresh"


def test_choice_tap_resolves_to_index(chef: Chef, fake: FakeTelegram) -> None:
    fake.reply_tap("C")

    result = asyncio.run(chef.choice("Pick one:", ["A", "B", "C"], 2))

    assert result == 2
    sent = fake.sent[0]
    assert sent["text"] == "Pick one:\n\nA) A\nB) B\nC) C"
    rows = sent["reply_markup"]["inline_keyboard"]
    assert [len(r) for r in rows] == [2, 1]
    assert [b["text"] for r in rows for b in r] == ["A", "B", "C"]
    assert len(fake.answered_callbacks) == 1
    assert fake.edits[0]["text"].endswith("✅ C) C")


def test_choice_accepts_typed_letter(chef: Chef, fake: FakeTelegram) -> None:
    fake.reply_text("Test Master")
    fake.reply_text("z")
    fake.reply_text(" b ")

    assert asyncio.run(chef.choice("Which skill?", ["API Architect", "Test Master"])) == 1


def test_choice_ignores_taps_on_other_messages(chef: Chef, fake: FakeTelegram) -> None:
    fake.reply_tap("A", message_id=1)
    fake.reply_tap("B")

    assert asyncio.run(chef.choice("Pick:", ["x", "y"])) == 1
    assert len(fake.answered_callbacks) == 2


def test_choice_rejects_bad_arguments_before_sending(chef: Chef, fake: FakeTelegram) -> None:
    with pytest.raises(ValueError):
        asyncio.run(chef.choice("Pick:", []))
    with pytest.raises(ValueError):
        asyncio.run(chef.choice("Pick:", [str(i) for i in range(27)]))
    with pytest.raises(ValueError):
        asyncio.run(chef.choice("Pick:", ["a"], columns=0))
    assert fake.sent == []


def test_confirm_button_and_text(chef: Chef, fake: FakeTelegram) -> None:
    fake.reply_tap("n")
    assert asyncio.run(chef.confirm("Proceed?")) is False
    assert fake.sent[0]["reply_markup"]["inline_keyboard"][0][0]["callback_data"] == "y"

    fake.reply_text("maybe")
    fake.reply_text("  OK ")
    assert asyncio.run(chef.confirm("Deploy?")) is True
    assert fake.edits[-1]["text"] == "Deploy?\n\n✅ Yes"


def test_timeout_returns_none_within_bounds(chef: Chef, fake: FakeTelegram) -> None:
    start = time.monotonic()
    result = asyncio.run(chef.ask("Anyone?", timeout=0.3))
    elapsed = time.monotonic() - start

    assert result is None
    assert 0.3 <= elapsed < 1.5
    assert fake.edits == []
    assert chef.pending is None


def test_reply_after_timeout_does_not_answer_next_question(chef: Chef, fake: FakeTelegram) -> None:
    assert asyncio.run(chef.ask("First?", timeout=0.1)) is None

    fake.push_text("late reply to first")
    fake.reply_text("second")

    assert asyncio.run(chef.ask("Second?")) == "second"


def test_send_failure_returns_none(chef: Chef, fake: FakeTelegram) -> None:
    fake.fail_sends = True

    assert asyncio.run(chef.ask("Name?")) is None
    assert asyncio.run(chef.confirm("Ok?")) is None
    assert asyncio.run(chef.choice("Pick:", ["a", "b"])) is None
    assert asyncio.run(chef.collect("Ideas?")) == []


def test_poll_errors_are_retried(chef: Chef, fake: FakeTelegram) -> None:
    fake.fail_polls = 2
    fake.reply_text("eventually")

    assert asyncio.run(chef.ask("Name?")) == "eventually"


def test_failed_edit_keeps_answer(chef: Chef, fake: FakeTelegram) -> None:
    fake.fail_edits = True
    fake.reply_text("y")

    assert asyncio.run(chef.confirm("Go?")) is True


def test_notify_never_raises(chef: Chef, fake: FakeTelegram) -> None:
    asyncio.run(chef.notify("Done!"))
    assert fake.sent[-1]["text"] == "Done!"

    fake.fail_sends = True
    assert asyncio.run(chef.notify("lost")) is None
    assert fake.get_updates_calls == []


def test_question_marks_recommended(chef: Chef, fake: FakeTelegram) -> None:
    asyncio.run(chef.question("Which?", ["one", "two", "three"], recommended=1))

    assert fake.sent[0]["text"] == "Which?\n\nA) one\nB) two ⭐\nC) three"


def test_collect_until_stop_word(chef: Chef, fake: FakeTelegram) -> None:
    fake.reply_text("idea one")
    fake.reply_text("idea two", chat_id=OTHER_CHAT_ID)
    fake.reply_text("idea three")
    fake.reply_text("LFG")
    fake.reply_text("after stop")

    collected = asyncio.run(chef.collect("Any ideas?", timeout=5))

    assert collected == ["idea one", "idea three"]
    assert fake.edits[0]["text"] == "Any ideas?\n\n✅ 2 messages"


def test_collect_timeout_returns_partial(chef: Chef, fake: FakeTelegram) -> None:
    fake.reply_text("only one")

    assert asyncio.run(chef.collect("Ideas?", timeout=0.2)) == ["only one"]
    assert fake.edits == []


def test_mark_and_gather(chef: Chef, fake: FakeTelegram) -> None:
    fake.push_text("before mark")
    assert asyncio.run(chef.mark()) == 1

    fake.push_text("hello")
    fake.push_text("elsewhere", chat_id=OTHER_CHAT_ID)
    fake.push_text("world")

    assert asyncio.run(chef.gather()) == ["hello", "world"]
    assert asyncio.run(chef.gather()) == []


def test_chat_is_discovered_when_not_configured(fake: FakeTelegram) -> None:
    fake.push_text("hi bot", chat_id=99)
    chef = Chef(ChefConfig(token="t"), telegram=fake)

    asyncio.run(chef.start())

    assert chef.chat_id == 99


def test_missing_chat_is_a_config_error(fake: FakeTelegram) -> None:
    chef = Chef(ChefConfig(token="t"), telegram=fake)

    async def scenario() -> None:
        async with chef:
            pass

    with pytest.raises(ChefConfigError):
        asyncio.run(scenario())
    assert fake.closed


def test_reply_in_batch_returned_after_deadline_is_ignored() -> None:
    slow = SlowTelegram(delay_s=0.3)
    chef = Chef(ChefConfig(token="t", chat_id=CHAT_ID), telegram=slow)
    slow.reply_text("too late")

    assert asyncio.run(chef.ask("Name?", timeout=0.1)) is None
    assert slow.edits == []
    assert [u.message.text for u in slow.queue] == ["too late"]


def test_discovery_keeps_queued_messages(fake: FakeTelegram) -> None:
    for i in range(15):
        fake.push_text(f"m{i}", chat_id=99)
    chef = Chef(ChefConfig(token="t"), telegram=fake)

    async def scenario() -> list[str]:
        async with chef:
            return await chef.gather()

    assert asyncio.run(scenario()) == [f"m{i}" for i in range(15)]
    assert chef.chat_id == 99


def test_lookup_failure_collapses_to_no_answer(fake: FakeTelegram) -> None:
    chef = Chef(ChefConfig(token="t", prompt_timeout_s=0.1), telegram=fake)
    chef.feed = UpdateFeed(fake, retry_delay_s=0.01)

    fake.fail_polls = 1
    assert asyncio.run(chef.ask("Name?")) is None

    fake.fail_polls = 1
    assert asyncio.run(chef.notify("Done!")) is None

    fake.fail_polls = 1
    assert asyncio.run(chef.collect("Ideas?")) == []

    fake.fail_polls = 1
    assert asyncio.run(chef.gather()) == []
    assert fake.sent == []
    assert chef.chat_id is None


def test_start_raises_transport_errors_as_is(fake: FakeTelegram) -> None:
    fake.fail_polls = 1
    chef = Chef(ChefConfig(token="t"), telegram=fake)

    with pytest.raises(TelegramError) as exc_info:
        asyncio.run(chef.start())
    assert not isinstance(exc_info.value, ChefConfigError)


def test_question_rejects_bad_option_counts(chef: Chef, fake: FakeTelegram) -> None:
    with pytest.raises(ValueError):
        asyncio.run(chef.question("Which?", []))
    with pytest.raises(ValueError):
        asyncio.run(chef.question("Which?", [str(i) for i in range(27)]))
    assert fake.sent == []
