"""Reply validation.

Each helper returns an ``Answer`` when the candidate fits the question's
expected shape and ``None`` when it should be ignored.
"""

from __future__ import annotations

import string

from chef.keyboards import CONFIRM_NO_DATA, CONFIRM_YES_DATA
from chef.models import Answer, Question, QuestionKind

YES_WORDS = frozenset({"yes", "y", "ok", "1"})
NO_WORDS = frozenset({"no", "n", "0"})


def parse_confirm_text(text: str | None) -> bool | None:
    normalized = (text or "").strip().lower()
    if normalized in YES_WORDS:
        return True
    if normalized in NO_WORDS:
        return False
    return None


def parse_choice_label(text: str | None, count: int) -> int | None:
    """Map a typed single letter to an option index, if it is in range."""
    normalized = (text or "").strip().upper()
    if len(normalized) != 1 or normalized not in string.ascii_uppercase:
        return None
    index = string.ascii_uppercase.index(normalized)
    if index >= count:
        return None
    return index


def _confirm_answer(value: bool) -> Answer:
    return Answer(value=value, display="Yes" if value else "No")


def _choice_answer(question: Question, index: int) -> Answer:
    label = string.ascii_uppercase[index]
    return Answer(value=index, display=f"{label}) {question.options[index]}")


def resolve_text(question: Question, text: str | None) -> Answer | None:
    """Validate a typed message against the question."""
    if question.kind is QuestionKind.TEXT:
        if not text or not text.strip():
            return None
        return Answer(value=text, display=text)

    if question.kind is QuestionKind.CONFIRM:
        value = parse_confirm_text(text)
        return None if value is None else _confirm_answer(value)

    index = parse_choice_label(text, len(question.options))
    return None if index is None else _choice_answer(question, index)


def resolve_callback(question: Question, data: str | None) -> Answer | None:
    """Validate a button tap's callback data against the question."""
    if question.kind is QuestionKind.CONFIRM:
        if data == CONFIRM_YES_DATA:
            return _confirm_answer(True)
        if data == CONFIRM_NO_DATA:
            return _confirm_answer(False)
        return None

    if question.kind is QuestionKind.CHOICE:
        if not data or len(data) != 1 or data not in string.ascii_uppercase:
            return None
        index = string.ascii_uppercase.index(data)
        if index >= len(question.options):
            return None
        return _choice_answer(question, index)

    return None
