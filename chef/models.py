"""Question/answer records shared by the client and the reply parsers."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum


class QuestionKind(str, Enum):
    TEXT = "text"
    CONFIRM = "confirm"
    CHOICE = "choice"


@dataclass(frozen=True)
class Question:
    """One interaction request to the operator."""

    prompt: str
    kind: QuestionKind
    timeout_s: float
    options: tuple[str, ...] = ()
    columns: int = 4
    created_at: float = field(default_factory=time.time)


@dataclass(frozen=True)
class Answer:
    """A resolved reply.

    ``value`` is the text for TEXT questions, a bool for CONFIRM and the
    zero-based option index for CHOICE. ``display`` is what gets shown next to
    the check mark on the original message.
    """

    value: str | bool | int
    display: str


@dataclass
class PendingRequest:
    """The single in-flight question, keyed by the dispatched message id."""

    message_id: int
    question: Question
    deadline: float  # time.monotonic() clock
