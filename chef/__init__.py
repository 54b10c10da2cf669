"""Ask a human operator questions through a Telegram bot."""

from __future__ import annotations

from .bot import Chef
from .config import ChefConfig, get_chef_config
from .errors import ChefConfigError, ChefError, TelegramError
from .models import Answer, PendingRequest, Question, QuestionKind
from .utils import load_env

__all__ = [
    "Answer",
    "Chef",
    "ChefConfig",
    "ChefConfigError",
    "ChefError",
    "PendingRequest",
    "Question",
    "QuestionKind",
    "TelegramError",
    "get_chef_config",
    "load_env",
]
