from __future__ import annotations

import os
from dataclasses import dataclass

from chef.errors import ChefConfigError

DEFAULT_API_URL = "https://api.telegram.org"
DEFAULT_PROMPT_TIMEOUT_MS = 30 * 60 * 1000
DEFAULT_HTTP_TIMEOUT_S = 30.0


@dataclass(frozen=True)
class ChefConfig:
    token: str
    chat_id: int | None = None
    prompt_timeout_s: float = DEFAULT_PROMPT_TIMEOUT_MS / 1000
    api_url: str = DEFAULT_API_URL
    http_timeout_s: float = DEFAULT_HTTP_TIMEOUT_S

    @property
    def bot_url(self) -> str:
        return f"{self.api_url}/bot{self.token}"


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ChefConfigError(f"{name} must be a number, got {raw!r}") from e
    if value <= 0:
        raise ChefConfigError(f"{name} must be positive, got {raw!r}")
    return value


def _env_chat_id() -> int | None:
    raw = (os.getenv("TELEGRAM_CHAT_ID") or "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError as e:
        raise ChefConfigError(f"TELEGRAM_CHAT_ID must be an integer, got {raw!r}") from e


def get_chef_config() -> ChefConfig:
    """Build the client configuration from the environment.

    Call load_env() first if .env files should be honoured.
    """
    token = (os.getenv("TELEGRAM_BOT_TOKEN") or "").strip()
    if not token:
        raise ChefConfigError(
            "TELEGRAM_BOT_TOKEN not found. "
            "Set via: export TELEGRAM_BOT_TOKEN=xxx, "
            "or add to .env.local: TELEGRAM_BOT_TOKEN=xxx"
        )

    api_url = (os.getenv("TELEGRAM_API_URL") or "").strip() or DEFAULT_API_URL

    return ChefConfig(
        token=token,
        chat_id=_env_chat_id(),
        prompt_timeout_s=_env_float("PROMPT_TIMEOUT_MS", DEFAULT_PROMPT_TIMEOUT_MS) / 1000,
        api_url=api_url.rstrip("/"),
        http_timeout_s=_env_float("CHEF_HTTP_TIMEOUT_S", DEFAULT_HTTP_TIMEOUT_S),
    )
