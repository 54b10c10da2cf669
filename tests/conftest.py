from __future__ import annotations

import pytest

from chef.bot import Chef
from chef.config import ChefConfig
from chef.updates import UpdateFeed
from tests.fakes import CHAT_ID, FakeTelegram


@pytest.fixture
def fake() -> FakeTelegram:
    return FakeTelegram()


@pytest.fixture
def config() -> ChefConfig:
    return ChefConfig(token="test-token", chat_id=CHAT_ID, prompt_timeout_s=5.0)


@pytest.fixture
def chef(config: ChefConfig, fake: FakeTelegram) -> Chef:
    client = Chef(config, telegram=fake)
    client.feed = UpdateFeed(fake, retry_delay_s=0.01)
    return client
