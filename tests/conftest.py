import os
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from dotenv import load_dotenv

# Settings are read when the package is first imported, so required values
# must be present before any test module imports daily_hn_bot.
os.environ.setdefault("LINE_CHANNEL_SECRET", "test-channel-secret")
os.environ.setdefault("LINE_CHANNEL_TOKEN", "test-channel-token")
os.environ.setdefault("OPENAI_API_KEY", "sk-test")
os.environ.setdefault("KAGI_API_KEY", "test-kagi-key")
os.environ.setdefault("PROMPTS_DIR", str(Path(__file__).resolve().parents[1] / "data" / "prompts"))

from daily_hn_bot.config import get_settings  # noqa: E402
from daily_hn_bot.line.client import LineClient  # noqa: E402
from daily_hn_bot.line.verify import sign  # noqa: E402
from daily_hn_bot.llm.resolver import CommandResolver  # noqa: E402
from daily_hn_bot.retrieval.stories import StorySource  # noqa: E402
from daily_hn_bot.retrieval.summarize import Summarizer  # noqa: E402
from daily_hn_bot.schemas.story import Story  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def _load_env():
    # Load .env once per session to avoid side-effects on import time
    load_dotenv()


def make_stories(count: int):
    return [Story(title=f"Story {i}", link=f"https://example.com/{i}") for i in range(1, count + 1)]


def signed_headers(body: bytes) -> dict:
    secret = get_settings().LINE_CHANNEL_SECRET.encode("utf-8")
    return {"x-line-signature": sign(secret, body), "content-type": "application/json"}


@pytest.fixture
def stories():
    return make_stories(10)


@pytest.fixture
def fake_story_source(stories):
    source = MagicMock(spec=StorySource)
    source.fetch = AsyncMock(return_value=stories)
    return source


@pytest.fixture
def fake_summarizer():
    summarizer = MagicMock(spec=Summarizer)
    summarizer.summarize_url = AsyncMock(side_effect=lambda url: f"summary of {url}")
    summarizer.summarize_or_placeholder = AsyncMock(side_effect=lambda url: f"summary of {url}")
    return summarizer


@pytest.fixture
def fake_messenger():
    messenger = MagicMock(spec=LineClient)
    messenger.reply = AsyncMock()
    messenger.push = AsyncMock()
    messenger.broadcast = AsyncMock()
    return messenger


@pytest.fixture
def fake_resolver():
    resolver = MagicMock(spec=CommandResolver)
    resolver.resolve = AsyncMock()
    return resolver


@pytest.fixture
def story_factory():
    return make_stories


@pytest.fixture
def sign_headers():
    return signed_headers
