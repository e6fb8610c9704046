"""Shared fakes and fixtures.

Every external capability is replaced by a fake that records its calls, so
tests can assert that an invalid call never reached a provider.
"""

import logging

import pytest

from core.config import Settings
from core.providers import Providers
from core.trends import TrendScraper
from tools.mcp_server import build_registry

CREDENTIALS = {
    "GEMINI_API_KEY": "test-gemini-key",
    "ELEVENLABS_API_KEY": "test-elevenlabs-key",
    "HUGGINGFACE_API_KEY": "test-hf-key",
}


class FakeTextGenerator:
    def __init__(self, reply: str = ""):
        self.reply = reply
        self.calls = []

    async def generate(self, prompt: str, api_key: str) -> str:
        self.calls.append({"prompt": prompt, "api_key": api_key})
        return self.reply


class FakeSynthesizer:
    def __init__(self, name: str, credential: str, audio: bytes = b"ID3-fake-audio"):
        self.name = name
        self.credential = credential
        self.credential_hint = ""
        self.audio = audio
        self.calls = []

    async def synthesize(self, text: str, voice: str, api_key: str) -> bytes:
        self.calls.append({"text": text, "voice": voice, "api_key": api_key})
        return self.audio


class RecordingSource:
    def __init__(self, topics=None, error=None):
        self.topics = topics or []
        self.error = error
        self.calls = 0

    async def __call__(self, niche: str) -> list[str]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return [topic.format(niche=niche) for topic in self.topics]


@pytest.fixture
def settings(tmp_path):
    return Settings(
        environ=dict(CREDENTIALS),
        output_dir=tmp_path / "artifacts",
        log_file=tmp_path / "logs" / "content-creator.log",
    )


@pytest.fixture
def text_generator():
    return FakeTextGenerator()


@pytest.fixture
def trend_sources():
    return {
        "youtube": RecordingSource(["{niche} tutorial", "best {niche}"]),
        "reddit": RecordingSource(["{niche} drama", "best {niche}"]),
        "google-trends": RecordingSource(["how to {niche}"]),
    }


@pytest.fixture
def providers(text_generator, trend_sources):
    return Providers(
        text=text_generator,
        trends=TrendScraper(trend_sources),
        speech={
            "elevenlabs": FakeSynthesizer("elevenlabs", "ELEVENLABS_API_KEY"),
            "huggingface": FakeSynthesizer("huggingface", "HUGGINGFACE_API_KEY"),
        },
    )


@pytest.fixture
def test_logger():
    return logging.getLogger("tests.content_creator")


@pytest.fixture
def make_registry(settings, providers, test_logger):
    def _make(adapter: str):
        return build_registry(adapter, settings=settings, providers=providers, logger=test_logger)

    return _make


def viral_idea(**overrides) -> dict:
    idea = {
        "id": "idea-1",
        "title": "I Tried Every Budget Keyboard",
        "hook": "Nobody tells you this about cheap keyboards",
        "platform": "youtube",
        "category": "tech",
        "viralScore": 82,
        "trendingTopics": ["keyboards"],
        "targetAudience": "Budget PC builders",
        "thumbnailConcept": "Stack of keyboards, shocked face",
        "scriptOutline": [{"section": "Hook", "duration": 5, "keyPoints": ["price reveal"]}],
        "estimatedViews": {"min": 10000, "max": 90000, "confidence": 0.7},
        "seo": {"tags": ["keyboard"], "description": "Budget keyboards ranked", "keywords": ["keyboard"]},
        "generatedAt": "2025-03-01T12:00:00Z",
    }
    idea.update(overrides)
    return idea
