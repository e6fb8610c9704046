"""Real provider classes against stubbed transports."""

import asyncio
import json
from types import SimpleNamespace

import httpx
import pytest
from google.genai import errors as genai_errors

from core.errors import ProviderError
from core.providers import (
    ELEVENLABS_VOICES,
    ElevenLabsSynthesizer,
    GeminiTextGenerator,
    HuggingFaceSynthesizer,
    Providers,
)
from core.trends import TrendScraper
from tools.mcp_server import build_registry


class StubGenaiClient:
    """Mimics ``genai.Client`` far enough for ``client.aio.models.generate_content``."""

    instances = []

    def __init__(self, api_key, reply="{}", delay=0.0, error=None):
        self.api_key = api_key
        self.reply = reply
        self.delay = delay
        self.error = error
        self.aio = SimpleNamespace(models=SimpleNamespace(generate_content=self._generate_content))
        StubGenaiClient.instances.append(self)

    async def _generate_content(self, model, contents):
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.reply)


def stub_factory(**behaviour):
    def factory(api_key):
        return StubGenaiClient(api_key, **behaviour)

    return factory


class TestGemini:
    @pytest.mark.asyncio
    async def test_reply_text_is_returned_and_client_is_reused(self):
        StubGenaiClient.instances.clear()
        generator = GeminiTextGenerator("gemini-test", timeout=5, client_factory=stub_factory(reply='{"ok": 1}'))

        assert await generator.generate("prompt", "key-a") == '{"ok": 1}'
        assert await generator.generate("prompt", "key-a") == '{"ok": 1}'
        await generator.generate("prompt", "key-b")

        assert [client.api_key for client in StubGenaiClient.instances] == ["key-a", "key-b"]

    @pytest.mark.asyncio
    async def test_slow_reply_hits_the_deadline(self):
        generator = GeminiTextGenerator("gemini-test", timeout=0.01, client_factory=stub_factory(delay=1))

        with pytest.raises(ProviderError, match="timed out after 0.01s"):
            await generator.generate("prompt", "key")

    @pytest.mark.asyncio
    async def test_api_errors_become_provider_errors(self):
        error = genai_errors.ServerError(503, {"error": {"message": "overloaded", "status": "UNAVAILABLE"}})
        generator = GeminiTextGenerator("gemini-test", timeout=5, client_factory=stub_factory(error=error))

        with pytest.raises(ProviderError) as excinfo:
            await generator.generate("prompt", "key")
        assert excinfo.value.details == {"status": 503}

    @pytest.mark.asyncio
    async def test_deadline_failure_is_an_error_envelope(self, settings, text_generator, trend_sources):
        providers = Providers(
            text=GeminiTextGenerator("gemini-test", timeout=0.01, client_factory=stub_factory(delay=1)),
            trends=TrendScraper(trend_sources),
        )
        registry = build_registry("idea-generator", settings=settings, providers=providers)
        envelope = await registry.call(
            "predict_virality",
            {"title": "t", "description": "d", "platform": "tiktok", "niche": "n"},
            trace_id="t-slow",
        )

        assert envelope.is_error
        assert envelope.payload() == {"error": "Gemini request timed out after 0.01s", "traceId": "t-slow"}


class RecordingTransport:
    """httpx.MockTransport that remembers each request."""

    def __init__(self, status=200, content=b"RIFF-audio", error=None):
        self.requests = []
        self.status = status
        self.content = content
        self.error = error
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error("stubbed failure", request=request)
        return httpx.Response(self.status, content=self.content)


def _speech_registry(settings, text_generator, trend_sources, transport):
    providers = Providers(
        text=text_generator,
        trends=TrendScraper(trend_sources),
        speech={
            "elevenlabs": ElevenLabsSynthesizer(timeout=5, transport=transport.transport),
            "huggingface": HuggingFaceSynthesizer(timeout=5, transport=transport.transport),
        },
    )
    return build_registry("script-to-video", settings=settings, providers=providers)


class TestSynthesizers:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("voice, voice_id", [
        ("calm", "EXAVITQu4vr4xnSDxMaL"),
        ("", ELEVENLABS_VOICES["neutral"]),
        ("customVoice123", "customVoice123"),
    ])
    async def test_elevenlabs_voice_resolution(self, voice, voice_id):
        transport = RecordingTransport()
        synthesizer = ElevenLabsSynthesizer(timeout=5, transport=transport.transport)

        assert await synthesizer.synthesize("hello", voice, "xi-key") == b"RIFF-audio"

        [request] = transport.requests
        assert request.url.path == f"/v1/text-to-speech/{voice_id}"
        assert request.headers["xi-api-key"] == "xi-key"
        assert json.loads(request.content)["text"] == "hello"

    @pytest.mark.asyncio
    async def test_huggingface_sends_bearer_token(self):
        transport = RecordingTransport()
        synthesizer = HuggingFaceSynthesizer(timeout=5, transport=transport.transport)

        await synthesizer.synthesize("hello", "ignored", "hf-key")

        [request] = transport.requests
        assert request.headers["Authorization"] == "Bearer hf-key"
        assert json.loads(request.content) == {"inputs": "hello"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("provider", ["elevenlabs", "huggingface"])
    async def test_http_failure_is_an_error_envelope_without_artifact(
        self, settings, text_generator, trend_sources, provider
    ):
        registry = _speech_registry(settings, text_generator, trend_sources, RecordingTransport(status=500))
        envelope = await registry.call("generate_voiceover", {"script": "hello", "provider": provider})

        assert envelope.is_error
        assert envelope.payload()["error"].startswith(f"{provider} request failed")
        assert not settings.output_dir.exists()

    @pytest.mark.asyncio
    async def test_timeout_is_a_provider_error(self):
        transport = RecordingTransport(error=httpx.ReadTimeout)
        synthesizer = HuggingFaceSynthesizer(timeout=5, transport=transport.transport)

        with pytest.raises(ProviderError, match="huggingface request timed out after 5s"):
            await synthesizer.synthesize("hello", "neutral", "hf-key")

    @pytest.mark.asyncio
    async def test_successful_synthesis_writes_the_artifact(self, settings, text_generator, trend_sources):
        transport = RecordingTransport(content=b"MP3-bytes")
        registry = _speech_registry(settings, text_generator, trend_sources, transport)
        envelope = await registry.call(
            "generate_voiceover", {"script": "hello", "provider": "elevenlabs", "voice": "male"}, trace_id="t-tts"
        )

        assert (settings.output_dir / "voiceover-t-tts.mp3").read_bytes() == b"MP3-bytes"
        assert envelope.payload()["provider"] == "elevenlabs"
        assert transport.requests[0].url.path.endswith(ELEVENLABS_VOICES["male"])
