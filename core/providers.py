# =============================================================================
# core/providers.py  -  External capabilities behind small interfaces
# =============================================================================
#
# Handlers never talk to Gemini / ElevenLabs / HuggingFace directly.  They
# receive a Providers bundle inside ToolContext and call:
#
#   providers.text.generate(prompt, api_key)            -> str
#   providers.speech[name].synthesize(text, voice, key) -> bytes
#   providers.trends.fetch(niche, platforms, log)       -> list[str]
#
# Tests swap in fakes with call counters; production uses the classes below.
#
# DEADLINES:
#   Every external call is bounded by Settings.provider_timeout.  A timeout
#   or any transport / HTTP error becomes a ProviderError, which fails that
#   one tool call.  There are no retries.
# =============================================================================

import asyncio
from dataclasses import dataclass, field
from typing import Optional, Protocol

import httpx
from google import genai
from google.genai import errors as genai_errors

from core.config import ELEVENLABS_API_KEY, HUGGINGFACE_API_KEY, Settings
from core.errors import ProviderError
from core.trends import TrendScraper


class TextGenerator(Protocol):
    async def generate(self, prompt: str, api_key: str) -> str: ...


class SpeechSynthesizer(Protocol):
    name: str
    credential: str
    credential_hint: str

    async def synthesize(self, text: str, voice: str, api_key: str) -> bytes: ...


# -----------------------------------------------------------------------------
# Gemini
# -----------------------------------------------------------------------------
class GeminiTextGenerator:
    """Prompt in, free-form text out (which usually embeds some JSON).

    One client is kept per API key for the life of the process.
    """

    def __init__(self, model: str, timeout: float, client_factory=genai.Client):
        self.model = model
        self.timeout = timeout
        self.client_factory = client_factory
        self._clients = {}

    def client_for(self, api_key: str):
        if api_key not in self._clients:
            self._clients[api_key] = self.client_factory(api_key=api_key)
        return self._clients[api_key]

    async def generate(self, prompt: str, api_key: str) -> str:
        client = self.client_for(api_key)
        try:
            response = await asyncio.wait_for(
                client.aio.models.generate_content(model=self.model, contents=prompt),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            raise ProviderError(f"Gemini request timed out after {self.timeout:g}s") from None
        except genai_errors.APIError as exc:
            raise ProviderError(f"Gemini request failed: {exc}", {"status": exc.code}) from exc
        return response.text or ""


# -----------------------------------------------------------------------------
# Text-to-speech
# -----------------------------------------------------------------------------
# Voice names a caller may pass instead of a raw ElevenLabs voice id.
ELEVENLABS_VOICES = {
    "neutral": "21m00Tcm4TlvDq8ikWAM",
    "female": "21m00Tcm4TlvDq8ikWAM",
    "calm": "EXAVITQu4vr4xnSDxMaL",
    "male": "pNInz6obpgDQGcFmaJgB",
    "energetic": "ErXwobaYiN019PkySvjV",
}


class _HttpSynthesizer:
    def __init__(self, timeout: float, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.timeout = timeout
        self.transport = transport

    async def _post(self, url: str, headers: dict, payload: dict) -> bytes:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(url, headers=headers, json=payload)
                response.raise_for_status()
                return response.content
        except httpx.TimeoutException:
            raise ProviderError(f"{self.name} request timed out after {self.timeout:g}s") from None
        except httpx.HTTPError as exc:
            raise ProviderError(f"{self.name} request failed: {exc}") from exc


class ElevenLabsSynthesizer(_HttpSynthesizer):
    name = "elevenlabs"
    credential = ELEVENLABS_API_KEY
    credential_hint = 'Set it or use provider: "huggingface"'
    base_url = "https://api.elevenlabs.io/v1"
    model_id = "eleven_monolingual_v1"

    async def synthesize(self, text: str, voice: str, api_key: str) -> bytes:
        voice_id = ELEVENLABS_VOICES.get(voice or "neutral", voice)
        return await self._post(
            f"{self.base_url}/text-to-speech/{voice_id}",
            headers={"xi-api-key": api_key, "Content-Type": "application/json"},
            payload={
                "text": text,
                "model_id": self.model_id,
                "voice_settings": {"stability": 0.5, "similarity_boost": 0.75},
            },
        )


class HuggingFaceSynthesizer(_HttpSynthesizer):
    name = "huggingface"
    credential = HUGGINGFACE_API_KEY
    credential_hint = ""
    url = "https://api-inference.huggingface.co/models/facebook/fastspeech2-en-ljspeech"

    async def synthesize(self, text: str, voice: str, api_key: str) -> bytes:
        # The hosted model has a single voice; ``voice`` is accepted and ignored.
        return await self._post(
            self.url,
            headers={"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"},
            payload={"inputs": text},
        )


# -----------------------------------------------------------------------------
# Bundle
# -----------------------------------------------------------------------------
@dataclass
class Providers:
    text: TextGenerator
    trends: TrendScraper
    speech: dict = field(default_factory=dict)

    @classmethod
    def from_settings(cls, settings: Settings) -> "Providers":
        timeout = settings.provider_timeout
        return cls(
            text=GeminiTextGenerator(settings.gemini_model, timeout),
            trends=TrendScraper.default(timeout),
            speech={
                "elevenlabs": ElevenLabsSynthesizer(timeout),
                "huggingface": HuggingFaceSynthesizer(timeout),
            },
        )
