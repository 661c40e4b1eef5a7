"""Speech capabilities used by the voice assistant.

Recognition and synthesis are platform services, so the assistant only talks
to a ``SpeechCapability``. ``RelayCapability`` serves the HTTP API: the browser
recognizes speech itself, posts the transcript, and plays back whatever the
assistant queued with ``speak``. ``CloudSpeechRecognizer`` transcribes uploaded
audio with Google Cloud Speech-to-Text.
"""

from __future__ import annotations

import asyncio
from typing import Any, List, Optional, Protocol

from google.api_core.exceptions import GoogleAPIError
from google.cloud import speech_v1p1beta1 as speech
from pydantic import BaseModel, Field

from .errors import CapabilityError, CapabilityUnsupported
from .logging import get_logger
from .settings import settings

logger = get_logger(__name__)


class SpeechOptions(BaseModel):
	rate: float = Field(default=1.0, gt=0, le=10)
	pitch: float = Field(default=1.0, ge=0, le=2)
	volume: float = Field(default=1.0, ge=0, le=1)
	voice_hint: Optional[str] = None

	@classmethod
	def from_settings(cls) -> "SpeechOptions":
		return cls(
			rate=settings.speech_rate,
			pitch=settings.speech_pitch,
			volume=settings.speech_volume,
			voice_hint=settings.speech_voice_hint,
		)


class Alternative(BaseModel):
	transcript: str
	confidence: float = 0.0


class Recognition(BaseModel):
	transcript: str
	confidence: float = 0.0
	alternatives: List[Alternative] = Field(default_factory=list)

	@classmethod
	def from_alternatives(cls, alternatives: List[Alternative]) -> "Recognition":
		usable = [a for a in alternatives if a.transcript.strip()]
		if not usable:
			raise CapabilityError("no speech recognized")
		best = max(usable, key=lambda a: a.confidence)
		return cls(transcript=best.transcript.strip(), confidence=best.confidence, alternatives=usable)


class Utterance(BaseModel):
	text: str
	options: SpeechOptions


class SpeechCapability(Protocol):
	def is_supported(self) -> bool: ...

	async def recognize_once(self) -> Recognition: ...

	async def speak(self, text: str, options: SpeechOptions) -> None: ...


class RelayCapability:
	"""Capability backed by a browser that already did the recognition."""

	def __init__(self, recognitions: Optional[List[Recognition]] = None, *, supported: bool = True) -> None:
		self._pending: List[Recognition] = list(recognitions or [])
		self._supported = supported
		self.utterances: List[Utterance] = []

	def is_supported(self) -> bool:
		return self._supported

	async def recognize_once(self) -> Recognition:
		if not self._pending:
			raise CapabilityError("no transcript was relayed")
		return self._pending.pop(0)

	async def speak(self, text: str, options: SpeechOptions) -> None:
		# Playback happens in the browser once the response arrives
		self.utterances.append(Utterance(text=text, options=options))


class CloudSpeechRecognizer:
	def __init__(self, language_code: Optional[str] = None, *, client: Any = None) -> None:
		self.language_code = language_code or settings.speech_language_code
		self._client = client

	def _get_client(self) -> Any:
		if self._client is None:
			try:
				self._client = speech.SpeechClient()
			except Exception as e:
				raise CapabilityUnsupported(f"Cloud speech recognition unavailable: {e}") from e
		return self._client

	def probe(self) -> bool:
		try:
			self._get_client()
		except CapabilityUnsupported as e:
			logger.info("%s", e)
			return False
		return True

	async def recognize(self, audio_content: bytes) -> Recognition:
		if not audio_content:
			raise CapabilityError("Empty audio payload received.")
		client = self._get_client()
		audio = speech.RecognitionAudio(content=audio_content)
		config = speech.RecognitionConfig(
			language_code=self.language_code,
			model="default",
			profanity_filter=True,
			enable_automatic_punctuation=True,
			max_alternatives=5,
		)
		try:
			response = await asyncio.to_thread(client.recognize, config=config, audio=audio)
		except GoogleAPIError as e:
			raise CapabilityError(f"Speech recognition API error: {e}") from e
		if not response.results:
			raise CapabilityError("No speech recognized.")
		# Each result is a consecutive chunk of audio; keep its best alternative
		chunks: List[Recognition] = []
		for result in response.results:
			chunks.append(Recognition.from_alternatives([
				Alternative(transcript=alt.transcript, confidence=alt.confidence)
				for alt in result.alternatives
			]))
		transcript = " ".join(c.transcript for c in chunks)
		confidence = sum(c.confidence for c in chunks) / len(chunks)
		return Recognition(transcript=transcript, confidence=confidence, alternatives=chunks[0].alternatives)
