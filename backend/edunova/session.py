from __future__ import annotations

import uuid
from collections import OrderedDict
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Tuple

from pydantic import BaseModel

from .content import AgeGroup, ContentType, GenerationRequest, export_filename
from .errors import (
	ConfigurationError,
	ErrorKind,
	GenerationError,
	GenerationInProgress,
	ValidationError,
)
from .gemini_client import GeminiClient
from .logging import get_logger
from .prompts import build_prompt
from .views import ContentView, PlainTextView, build_view
from .voice import VoiceAssistantState, VoiceContext

logger = get_logger(__name__)


FALLBACK_MESSAGE = "⚠️ Error generating content. Please check your API key and try again."


class GenerationResult(BaseModel):
	text: Optional[str] = None
	failure: Optional[ErrorKind] = None

	@property
	def ok(self) -> bool:
		return self.failure is None

	@property
	def display_text(self) -> str:
		return self.text if self.ok and self.text is not None else FALLBACK_MESSAGE


def _now_utc() -> datetime:
	return datetime.now(timezone.utc)


class GeneratorSession:
	"""Everything one open page knows: selections, last result and its view."""

	def __init__(self, *, voice_supported: bool = False) -> None:
		self.session_id: str = uuid.uuid4().hex
		self.age_group: AgeGroup = AgeGroup.YOUNGER
		self.content_type: ContentType = ContentType.LESSON_PLAN
		self.topic: str = ""
		self.request: Optional[GenerationRequest] = None
		self.result: Optional[GenerationResult] = None
		self.view: Optional[ContentView] = None
		self.loading: bool = False
		self.voice = VoiceAssistantState(supported=voice_supported)
		self.awaiting_topic: bool = False
		self.created_at: datetime = _now_utc()

	@property
	def result_text(self) -> Optional[str]:
		return self.result.display_text if self.result is not None else None

	def select(
		self,
		*,
		age_group: Optional[AgeGroup] = None,
		content_type: Optional[ContentType] = None,
		topic: Optional[str] = None,
	) -> None:
		if age_group is not None:
			self.age_group = AgeGroup(age_group)
		if topic is not None:
			self.topic = topic
		if content_type is not None and ContentType(content_type) is not self.content_type:
			self.content_type = ContentType(content_type)
			# The view always matches the selected content type
			if self.result is not None and self.result.ok:
				self.view = build_view(self.content_type, self.result.text)

	async def generate(self, client_factory: Callable[[], GeminiClient]) -> GenerationResult:
		if self.loading:
			raise GenerationInProgress("A generation request is already in progress.")
		request = GenerationRequest.submit(self.age_group, self.content_type, self.topic)
		prompt = build_prompt(request.content_type, request.age_group, request.topic)

		self.loading = True
		self.request = request
		self.result = None
		self.view = None
		client: Optional[GeminiClient] = None
		try:
			client = client_factory()
			text = await client.generate(prompt)
			self.result = GenerationResult(text=text)
		except (GenerationError, ConfigurationError) as err:
			logger.error("Error generating content (%s): %s", err.kind.value, err)
			self.result = GenerationResult(failure=err.kind)
		finally:
			self.loading = False
			if client is not None:
				await client.aclose()

		if self.result.ok:
			self.view = build_view(self.content_type, self.result.text)
		else:
			self.view = PlainTextView(text=FALLBACK_MESSAGE)
		return self.result

	def copy_text(self) -> str:
		if self.result is None:
			raise ValidationError("Nothing to copy yet.")
		return self.result.display_text

	def export(self) -> Tuple[str, str]:
		if self.result is None or self.request is None:
			raise ValidationError("Nothing to download yet.")
		filename = export_filename(self.request.content_type, self.request.topic, self.request.age_group)
		return filename, self.result.display_text

	def voice_context(self) -> VoiceContext:
		return VoiceContext(
			topic=self.topic,
			content_type=self.content_type,
			has_result=self.result is not None,
			awaiting_topic=self.awaiting_topic,
		)

	def to_payload(self) -> Dict[str, Any]:
		return {
			"session_id": self.session_id,
			"age_group": self.age_group.value,
			"content_type": self.content_type.value,
			"topic": self.topic,
			"loading": self.loading,
			"result": self.result_text,
			"failure": self.result.failure.value if self.result and self.result.failure else None,
			"view": self.view.to_payload() if self.view is not None else None,
			"voice": {
				"supported": self.voice.supported,
				"enabled": self.voice.enabled,
				"listening": self.voice.listening,
				"speaking": self.voice.speaking,
				"awaiting_topic": self.awaiting_topic,
			},
		}


class SessionRegistry:
	def __init__(self, limit: int) -> None:
		self.limit = max(1, limit)
		self._sessions: "OrderedDict[str, GeneratorSession]" = OrderedDict()

	def create(self, *, voice_supported: bool = False) -> GeneratorSession:
		session = GeneratorSession(voice_supported=voice_supported)
		self._sessions[session.session_id] = session
		while len(self._sessions) > self.limit:
			evicted, _ = self._sessions.popitem(last=False)
			logger.info("Evicted generator session %s", evicted)
		return session

	def get(self, session_id: str) -> Optional[GeneratorSession]:
		session = self._sessions.get(session_id)
		if session is not None:
			self._sessions.move_to_end(session_id)
		return session

	def drop(self, session_id: str) -> bool:
		return self._sessions.pop(session_id, None) is not None

	def __len__(self) -> int:
		return len(self._sessions)
