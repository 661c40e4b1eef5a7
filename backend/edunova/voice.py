"""Voice command interpretation and the listen/respond pipeline.

``interpret`` is best-effort keyword matching, not a grammar. Rules are tried
in declared order and the first match wins, so overlapping phrases ("make a
quiz", "study guide") resolve to whichever rule comes first.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, List, Optional, Tuple

from pydantic import BaseModel

from .content import AGE_GROUP_LABELS, CONTENT_TYPES, AgeGroup, ContentType
from .errors import CapabilityError, CapabilityUnsupported, GenerationInProgress, ValidationError
from .logging import get_logger
from .speech import SpeechCapability, SpeechOptions

if TYPE_CHECKING:
	from .gemini_client import GeminiClient
	from .session import GeneratorSession

logger = get_logger(__name__)


VOICE_UNSUPPORTED = "Voice features are not supported in this browser."
DIDNT_CATCH = "Sorry, I didn't catch that. Please try again."
ASK_TOPIC = "What topic would you like me to create content about?"

AGE_PHRASES: List[Tuple[AgeGroup, Tuple[str, ...]]] = [
	(AgeGroup.YOUNGER, ("6 to 8", "six to eight", "6-8", "younger")),
	(AgeGroup.OLDER, ("9 to 12", "nine to twelve", "9-12", "older")),
]

CONTENT_KEYWORDS: List[Tuple[str, ContentType]] = [
	("lesson plan", ContentType.LESSON_PLAN),
	("lesson", ContentType.LESSON_PLAN),
	("flashcard", ContentType.FLASHCARDS),
	("flash card", ContentType.FLASHCARDS),
	("quiz", ContentType.QUIZ),
	("test", ContentType.QUIZ),
	("study guide", ContentType.STUDY_GUIDE),
	("guide", ContentType.STUDY_GUIDE),
	("tutorial", ContentType.TUTORIAL),
	("step by step", ContentType.TUTORIAL),
]

GENERATE_WORDS = ("generate", "create", "make")
READ_WORDS = ("read", "speak")

# "about" wins over "on"/"for" when both appear
EMBEDDED_TOPIC_RES = (
	re.compile(r"\babout\s+(.+)$", re.IGNORECASE),
	re.compile(r"\b(?:on|for)\s+(.+)$", re.IGNORECASE),
)
TOPIC_REMAINDER_RE = re.compile(r"\b(?:topic|about)\b(?:\s+is\b)?[\s:,]*(.*)$", re.IGNORECASE)


class Intent(str, Enum):
	SET_AGE_GROUP = "set_age_group"
	SET_CONTENT_TYPE = "set_content_type"
	SET_TOPIC = "set_topic"
	GENERATE = "generate"
	ASK_TOPIC = "ask_topic"
	READ_ALOUD = "read_aloud"
	UNKNOWN = "unknown"


class VoiceAction(BaseModel):
	intent: Intent
	reply: str
	age_group: Optional[AgeGroup] = None
	content_type: Optional[ContentType] = None
	# For GENERATE, None means "use the topic already set"
	topic: Optional[str] = None


@dataclass
class VoiceContext:
	topic: str = ""
	content_type: ContentType = ContentType.LESSON_PLAN
	has_result: bool = False
	awaiting_topic: bool = False


@dataclass
class VoiceAssistantState:
	supported: bool = False
	enabled: bool = False
	listening: bool = False
	speaking: bool = False

	def toggle(self) -> bool:
		if not self.supported:
			raise CapabilityUnsupported(VOICE_UNSUPPORTED)
		self.enabled = not self.enabled
		return self.enabled


def _has_word(text: str, word: str) -> bool:
	return re.search(rf"\b{re.escape(word)}s?\b", text) is not None


def _clean_topic(value: str) -> str:
	return value.strip().strip(".!?,").strip()


def _embedded_topic(original: str) -> str:
	for pattern in EMBEDDED_TOPIC_RES:
		match = pattern.search(original)
		if match:
			return _clean_topic(match.group(1))
	return ""


def _generate_action(topic: str, content_type: ContentType) -> VoiceAction:
	label = CONTENT_TYPES[content_type].label
	return VoiceAction(intent=Intent.GENERATE, reply=f"Generating {label} about {topic}.")


def interpret(transcript: str, context: VoiceContext) -> VoiceAction:
	original = (transcript or "").strip()
	text = original.lower()
	if not text:
		return VoiceAction(intent=Intent.UNKNOWN, reply=DIDNT_CATCH)

	if context.awaiting_topic:
		topic = _clean_topic(original)
		if not topic:
			return VoiceAction(intent=Intent.ASK_TOPIC, reply=ASK_TOPIC)
		action = _generate_action(topic, context.content_type)
		action.topic = topic
		return action

	for age_group, phrases in AGE_PHRASES:
		if any(_has_word(text, phrase) for phrase in phrases):
			return VoiceAction(
				intent=Intent.SET_AGE_GROUP,
				age_group=age_group,
				reply=f"Age group set to {AGE_GROUP_LABELS[age_group]}.",
			)

	for keyword, content_type in CONTENT_KEYWORDS:
		if _has_word(text, keyword):
			return VoiceAction(
				intent=Intent.SET_CONTENT_TYPE,
				content_type=content_type,
				reply=f"Content type set to {CONTENT_TYPES[content_type].label}.",
			)

	if any(_has_word(text, word) for word in GENERATE_WORDS):
		topic = _embedded_topic(original)
		if topic:
			action = _generate_action(topic, context.content_type)
			action.topic = topic
			return action
		if context.topic.strip():
			return _generate_action(context.topic.strip(), context.content_type)
		return VoiceAction(intent=Intent.ASK_TOPIC, reply=ASK_TOPIC)

	if context.has_result and any(_has_word(text, word) for word in READ_WORDS):
		return VoiceAction(intent=Intent.READ_ALOUD, reply="Reading your content now.")

	if _has_word(text, "topic") or _has_word(text, "about"):
		match = TOPIC_REMAINDER_RE.search(original)
		topic = _clean_topic(match.group(1)) if match else ""
		if not topic:
			return VoiceAction(intent=Intent.ASK_TOPIC, reply=ASK_TOPIC)
		return VoiceAction(intent=Intent.SET_TOPIC, topic=topic, reply=f"Topic set to {topic}.")

	topic = _clean_topic(original)
	if not topic:
		return VoiceAction(intent=Intent.UNKNOWN, reply=DIDNT_CATCH)
	return VoiceAction(intent=Intent.SET_TOPIC, topic=topic, reply=f"Topic set to {topic}.")


class VoiceAssistant:
	"""Runs one strictly sequential turn: listen, interpret, apply, acknowledge."""

	def __init__(self, session: "GeneratorSession", capability: SpeechCapability, *, options: Optional[SpeechOptions] = None) -> None:
		self.session = session
		self.capability = capability
		self.options = options or SpeechOptions.from_settings()

	@property
	def state(self) -> VoiceAssistantState:
		return self.session.voice

	async def say(self, text: str) -> None:
		self.state.speaking = True
		try:
			await self.capability.speak(text, self.options)
		except CapabilityError as e:
			logger.warning("Speech output failed: %s", e)
		finally:
			self.state.speaking = False

	async def listen_and_respond(
		self,
		client_factory: Callable[[], "GeminiClient"],
		*,
		follow_up: bool = True,
	) -> VoiceAction:
		"""Handle one utterance.

		With ``follow_up`` set, a request for a topic is immediately followed by
		a second listen once the prompt has been spoken.
		"""
		if not (self.state.supported and self.capability.is_supported()):
			raise CapabilityUnsupported(VOICE_UNSUPPORTED)
		self.state.listening = True
		try:
			recognition = await self.capability.recognize_once()
		except CapabilityError as e:
			logger.warning("Speech recognition failed: %s", e)
			recognition = None
		finally:
			self.state.listening = False
		if recognition is None:
			await self.say(DIDNT_CATCH)
			return VoiceAction(intent=Intent.UNKNOWN, reply=DIDNT_CATCH)

		logger.info("Voice transcript %r (confidence %.2f)", recognition.transcript, recognition.confidence)
		action = interpret(recognition.transcript, self.session.voice_context())
		await self._apply(action, client_factory)
		if action.intent is Intent.ASK_TOPIC and follow_up:
			return await self.listen_and_respond(client_factory, follow_up=False)
		return action

	async def _apply(self, action: VoiceAction, client_factory: Callable[[], "GeminiClient"]) -> None:
		session = self.session
		if action.intent is Intent.SET_AGE_GROUP:
			session.select(age_group=action.age_group)
		elif action.intent is Intent.SET_CONTENT_TYPE:
			session.select(content_type=action.content_type)
		elif action.intent is Intent.SET_TOPIC:
			session.select(topic=action.topic)
		elif action.intent is Intent.ASK_TOPIC:
			session.awaiting_topic = True
		elif action.intent is Intent.GENERATE:
			session.awaiting_topic = False
			if action.topic:
				session.select(topic=action.topic)
			await self.say(action.reply)
			await self._generate(client_factory)
			return
		elif action.intent is Intent.READ_ALOUD:
			await self.say(action.reply)
			await self.say(session.result_text or "")
			return
		await self.say(action.reply)

	async def _generate(self, client_factory: Callable[[], "GeminiClient"]) -> None:
		try:
			result = await self.session.generate(client_factory)
		except GenerationInProgress:
			await self.say("I'm still working on your last request.")
			return
		except ValidationError:
			self.session.awaiting_topic = True
			await self.say(ASK_TOPIC)
			return
		if result.ok:
			label = CONTENT_TYPES[self.session.request.content_type].label
			await self.say(f"Your {label} is ready!")
		else:
			await self.say("Sorry, something went wrong while generating your content.")
