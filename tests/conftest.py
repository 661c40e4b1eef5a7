from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

from edunova.errors import CapabilityError
from edunova.main import app
from edunova.routers.deps import get_client_factory
from edunova.speech import Recognition, SpeechOptions


SAMPLE_FLASHCARDS = (
	"Here are your flashcards!\n\n"
	"CARD 1:\nTERM: Sun\nDEFINITION: A star.\n\n"
	"CARD 2:\nTERM: Moon\nDEFINITION: Earth's satellite."
)

SAMPLE_QUIZ = (
	"QUESTION 1: What is the closest star to Earth?\n"
	"A) The Moon\nB) The Sun\nC) Mars\nD) Polaris\n"
	"CORRECT: B\n\n"
	"QUESTION 2: Which planet is known as the Red Planet?\n"
	"A) Venus\nB) Jupiter\nC) Mars\nD) Saturn\n"
	"CORRECT: C\n"
)


class FakeGeminiClient:
	def __init__(self, text: Optional[str] = None, error: Optional[Exception] = None) -> None:
		self.text = text
		self.error = error
		self.prompts: List[str] = []
		self.closed = False

	async def generate(self, prompt: str) -> str:
		self.prompts.append(prompt)
		if self.error is not None:
			raise self.error
		return self.text

	async def aclose(self) -> None:
		self.closed = True


class FakeSpeech:
	"""Deterministic stand-in for the browser speech engines."""

	def __init__(self, transcripts: List[str], *, supported: bool = True, session=None) -> None:
		self.transcripts = list(transcripts)
		self.supported = supported
		self.session = session
		self.spoken: List[str] = []
		self.overlaps = 0

	def is_supported(self) -> bool:
		return self.supported

	async def recognize_once(self) -> Recognition:
		if not self.transcripts:
			raise CapabilityError("nothing heard")
		return Recognition(transcript=self.transcripts.pop(0), confidence=0.9)

	async def speak(self, text: str, options: SpeechOptions) -> None:
		if self.session is not None and self.session.voice.listening:
			self.overlaps += 1
		self.spoken.append(text)


@pytest.fixture
def fake_client():
	return FakeGeminiClient(text=SAMPLE_QUIZ)


@pytest.fixture
def api(fake_client):
	app.dependency_overrides[get_client_factory] = lambda: (lambda: fake_client)
	try:
		yield TestClient(app)
	finally:
		app.dependency_overrides.clear()
