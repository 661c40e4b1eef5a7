from __future__ import annotations
from typing import Callable

from fastapi import HTTPException, Query

from ..gemini_client import GeminiClient
from ..session import GeneratorSession, SessionRegistry
from ..settings import settings
from ..speech import CloudSpeechRecognizer


registry = SessionRegistry(settings.session_limit)


def get_client_factory() -> Callable[[], GeminiClient]:
	return GeminiClient


def get_session(session_id: str = Query(...)) -> GeneratorSession:
	session = registry.get(session_id)
	if session is None:
		raise HTTPException(status_code=404, detail="Session not found")
	return session


recognizer = CloudSpeechRecognizer()


def get_recognizer() -> CloudSpeechRecognizer:
	if not settings.cloud_speech_enabled:
		raise HTTPException(status_code=503, detail="Cloud speech recognition is disabled")
	return recognizer
