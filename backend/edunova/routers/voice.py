from __future__ import annotations
import base64
import binascii
from typing import Callable, List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ..errors import CapabilityError, CapabilityUnsupported
from ..gemini_client import GeminiClient
from ..logging import get_logger
from ..session import GeneratorSession
from ..speech import Alternative, CloudSpeechRecognizer, Recognition, RelayCapability
from ..voice import DIDNT_CATCH, VoiceAssistant
from .deps import get_client_factory, get_recognizer, get_session

logger = get_logger(__name__)

router = APIRouter(prefix="/voice", tags=["voice"])


class CommandRequest(BaseModel):
	transcript: str = ""
	# Browser recognition alternatives; the most confident one wins
	alternatives: List[Alternative] = Field(default_factory=list)


class TranscribeRequest(BaseModel):
	audio_base64: str


def _relayed_recognitions(req: CommandRequest) -> List[Recognition]:
	candidates = list(req.alternatives)
	if req.transcript.strip():
		candidates.append(Alternative(transcript=req.transcript, confidence=0.0 if candidates else 1.0))
	try:
		return [Recognition.from_alternatives(candidates)]
	except CapabilityError:
		return []


@router.post("/toggle")
def toggle_voice(session: GeneratorSession = Depends(get_session)):
	try:
		enabled = session.voice.toggle()
	except CapabilityUnsupported as e:
		raise HTTPException(status_code=400, detail=str(e))
	return {"enabled": enabled, "state": session.to_payload()}


@router.post("/command")
async def voice_command(
	req: CommandRequest,
	session: GeneratorSession = Depends(get_session),
	client_factory: Callable[[], GeminiClient] = Depends(get_client_factory),
):
	if session.voice.supported and not session.voice.enabled:
		raise HTTPException(status_code=409, detail="Voice assistant is turned off")
	capability = RelayCapability(_relayed_recognitions(req), supported=session.voice.supported)
	assistant = VoiceAssistant(session, capability)
	try:
		# The browser listens again on its own after a spoken topic prompt
		action = await assistant.listen_and_respond(client_factory, follow_up=False)
	except CapabilityUnsupported as e:
		raise HTTPException(status_code=400, detail=str(e))
	return {
		"action": action.model_dump(mode="json"),
		"utterances": [u.model_dump(mode="json") for u in capability.utterances],
		"state": session.to_payload(),
	}


@router.post("/transcribe")
async def transcribe(req: TranscribeRequest, recognizer: CloudSpeechRecognizer = Depends(get_recognizer)):
	try:
		audio = base64.b64decode(req.audio_base64, validate=True)
	except (binascii.Error, ValueError):
		raise HTTPException(status_code=400, detail="audio_base64 is not valid base64")
	try:
		recognition = await recognizer.recognize(audio)
	except CapabilityUnsupported as e:
		raise HTTPException(status_code=503, detail=str(e))
	except CapabilityError as e:
		logger.warning("Transcription failed: %s", e)
		return {"recognized": False, "message": DIDNT_CATCH}
	return {"recognized": True, **recognition.model_dump(mode="json")}
