from __future__ import annotations
from typing import Callable, Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from ..content import AGE_GROUP_LABELS, AgeGroup, ContentType, content_type_catalog
from ..errors import GenerationInProgress, ValidationError
from ..gemini_client import GeminiClient
from ..logging import get_logger
from ..session import GeneratorSession
from .deps import get_client_factory, get_session, registry

logger = get_logger(__name__)

router = APIRouter(tags=["generator"])


class StartRequest(BaseModel):
	# Result of the browser's one-time speech capability probe
	voice_supported: bool = False


class SelectRequest(BaseModel):
	age_group: Optional[AgeGroup] = None
	content_type: Optional[ContentType] = None
	topic: Optional[str] = None


def _content_disposition(filename: str) -> str:
	fallback = filename.encode("ascii", "replace").decode("ascii").replace('"', "_")
	return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"


@router.get("/content-types")
def list_content_types():
	return {
		"content_types": [info.model_dump(mode="json") for info in content_type_catalog()],
		"age_groups": [{"value": age.value, "label": label} for age, label in AGE_GROUP_LABELS.items()],
	}


@router.post("/session/start")
def start_session(req: StartRequest):
	session = registry.create(voice_supported=req.voice_supported)
	logger.info("Started generator session %s (voice supported: %s)", session.session_id, req.voice_supported)
	return session.to_payload()


@router.get("/session/state")
def get_state(session: GeneratorSession = Depends(get_session)):
	return session.to_payload()


@router.post("/session/select")
def select(req: SelectRequest, session: GeneratorSession = Depends(get_session)):
	session.select(age_group=req.age_group, content_type=req.content_type, topic=req.topic)
	return session.to_payload()


@router.post("/session/generate")
async def generate(
	session: GeneratorSession = Depends(get_session),
	client_factory: Callable[[], GeminiClient] = Depends(get_client_factory),
):
	try:
		await session.generate(client_factory)
	except ValidationError as e:
		raise HTTPException(status_code=400, detail=str(e))
	except GenerationInProgress as e:
		raise HTTPException(status_code=409, detail=str(e))
	return session.to_payload()


@router.get("/session/copy")
def copy_result(session: GeneratorSession = Depends(get_session)):
	try:
		return {"text": session.copy_text()}
	except ValidationError as e:
		raise HTTPException(status_code=404, detail=str(e))


@router.get("/session/export")
def export_result(session: GeneratorSession = Depends(get_session)):
	try:
		filename, text = session.export()
	except ValidationError as e:
		raise HTTPException(status_code=404, detail=str(e))
	return PlainTextResponse(
		content=text,
		headers={"Content-Disposition": _content_disposition(filename)},
	)


@router.delete("/session")
def end_session(session: GeneratorSession = Depends(get_session)):
	registry.drop(session.session_id)
	return {"ended": True}
