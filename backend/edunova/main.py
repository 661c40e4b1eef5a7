from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from .logging import get_logger, setup_logging
from .settings import settings
from .routers import health, generate, interactive, voice
from .routers.deps import recognizer

logger = get_logger(__name__)

# Probed once at startup; None until then
_cloud_speech_available: bool | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
	global _cloud_speech_available
	setup_logging()
	if settings.cloud_speech_enabled:
		_cloud_speech_available = recognizer.probe()
	else:
		_cloud_speech_available = False
	if not settings.gemini_api_key:
		logger.warning("GEMINI_API_KEY is not configured; generation requests will fail")
	yield


app = FastAPI(title="EduNova Generator API", lifespan=lifespan)
app.include_router(health.router)
app.include_router(generate.router)
app.include_router(interactive.router)
app.include_router(voice.router)


@app.get("/info")
def root():
	return {
		"status": "ok",
		"gemini_configured": bool(settings.gemini_api_key),
		"cloud_speech_available": bool(_cloud_speech_available),
	}


if __name__ == "__main__":
	uvicorn.run("edunova.main:app", host="0.0.0.0", port=8000)
