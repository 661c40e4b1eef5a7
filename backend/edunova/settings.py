from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
	gemini_api_key: str | None = Field(default=None, validation_alias="GEMINI_API_KEY")
	# Provider can be "vertex" (Vertex AI Express) or "ai_studio" (Generative Language API)
	gemini_provider: str = Field(default="ai_studio", validation_alias="GEMINI_PROVIDER")
	gemini_model: str = Field(default="gemini-2.5-flash", validation_alias="GEMINI_MODEL")
	gemini_timeout_seconds: float = Field(default=30, validation_alias="GEMINI_TIMEOUT_SECONDS")
	# Vertex configuration
	vertex_region: str = Field(default="us-central1", validation_alias="GEMINI_VERTEX_REGION")
	vertex_project: str | None = Field(default=None, validation_alias="GEMINI_VERTEX_PROJECT")

	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

	# Speech output defaults handed to the browser along with each utterance
	speech_language_code: str = Field(default="en-US", validation_alias="SPEECH_LANGUAGE_CODE")
	speech_rate: float = Field(default=0.9, validation_alias="SPEECH_RATE")
	speech_pitch: float = Field(default=1.1, validation_alias="SPEECH_PITCH")
	speech_volume: float = Field(default=1.0, validation_alias="SPEECH_VOLUME")
	speech_voice_hint: str | None = Field(default=None, validation_alias="SPEECH_VOICE_HINT")
	# Server-side transcription of uploaded audio via Google Cloud Speech-to-Text
	cloud_speech_enabled: bool = Field(default=False, validation_alias="CLOUD_SPEECH_ENABLED")

	# Live generator sessions kept in memory; the oldest is dropped past this
	session_limit: int = Field(default=500, validation_alias="SESSION_LIMIT")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
