from __future__ import annotations
import httpx
from typing import Any, Dict, Optional
from .errors import ConfigurationError, MalformedResponseError, TransportError
from .logging import get_logger
from .settings import settings

logger = get_logger(__name__)

# Sampling policy; not tunable per call
TEMPERATURE = 0.7
TOP_K = 40
TOP_P = 0.95
MAX_OUTPUT_TOKENS = 8192

GENERATION_CONFIG: Dict[str, Any] = {
	"temperature": TEMPERATURE,
	"topK": TOP_K,
	"topP": TOP_P,
	"maxOutputTokens": MAX_OUTPUT_TOKENS,
}


class GeminiClient:
	def __init__(
		self,
		api_key: Optional[str] = None,
		*,
		base_url: Optional[str] = None,
		model: Optional[str] = None,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	) -> None:
		self.api_key = api_key or settings.gemini_api_key
		if not self.api_key:
			raise ConfigurationError("GEMINI_API_KEY is not configured")
		self.model = model or settings.gemini_model
		self.provider = settings.gemini_provider
		if self.provider == "vertex":
			region = settings.vertex_region
			project = settings.vertex_project or "placeholder-project"
			# Vertex AI Generative REST endpoint (API key via header)
			self.base_url = base_url or (
				f"https://{region}-aiplatform.googleapis.com/v1/projects/{project}/locations/{region}/publishers/google/models/{self.model}:generateContent"
			)
			self._auth_in_query = False
		else:
			# Google AI Studio (Generative Language API)
			self.base_url = base_url or f"https://generativelanguage.googleapis.com/v1beta/models/{self.model}:generateContent"
			self._auth_in_query = True
		self._client = httpx.AsyncClient(timeout=settings.gemini_timeout_seconds, transport=transport)

	async def generate(self, prompt: str) -> str:
		payload: Dict[str, Any] = {
			"contents": [{"parts": [{"text": prompt}]}],
			"generationConfig": dict(GENERATION_CONFIG),
		}
		return await self._post_payload(payload)

	async def _post_payload(self, payload: Dict[str, Any]) -> str:
		params: Dict[str, Any] = {}
		headers: Dict[str, str] = {}
		if self._auth_in_query:
			params["key"] = self.api_key
		else:
			headers["x-goog-api-key"] = self.api_key
		try:
			r = await self._client.post(self.base_url, params=params, headers=headers, json=payload)
			r.raise_for_status()
		except httpx.HTTPStatusError as http_err:
			logger.warning("Gemini returned HTTP %s", http_err.response.status_code)
			raise TransportError(f"HTTP error! status: {http_err.response.status_code}") from http_err
		except httpx.RequestError as net_err:
			logger.warning("Gemini request failed: %s", net_err.__class__.__name__)
			raise TransportError(str(net_err) or net_err.__class__.__name__) from net_err
		return _extract_text(r)

	async def aclose(self) -> None:
		await self._client.aclose()


def _extract_text(r: httpx.Response) -> str:
	try:
		data = r.json()
		text = data["candidates"][0]["content"]["parts"][0]["text"]
	except (ValueError, KeyError, IndexError, TypeError) as err:
		raise MalformedResponseError(f"Unexpected Gemini response: {r.text[:200]}") from err
	if not isinstance(text, str) or not text.strip():
		raise MalformedResponseError("Gemini returned an empty candidate")
	return text
