from conftest import SAMPLE_FLASHCARDS, SAMPLE_QUIZ, FakeGeminiClient

from edunova.errors import TransportError
from edunova.main import app
from edunova.routers.deps import get_client_factory
from edunova.session import FALLBACK_MESSAGE


def _start(api, voice_supported=False):
	resp = api.post("/session/start", json={"voice_supported": voice_supported})
	assert resp.status_code == 200
	return resp.json()["session_id"]


def test_health_and_catalog(api):
	assert api.get("/health").json() == {"status": "ok"}
	catalog = api.get("/content-types").json()
	assert [c["value"] for c in catalog["content_types"]] == ["lesson_plan", "flashcards", "quiz", "study_guide", "tutorial"]
	assert [a["value"] for a in catalog["age_groups"]] == ["6-8", "9-12"]


def test_unknown_session_is_404(api):
	assert api.get("/session/state", params={"session_id": "nope"}).status_code == 404


def test_empty_topic_is_rejected(api, fake_client):
	sid = _start(api)
	resp = api.post("/session/generate", params={"session_id": sid})
	assert resp.status_code == 400
	assert resp.json()["detail"] == "Please enter a topic to generate content."
	assert fake_client.prompts == []


def test_quiz_flow(api):
	sid = _start(api)
	params = {"session_id": sid}
	api.post("/session/select", params=params, json={"content_type": "quiz", "topic": "Solar System", "age_group": "6-8"})
	state = api.post("/session/generate", params=params).json()
	assert state["loading"] is False
	assert state["view"]["kind"] == "quiz"
	assert state["view"]["total"] == 2

	blocked = api.post("/quiz/next", params=params).json()
	assert blocked["advanced"] is False
	assert blocked["view"]["current_index"] == 0

	api.post("/quiz/answer", params=params, json={"label": "B"})
	assert api.post("/quiz/next", params=params).json()["view"]["current_index"] == 1
	api.post("/quiz/answer", params=params, json={"label": "A"})
	done = api.post("/quiz/next", params=params).json()["view"]
	assert done["completed"] is True
	assert done["score"] == 1

	reset = api.post("/quiz/reset", params=params).json()["view"]
	assert reset["current_index"] == 0 and reset["answers"] == {} and reset["completed"] is False

	export = api.get("/session/export", params=params)
	assert export.status_code == 200
	assert "quiz_Solar_System_age_6-8.txt" in export.headers["content-disposition"]
	assert export.text == SAMPLE_QUIZ
	assert api.get("/session/copy", params=params).json() == {"text": SAMPLE_QUIZ}


def test_flashcard_flow(api, fake_client):
	fake_client.text = SAMPLE_FLASHCARDS
	sid = _start(api)
	params = {"session_id": sid}
	api.post("/session/select", params=params, json={"content_type": "flashcards", "topic": "Space"})
	api.post("/session/generate", params=params)
	assert api.post("/flashcards/flip", params=params, json={"index": 1}).json()["revealed"] is True
	assert api.post("/flashcards/flip", params=params, json={"index": 1}).json()["revealed"] is False
	assert api.post("/flashcards/flip", params=params, json={"index": 9}).status_code == 400
	api.post("/flashcards/flip", params=params, json={"index": 0})
	cards = api.post("/flashcards/reset", params=params).json()["view"]["cards"]
	assert [c["revealed"] for c in cards] == [False, False]
	assert api.post("/quiz/next", params=params).status_code == 409


def test_failed_generation_returns_fallback_text(api):
	failing = FakeGeminiClient(error=TransportError("HTTP error! status: 503"))
	app.dependency_overrides[get_client_factory] = lambda: (lambda: failing)
	sid = _start(api)
	params = {"session_id": sid}
	api.post("/session/select", params=params, json={"topic": "Rain"})
	state = api.post("/session/generate", params=params).json()
	assert state["result"] == FALLBACK_MESSAGE
	assert state["failure"] == "transport"
	assert state["loading"] is False


def test_voice_command_roundtrip(api):
	sid = _start(api, voice_supported=True)
	params = {"session_id": sid}
	assert api.post("/voice/command", params=params, json={"transcript": "quiz"}).status_code == 409
	assert api.post("/voice/toggle", params=params).json()["enabled"] is True

	body = api.post(
		"/voice/command",
		params=params,
		json={"alternatives": [{"transcript": "flash cards", "confidence": 0.4}, {"transcript": "quiz", "confidence": 0.8}]},
	).json()
	assert body["action"]["intent"] == "set_content_type"
	assert body["state"]["content_type"] == "quiz"
	assert body["utterances"][0]["text"] == "Content type set to Quiz."

	body = api.post("/voice/command", params=params, json={"transcript": "generate"}).json()
	assert body["action"]["intent"] == "ask_topic"
	assert body["state"]["voice"]["awaiting_topic"] is True

	body = api.post("/voice/command", params=params, json={"transcript": "Volcanoes"}).json()
	assert body["action"]["intent"] == "generate"
	assert body["state"]["view"]["kind"] == "quiz"
	assert [u["text"] for u in body["utterances"]] == ["Generating Quiz about Volcanoes.", "Your Quiz is ready!"]

	body = api.post("/voice/command", params=params, json={"transcript": "  "}).json()
	assert body["action"]["intent"] == "unknown"


def test_voice_unsupported(api):
	sid = _start(api, voice_supported=False)
	params = {"session_id": sid}
	assert api.post("/voice/toggle", params=params).status_code == 400
	resp = api.post("/voice/command", params=params, json={"transcript": "quiz"})
	assert resp.status_code == 400
	assert resp.json()["detail"] == "Voice features are not supported in this browser."


def test_transcribe_disabled_by_default(api):
	resp = api.post("/voice/transcribe", json={"audio_base64": "AAAA"})
	assert resp.status_code == 503
