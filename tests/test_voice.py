import asyncio

from conftest import SAMPLE_QUIZ, FakeGeminiClient, FakeSpeech

import pytest

from edunova.content import AgeGroup, ContentType
from edunova.errors import CapabilityUnsupported
from edunova.session import GeneratorSession
from edunova.voice import ASK_TOPIC, DIDNT_CATCH, Intent, VoiceAssistant, VoiceContext, interpret


@pytest.mark.parametrize(
	"transcript,age_group",
	[
		("for kids six to eight please", AgeGroup.YOUNGER),
		("ages 9 to 12", AgeGroup.OLDER),
		("older children", AgeGroup.OLDER),
	],
)
def test_age_group_phrases(transcript, age_group):
	action = interpret(transcript, VoiceContext())
	assert action.intent is Intent.SET_AGE_GROUP
	assert action.age_group is age_group


@pytest.mark.parametrize(
	"transcript,content_type",
	[
		("Lesson plan please", ContentType.LESSON_PLAN),
		("let's do flashcards", ContentType.FLASHCARDS),
		("give me a test", ContentType.QUIZ),
		("Study guide", ContentType.STUDY_GUIDE),
		("a tutorial", ContentType.TUTORIAL),
	],
)
def test_content_type_keywords(transcript, content_type):
	action = interpret(transcript, VoiceContext())
	assert action.intent is Intent.SET_CONTENT_TYPE
	assert action.content_type is content_type


def test_content_type_wins_over_generate_by_declared_order():
	action = interpret("make a quiz about volcanoes", VoiceContext())
	assert action.intent is Intent.SET_CONTENT_TYPE
	assert action.content_type is ContentType.QUIZ


def test_generate_with_embedded_topic_keeps_casing():
	action = interpret("Generate something about the Solar System.", VoiceContext(content_type=ContentType.QUIZ))
	assert action.intent is Intent.GENERATE
	assert action.topic == "the Solar System"
	assert action.reply == "Generating Quiz about the Solar System."


def test_generate_reuses_existing_topic():
	action = interpret("create it", VoiceContext(topic="Plants"))
	assert action.intent is Intent.GENERATE
	assert action.topic is None
	assert "Plants" in action.reply


def test_generate_without_topic_asks_for_one():
	action = interpret("generate", VoiceContext())
	assert action.intent is Intent.ASK_TOPIC
	assert action.reply == ASK_TOPIC


def test_read_only_when_result_exists():
	assert interpret("read it to me", VoiceContext(has_result=True)).intent is Intent.READ_ALOUD
	fallback = interpret("read it to me", VoiceContext(has_result=False))
	assert fallback.intent is Intent.SET_TOPIC
	assert fallback.topic == "read it to me"


def test_topic_remainder():
	action = interpret("the topic is rainbows", VoiceContext())
	assert action.intent is Intent.SET_TOPIC
	assert action.topic == "rainbows"


def test_fallback_uses_whole_utterance():
	action = interpret("Dinosaurs!", VoiceContext())
	assert action.intent is Intent.SET_TOPIC
	assert action.topic == "Dinosaurs"


def test_answer_after_topic_prompt_triggers_generation():
	action = interpret("Volcanoes", VoiceContext(awaiting_topic=True))
	assert action.intent is Intent.GENERATE
	assert action.topic == "Volcanoes"


def _session(supported=True):
	session = GeneratorSession(voice_supported=supported)
	session.voice.enabled = supported
	return session


def test_assistant_applies_selection_and_acknowledges():
	session = _session()
	speech = FakeSpeech(["nine to twelve"], session=session)
	client = FakeGeminiClient(text="unused")
	action = asyncio.run(VoiceAssistant(session, speech).listen_and_respond(lambda: client))
	assert action.intent is Intent.SET_AGE_GROUP
	assert session.age_group is AgeGroup.OLDER
	assert speech.spoken == ["Age group set to 9 to 12 years."]
	assert client.prompts == []


def test_assistant_asks_for_topic_then_listens_again_and_generates():
	session = _session()
	session.select(content_type=ContentType.QUIZ)
	speech = FakeSpeech(["generate", "Volcanoes"], session=session)
	client = FakeGeminiClient(text=SAMPLE_QUIZ)
	action = asyncio.run(VoiceAssistant(session, speech).listen_and_respond(lambda: client))
	assert action.intent is Intent.GENERATE
	assert speech.spoken[0] == ASK_TOPIC
	assert speech.spoken[-1] == "Your Quiz is ready!"
	assert session.topic == "Volcanoes"
	assert session.awaiting_topic is False
	assert session.view.kind == "quiz"
	assert speech.overlaps == 0
	assert session.voice.listening is False and session.voice.speaking is False


def test_assistant_reads_result_aloud():
	session = _session()
	session.select(topic="Rain")
	asyncio.run(session.generate(lambda: FakeGeminiClient(text="Rain falls from clouds.")))
	speech = FakeSpeech(["please read that"], session=session)
	asyncio.run(VoiceAssistant(session, speech).listen_and_respond(lambda: None))
	assert speech.spoken == ["Reading your content now.", "Rain falls from clouds."]


def test_recognition_error_is_acknowledged_not_raised():
	session = _session()
	speech = FakeSpeech([], session=session)
	action = asyncio.run(VoiceAssistant(session, speech).listen_and_respond(lambda: None))
	assert action.intent is Intent.UNKNOWN
	assert speech.spoken == [DIDNT_CATCH]
	assert session.voice.listening is False


def test_unsupported_capability_raises():
	session = _session(supported=False)
	with pytest.raises(CapabilityUnsupported):
		asyncio.run(VoiceAssistant(session, FakeSpeech(["quiz"])).listen_and_respond(lambda: None))
	with pytest.raises(CapabilityUnsupported):
		session.voice.toggle()


def test_generate_prefers_about_over_for():
	action = interpret("generate something for kids about volcanoes", VoiceContext())
	assert action.intent is Intent.GENERATE
	assert action.topic == "volcanoes"


def test_generate_topic_after_for():
	action = interpret("create something for the water cycle", VoiceContext())
	assert action.topic == "the water cycle"
