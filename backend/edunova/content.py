from __future__ import annotations
import re
from enum import Enum
from typing import Dict, List

from pydantic import BaseModel, ConfigDict

from .errors import ValidationError


class AgeGroup(str, Enum):
	YOUNGER = "6-8"
	OLDER = "9-12"


class ContentType(str, Enum):
	LESSON_PLAN = "lesson_plan"
	FLASHCARDS = "flashcards"
	QUIZ = "quiz"
	STUDY_GUIDE = "study_guide"
	TUTORIAL = "tutorial"


class ContentTypeInfo(BaseModel):
	value: ContentType
	label: str
	description: str
	emoji: str
	interactive: bool = False


CONTENT_TYPES: Dict[ContentType, ContentTypeInfo] = {
	ContentType.LESSON_PLAN: ContentTypeInfo(
		value=ContentType.LESSON_PLAN,
		label="Lesson Plan",
		description="Fun activities and learning adventures!",
		emoji="📚",
	),
	ContentType.FLASHCARDS: ContentTypeInfo(
		value=ContentType.FLASHCARDS,
		label="Flashcards",
		description="Quick memory games & brain boosters!",
		emoji="⚡",
		interactive=True,
	),
	ContentType.QUIZ: ContentTypeInfo(
		value=ContentType.QUIZ,
		label="Quiz",
		description="Test your super brain power!",
		emoji="🧠",
		interactive=True,
	),
	ContentType.STUDY_GUIDE: ContentTypeInfo(
		value=ContentType.STUDY_GUIDE,
		label="Study Guide",
		description="Everything you need to master!",
		emoji="📖",
	),
	ContentType.TUTORIAL: ContentTypeInfo(
		value=ContentType.TUTORIAL,
		label="Tutorial",
		description="Step-by-step learning journeys!",
		emoji="🎬",
	),
}

AGE_GROUP_LABELS: Dict[AgeGroup, str] = {
	AgeGroup.YOUNGER: "6 to 8 years",
	AgeGroup.OLDER: "9 to 12 years",
}


def content_type_catalog() -> List[ContentTypeInfo]:
	return list(CONTENT_TYPES.values())


class GenerationRequest(BaseModel):
	model_config = ConfigDict(frozen=True)

	age_group: AgeGroup
	content_type: ContentType
	topic: str

	@classmethod
	def submit(cls, age_group: AgeGroup, content_type: ContentType, topic: str) -> "GenerationRequest":
		topic = (topic or "").strip()
		if not topic:
			raise ValidationError("Please enter a topic to generate content.")
		return cls(age_group=age_group, content_type=content_type, topic=topic)


def export_filename(content_type: ContentType, topic: str, age_group: AgeGroup) -> str:
	slug = re.sub(r"\s+", "_", topic)
	return f"{ContentType(content_type).value}_{slug}_age_{AgeGroup(age_group).value}.txt"
