from __future__ import annotations
from typing import Callable, Dict

from .content import AgeGroup, ContentType
from .errors import ConfigurationError


PLAIN_TEXT_DIRECTIVE = "Format the response in plain text without markdown formatting."


def _lesson_plan(age_group: str, topic: str) -> str:
	return (
		f"Create an engaging STEM lesson plan for children aged {age_group}.\n"
		f"Topic: {topic}\n"
		"Include:\n"
		"- Objective\n"
		"- Materials Needed\n"
		"- Step-by-step Instructions\n"
		"- A fun hands-on activity\n"
		"Use simple, kid-friendly language.\n"
	)


def _flashcards(age_group: str, topic: str) -> str:
	return (
		f"Generate 5 flashcards for children aged {age_group}.\n"
		f"Topic: {topic}\n"
		"Each flashcard should have:\n"
		"- A simple STEM or digital literacy term\n"
		"- A short, age-appropriate definition\n"
		"Format each flashcard exactly like this:\n"
		"CARD 1:\n"
		"TERM: [term here]\n"
		"DEFINITION: [definition here]\n\n"
		"CARD 2:\n"
		"TERM: [term here]\n"
		"DEFINITION: [definition here]\n\n"
		"Continue this format for all 5 cards.\n"
	)


def _quiz(age_group: str, topic: str) -> str:
	question_block = (
		"A) [option A]\n"
		"B) [option B]\n"
		"C) [option C]\n"
		"D) [option D]\n"
		"CORRECT: [A, B, C, or D]\n"
	)
	return (
		f"Create a short quiz for children aged {age_group} on the topic: {topic}.\n"
		"Include 5 multiple choice questions with 4 options each and the correct answer.\n"
		"Format each question exactly like this:\n"
		"QUESTION 1: [question text]\n"
		f"{question_block}\n"
		"QUESTION 2: [question text]\n"
		f"{question_block}\n"
		"Continue this format for all 5 questions.\n"
		"Keep the tone light and fun.\n"
	)


def _study_guide(age_group: str, topic: str) -> str:
	return (
		f"Write a study guide for children aged {age_group}.\n"
		f"Topic: {topic}\n"
		"Include:\n"
		"- A short explanation\n"
		"- A visual or analogy\n"
		"- A practice activity\n"
		"Use age-appropriate and interactive language.\n"
	)


def _tutorial(age_group: str, topic: str) -> str:
	return (
		f"Write a kid-friendly step-by-step tutorial for children aged {age_group}.\n"
		f"Topic: {topic}\n"
		"Use numbered steps, simple terms, and suggest interactive elements if possible.\n"
		"Keep it playful and educational.\n"
	)


PROMPT_TEMPLATES: Dict[ContentType, Callable[[str, str], str]] = {
	ContentType.LESSON_PLAN: _lesson_plan,
	ContentType.FLASHCARDS: _flashcards,
	ContentType.QUIZ: _quiz,
	ContentType.STUDY_GUIDE: _study_guide,
	ContentType.TUTORIAL: _tutorial,
}


def build_prompt(content_type: ContentType | str, age_group: AgeGroup | str, topic: str) -> str:
	try:
		template = PROMPT_TEMPLATES[ContentType(content_type)]
	except (ValueError, KeyError):
		raise ConfigurationError(f"Unknown content type: {content_type!r}")
	age = age_group.value if isinstance(age_group, AgeGroup) else str(age_group)
	return template(age, topic) + PLAIN_TEXT_DIRECTIVE
