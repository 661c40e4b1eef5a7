"""Recover flashcards and quiz questions from loosely formatted model output.

The prompts ask Gemini for a literal tagged layout (``CARD n:`` / ``TERM:`` /
``DEFINITION:`` and ``QUESTION n:`` / ``A)``..``D)`` / ``CORRECT:``) but the
output is not guaranteed to follow it. The strict parsers raise
``ParseFailure`` when nothing usable is found; the public ``parse_*`` functions
are the only place that substitutes a placeholder, so callers never see an
empty deck or quiz.
"""

from __future__ import annotations
import re
from typing import Dict, List, Optional

from pydantic import ValidationError as SchemaError

from .errors import ParseFailure
from .logging import get_logger
from .models import OPTION_LABELS, Flashcard, QuizQuestion

logger = get_logger(__name__)


CARD_HEADER = re.compile(r"\bCARD\s*\d+\s*:", re.IGNORECASE)
TERM_RE = re.compile(r"\bTERM\s*:\s*(.+)", re.IGNORECASE)
DEFINITION_RE = re.compile(r"\bDEFINITION\s*:\s*([^\n]+(?:\n(?!\s*\n)[^\n]+)*)", re.IGNORECASE)

QUESTION_HEADER = re.compile(r"\bQUESTION\s*\d+\s*:", re.IGNORECASE)
OPTION_RE = re.compile(r"^[ \t*]*\(?([A-D])\s*[).:]\s*(.+)$", re.IGNORECASE | re.MULTILINE)
CORRECT_RE = re.compile(r"\bCORRECT(?:\s+ANSWER)?\s*:\s*\**\s*\(?([A-D])\b", re.IGNORECASE)

PLACEHOLDER_CARD = Flashcard(
	term="No flashcards found",
	definition="Try generating again. Each card should follow the CARD / TERM / DEFINITION format.",
	placeholder=True,
)

PLACEHOLDER_QUESTION = QuizQuestion(
	prompt="No quiz questions could be read from this response. Try generating again.",
	options=["Unavailable", "Unavailable", "Unavailable", "Unavailable"],
	correct_label="A",
	placeholder=True,
)


def _clean(value: str) -> str:
	# Collapse line breaks and strip stray markdown emphasis
	return " ".join(value.split()).strip("*").strip()


def _segments(header: re.Pattern, text: str) -> List[str]:
	# Anything before the first header is preamble and is discarded
	return header.split(text or "")[1:]


def _parse_card(segment: str) -> Optional[Flashcard]:
	term_match = TERM_RE.search(segment)
	definition_match = DEFINITION_RE.search(segment)
	if not term_match or not definition_match:
		return None
	term = _clean(term_match.group(1))
	definition = _clean(definition_match.group(1))
	if not term or not definition:
		return None
	return Flashcard(term=term, definition=definition)


def try_parse_flashcards(text: str) -> List[Flashcard]:
	cards: List[Flashcard] = []
	for segment in _segments(CARD_HEADER, text):
		card = _parse_card(segment)
		if card is not None:
			cards.append(card)
	if not cards:
		raise ParseFailure("no flashcards in response")
	return cards


def _parse_question(segment: str) -> Optional[QuizQuestion]:
	options: Dict[str, str] = {}
	first_option_at: Optional[int] = None
	for match in OPTION_RE.finditer(segment):
		label = match.group(1).upper()
		if first_option_at is None:
			first_option_at = match.start()
		# Keep the first occurrence of each label
		options.setdefault(label, _clean(match.group(2)))
	correct = CORRECT_RE.search(segment)
	if first_option_at is None or correct is None:
		return None
	if any(not options.get(label) for label in OPTION_LABELS):
		return None
	prompt = _clean(segment[:first_option_at])
	if not prompt:
		return None
	try:
		return QuizQuestion(
			prompt=prompt,
			options=[options[label] for label in OPTION_LABELS],
			correct_label=correct.group(1).upper(),
		)
	except SchemaError:
		return None


def try_parse_quiz(text: str) -> List[QuizQuestion]:
	questions: List[QuizQuestion] = []
	for index, segment in enumerate(_segments(QUESTION_HEADER, text)):
		question = _parse_question(segment)
		if question is None:
			logger.debug("Dropping malformed quiz question %d", index + 1)
			continue
		questions.append(question)
	if not questions:
		raise ParseFailure("no quiz questions in response")
	return questions


def parse_flashcards(text: str) -> List[Flashcard]:
	try:
		return try_parse_flashcards(text)
	except ParseFailure:
		logger.info("No flashcards parsed; showing placeholder card")
		return [PLACEHOLDER_CARD.model_copy()]


def parse_quiz(text: str) -> List[QuizQuestion]:
	try:
		return try_parse_quiz(text)
	except ParseFailure:
		logger.info("No quiz questions parsed; showing placeholder question")
		return [PLACEHOLDER_QUESTION.model_copy()]
