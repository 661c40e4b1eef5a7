"""Interactive state for the currently displayed result.

A generator session holds exactly one view, chosen by content type:
``PlainTextView`` for lesson plans, study guides and tutorials,
``FlashcardSession`` for flashcards and ``QuizSession`` for quizzes.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Optional, Set, Union

from .content import ContentType
from .models import OPTION_LABELS, Flashcard, QuizQuestion
from .parsing import parse_flashcards, parse_quiz


@dataclass
class PlainTextView:
	kind: ClassVar[str] = "plain_text"

	text: str

	def to_payload(self) -> Dict[str, Any]:
		return {"kind": self.kind, "text": self.text}


@dataclass
class FlashcardSession:
	kind: ClassVar[str] = "flashcards"

	cards: List[Flashcard]
	flipped: Set[int] = field(default_factory=set)

	def _check_index(self, index: int) -> None:
		if index < 0 or index >= len(self.cards):
			raise IndexError(f"card index must be 0..{len(self.cards) - 1}")

	def toggle(self, index: int) -> bool:
		"""Flip a card; returns True when the card is now revealed."""
		self._check_index(index)
		if index in self.flipped:
			self.flipped.discard(index)
			return False
		self.flipped.add(index)
		return True

	def is_flipped(self, index: int) -> bool:
		return index in self.flipped

	def reset(self) -> None:
		self.flipped.clear()

	def to_payload(self) -> Dict[str, Any]:
		return {
			"kind": self.kind,
			"cards": [
				{
					"index": i,
					"term": card.term,
					"definition": card.definition,
					"placeholder": card.placeholder,
					"revealed": i in self.flipped,
				}
				for i, card in enumerate(self.cards)
			],
		}


@dataclass
class QuizSession:
	kind: ClassVar[str] = "quiz"

	questions: List[QuizQuestion]
	current_index: int = 0
	answers: Dict[int, str] = field(default_factory=dict)
	completed: bool = False

	def __post_init__(self) -> None:
		if not self.questions:
			raise ValueError("a quiz session needs at least one question")

	@property
	def current(self) -> QuizQuestion:
		return self.questions[self.current_index]

	@property
	def can_advance(self) -> bool:
		return not self.completed and self.current_index in self.answers

	@property
	def score(self) -> int:
		return sum(
			1
			for i, question in enumerate(self.questions)
			if self.answers.get(i) == question.correct_label
		)

	def select(self, label: str) -> bool:
		"""Record an answer for the current question without advancing."""
		label = (label or "").strip().upper()
		if label not in OPTION_LABELS:
			raise ValueError(f"label must be one of {OPTION_LABELS}")
		if self.completed or self.current.placeholder:
			return False
		self.answers[self.current_index] = label
		return True

	def next(self) -> bool:
		# Unanswered questions block progression
		if not self.can_advance:
			return False
		if self.current_index >= len(self.questions) - 1:
			self.completed = True
		else:
			self.current_index += 1
		return True

	def reset(self) -> None:
		self.current_index = 0
		self.answers.clear()
		self.completed = False

	def to_payload(self) -> Dict[str, Any]:
		question = self.current
		payload: Dict[str, Any] = {
			"kind": self.kind,
			"total": len(self.questions),
			"current_index": self.current_index,
			"completed": self.completed,
			"can_advance": self.can_advance,
			"answers": {str(i): label for i, label in self.answers.items()},
			"question": {
				"prompt": question.prompt,
				"options": [
					{"label": label, "text": text}
					for label, text in zip(OPTION_LABELS, question.options)
				],
				"placeholder": question.placeholder,
				"selected": self.answers.get(self.current_index),
			},
			"score": None,
		}
		if self.completed:
			payload["score"] = self.score
		return payload


ContentView = Union[PlainTextView, FlashcardSession, QuizSession]


def build_view(content_type: ContentType, text: Optional[str]) -> Optional[ContentView]:
	if text is None:
		return None
	content_type = ContentType(content_type)
	if content_type is ContentType.FLASHCARDS:
		return FlashcardSession(cards=parse_flashcards(text))
	if content_type is ContentType.QUIZ:
		return QuizSession(questions=parse_quiz(text))
	return PlainTextView(text=text)
