from __future__ import annotations
from typing import List

from pydantic import BaseModel, Field, model_validator


OPTION_LABELS: List[str] = ["A", "B", "C", "D"]


class Flashcard(BaseModel):
	term: str
	definition: str
	placeholder: bool = False


class QuizQuestion(BaseModel):
	prompt: str
	options: List[str] = Field(min_length=4, max_length=4)
	correct_label: str
	# Rendered with every option disabled
	placeholder: bool = False

	@model_validator(mode="after")
	def _label_indexes_options(self) -> "QuizQuestion":
		if self.correct_label not in OPTION_LABELS:
			raise ValueError(f"correct_label must be one of {OPTION_LABELS}")
		return self

	@property
	def correct_index(self) -> int:
		return OPTION_LABELS.index(self.correct_label)

	def option_for(self, label: str) -> str:
		return self.options[OPTION_LABELS.index(label)]
