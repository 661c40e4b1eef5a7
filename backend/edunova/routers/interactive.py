from __future__ import annotations
from typing import Type, TypeVar

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ..session import GeneratorSession
from ..views import FlashcardSession, QuizSession
from .deps import get_session


router = APIRouter(tags=["interactive"])

V = TypeVar("V", FlashcardSession, QuizSession)


class FlipRequest(BaseModel):
	index: int = Field(ge=0)


class AnswerRequest(BaseModel):
	label: str = Field(min_length=1, max_length=1, description="Option label A-D")


def _active_view(session: GeneratorSession, view_type: Type[V]) -> V:
	view = session.view
	if not isinstance(view, view_type):
		raise HTTPException(status_code=409, detail=f"Active view is not {view_type.kind}")
	return view


@router.post("/flashcards/flip")
def flip_card(req: FlipRequest, session: GeneratorSession = Depends(get_session)):
	deck = _active_view(session, FlashcardSession)
	try:
		revealed = deck.toggle(req.index)
	except IndexError as e:
		raise HTTPException(status_code=400, detail=str(e))
	return {"index": req.index, "revealed": revealed, "view": deck.to_payload()}


@router.post("/flashcards/reset")
def reset_cards(session: GeneratorSession = Depends(get_session)):
	deck = _active_view(session, FlashcardSession)
	deck.reset()
	return {"view": deck.to_payload()}


@router.post("/quiz/answer")
def answer_question(req: AnswerRequest, session: GeneratorSession = Depends(get_session)):
	quiz = _active_view(session, QuizSession)
	try:
		recorded = quiz.select(req.label)
	except ValueError as e:
		raise HTTPException(status_code=400, detail=str(e))
	return {"recorded": recorded, "view": quiz.to_payload()}


@router.post("/quiz/next")
def next_question(session: GeneratorSession = Depends(get_session)):
	quiz = _active_view(session, QuizSession)
	advanced = quiz.next()
	return {"advanced": advanced, "view": quiz.to_payload()}


@router.post("/quiz/reset")
def reset_quiz(session: GeneratorSession = Depends(get_session)):
	quiz = _active_view(session, QuizSession)
	quiz.reset()
	return {"view": quiz.to_payload()}
