from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.auth.dependencies import get_optional_user
from app.helpers import question_bank
from app.helpers.registration_gate import ensure_ongoing, utcnow
from app.models import QuizQuestion, User
from app.schemas.quiz import QuestionRead, QuizDetailView, QuizRead, QuizStatusResponse

router = APIRouter(
    prefix="/quiz",
    tags=["Quiz Endpoints"]
)


def question_view(question: QuizQuestion, reveal_answer: bool = False) -> QuestionRead:
    view = QuestionRead.model_validate(question)
    if not reveal_answer:
        view.correct_answer = None
    return view


@router.get("/quizzes", response_model=List[QuizRead])
async def list_quizzes(db: AsyncSession = Depends(get_db)):
    return await question_bank.list_published_quizzes(db)


@router.get(
    "/quizzes/{quiz_id}",
    response_model=QuizDetailView,
)
async def get_quiz_details(
    quiz_id: UUID,
    current_user: Optional[User] = Depends(get_optional_user),
    now: datetime = Depends(utcnow),
    db: AsyncSession = Depends(get_db),
):
    quiz = await question_bank.get_visible_quiz(db, quiz_id, current_user, with_questions=True)

    # --------------------------
    # Authors always see their quiz, answer keys included
    # --------------------------
    author = question_bank.is_author(quiz, current_user)
    if not author:
        ensure_ongoing(quiz, now)

    return QuizDetailView(
        id=quiz.id,
        name=quiz.name,
        description=quiz.description,
        instructions=quiz.instructions,
        start_time=quiz.start_time,
        end_time=quiz.end_time,
        is_published=quiz.is_published,
        questions=[question_view(q, reveal_answer=author) for q in quiz.questions],
    )


@router.get("/quizzes/{quiz_id}/status", response_model=QuizStatusResponse)
async def get_quiz_status(
    quiz_id: UUID,
    now: datetime = Depends(utcnow),
    db: AsyncSession = Depends(get_db),
):
    quiz = await question_bank.get_visible_quiz(db, quiz_id)
    ensure_ongoing(quiz, now)
    return {"status": "ONGOING"}
