# app/routes/users/teacher/quiz.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from app.database import get_db
from app.auth.dependencies import is_teacher, ensure_acting_as
from app.helpers import question_bank
from app.models import Quiz, User
from app.routes.users.quiz import question_view
from app.schemas.quiz import (
    QuizCreate, QuizCreateResponse, QuizRead,
    QuestionCreate, QuestionCreateResponse, MessageResponse
)

router = APIRouter(
    prefix="/quiz",
    tags=["Teacher Quiz Endpoints"]
)


def ensure_quiz_author(quiz: Quiz, current_user: User) -> None:
    if quiz.created_by != current_user.id:
        raise HTTPException(403, "Only the quiz author can modify this quiz")


@router.post(
    "/quizzes",
    response_model=QuizCreateResponse,
    status_code=201
)
async def create_quiz(
    quiz_in: QuizCreate,
    current_user: User = Depends(is_teacher),
    db: AsyncSession = Depends(get_db),
):
    created_by = ensure_acting_as(current_user, quiz_in.created_by)
    quiz = await question_bank.create_quiz(db, quiz_in, created_by)

    return QuizCreateResponse(
        message="Quiz created",
        quiz=QuizRead.model_validate(quiz),
    )


@router.post(
    "/quizzes/{quiz_id}/questions",
    response_model=QuestionCreateResponse,
    status_code=201
)
async def add_question(
    quiz_id: UUID,
    question_in: QuestionCreate,
    current_user: User = Depends(is_teacher),
    db: AsyncSession = Depends(get_db),
):
    # --------------------------
    # Fetch quiz + ownership check
    # --------------------------
    quiz = await question_bank.get_quiz(db, quiz_id)
    ensure_quiz_author(quiz, current_user)

    question = await question_bank.add_question(db, quiz, question_in)

    return QuestionCreateResponse(
        message="Question added",
        question=question_view(question, reveal_answer=True),
    )


@router.post(
    "/quizzes/{quiz_id}/publish",
    response_model=MessageResponse,
)
async def publish_quiz(
    quiz_id: UUID,
    current_user: User = Depends(is_teacher),
    db: AsyncSession = Depends(get_db),
):
    quiz = await question_bank.get_quiz(db, quiz_id)
    ensure_quiz_author(quiz, current_user)

    await question_bank.publish_quiz(db, quiz)

    return {"message": "Quiz published successfully"}
