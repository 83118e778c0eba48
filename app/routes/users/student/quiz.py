from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.models import User
from app.auth.dependencies import get_current_user, ensure_acting_as
from app.helpers import question_bank, registration_gate
from app.helpers.registration_gate import utcnow
from app.routes.users.quiz import question_view
from app.schemas.quiz_submission import (
    ParticipantRequest, RegistrationResponse,
    RegistrationCheckResponse, AttemptView
)


router = APIRouter(
    prefix="/quiz",
    tags=["Participant Quiz Endpoints"]
)


@router.post(
    "/quizzes/{quiz_id}/register",
    response_model=RegistrationResponse,
)
async def register_for_quiz(
    quiz_id: UUID,
    payload: Optional[ParticipantRequest] = None,
    current_user: User = Depends(get_current_user),
    now: datetime = Depends(utcnow),
    db: AsyncSession = Depends(get_db),
):
    user_id = ensure_acting_as(current_user, payload.user_id if payload else None)
    quiz = await question_bank.get_visible_quiz(db, quiz_id, current_user)

    created = await registration_gate.register(db, quiz, user_id, now)

    return RegistrationResponse(
        registered=True,
        message="Registration successful" if created else "Already registered",
    )


@router.post(
    "/quizzes/{quiz_id}/check",
    response_model=RegistrationCheckResponse,
)
async def check_registration(
    quiz_id: UUID,
    payload: Optional[ParticipantRequest] = None,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    user_id = ensure_acting_as(current_user, payload.user_id if payload else None)
    quiz = await question_bank.get_visible_quiz(db, quiz_id, current_user)

    return RegistrationCheckResponse(
        registered=await registration_gate.is_registered(db, quiz.id, user_id)
    )


@router.get(
    "/quizzes/{quiz_id}/attempt",
    response_model=AttemptView,
)
async def get_attempt_questions(
    quiz_id: UUID,
    current_user: User = Depends(get_current_user),
    now: datetime = Depends(utcnow),
    db: AsyncSession = Depends(get_db),
):
    quiz = await question_bank.get_visible_quiz(db, quiz_id, current_user)

    # --------------------------
    # Window + registration check
    # --------------------------
    await registration_gate.ensure_can_attempt(db, quiz, current_user.id, now)

    questions = await question_bank.list_questions(db, quiz.id)

    return AttemptView(questions=[question_view(q) for q in questions])
