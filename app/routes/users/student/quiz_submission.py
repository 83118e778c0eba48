from datetime import datetime
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from app.database import get_db
from app.auth.dependencies import get_current_user, ensure_acting_as
from app.helpers import question_bank, registration_gate
from app.helpers.quiz_answer_evaluator import evaluate_quiz_answers, save_quiz_result
from app.helpers.registration_gate import utcnow
from app.models import User
from app.schemas.quiz_submission import QuizSubmitRequest, QuizSubmitResponse

router = APIRouter(
    prefix="/quiz",
    tags=["Participant Quiz Submission Endpoints"]
)


@router.post(
    "/quizzes/{quiz_id}/submit",
    response_model=QuizSubmitResponse,
)
async def submit_quiz(
    quiz_id: UUID,
    payload: QuizSubmitRequest,
    current_user: User = Depends(get_current_user),
    now: datetime = Depends(utcnow),
    db: AsyncSession = Depends(get_db),
):
    user_id = ensure_acting_as(current_user, payload.user_id)

    # --------------------------
    # Fetch quiz with questions
    # --------------------------
    quiz = await question_bank.get_visible_quiz(db, quiz_id, current_user, with_questions=True)

    # --------------------------
    # Window + registration check
    # --------------------------
    await registration_gate.ensure_can_attempt(db, quiz, user_id, now)

    # --------------------------
    # Evaluate answers, last submission wins
    # --------------------------
    result = evaluate_quiz_answers(quiz.questions, payload.answers)
    await save_quiz_result(db, quiz.id, user_id, result, submitted_at=now)

    return QuizSubmitResponse(
        message="Quiz submitted",
        score=result.score,
        answered=result.answered,
        total_questions=result.total_questions,
    )
