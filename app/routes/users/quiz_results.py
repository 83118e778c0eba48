from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.auth.dependencies import get_optional_user
from app.helpers import question_bank
from app.helpers.leaderboard import build_leaderboard, fetch_quiz_results
from app.models import User
from app.schemas.quiz_submission import LeaderboardResponse, QuizResultRow

router = APIRouter(
    prefix="/quiz",
    tags=["Quiz Result Endpoints"]
)


@router.get("/quizzes/{quiz_id}/results", response_model=List[QuizResultRow])
async def get_quiz_results(
    quiz_id: UUID,
    current_user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    quiz = await question_bank.get_visible_quiz(db, quiz_id, current_user)
    return await fetch_quiz_results(db, quiz.id)


@router.get("/quizzes/{quiz_id}/leaderboard", response_model=LeaderboardResponse)
async def get_quiz_leaderboard(
    quiz_id: UUID,
    current_user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    quiz = await question_bank.get_visible_quiz(db, quiz_id, current_user)
    rows = await fetch_quiz_results(db, quiz.id)
    return {"leaderboard": build_leaderboard(rows)}
