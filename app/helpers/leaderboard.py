from typing import List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import QuizResult, User
from app.schemas.quiz_submission import LeaderboardEntry, QuizResultRow


async def fetch_quiz_results(db: AsyncSession, quiz_id: UUID) -> List[QuizResultRow]:
    """
    One row per user who submitted the quiz, joined with their display name.
    Rows come back in user id order; ranking is left to build_leaderboard.
    """
    result = await db.execute(
        select(
            QuizResult.user_id,
            User.name,
            QuizResult.score,
            QuizResult.answered,
            QuizResult.total_questions,
        )
        .join(User, User.id == QuizResult.user_id)
        .where(QuizResult.quiz_id == quiz_id)
        .order_by(QuizResult.user_id.asc())
    )

    return [
        QuizResultRow(
            user_id=r.user_id,
            user_name=r.name,
            score=r.score,
            answered=r.answered,
            total_questions=r.total_questions,
        )
        for r in result.all()
    ]


def build_leaderboard(rows: List[QuizResultRow]) -> List[LeaderboardEntry]:
    """
    Score descending, ties broken by user id ascending.
    Equal scores share a rank and the next rank skips ahead (1, 1, 3).
    """
    ordered = sorted(rows, key=lambda r: (-r.score, str(r.user_id)))

    leaderboard: List[LeaderboardEntry] = []
    rank = 0
    previous_score = None
    for position, row in enumerate(ordered, start=1):
        if row.score != previous_score:
            rank = position
            previous_score = row.score
        leaderboard.append(
            LeaderboardEntry(
                rank=rank,
                user_id=row.user_id,
                user_name=row.user_name,
                score=row.score,
            )
        )
    return leaderboard
