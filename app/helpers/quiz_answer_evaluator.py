import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List
from uuid import UUID

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import ValidationError
from app.models import QuizQuestion, QuizResult
from app.schemas.quiz_submission import QuizAnswerSubmit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuizScore:
    score: int
    answered: int
    total_questions: int


def evaluate_quiz_answers(
    questions: Iterable[QuizQuestion],
    answers_payload: List[QuizAnswerSubmit],
) -> QuizScore:
    """
    Evaluates quiz answers and returns the score triple.

    - each matching answer adds its question's marks
    - unknown question ids and wrong options add nothing
    - repeated question ids: the last answer counts, once, toward the score
    - answered is the number of answers submitted, repeats included
    """
    if not answers_payload:
        raise ValidationError("Answers array must contain at least one answer")

    questions = list(questions)

    # Map questions for fast lookup
    question_map: Dict[UUID, QuizQuestion] = {q.id: q for q in questions}

    selected: Dict[UUID, str] = {}
    for ans in answers_payload:
        selected[ans.question_id] = ans.selected_option

    total_score = 0
    for question_id, option in selected.items():
        question = question_map.get(question_id)
        if not question:
            continue

        if option == question.correct_answer:
            total_score += question.marks

    return QuizScore(
        score=total_score,
        answered=len(answers_payload),
        total_questions=len(questions),
    )


def _insert_for(db: AsyncSession):
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert
    if dialect == "sqlite":
        return sqlite.insert
    raise NotImplementedError(f"Result upsert is not supported on {dialect}")


async def save_quiz_result(
    db: AsyncSession,
    quiz_id: UUID,
    user_id: UUID,
    result: QuizScore,
    submitted_at: datetime,
) -> None:
    """
    Upsert the (quiz, user) result row. The unique constraint on the pair
    keeps one row per user; a resubmission replaces the previous values.
    """
    insert = _insert_for(db)
    values = {
        "score": result.score,
        "answered": result.answered,
        "total_questions": result.total_questions,
        "submitted_at": submitted_at,
    }

    stmt = insert(QuizResult).values(quiz_id=quiz_id, user_id=user_id, **values)
    stmt = stmt.on_conflict_do_update(
        index_elements=["quiz_id", "user_id"],
        set_=values,
    )

    await db.execute(stmt)
    await db.commit()

    logger.info(
        "Quiz %s scored for user %s: %s (%s/%s answered)",
        quiz_id, user_id, result.score, result.answered, result.total_questions,
    )
