import logging
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.errors import NotFoundError, ValidationError
from app.models import OPTION_LETTERS, Quiz, QuizQuestion
from app.schemas.quiz import QuestionCreate, QuizCreate

logger = logging.getLogger(__name__)


def to_naive_utc(value: datetime) -> datetime:
    """Quiz windows are stored as naive UTC; aware inputs are converted first."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _required_text(value: Optional[str], field: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{field} is required")
    return value.strip()


# ---------------------------
# Quizzes
# ---------------------------
async def create_quiz(db: AsyncSession, quiz_in: QuizCreate, created_by: UUID) -> Quiz:
    name = _required_text(quiz_in.name, "name")
    start_time = to_naive_utc(quiz_in.start_time)
    end_time = to_naive_utc(quiz_in.end_time)

    if start_time >= end_time:
        raise ValidationError("start_time must be before end_time")

    quiz = Quiz(
        name=name,
        description=quiz_in.description,
        instructions=quiz_in.instructions,
        start_time=start_time,
        end_time=end_time,
        created_by=created_by,
        is_published=False,
    )
    db.add(quiz)
    await db.commit()
    await db.refresh(quiz)

    logger.info("Quiz %s created by %s", quiz.id, created_by)
    return quiz


async def get_quiz(db: AsyncSession, quiz_id: UUID, with_questions: bool = False) -> Quiz:
    stmt = select(Quiz).where(Quiz.id == quiz_id)
    if with_questions:
        stmt = stmt.options(selectinload(Quiz.questions))

    result = await db.execute(stmt)
    quiz = result.scalar_one_or_none()

    if not quiz:
        raise NotFoundError("Quiz not found")
    return quiz


def is_author(quiz: Quiz, user) -> bool:
    return user is not None and user.id == quiz.created_by


async def get_visible_quiz(db: AsyncSession, quiz_id: UUID, user=None, with_questions: bool = False) -> Quiz:
    """
    Fetch a quiz as seen by user (None for anonymous callers).
    Unpublished quizzes only exist for their author.
    """
    quiz = await get_quiz(db, quiz_id, with_questions=with_questions)
    if not quiz.is_published and not is_author(quiz, user):
        raise NotFoundError("Quiz not found")
    return quiz


async def publish_quiz(db: AsyncSession, quiz: Quiz) -> Quiz:
    """
    Publishing only ever moves is_published to true, so repeating it is a no-op.
    """
    if not quiz.is_published:
        await db.execute(
            update(Quiz).where(Quiz.id == quiz.id).values(is_published=True)
        )
        await db.commit()
        quiz.is_published = True
        logger.info("Quiz %s published", quiz.id)
    return quiz


async def list_published_quizzes(db: AsyncSession) -> List[Quiz]:
    result = await db.execute(
        select(Quiz)
        .where(Quiz.is_published.is_(True))
        .order_by(Quiz.start_time.asc(), Quiz.id.asc())
    )
    return list(result.scalars().all())


# ---------------------------
# Questions
# ---------------------------
def build_question(quiz_id: UUID, question_in: QuestionCreate) -> QuizQuestion:
    """
    Validate an authoring payload and map it onto the A-D option columns.
    The correct option's position decides the stored correct_answer letter.
    """
    question_text = _required_text(question_in.question, "question")

    if question_in.marks is None or question_in.marks <= 0:
        raise ValidationError("marks must be a positive integer")

    options = question_in.options or []
    if not 2 <= len(options) <= len(OPTION_LETTERS):
        raise ValidationError("A question needs between 2 and 4 options")

    for index, option in enumerate(options):
        if not option.text or not option.text.strip():
            raise ValidationError(f"Option {OPTION_LETTERS[index]} text is required")

    correct = [index for index, option in enumerate(options) if option.is_correct]
    if len(correct) != 1:
        raise ValidationError("Exactly one option must be marked correct")

    texts = [option.text.strip() for option in options]
    texts += [None] * (len(OPTION_LETTERS) - len(texts))

    return QuizQuestion(
        quiz_id=quiz_id,
        question_text=question_text,
        option_a=texts[0],
        option_b=texts[1],
        option_c=texts[2],
        option_d=texts[3],
        correct_answer=OPTION_LETTERS[correct[0]],
        marks=question_in.marks,
    )


async def add_question(db: AsyncSession, quiz: Quiz, question_in: QuestionCreate) -> QuizQuestion:
    question = build_question(quiz.id, question_in)

    db.add(question)
    await db.commit()
    await db.refresh(question)

    logger.info("Question %s added to quiz %s", question.id, quiz.id)
    return question


async def list_questions(db: AsyncSession, quiz_id: UUID) -> List[QuizQuestion]:
    result = await db.execute(
        select(QuizQuestion)
        .where(QuizQuestion.quiz_id == quiz_id)
        .order_by(QuizQuestion.created_at.asc(), QuizQuestion.id.asc())
    )
    return list(result.scalars().all())
