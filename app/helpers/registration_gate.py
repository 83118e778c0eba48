import enum
import logging
from datetime import datetime
from uuid import UUID

from fastapi.encoders import jsonable_encoder
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import NotRegistered, QuizEnded, QuizNotStarted
from app.models import Quiz, QuizParticipant
from app.schemas.quiz import as_utc

logger = logging.getLogger(__name__)


class QuizWindow(str, enum.Enum):
    NOT_STARTED = "NOT_STARTED"
    ONGOING = "ONGOING"
    ENDED = "ENDED"


def utcnow() -> datetime:
    """Clock dependency; naive UTC to match stored quiz windows."""
    return datetime.utcnow()


def quiz_metadata(quiz: Quiz) -> dict:
    return jsonable_encoder({
        "id": quiz.id,
        "name": quiz.name,
        "description": quiz.description,
        "instructions": quiz.instructions,
        "start_time": as_utc(quiz.start_time),
        "end_time": as_utc(quiz.end_time),
    })


def quiz_window(quiz: Quiz, now: datetime) -> QuizWindow:
    # Both boundaries are inclusive for attempts
    if now < quiz.start_time:
        return QuizWindow.NOT_STARTED
    if now > quiz.end_time:
        return QuizWindow.ENDED
    return QuizWindow.ONGOING


def ensure_ongoing(quiz: Quiz, now: datetime) -> None:
    """
    Raise the structured rejection for a quiz outside its window.
    A quiz that has not started still exposes its metadata, never its questions.
    """
    window = quiz_window(quiz, now)
    if window is QuizWindow.NOT_STARTED:
        raise QuizNotStarted(quiz_metadata(quiz))
    if window is QuizWindow.ENDED:
        raise QuizEnded()


async def is_registered(db: AsyncSession, quiz_id: UUID, user_id: UUID) -> bool:
    result = await db.execute(
        select(QuizParticipant.id).where(
            QuizParticipant.quiz_id == quiz_id,
            QuizParticipant.user_id == user_id,
        )
    )
    return result.first() is not None


async def register(db: AsyncSession, quiz: Quiz, user_id: UUID, now: datetime) -> bool:
    """
    Register user_id for quiz. Returns True when a registration row was
    created and False when the user was already registered.
    """
    if quiz_window(quiz, now) is QuizWindow.ENDED:
        raise QuizEnded()

    if await is_registered(db, quiz.id, user_id):
        return False

    db.add(QuizParticipant(quiz_id=quiz.id, user_id=user_id))
    try:
        await db.commit()
    except IntegrityError:
        # A concurrent request registered the same pair first
        await db.rollback()
        return False

    logger.info("User %s registered for quiz %s", user_id, quiz.id)
    return True


async def ensure_can_attempt(db: AsyncSession, quiz: Quiz, user_id: UUID, now: datetime) -> None:
    ensure_ongoing(quiz, now)
    if not await is_registered(db, quiz.id, user_id):
        raise NotRegistered()
