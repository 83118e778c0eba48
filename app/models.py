import uuid
import enum
from datetime import datetime
from sqlalchemy import (
    Column, String, Boolean, DateTime, Integer, Enum, ForeignKey, Text, Uuid,
    UniqueConstraint, CheckConstraint,
)
from sqlalchemy.orm import relationship
from app.database import Base


# ---------------------------
# Role Enum
# ---------------------------
class UserRole(str, enum.Enum):
    ADMIN = "admin"
    STUDENT = "student"
    INSTRUCTOR = "instructor"


OPTION_LETTERS = ("A", "B", "C", "D")


# ---------------------------
# User Model
# ---------------------------
class User(Base):
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    role = Column(Enum(UserRole, name="user_role_enum"), nullable=False, default=UserRole.STUDENT)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=True)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)


# ---------------------------
# Quiz Model
# ---------------------------
class Quiz(Base):
    __tablename__ = "quizzes"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    created_by = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False)

    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    instructions = Column(Text, nullable=True)

    # Stored as naive UTC
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)

    is_published = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    author = relationship("User")
    questions = relationship(
        "QuizQuestion",
        back_populates="quiz",
        cascade="all, delete-orphan",
        order_by="QuizQuestion.created_at",
    )
    participants = relationship("QuizParticipant", back_populates="quiz", cascade="all, delete-orphan")
    results = relationship("QuizResult", back_populates="quiz", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("start_time < end_time", name="quiz_window_order"),
    )


class QuizQuestion(Base):
    __tablename__ = "quiz_questions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    quiz_id = Column(Uuid(as_uuid=True), ForeignKey("quizzes.id"), nullable=False, index=True)

    question_text = Column(Text, nullable=False)
    option_a = Column(Text, nullable=True)
    option_b = Column(Text, nullable=True)
    option_c = Column(Text, nullable=True)
    option_d = Column(Text, nullable=True)
    correct_answer = Column(String(1), nullable=False)
    marks = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime, default=datetime.utcnow)

    quiz = relationship("Quiz", back_populates="questions")

    __table_args__ = (
        CheckConstraint("marks > 0", name="question_marks_positive"),
        CheckConstraint("correct_answer IN ('A', 'B', 'C', 'D')", name="question_correct_letter"),
    )

    def option_text(self, letter: str):
        return getattr(self, f"option_{letter.lower()}")


# ---------------------------
# Participation
# ---------------------------
class QuizParticipant(Base):
    __tablename__ = "quiz_participants"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    quiz_id = Column(Uuid(as_uuid=True), ForeignKey("quizzes.id"), nullable=False)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False)

    registered_at = Column(DateTime, default=datetime.utcnow)

    quiz = relationship("Quiz", back_populates="participants")
    user = relationship("User")

    __table_args__ = (
        UniqueConstraint("quiz_id", "user_id", name="unique_quiz_participant"),
    )


class QuizResult(Base):
    __tablename__ = "quiz_results"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    quiz_id = Column(Uuid(as_uuid=True), ForeignKey("quizzes.id"), nullable=False)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False)

    score = Column(Integer, nullable=False, default=0)
    answered = Column(Integer, nullable=False, default=0)
    total_questions = Column(Integer, nullable=False, default=0)
    submitted_at = Column(DateTime, default=datetime.utcnow)

    quiz = relationship("Quiz", back_populates="results")
    user = relationship("User")

    __table_args__ = (
        UniqueConstraint("quiz_id", "user_id", name="unique_quiz_result"),
    )
