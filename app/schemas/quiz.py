from pydantic import BaseModel, Field, field_serializer
from typing import Optional, List
from datetime import datetime, timezone
from uuid import UUID


def as_utc(value: datetime) -> datetime:
    """Quiz times are stored as naive UTC; attach the offset on the way out."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# Authoring

class QuizCreate(BaseModel):
    name: str
    description: Optional[str] = None
    instructions: Optional[str] = None
    start_time: datetime
    end_time: datetime
    created_by: Optional[UUID] = None


class QuestionOptionIn(BaseModel):
    text: str
    is_correct: bool = Field(default=False, alias="isCorrect")

    model_config = {"populate_by_name": True}


class QuestionCreate(BaseModel):
    question: str
    marks: int = 1
    options: List[QuestionOptionIn]


# Reads

class QuizRead(BaseModel):
    id: UUID
    name: str
    description: Optional[str]
    instructions: Optional[str]
    start_time: datetime
    end_time: datetime
    created_by: UUID
    is_published: bool

    model_config = {"from_attributes": True}

    @field_serializer("start_time", "end_time")
    def serialize_window(self, value: datetime) -> datetime:
        return as_utc(value)


class QuestionRead(BaseModel):
    id: UUID
    quiz_id: UUID
    question_text: str
    option_a: Optional[str]
    option_b: Optional[str]
    option_c: Optional[str]
    option_d: Optional[str]
    marks: int
    # Only filled for the quiz author
    correct_answer: Optional[str] = None

    model_config = {"from_attributes": True}


class QuizDetailView(BaseModel):
    id: UUID
    name: str
    description: Optional[str]
    instructions: Optional[str]
    start_time: datetime
    end_time: datetime
    is_published: bool
    questions: List[QuestionRead]

    @field_serializer("start_time", "end_time")
    def serialize_window(self, value: datetime) -> datetime:
        return as_utc(value)


class QuizCreateResponse(BaseModel):
    message: str
    quiz: QuizRead


class QuestionCreateResponse(BaseModel):
    message: str
    question: QuestionRead


class MessageResponse(BaseModel):
    message: str


class QuizStatusResponse(BaseModel):
    status: str
