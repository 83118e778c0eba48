from pydantic import BaseModel
from typing import List, Optional
from uuid import UUID

from app.schemas.quiz import QuestionRead


#for participants
class ParticipantRequest(BaseModel):
    user_id: Optional[UUID] = None


class RegistrationResponse(BaseModel):
    registered: bool
    message: str


class RegistrationCheckResponse(BaseModel):
    registered: bool


class AttemptView(BaseModel):
    success: bool = True
    questions: List[QuestionRead]


class QuizAnswerSubmit(BaseModel):
    question_id: UUID
    selected_option: str


class QuizSubmitRequest(BaseModel):
    user_id: Optional[UUID] = None
    answers: List[QuizAnswerSubmit]


class QuizSubmitResponse(BaseModel):
    message: str
    score: int
    answered: int
    total_questions: int


#for results
class QuizResultRow(BaseModel):
    user_id: UUID
    user_name: str
    score: int
    answered: int
    total_questions: int


class LeaderboardEntry(BaseModel):
    rank: int
    user_id: UUID
    user_name: str
    score: int


class LeaderboardResponse(BaseModel):
    leaderboard: List[LeaderboardEntry]
