import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["RATE_LIMIT_REQUESTS"] = "0"

from datetime import datetime, timedelta

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.auth.jwt import create_access_token
from app.database import Base, get_db
from app.helpers.registration_gate import utcnow
from app.main import app
from app.models import Quiz, QuizQuestion, User, UserRole

NOW = datetime(2030, 1, 1, 12, 0, 0)


class FrozenClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock():
    return FrozenClock(NOW)


@pytest.fixture
async def session_factory():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    await engine.dispose()


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory, clock):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[utcnow] = clock

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    async def _make_user(name="student one", role=UserRole.STUDENT):
        user = User(
            name=name,
            role=role,
            email=f"{name.replace(' ', '.')}@example.com",
        )
        db.add(user)
        await db.commit()
        return user

    return _make_user


@pytest.fixture
async def teacher(make_user):
    return await make_user("teacher", UserRole.INSTRUCTOR)


@pytest.fixture
async def student(make_user):
    return await make_user("student", UserRole.STUDENT)


@pytest.fixture
def auth_headers():
    def _auth_headers(user: User) -> dict:
        token = create_access_token({"user_id": str(user.id), "role": user.role.value})
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


@pytest.fixture
def make_quiz(db, teacher):
    """
    Build a quiz directly in the database; questions are (text, marks, correct letter).
    The default window is open at NOW.
    """
    async def _make_quiz(
        start=NOW - timedelta(hours=1),
        end=NOW + timedelta(hours=1),
        published=True,
        questions=(("2 + 2?", 2, "A"), ("Capital of France?", 3, "B")),
        author=None,
    ):
        quiz = Quiz(
            name="General knowledge",
            description="Warm-up round",
            instructions="One answer per question",
            start_time=start,
            end_time=end,
            created_by=(author or teacher).id,
            is_published=published,
            questions=[
                QuizQuestion(
                    question_text=text,
                    option_a="first",
                    option_b="second",
                    option_c="third",
                    option_d="fourth",
                    correct_answer=correct,
                    marks=marks,
                )
                for text, marks, correct in questions
            ],
        )
        db.add(quiz)
        await db.commit()
        return quiz

    return _make_quiz
