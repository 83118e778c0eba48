import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from app.errors import storage_error_handler
from app.middleware.rate_limit import SlidingWindowRateLimiter, rate_limit_middleware

from app.routes.users.user_creation import router as user_registration_router
from app.routes.users.quiz import router as quiz_router
from app.routes.users.quiz_results import router as quiz_results_router

from app.routes.users.teacher.quiz import router as teacher_quiz_router

from app.routes.users.student.quiz import router as student_quiz_router
from app.routes.users.student.quiz_submission import router as student_quiz_submission_router

load_dotenv()

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
logger = logging.getLogger("quiz-platform")


def _parse_origins(raw: str) -> list[str]:
    raw = (raw or "").strip()
    if not raw or raw == "*":
        return ["*"]
    return [o.strip() for o in raw.split(",") if o.strip()]


RATE_LIMIT_REQUESTS = int(os.getenv("RATE_LIMIT_REQUESTS", 120))
RATE_LIMIT_WINDOW_SECONDS = float(os.getenv("RATE_LIMIT_WINDOW_SECONDS", 60))


app = FastAPI(
    title="Quiz Platform"
)

if RATE_LIMIT_REQUESTS > 0:
    app.middleware("http")(
        rate_limit_middleware(
            SlidingWindowRateLimiter(RATE_LIMIT_REQUESTS, RATE_LIMIT_WINDOW_SECONDS)
        )
    )

# Outermost middleware, wraps the rate limiter
origins = _parse_origins(os.getenv("CORS_ORIGINS", "*"))

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    # Browsers reject "*" with credentials
    allow_credentials=origins != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(SQLAlchemyError, storage_error_handler)


@app.get("/")
def root():
    return {
        "message": "Quiz Platform is Running!"
        }


@app.get("/health")
def health_check():
    return {"status": "healthy"}


app.include_router(user_registration_router)

app.include_router(quiz_router)
app.include_router(quiz_results_router)

app.include_router(teacher_quiz_router)

app.include_router(student_quiz_router)
app.include_router(student_quiz_submission_router)
