import logging

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


# ---------------------------
# Domain errors
# ---------------------------
class QuizError(HTTPException):
    """
    Base for quiz lifecycle rejections.
    The response body is {"detail": {"message": ..., "code": ...}}.
    """

    status_code = status.HTTP_400_BAD_REQUEST
    code = "ERROR"

    def __init__(self, message: str, **extra):
        detail = {"message": message, "code": self.code, **extra}
        super().__init__(status_code=self.status_code, detail=detail)
        self.message = message


class ValidationError(QuizError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "VALIDATION_ERROR"


class NotFoundError(QuizError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"


class QuizNotStarted(QuizError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "NOT_STARTED"

    def __init__(self, quiz_metadata: dict):
        super().__init__("Quiz has not started yet", quiz=quiz_metadata)


class QuizEnded(QuizError):
    status_code = status.HTTP_410_GONE
    code = "ENDED"

    def __init__(self):
        super().__init__("Quiz has ended")


class NotRegistered(QuizError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "NOT_REGISTERED"

    def __init__(self):
        super().__init__("You are not registered for this quiz")


# ---------------------------
# Storage failures
# ---------------------------
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(
        "Storage failure on %s %s", request.method, request.url.path, exc_info=exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )
