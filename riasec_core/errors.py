"""Failure kinds raised by the submission and confirmation pipeline.

Each error carries a stable machine ``code`` and the HTTP status the API layer
answers with. Expected outcomes (already completed, confirmation conflicts)
sit next to the defensive ones; only the latter are system faults.
"""
from __future__ import annotations


class PipelineError(Exception):
    code: str = "PIPELINE_ERROR"
    status: int = 400
    defensive: bool = False

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.code)

    def to_dict(self) -> dict[str, str]:
        return {"error": str(self), "code": self.code}


class InvalidMetadata(PipelineError):
    code = "INVALID_INPUT"


class MalformedAnswer(PipelineError):
    code = "MALFORMED_ANSWER"

    def __init__(self, question_id: str, message: str | None = None) -> None:
        self.question_id = question_id
        super().__init__(message or f"Malformed answer for {question_id}")


class ResponseCountMismatch(PipelineError):
    code = "RESPONSE_COUNT_MISMATCH"
    status = 500
    defensive = True


class ScoreInvariantViolation(PipelineError):
    code = "SCORE_INVARIANT_VIOLATION"
    status = 500
    defensive = True


class AlreadyCompleted(PipelineError):
    code = "QUIZ_ALREADY_COMPLETED"
    status = 409

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or "Quiz already completed for this user.")


class IdentityNotFound(PipelineError):
    code = "USER_NOT_FOUND"
    status = 404

    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__(f"User {user_id} not found")


class CandidateNotRecommended(PipelineError):
    code = "MAJOR_NOT_RECOMMENDED"

    def __init__(self, major: str) -> None:
        self.major = major
        super().__init__(f"{major} is not one of the recommended majors")


class AlreadyConfirmedSame(PipelineError):
    code = "MAJOR_ALREADY_CONFIRMED"
    status = 409

    def __init__(self, major: str) -> None:
        self.major = major
        super().__init__(f"{major} is already the confirmed major")


class ConfirmationImmutable(PipelineError):
    code = "MAJOR_CONFIRMATION_IMMUTABLE"
    status = 409

    def __init__(self, current: str) -> None:
        self.current = current
        super().__init__(f"Chosen major is already set to {current} and cannot be changed")


__all__ = [
    "PipelineError",
    "InvalidMetadata",
    "MalformedAnswer",
    "ResponseCountMismatch",
    "ScoreInvariantViolation",
    "AlreadyCompleted",
    "IdentityNotFound",
    "CandidateNotRecommended",
    "AlreadyConfirmedSame",
    "ConfirmationImmutable",
]
