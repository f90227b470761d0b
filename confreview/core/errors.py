from __future__ import annotations

from typing import Any


class WorkflowError(Exception):
    """Базовая ошибка рабочего процесса. Видна вызывающей стороне как есть."""

    code = "workflow_error"
    status_code = 400

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": False,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class InvalidArgument(WorkflowError):
    code = "invalid_argument"
    status_code = 422


class NotFound(WorkflowError):
    code = "not_found"
    status_code = 404


class Forbidden(WorkflowError):
    code = "forbidden"
    status_code = 403


class Conflict(WorkflowError):
    code = "conflict"
    status_code = 409


class NotEligible(WorkflowError):
    code = "not_eligible"
    status_code = 409


class AlreadyFinalized(WorkflowError):
    code = "already_finalized"
    status_code = 409


class AwaitingAuthorRevision(WorkflowError):
    code = "awaiting_author_revision"
    status_code = 409


class PreconditionFailed(WorkflowError):
    code = "precondition_failed"
    status_code = 412
