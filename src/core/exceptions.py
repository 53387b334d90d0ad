"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the engine."""

    # Validation errors
    INVALID_ATTRIBUTE = "INVALID_ATTRIBUTE"
    INVALID_FILTER = "INVALID_FILTER"

    # Lifecycle errors
    TASK_DESTROYED = "TASK_DESTROYED"
    STALE_HANDLE = "STALE_HANDLE"
    DUPLICATE_TASK = "DUPLICATE_TASK"

    # Storage errors
    PERSISTENCE_ERROR = "PERSISTENCE_ERROR"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.details = details
        super().__init__(self.message)


class InvalidAttributeError(AppException):
    """Attribute cannot be set through save()."""

    def __init__(self, attribute: str) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_ATTRIBUTE,
            message=f"Attribute cannot be saved: {attribute}",
            details={"attribute": attribute},
        )


class InvalidFilterError(AppException):
    """Unknown filter value."""

    def __init__(self, value: str) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_FILTER,
            message=f"Unknown filter: {value!r}",
            details={"filter": value},
        )


class DuplicateTaskError(AppException):
    """A task with the same id is already a member of the list."""

    def __init__(self, task_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.DUPLICATE_TASK,
            message=f"Task already in list: {task_id}",
            details={"task_id": task_id},
        )


class TaskDestroyedError(AppException):
    """Operation attempted on a destroyed task."""

    def __init__(self, task_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.TASK_DESTROYED,
            message=f"Task has been destroyed: {task_id}",
            details={"task_id": task_id},
        )


class StaleHandleError(AppException):
    """The controller's handle to its task has been revoked."""

    def __init__(self, task_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.STALE_HANDLE,
            message=f"Handle revoked for task: {task_id}",
            details={"task_id": task_id},
        )


class PersistenceError(AppException):
    """A storage read or write failed."""

    def __init__(
        self,
        operation: str,
        task_id: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        message = f"Persistence {operation} failed"
        if task_id:
            message = f"{message} for task {task_id}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(
            error_code=ErrorCode.PERSISTENCE_ERROR,
            message=message,
            details={"operation": operation, "task_id": task_id},
        )
        self.operation = operation
        self.task_id = task_id
