"""Exception types raised by the kanbanstore engine."""

from __future__ import annotations

from typing import Any


class KanbanError(Exception):
    """Base exception for kanbanstore errors."""

    retryable = False

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context


class ValidationError(KanbanError):
    """Malformed or missing input."""

    pass


class NotFoundError(KanbanError):
    """Referenced entity does not exist."""

    def __init__(self, resource: str, identifier: str | None = None) -> None:
        if identifier:
            message = f"{resource} with identifier '{identifier}' not found"
        else:
            message = f"{resource} not found"
        super().__init__(message, resource=resource, identifier=identifier)
        self.resource = resource
        self.identifier = identifier


class BoardNotFoundError(NotFoundError):
    """Board not found."""

    def __init__(self, board_id: str) -> None:
        super().__init__("Board", board_id)


class ColumnNotFoundError(NotFoundError):
    """Column not found."""

    def __init__(self, column_id: str) -> None:
        super().__init__("Column", column_id)


class TaskNotFoundError(NotFoundError):
    """Task not found."""

    def __init__(self, task_id: str) -> None:
        super().__init__("Task", task_id)


class BusinessRuleError(KanbanError):
    """An operation was rejected by a workflow rule."""

    pass


class ColumnCapacityFullError(BusinessRuleError):
    """Column has reached its WIP limit."""

    def __init__(self, column_name: str, current_count: int, wip_limit: int) -> None:
        super().__init__(
            f"Column '{column_name}' is at capacity ({current_count}/{wip_limit})",
            column_name=column_name,
            current_count=current_count,
            wip_limit=wip_limit,
        )
        self.column_name = column_name
        self.current_count = current_count
        self.wip_limit = wip_limit


class StructuralImportError(KanbanError):
    """Import payload is malformed or internally inconsistent."""

    pass


class StorageError(KanbanError):
    """Transaction or connection failure at the storage boundary."""

    def __init__(
        self,
        operation: str,
        message: str | None = None,
        *,
        retryable: bool = False,
        table: str | None = None,
    ) -> None:
        detail = f"Database operation failed: {operation}"
        if table:
            detail += f" on {table}"
        if message:
            detail += f": {message}"
        super().__init__(detail, operation=operation, table=table)
        self.operation = operation
        self.retryable = retryable


class ContentionError(StorageError):
    """Retries were exhausted while the store stayed contended."""

    def __init__(self, operation: str, attempts: int, message: str | None = None) -> None:
        super().__init__(
            operation,
            f"gave up after {attempts} attempts" + (f" ({message})" if message else ""),
        )
        self.attempts = attempts
