"""
Habit Tracker Backend — Custom Exception Hierarchy
===================================================

What:  Defines one exception per error kind a caller can receive.
Why:   Each kind carries its own machine-readable code and HTTP status, so
       the global handler in main.py can render every failure the same way.
How:   Each exception class carries a message and optional details.
       The `HabitError` handler turns them into the failure envelope:
       {"success": false, "error": {"code", "message", "details"}}.
Who:   Raised by the validation layer and HabitService; caught by handlers.
When:  During request processing, before any store write happens.

Exception Hierarchy:
    HabitError (base)
    ├── ValidationError        → 400 VALIDATION_ERROR (field-level details)
    ├── NotFoundError          → 404 NOT_FOUND
    ├── LimitReachedError      → 400 LIMIT_REACHED
    ├── DuplicateNameError     → 400 DUPLICATE_NAME
    ├── AlreadyArchivedError   → 400 ALREADY_ARCHIVED
    └── AlreadyActiveError     → 400 ALREADY_ACTIVE

Anything else is an internal error and becomes an opaque 500.
"""

from typing import Any, Dict, List, Optional, Union

Details = Union[List[Dict[str, Any]], Dict[str, Any]]


class HabitError(Exception):
    """
    Base exception for all habit application errors.

    Attributes:
        code:         Machine-readable error kind (safe to return)
        status_code:  HTTP status used by the global handler
        message:      User-facing error description (safe to return)
        details:      Structured extra information, e.g. field violations
    """

    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        details: Optional[Details] = None,
    ):
        self.message = message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Body of the `error` member in the failure envelope."""
        body: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(HabitError):
    """
    Raised when an inbound payload or path parameter fails its schema.

    `details` always holds the complete list of violations, one entry per
    offending field: {"field": "nome", "message": "...", "type": "string_too_short"}.
    """

    code = "VALIDATION_ERROR"
    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        details: Optional[List[Dict[str, Any]]] = None,
    ):
        super().__init__(message=message, details=details or [])


class NotFoundError(HabitError):
    """Raised when an id does not resolve to a stored habit."""

    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, message: str = "Hábito não encontrado"):
        super().__init__(message=message)


class LimitReachedError(HabitError):
    """Raised when creating a habit would exceed the active-habit cap."""

    code = "LIMIT_REACHED"
    status_code = 400

    def __init__(self, limit: int = 20):
        super().__init__(message=f"Você atingiu o limite de {limit} hábitos ativos")
        self.limit = limit


class DuplicateNameError(HabitError):
    """
    Raised when a habit name is already taken.

    Names are unique across the whole store, archived habits included.
    """

    code = "DUPLICATE_NAME"
    status_code = 400

    def __init__(self, message: str = "Você já possui um hábito com este nome"):
        super().__init__(message=message)


class AlreadyArchivedError(HabitError):
    code = "ALREADY_ARCHIVED"
    status_code = 400

    def __init__(self, message: str = "Este hábito já está arquivado"):
        super().__init__(message=message)


class AlreadyActiveError(HabitError):
    code = "ALREADY_ACTIVE"
    status_code = 400

    def __init__(self, message: str = "Este hábito já está ativo"):
        super().__init__(message=message)
