"""Exceptions for files app.

Every drive operation fails with one of these. Callers (the API
layer) map ``code`` to a response without inspecting messages.
"""

from typing import ClassVar


class DriveError(Exception):
    """Base class for expected drive operation failures."""

    code: ClassVar[str] = 'error'


class NotFoundError(DriveError):
    """Raised when the requested entity does not exist."""

    code = 'not_found'

    def __init__(self, entity: str, entity_id: int | None = None) -> None:
        """Initialize NotFoundError.

        Args:
            entity: Human readable entity name (e.g. 'Folder').
            entity_id: ID that was looked up.
        """
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f'{entity} not found')


class ForbiddenError(DriveError):
    """Raised when the entity exists but belongs to someone else."""

    code = 'forbidden'

    def __init__(self, message: str = 'Unauthorized') -> None:
        """Initialize ForbiddenError."""
        super().__init__(message)


class InvalidInputError(DriveError):
    """Raised for missing or malformed input."""

    code = 'invalid_input'


class ConflictError(DriveError):
    """Raised when a change would break the folder tree structure."""

    code = 'conflict'


class AuthenticationFailedError(DriveError):
    """Raised when a lock password does not match."""

    code = 'authentication_failed'

    def __init__(self, message: str = 'Incorrect password') -> None:
        """Initialize AuthenticationFailedError."""
        super().__init__(message)


class NotApplicableError(DriveError):
    """Raised when the entity is not in a state the operation needs."""

    code = 'not_applicable'


class NotLockedError(NotApplicableError):
    """Raised when unlocking something that is not locked."""

    code = 'not_locked'

    def __init__(self, entity: str) -> None:
        """Initialize NotLockedError.

        Args:
            entity: Human readable entity name (e.g. 'File').
        """
        self.entity = entity
        super().__init__(f'{entity} is not locked')


class InternalError(DriveError):
    """Raised for unexpected persistence or storage failures.

    Carries a generic message; details are only logged.
    """

    code = 'internal'

    def __init__(self, message: str = 'Internal error') -> None:
        """Initialize InternalError."""
        super().__init__(message)
