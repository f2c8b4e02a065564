"""
Base Service.

Base class for all services providing common patterns for business logic.
Services orchestrate repositories, validate input before any write, and
translate store failures into application exceptions.

Usage:
    from notedesk.backend.services.base import BaseService

    class BookmarkService(BaseService):
        def __init__(self, session: AsyncSession) -> None:
            super().__init__(session)
            self.repo = BookmarkRepository(session)

        async def create_bookmark(self, owner_id: str, url: str) -> Bookmark:
            self._require_owner(owner_id)
            self._validate_required({"url": url}, ["url"])
            return await self._execute_db_operation(
                "create_bookmark",
                self.repo.create(owner_id=owner_id, url=url),
            )
"""

import re
from collections.abc import Awaitable
from typing import Any, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from notedesk.backend.core.exceptions import (
    ConflictError,
    NotAuthenticatedError,
    PersistenceError,
    ValidationError,
)
from notedesk.backend.core.logging import get_logger
from notedesk.backend.core.utils import normalize_tag_name

logger = get_logger(__name__)

T = TypeVar("T")

TAG_NAME_PATTERN = re.compile(r"[A-Za-z0-9\s_-]+")


class BaseService:
    """
    Base class for all services.

    Provides:
    - Database session management
    - Logging context
    - Error wrapping for database operations
    - Owner scope check and common validation patterns

    Subclasses should:
    - Call super().__init__(session) in their __init__
    - Initialize repositories in __init__
    - Implement business logic methods
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize the service with a database session.

        Args:
            session: SQLAlchemy async session for database operations
        """
        self._session = session
        self._logger = get_logger(self.__class__.__module__)

    @property
    def session(self) -> AsyncSession:
        """Get the database session."""
        return self._session

    async def _execute_db_operation(
        self,
        operation: str,
        coro: Awaitable[T],
        conflict_message: str | None = None,
    ) -> T:
        """
        Execute a database operation with error handling.

        Application exceptions raised inside the coroutine pass through
        unchanged. SQLAlchemy exceptions become PersistenceError, except a
        unique violation when the caller supplies `conflict_message`.

        Args:
            operation: Description of the operation for logging
            coro: Coroutine to execute
            conflict_message: Message for ConflictError on unique violation

        Raises:
            ConflictError: For unique constraint violations, when requested
            PersistenceError: For every other database error
        """
        try:
            return await coro
        except IntegrityError as e:
            self._logger.warning(
                "Database integrity error",
                extra={"operation": operation, "error": str(e)},
            )
            error_str = str(e).lower()
            if conflict_message and ("unique" in error_str or "duplicate" in error_str):
                raise ConflictError(conflict_message) from e
            raise PersistenceError(f"Database constraint violation: {operation}") from e
        except SQLAlchemyError as e:
            self._logger.error(
                "Database error",
                extra={"operation": operation, "error": str(e)},
            )
            raise PersistenceError(f"Database operation failed: {operation}") from e

    def _require_owner(self, owner_id: str | None) -> str:
        """
        Fail fast when no owner is in scope.

        Raises:
            NotAuthenticatedError: If owner_id is missing or blank
        """
        if not owner_id or not owner_id.strip():
            raise NotAuthenticatedError()
        return owner_id

    def _validate_required(
        self,
        fields: dict[str, Any],
        field_names: list[str],
    ) -> None:
        """
        Validate that required fields are present and not empty.

        Raises:
            ValidationError: If any required field is missing or empty
        """
        missing = []
        for name in field_names:
            value = fields.get(name)
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(name)

        if missing:
            raise ValidationError(
                "Required fields missing",
                details={"missing_fields": missing},
            )

    def _validate_string_length(
        self,
        value: str,
        field_name: str,
        min_length: int | None = None,
        max_length: int | None = None,
    ) -> None:
        """
        Validate string length constraints.

        Raises:
            ValidationError: If string length is out of bounds
        """
        if min_length is not None and len(value) < min_length:
            raise ValidationError(
                f"{field_name} too short",
                details={field_name: f"Minimum length is {min_length}"},
            )
        if max_length is not None and len(value) > max_length:
            raise ValidationError(
                f"{field_name} too long",
                details={field_name: f"Maximum length is {max_length}"},
            )

    def _validate_tag_names(self, names: list[str], max_length: int) -> None:
        """
        Validate user-supplied tag names after trimming.

        A name must be non-blank, at most `max_length` characters, and
        contain only letters, digits, spaces, hyphens and underscores.

        Raises:
            ValidationError: Listing every offending name
        """
        invalid: dict[str, str] = {}
        for raw in names:
            name = normalize_tag_name(raw)
            if not name:
                invalid[raw] = "Tag name is required"
            elif len(name) > max_length:
                invalid[raw] = f"Tag name must be {max_length} characters or less"
            elif not TAG_NAME_PATTERN.fullmatch(name):
                invalid[raw] = (
                    "Tag name can only contain letters, numbers, spaces, "
                    "hyphens, and underscores"
                )

        if invalid:
            raise ValidationError(
                "Invalid tag names",
                details={"invalid_tags": invalid},
            )

    def _log_operation(
        self,
        operation: str,
        **context: Any,
    ) -> None:
        """Log a service operation with context."""
        self._logger.info(
            operation,
            extra={"service": self.__class__.__name__, **context},
        )

    def _log_debug(
        self,
        message: str,
        **context: Any,
    ) -> None:
        """Log debug information."""
        self._logger.debug(
            message,
            extra={"service": self.__class__.__name__, **context},
        )
