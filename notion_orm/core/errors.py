"""
Error taxonomy for the schema compiler, validator, query builder and remote client.
"""

from typing import List, Optional

from notion_orm.core.models import FieldMismatch


class NotionOrmError(Exception):
    """Base class for every error raised by notion_orm."""


class ParseError(NotionOrmError):
    """Malformed schema text, or no models found."""

    def __init__(self, message: str, line: Optional[str] = None):
        super().__init__(message)
        self.line = line


class MappingError(NotionOrmError):
    """Query construction cannot be resolved (relation target unknown, empty sub-query)."""


class BuilderConsumedError(MappingError):
    """A QueryBuilder was used again after execute()."""


class SchemaValidationError(NotionOrmError):
    """A model cannot be realized against its remote database."""

    def __init__(
        self,
        message: str,
        model_name: Optional[str] = None,
        mismatches: Optional[List[FieldMismatch]] = None,
    ):
        super().__init__(message)
        self.model_name = model_name
        self.mismatches = mismatches or []


class RemoteError(NotionOrmError):
    """Failure reported by the remote service or the transport."""

    retryable_statuses = frozenset({409, 429, 500, 502, 503, 504})

    def __init__(self, message: str, code: Optional[str] = None, status: Optional[int] = None):
        super().__init__(message)
        self.code = code
        self.status = status

    @property
    def is_retryable(self) -> bool:
        # Transport failures carry no status
        if self.status is None:
            return True
        return self.status in self.retryable_statuses


class NotFoundError(RemoteError):
    """The requested database or page does not exist or is not shared."""

    @property
    def is_retryable(self) -> bool:
        return False


class UnauthorizedError(RemoteError):
    """The credential was rejected."""

    @property
    def is_retryable(self) -> bool:
        return False


class RemoteValidationError(RemoteError):
    """The remote service rejected the request body (code ``validation_error``)."""

    @property
    def is_retryable(self) -> bool:
        return False
