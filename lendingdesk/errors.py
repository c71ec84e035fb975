"""Error types that carry a machine-readable slug next to a human message."""

from __future__ import annotations

from enum import Enum


class ErrorType(Enum):
    """Broad category of a slug error, used to decide how callers react."""

    UNKNOWN = "unknown"
    INCORRECT_INPUT = "incorrect-input"


class SlugError(Exception):
    """An error identified by a stable slug and described by a message.

    Subclasses may set ``SLUG`` and ``MESSAGE`` so they can be raised
    without arguments.
    """

    SLUG = ""
    MESSAGE = ""
    ERROR_TYPE = ErrorType.UNKNOWN

    def __init__(
        self,
        slug: str | None = None,
        message: str | None = None,
        error_type: ErrorType | None = None,
    ) -> None:
        self.slug = self.SLUG if slug is None else slug
        self.message = self.MESSAGE if message is None else message
        self.error_type = self.ERROR_TYPE if error_type is None else error_type
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(slug={self.slug!r}, message={self.message!r})"


class IncorrectInputError(SlugError):
    """Raised when the caller supplied input the domain rejects."""

    ERROR_TYPE = ErrorType.INCORRECT_INPUT

    def __init__(self, slug: str | None = None, message: str | None = None) -> None:
        super().__init__(slug, message, ErrorType.INCORRECT_INPUT)


class PatronNotFoundError(IncorrectInputError):
    """Raised when a patron does not exist."""

    SLUG = "patron-not-found"
    MESSAGE = "patron not found"


class BookNotFoundError(IncorrectInputError):
    """Raised when a book does not exist."""

    SLUG = "book-not-found"
    MESSAGE = "book not found"