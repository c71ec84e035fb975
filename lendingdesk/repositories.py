"""Storage interfaces for the patron and book aggregates."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from uuid import UUID

from .book import Book, Information
from .patron import Patron

PatronUpdate = Callable[[Patron], None]
PatronWithBookUpdate = Callable[[Patron, Book], None]
BookUpdate = Callable[[Book], None]
BookWithPatronUpdate = Callable[[Book, Patron], None]


class PatronRepository(ABC):
    """Loads patrons, lets a callback change them and stores the result.

    Implementations raise ``PatronNotFoundError`` or ``BookNotFoundError``
    when an aggregate does not exist. If the callback raises, nothing is
    stored and the exception propagates.
    """

    @abstractmethod
    def update(self, patron_id: UUID, update_fn: PatronUpdate) -> None:
        """Apply ``update_fn`` to the patron and persist it."""

    @abstractmethod
    def update_with_book(
        self, patron_id: UUID, book_id: UUID, update_fn: PatronWithBookUpdate
    ) -> None:
        """Apply ``update_fn`` to the patron and the book and persist both."""


class BookRepository(ABC):
    """Creates books and lets a callback change them and their patron.

    Implementations raise ``BookNotFoundError`` or ``PatronNotFoundError``
    when an aggregate does not exist. If the callback raises, nothing is
    stored and the exception propagates.
    """

    @abstractmethod
    def create_available_book(self, book: Information) -> None:
        """Store a new book that is available for lending."""

    @abstractmethod
    def update(self, book_id: UUID, update_fn: BookUpdate) -> None:
        """Apply ``update_fn`` to the book and persist it."""

    @abstractmethod
    def update_with_patron(self, book_id: UUID, update_fn: BookWithPatronUpdate) -> None:
        """Apply ``update_fn`` to the book and the patron linked to it, then persist both."""