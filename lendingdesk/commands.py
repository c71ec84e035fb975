"""Commands that change patrons and books, with their handlers."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID

from .book import Book, BookType, new_book_information
from .errors import IncorrectInputError
from .patron import HoldDuration, Patron
from .repositories import BookRepository, PatronRepository

_log = logging.getLogger(__name__)


def _missing(value: UUID | None) -> bool:
    return value is None or value.int == 0


def _require_ids(*fields: tuple[UUID | None, str, str]) -> None:
    """Raise for the first identifier that is absent or nil."""
    for value, slug, message in fields:
        if _missing(value):
            raise IncorrectInputError(slug, message)


@contextmanager
def _monitored(kind: str, name: str, subject: Any) -> Iterator[None]:
    start = time.perf_counter()
    try:
        yield
    except Exception as exc:
        _log.error(
            "%s %s failed after %.3fs: %s (%r)",
            kind,
            name,
            time.perf_counter() - start,
            exc,
            subject,
        )
        raise
    _log.info("%s %s done in %.3fs (%r)", kind, name, time.perf_counter() - start, subject)


def _require(dependency: Any, name: str) -> Any:
    if dependency is None:
        raise ValueError(f"missing {name}")
    return dependency


_PATRON_ID = ("missing-patron-id", "missing patron id")
_BOOK_ID = ("missing-book-id", "missing book id")
_BRANCH_ID = ("missing-library-branch-id", "missing library branch id")


class _PatronRepoHandler:
    def __init__(self, patron_repo: PatronRepository) -> None:
        self._patron_repo = _require(patron_repo, "patronRepo")


class _BookRepoHandler:
    def __init__(self, book_repo: BookRepository) -> None:
        self._book_repo = _require(book_repo, "bookRepo")


@dataclass(frozen=True)
class AddNewBookCommand:
    book_id: UUID | None
    book_type: BookType | None
    library_branch_id: UUID | None

    def _validate(self) -> None:
        _require_ids((self.book_id, *_BOOK_ID))
        if self.book_type is None:
            raise IncorrectInputError("missing-book-type", "missing book type")
        _require_ids((self.library_branch_id, *_BRANCH_ID))


class AddNewBookHandler(_BookRepoHandler):
    """Registers a new, available book."""

    def handle(self, cmd: AddNewBookCommand) -> None:
        with _monitored("command", "AddNewBook", cmd):
            cmd._validate()
            info = new_book_information(cmd.book_id, cmd.book_type, cmd.library_branch_id)
            self._book_repo.create_available_book(info)


@dataclass(frozen=True)
class CancelHoldCommand:
    patron_id: UUID | None
    book_id: UUID | None

    def _validate(self) -> None:
        _require_ids(
            (self.patron_id, "missing-patron-id", "missing-patron-id"),
            (self.book_id, "missing-book-id", "missing-book-id"),
        )


class CancelHoldHandler(_PatronRepoHandler):
    """Cancels a patron's hold on a book."""

    def handle(self, cmd: CancelHoldCommand) -> None:
        with _monitored("command", "CancelHold", cmd):
            cmd._validate()

            def cancel(patron: Patron, book: Book) -> None:
                patron.cancel_hold(cmd.book_id)
                book.cancel_hold()

            self._patron_repo.update_with_book(cmd.patron_id, cmd.book_id, cancel)


@dataclass(frozen=True)
class CheckoutCommand:
    request_at: datetime | None
    patron_id: UUID | None
    book_id: UUID | None

    def _validate(self) -> None:
        if self.request_at is None:
            raise IncorrectInputError("missing-request-at", "missing request at")
        _require_ids((self.patron_id, *_PATRON_ID), (self.book_id, *_BOOK_ID))


class CheckoutHandler(_PatronRepoHandler):
    """Turns a patron's hold into a checkout."""

    def handle(self, cmd: CheckoutCommand) -> None:
        with _monitored("command", "Checkout", cmd):
            cmd._validate()

            def checkout(patron: Patron, book: Book) -> None:
                patron.checkout(cmd.book_id)
                book.checkout(cmd.patron_id, cmd.request_at)

            self._patron_repo.update_with_book(cmd.patron_id, cmd.book_id, checkout)


@dataclass(frozen=True)
class MarkOverdueCheckoutCommand:
    patron_id: UUID | None
    book_id: UUID | None
    library_branch_id: UUID | None

    def _validate(self) -> None:
        _require_ids(
            (self.patron_id, *_PATRON_ID),
            (self.book_id, *_BOOK_ID),
            (self.library_branch_id, *_BRANCH_ID),
        )


class MarkOverdueCheckoutHandler(_PatronRepoHandler):
    """Records that a patron's checkout is overdue."""

    def handle(self, cmd: MarkOverdueCheckoutCommand) -> None:
        with _monitored("command", "MarkOverdueCheckout", cmd):
            cmd._validate()
            self._patron_repo.update(
                cmd.patron_id,
                lambda patron: patron.mark_overdue_checkout(
                    cmd.book_id, cmd.library_branch_id
                ),
            )


@dataclass(frozen=True)
class PlaceOnHoldCommand:
    patron_id: UUID | None
    book_id: UUID | None
    hold_duration: HoldDuration | None

    def _validate(self) -> None:
        _require_ids((self.patron_id, *_PATRON_ID), (self.book_id, *_BOOK_ID))
        if self.hold_duration is None or self.hold_duration.is_zero():
            raise IncorrectInputError("missing-hold-duration", "missing hold duration")


class PlaceOnHoldHandler(_PatronRepoHandler):
    """Places a hold on an available book for a patron."""

    def handle(self, cmd: PlaceOnHoldCommand) -> None:
        with _monitored("command", "PlaceOnHold", cmd):
            cmd._validate()

            def place(patron: Patron, book: Book) -> None:
                patron.place_on_hold(book.info, cmd.hold_duration)
                book.hold_by(patron.id, cmd.hold_duration.till)

            self._patron_repo.update_with_book(cmd.patron_id, cmd.book_id, place)


@dataclass(frozen=True)
class ReturnBookCommand:
    book_id: UUID | None

    def _validate(self) -> None:
        _require_ids((self.book_id, *_BOOK_ID))


class ReturnBookHandler(_BookRepoHandler):
    """Checks a book back in and clears it from the patron's overdue list."""

    def handle(self, cmd: ReturnBookCommand) -> None:
        with _monitored("command", "ReturnBook", cmd):
            cmd._validate()

            def give_back(book: Book, patron: Patron) -> None:
                book.check_in()
                patron.return_book(cmd.book_id)

            self._book_repo.update_with_patron(cmd.book_id, give_back)