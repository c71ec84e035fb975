from datetime import datetime, timezone
from uuid import uuid4

import pytest

from lendingdesk.book import Book, BookStatus, BookType, new_book_information
from lendingdesk.patron import HoldDuration, Patron, PatronType
from lendingdesk.repositories import BookRepository, PatronRepository


class _DictPatronRepository(PatronRepository):
    def __init__(self, patron, book):
        self.patrons = {patron.id: patron}
        self.books = {book.id: book}

    def update(self, patron_id, update_fn):
        update_fn(self.patrons[patron_id])

    def update_with_book(self, patron_id, book_id, update_fn):
        update_fn(self.patrons[patron_id], self.books[book_id])


@pytest.fixture
def world():
    patron = Patron(uuid4(), PatronType.REGULAR)
    info = new_book_information(uuid4(), BookType.CIRCULATING, uuid4())
    book = Book.available(info)
    return patron, info, book, _DictPatronRepository(patron, book)


@pytest.mark.parametrize("cls", [PatronRepository, BookRepository])
def test_interfaces_cannot_be_instantiated(cls):
    with pytest.raises(TypeError):
        cls()


def test_complete_implementation_runs_callbacks(world):
    patron, _, book, repo = world
    seen = []

    repo.update_with_book(patron.id, book.id, lambda p, b: seen.append((p, b)))
    repo.update(patron.id, seen.append)

    assert seen == [(patron, book), patron]


def test_update_with_book_applies_domain_changes(world):
    patron, info, book, repo = world
    duration = HoldDuration.for_days(datetime(2023, 1, 1, tzinfo=timezone.utc), 5)
    patron.place_on_hold(info, duration)
    book.hold_by(patron.id, duration.till)

    def cancel(p, b):
        p.cancel_hold(info.book_id)
        b.cancel_hold()

    repo.update_with_book(patron.id, book.id, cancel)

    assert book.status is BookStatus.AVAILABLE
    assert list(patron.holds) == []