from datetime import datetime, timezone
from uuid import uuid4

import pytest

from lendingdesk.app import Application, Commands, Queries
from lendingdesk.book import Book, BookStatus, BookType, Information
from lendingdesk.commands import (
    AddNewBookCommand,
    AddNewBookHandler,
    CancelHoldHandler,
    CheckoutHandler,
    MarkOverdueCheckoutHandler,
    PlaceOnHoldCommand,
    PlaceOnHoldHandler,
    ReturnBookHandler,
)
from lendingdesk.errors import BookNotFoundError, PatronNotFoundError
from lendingdesk.patron import HoldDuration, Patron, PatronType
from lendingdesk.queries import (
    ExpiredHold,
    ExpiredHoldsHandler,
    ExpiredHoldsQuery,
    ExpiredHoldsReadModel,
    OverdueCheckoutsHandler,
    OverdueCheckoutsReadModel,
    PatronProfileHandler,
    PatronProfileReadModel,
)
from lendingdesk.repositories import BookRepository, PatronRepository


class Store(PatronRepository, BookRepository, ExpiredHoldsReadModel,
            OverdueCheckoutsReadModel, PatronProfileReadModel):
    def __init__(self):
        self.patrons = {}
        self.books = {}
        self.expired = []

    def _patron(self, patron_id):
        if patron_id not in self.patrons:
            raise PatronNotFoundError()
        return self.patrons[patron_id]

    def _book(self, book_id):
        if book_id not in self.books:
            raise BookNotFoundError()
        return self.books[book_id]

    def update(self, some_id, update_fn):
        if some_id in self.patrons:
            update_fn(self.patrons[some_id])
        else:
            update_fn(self._book(some_id))

    def update_with_book(self, patron_id, book_id, update_fn):
        update_fn(self._patron(patron_id), self._book(book_id))

    def create_available_book(self, book):
        self.books[book.book_id] = Book.available(book)

    def update_with_patron(self, book_id, update_fn):
        book = self._book(book_id)
        update_fn(book, self._patron(book.by_patron_id()))

    def list_expired_holds(self, at):
        return list(self.expired)

    def list_overdue_checkouts(self, at, max_checkout_duration_days):
        return []

    def get_patron_profile(self, patron_id):
        raise PatronNotFoundError()


@pytest.fixture
def store():
    return Store()


@pytest.fixture
def app(store):
    return Application(
        commands=Commands(
            place_on_hold=PlaceOnHoldHandler(store),
            cancel_hold=CancelHoldHandler(store),
            check_out=CheckoutHandler(store),
            return_book=ReturnBookHandler(store),
            mark_overdue_checkout=MarkOverdueCheckoutHandler(store),
            add_new_book=AddNewBookHandler(store),
        ),
        queries=Queries(
            patron_profile=PatronProfileHandler(store),
            expired_holds=ExpiredHoldsHandler(store),
            overdue_checkouts=OverdueCheckoutsHandler(store),
        ),
    )


def test_add_new_book_through_application(app, store):
    book_id, branch_id = uuid4(), uuid4()
    app.commands.add_new_book.handle(
        AddNewBookCommand(book_id, BookType.CIRCULATING, branch_id)
    )
    assert store.books[book_id].status is BookStatus.AVAILABLE
    assert store.books[book_id].info == Information(book_id, BookType.CIRCULATING, branch_id)


def test_place_on_hold_through_application(app, store):
    patron_id, book_id, branch_id = uuid4(), uuid4(), uuid4()
    store.patrons[patron_id] = Patron(patron_id, PatronType.REGULAR)
    store.books[book_id] = Book.available(Information(book_id, BookType.CIRCULATING, branch_id))
    duration = HoldDuration.for_days(datetime(2023, 1, 1, tzinfo=timezone.utc), 5)

    app.commands.place_on_hold.handle(PlaceOnHoldCommand(patron_id, book_id, duration))

    assert store.books[book_id].status is BookStatus.ON_HOLD
    assert store.books[book_id].by_patron_id() == patron_id
    assert [h.book_id for h in store.patrons[patron_id].holds] == [book_id]


def test_query_through_application(app, store):
    at = datetime(2023, 1, 1, tzinfo=timezone.utc)
    hold = ExpiredHold(uuid4(), uuid4(), uuid4(), at)
    store.expired = [hold]
    assert app.queries.expired_holds.handle(ExpiredHoldsQuery(at=at)) == [hold]


def test_application_is_immutable(app):
    before = app.commands
    with pytest.raises(AttributeError):
        app.commands = None
    assert app.commands is before