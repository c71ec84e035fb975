# lendingdesk

The lending side of a library system. Patrons place books on hold, check them
out and return them, and they get flagged for overdue checkouts. Two aggregates
hold the business rules: `Book` and `Patron`. Application handlers coordinate
the aggregates through repository and read-model interfaces, which you
implement.

The package has no runtime dependencies.

## Installation

```
pip install .
```

To install the test dependencies as well:

```
pip install ".[test]"
```

## Domain

### `lendingdesk.book`

- `Book` is one copy of a book. Create it with one of three constructors:
  - `Book.available(information)`
  - `Book.on_hold(information, hold_information)`
  - `Book.checked_out(information, checked_out_information)`
- A `Book` has these state changes:
  - `hold_by(patron_id, till)` works only on an available book. Otherwise it
    raises `BookNotAvailableError`.
  - `cancel_hold()` raises `BookNotOnHoldError` if the book is not on hold.
  - `checkout(patron_id, at)` raises `BookNotOnHoldError` if the book is not on
    hold. It raises `BookNotHoldByPatronError` if a different patron holds it.
  - `check_in()` raises `BookNotCheckedOutError` if the book is not checked out.
- `by_patron_id()` returns the patron that holds the book or has checked it
  out. It returns `None` when the book is available.
- Read-only properties: `id`, `info`, `status`, `hold_info` and
  `checked_out_info`.
- Value types: `Information`, `BookType` (`RESTRICTED`, `CIRCULATING`),
  `BookStatus` (`AVAILABLE`, `ON_HOLD`, `CHECKED_OUT`), `HoldInformation` and
  `CheckedOutInformation`.
- `new_book_information(book_id, book_type, placed_at)` builds an
  `Information`. It rejects missing or nil ids and a missing type.

### `lendingdesk.patron`

- `Patron(id, patron_type, holds=None, overdue_checkouts=None)` is a patron.
  Read-only properties: `id`, `patron_type`, `holds`, `overdue_checkouts` and
  `is_regular`.
- A `Patron` has these methods:
  - `place_on_hold(book_information, duration)`
  - `cancel_hold(book_id)` and `checkout(book_id)`. Both raise
    `HoldNotFoundError` when the patron has no hold on that book.
  - `mark_overdue_checkout(book_id, library_branch_id)`
  - `return_book(book_id)`. It removes the book from the overdue checkouts, if
    it is there.
- `HoldDuration` has two constructors:
  - `HoldDuration.for_days(from_, num_of_days)`. With 0 days the hold is
    open-ended. A negative number of days is rejected.
  - `HoldDuration.from_till(from_, till)`. A `till` before `from_` is rejected.
- `new_hold(book_id, placed_at, duration)` builds a validated `Hold`.
- `OverdueCheckouts` maps library branch ids to lists of overdue book ids. It
  is a `dict`, with `total_at`, `add_new_book_id` and `remove_book_id`.

`place_on_hold` checks these policies in this order:

1. Regular patrons cannot hold restricted books
   (`RegularPatronCannotHoldRestrictedBookError`).
2. A patron with 2 or more overdue checkouts at the book's branch is rejected
   (`MaxCountOfOverdueCheckoutsReachedError`).
3. A regular patron can hold at most 5 books (`MaxHoldsReachedError`).
4. Only researchers can place open-ended holds
   (`OnlyResearcherCanPlaceOpenEndedHoldError`).

### `lendingdesk.errors`

Every validation failure and rule violation raises a subclass of
`IncorrectInputError`. It is a `SlugError`, which carries:

- `slug`, for example `"max-holds-reached"`
- `message`
- `error_type`, an `ErrorType`

The module also defines `PatronNotFoundError` and `BookNotFoundError`, for
repository implementations to raise.

```python
import uuid
from datetime import datetime

from lendingdesk.book import Book, BookType, new_book_information
from lendingdesk.patron import HoldDuration, Patron, PatronType

info = new_book_information(uuid.uuid4(), BookType.CIRCULATING, uuid.uuid4())
book = Book.available(info)
patron = Patron(uuid.uuid4(), PatronType.REGULAR)

duration = HoldDuration.for_days(datetime.now(), 5)
patron.place_on_hold(info, duration)
book.hold_by(patron.id, duration.till)
```

## Application layer

### `lendingdesk.repositories`

This module has two abstract classes:

- `PatronRepository`, with `update` and `update_with_book`
- `BookRepository`, with `create_available_book`, `update` and
  `update_with_patron`

Each update method loads the aggregates, passes them to a callback and stores
the result.

### `lendingdesk.commands`

The command handlers are:

- `AddNewBookHandler`
- `CancelHoldHandler`
- `CheckoutHandler`
- `MarkOverdueCheckoutHandler`
- `PlaceOnHoldHandler`
- `ReturnBookHandler`

Each handler is built with its repository and has `handle(cmd)`, which takes
the matching frozen `...Command` dataclass. Before any repository is touched,
the command is validated: a missing or nil id raises `IncorrectInputError`.
Building a handler with `None` as its repository raises `ValueError`. Every
handling is logged through `logging`, together with its duration.

### `lendingdesk.queries`

The query handlers are:

- `PatronProfileHandler`
- `ExpiredHoldsHandler`
- `OverdueCheckoutsHandler`

They read through the abstract read models `PatronProfileReadModel`,
`ExpiredHoldsReadModel` and `OverdueCheckoutsReadModel`. The overdue query
passes a maximum checkout duration of 60 days to its read model. The result
types are `PatronProfile`, `CheckedOut`, `OverdueCheckout` and `ExpiredHold`.

### `lendingdesk.app`

`Application` bundles a `Commands` instance and a `Queries` instance, which
hold the handlers.

## Jobs and events

### `lendingdesk.jobs.Job`

`Job(app)` provides two batch operations:

- `cancel_expired_holds(at)` cancels every hold that has expired by `at`.
- `mark_overdue_checkouts(at)` marks every checkout that is overdue at `at`.

Both log a failure and re-raise it, stopping at the first error.

### `lendingdesk.consumer`

- `CatalogueEventConsumer(app)` handles `Message` objects.
- `process_messages(messages)` takes any iterable of messages. It handles each
  message, logs any failure and acknowledges every message.
- Messages whose `eventType` metadata is `BookInstanceAdded` are decoded with
  `BookInstanceAdded.from_json` and turned into an `AddNewBookCommand`. Other
  event types are ignored.
- `should_nack(err)` reports whether a failure is worth redelivering. It
  returns `False` for incorrect-input errors.

## What this package does not do

- It ships no storage. You supply the repositories and read models, for
  example over a database.
- It provides no HTTP server and no command-line entry point.
- It does not connect to a message broker. You feed `process_messages` an
  iterable of `Message` objects from your own subscriber.

## Running the tests

```
pytest
```