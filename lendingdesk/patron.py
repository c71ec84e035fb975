"""The patron aggregate: who borrows books and the rules for placing holds."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from uuid import UUID

from .book import Information
from .errors import IncorrectInputError

MAX_COUNT_OF_OVERDUE_CHECKOUTS = 2
MAX_NUMBER_OF_HOLDS = 5


def _missing(value: UUID | None) -> bool:
    return value is None or value.int == 0


class PatronType(Enum):
    REGULAR = "Regular"
    RESEARCHER = "Researcher"


class HoldNotFoundError(IncorrectInputError):
    SLUG = "hold-not-found"
    MESSAGE = "hold not found"


class RegularPatronCannotHoldRestrictedBookError(IncorrectInputError):
    SLUG = "regular-patron-cannot-hold-restricted-book"
    MESSAGE = "regular patron cannot hold restricted book"


class MaxCountOfOverdueCheckoutsReachedError(IncorrectInputError):
    SLUG = "max-count-of-overdue-checkouts-reached"
    MESSAGE = "max count of overdue checkout reached"


class MaxHoldsReachedError(IncorrectInputError):
    SLUG = "max-holds-reached"
    MESSAGE = "patron cannot hold more books"


class OnlyResearcherCanPlaceOpenEndedHoldError(IncorrectInputError):
    SLUG = "only-researcher-can-place-open-ended-hold"
    MESSAGE = "only researcher can place open ended hold"


@dataclass(frozen=True)
class HoldDuration:
    """The period a hold lasts; a missing ``till`` means open-ended."""

    from_: datetime | None = None
    till: datetime | None = None

    @classmethod
    def for_days(cls, from_: datetime | None, num_of_days: int) -> HoldDuration:
        """A hold lasting ``num_of_days`` days; zero days means open-ended."""
        if from_ is None:
            raise IncorrectInputError("missing-from", "missing from")
        if num_of_days < 0:
            raise IncorrectInputError("invalid-num-of-days", "numOfDays must great than 0")
        till = from_ + timedelta(days=num_of_days) if num_of_days > 0 else None
        return cls.from_till(from_, till)

    @classmethod
    def from_till(cls, from_: datetime | None, till: datetime | None) -> HoldDuration:
        if from_ is None:
            raise IncorrectInputError("missing-from", "missing from")
        if till is not None and till < from_:
            raise IncorrectInputError("invalid-till", "till must after from")
        return cls(from_=from_, till=till)

    def is_zero(self) -> bool:
        return self.from_ is None and self.till is None

    def is_open_ended(self) -> bool:
        return self.till is None


@dataclass(frozen=True)
class Hold:
    """A hold a patron has placed on a book at a library branch."""

    book_id: UUID
    placed_at: UUID
    hold_duration: HoldDuration


def new_hold(
    book_id: UUID | None, placed_at: UUID | None, duration: HoldDuration | None
) -> Hold:
    """Build a hold, rejecting any missing part."""
    if _missing(book_id):
        raise IncorrectInputError("missing-book-id", "missing book id")
    if _missing(placed_at):
        raise IncorrectInputError("missing-placed-at", "missing-placed-at")
    if duration is None or duration.is_zero():
        raise IncorrectInputError("missing-hold-duration", "missing hold duration")
    return Hold(book_id=book_id, placed_at=placed_at, hold_duration=duration)


class OverdueCheckouts(dict):
    """Overdue book ids grouped by library branch id."""

    def total_at(self, library_branch_id: UUID) -> int:
        return len(self.get(library_branch_id, ()))

    def add_new_book_id(self, library_branch_id: UUID, book_id: UUID) -> None:
        self.setdefault(library_branch_id, []).append(book_id)

    def remove_book_id(self, book_id: UUID) -> None:
        """Drop a book id wherever it is; an emptied branch is removed."""
        for branch_id, books in self.items():
            if book_id in books:
                books.remove(book_id)
                if not books:
                    del self[branch_id]
                return


class Patron:
    """A person who borrows books; aggregate root for holds and overdue checkouts."""

    def __init__(
        self,
        id: UUID | None,
        patron_type: PatronType | None,
        holds: Iterable[Hold] | None = None,
        overdue_checkouts: Mapping[UUID, Iterable[UUID]] | None = None,
    ) -> None:
        if _missing(id):
            raise IncorrectInputError("missing-patron-id", "missing patron id")
        if patron_type is None:
            raise IncorrectInputError("missing-patron-type", "missing patron type")
        self._id = id
        self._patron_type = patron_type
        self._holds: list[Hold] = list(holds or ())
        self._overdue_checkouts = OverdueCheckouts(
            (branch, list(books)) for branch, books in (overdue_checkouts or {}).items()
        )

    @property
    def id(self) -> UUID:
        return self._id

    @property
    def patron_type(self) -> PatronType:
        return self._patron_type

    @property
    def holds(self) -> tuple[Hold, ...]:
        return tuple(self._holds)

    @property
    def overdue_checkouts(self) -> OverdueCheckouts:
        return self._overdue_checkouts

    @property
    def is_regular(self) -> bool:
        return self._patron_type is PatronType.REGULAR

    def _remove_hold(self, book_id: UUID) -> None:
        for hold in self._holds:
            if hold.book_id == book_id:
                self._holds.remove(hold)
                return
        raise HoldNotFoundError()

    def cancel_hold(self, book_id: UUID) -> None:
        self._remove_hold(book_id)

    def checkout(self, book_id: UUID) -> None:
        self._remove_hold(book_id)

    def place_on_hold(self, book: Information, duration: HoldDuration) -> None:
        """Place a hold after every hold policy has accepted it."""
        for policy in _HOLD_POLICIES:
            policy(book, self, duration)
        self._holds.append(
            Hold(book_id=book.book_id, placed_at=book.placed_at, hold_duration=duration)
        )

    def mark_overdue_checkout(self, book_id: UUID, library_branch_id: UUID) -> None:
        self._overdue_checkouts.add_new_book_id(library_branch_id, book_id)

    def return_book(self, book_id: UUID) -> None:
        self._overdue_checkouts.remove_book_id(book_id)


def _only_researchers_hold_restricted_books(
    book: Information, patron: Patron, _duration: HoldDuration
) -> None:
    if book.is_restricted() and patron.is_regular:
        raise RegularPatronCannotHoldRestrictedBookError()


def _reject_on_overdue_checkouts(
    book: Information, patron: Patron, _duration: HoldDuration
) -> None:
    if patron.overdue_checkouts.total_at(book.placed_at) >= MAX_COUNT_OF_OVERDUE_CHECKOUTS:
        raise MaxCountOfOverdueCheckoutsReachedError()


def _regular_patron_max_holds(
    _book: Information, patron: Patron, _duration: HoldDuration
) -> None:
    if patron.is_regular and len(patron.holds) >= MAX_NUMBER_OF_HOLDS:
        raise MaxHoldsReachedError()


def _only_researchers_place_open_ended_holds(
    _book: Information, patron: Patron, duration: HoldDuration
) -> None:
    if patron.is_regular and duration.is_open_ended():
        raise OnlyResearcherCanPlaceOpenEndedHoldError()


_HOLD_POLICIES: tuple[Callable[[Information, Patron, HoldDuration], None], ...] = (
    _only_researchers_hold_restricted_books,
    _reject_on_overdue_checkouts,
    _regular_patron_max_holds,
    _only_researchers_place_open_ended_holds,
)