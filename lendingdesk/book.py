"""The book aggregate: information about a book and its lending state."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID

from .errors import IncorrectInputError


def _missing(value: UUID | None) -> bool:
    return value is None or value.int == 0


class BookType(Enum):
    RESTRICTED = "Restricted"
    CIRCULATING = "Circulating"


class BookStatus(Enum):
    AVAILABLE = "Available"
    ON_HOLD = "OnHold"
    CHECKED_OUT = "CheckedOut"


class BookNotOnHoldError(IncorrectInputError):
    SLUG = "book-not-on-hold"
    MESSAGE = "book not on hold"


class BookNotCheckedOutError(IncorrectInputError):
    SLUG = "book-not-checked-out"
    MESSAGE = "book not checked out"


class BookNotHoldByPatronError(IncorrectInputError):
    SLUG = "book-not-hold-by-patron"
    MESSAGE = "book not hold by patron"


class BookNotAvailableError(IncorrectInputError):
    SLUG = "book-not-available"
    MESSAGE = "book not available"


@dataclass(frozen=True)
class Information:
    """Identity, type and library branch of a book."""

    book_id: UUID | None = None
    book_type: BookType | None = None
    placed_at: UUID | None = None

    def is_restricted(self) -> bool:
        return self.book_type is BookType.RESTRICTED

    def _is_empty(self) -> bool:
        return _missing(self.book_id) and self.book_type is None and _missing(self.placed_at)


def new_book_information(
    book_id: UUID | None, book_type: BookType | None, placed_at: UUID | None
) -> Information:
    """Build book information, rejecting any missing part."""
    if _missing(book_id):
        raise IncorrectInputError("missing-book-id", "missing book id")
    if book_type is None:
        raise IncorrectInputError("missing-book-type", "missing book type")
    if _missing(placed_at):
        raise IncorrectInputError("missing-placed-at", "missing placed at")
    return Information(book_id=book_id, book_type=book_type, placed_at=placed_at)


@dataclass(frozen=True)
class HoldInformation:
    """Who holds a book and until when."""

    by_patron: UUID | None = None
    till: datetime | None = None

    def is_zero(self) -> bool:
        return _missing(self.by_patron) and self.till is None


@dataclass(frozen=True)
class CheckedOutInformation:
    """Who checked a book out and when."""

    by_patron: UUID | None = None
    at: datetime | None = None

    def is_zero(self) -> bool:
        return _missing(self.by_patron) and self.at is None


class Book:
    """Aggregate root for a single book copy and its lending status."""

    def __init__(
        self,
        info: Information,
        status: BookStatus,
        hold_info: HoldInformation | None = None,
        checked_out_info: CheckedOutInformation | None = None,
    ) -> None:
        self._info = info
        self._status = status
        self._hold_info = hold_info or HoldInformation()
        self._checked_out_info = checked_out_info or CheckedOutInformation()

    @staticmethod
    def _require_information(information: Information | None) -> Information:
        if information is None or information._is_empty():
            raise IncorrectInputError("missing-information", "missing book information")
        return information

    @classmethod
    def available(cls, information: Information | None) -> Book:
        info = cls._require_information(information)
        return cls(info, BookStatus.AVAILABLE)

    @classmethod
    def on_hold(
        cls, information: Information | None, hold_information: HoldInformation | None
    ) -> Book:
        info = cls._require_information(information)
        if hold_information is None or hold_information.is_zero():
            raise IncorrectInputError("missing-hold-information", "missing hold information")
        return cls(info, BookStatus.ON_HOLD, hold_info=hold_information)

    @classmethod
    def checked_out(
        cls,
        information: Information | None,
        checked_out_information: CheckedOutInformation | None,
    ) -> Book:
        info = cls._require_information(information)
        if checked_out_information is None or checked_out_information.is_zero():
            raise IncorrectInputError(
                "missing-checked-out-information", "missing checked out information"
            )
        return cls(info, BookStatus.CHECKED_OUT, checked_out_info=checked_out_information)

    @property
    def id(self) -> UUID | None:
        return self._info.book_id

    @property
    def info(self) -> Information:
        return self._info

    @property
    def status(self) -> BookStatus:
        return self._status

    @property
    def hold_info(self) -> HoldInformation:
        return self._hold_info

    @property
    def checked_out_info(self) -> CheckedOutInformation:
        return self._checked_out_info

    def by_patron_id(self) -> UUID | None:
        """The patron holding or having checked out the book, if any."""
        if self._status is BookStatus.ON_HOLD:
            return self._hold_info.by_patron
        if self._status is BookStatus.CHECKED_OUT:
            return self._checked_out_info.by_patron
        return None

    def cancel_hold(self) -> None:
        if self._status is not BookStatus.ON_HOLD:
            raise BookNotOnHoldError()
        self._hold_info = HoldInformation()
        self._status = BookStatus.AVAILABLE

    def check_in(self) -> None:
        if self._status is not BookStatus.CHECKED_OUT:
            raise BookNotCheckedOutError()
        self._checked_out_info = CheckedOutInformation()
        self._status = BookStatus.AVAILABLE

    def checkout(self, patron_id: UUID, at: datetime) -> None:
        if self._status is not BookStatus.ON_HOLD:
            raise BookNotOnHoldError()
        holder = self._hold_info.by_patron
        if holder != patron_id:
            raise BookNotHoldByPatronError(
                message=(
                    f"checkoutBy={patron_id} holdBy={holder}: "
                    f"{BookNotHoldByPatronError.MESSAGE}"
                )
            )
        self._status = BookStatus.CHECKED_OUT
        self._hold_info = HoldInformation()
        self._checked_out_info = CheckedOutInformation(by_patron=patron_id, at=at)

    def hold_by(self, patron_id: UUID, till: datetime | None) -> None:
        if self._status is not BookStatus.AVAILABLE:
            raise BookNotAvailableError()
        self._hold_info = HoldInformation(by_patron=patron_id, till=till)
        self._status = BookStatus.ON_HOLD