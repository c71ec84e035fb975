"""Read-side queries about patrons, holds and checkouts, with their handlers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID

from .commands import _monitored, _require, _require_ids
from .errors import IncorrectInputError
from .patron import Hold, PatronType

MAX_CHECKOUT_DURATION_DAYS = 60


@dataclass(frozen=True)
class CheckedOut:
    """A book a patron currently has checked out."""

    book_id: UUID
    library_branch_id: UUID
    at: datetime


@dataclass(frozen=True)
class OverdueCheckout:
    """A checkout that has gone past its allowed duration."""

    patron_id: UUID
    book_id: UUID
    library_branch_id: UUID


@dataclass(frozen=True)
class ExpiredHold:
    """A hold whose end date has passed."""

    book_id: UUID
    library_branch_id: UUID
    patron_id: UUID
    hold_till: datetime


@dataclass(frozen=True)
class PatronProfile:
    """What a patron currently holds, has checked out and has overdue."""

    patron_id: UUID
    patron_type: PatronType
    holds: tuple[Hold, ...] = ()
    checked_outs: tuple[CheckedOut, ...] = ()
    overdue_checkouts: tuple[OverdueCheckout, ...] = ()


class ExpiredHoldsReadModel(ABC):
    @abstractmethod
    def list_expired_holds(self, at: datetime) -> list[ExpiredHold]:
        """Holds that have expired by ``at``."""


class OverdueCheckoutsReadModel(ABC):
    @abstractmethod
    def list_overdue_checkouts(
        self, at: datetime, max_checkout_duration_days: int
    ) -> list[OverdueCheckout]:
        """Checkouts older than ``max_checkout_duration_days`` days at ``at``."""


class PatronProfileReadModel(ABC):
    @abstractmethod
    def get_patron_profile(self, patron_id: UUID) -> PatronProfile:
        """The profile of one patron."""


@dataclass(frozen=True)
class _AtQuery:
    at: datetime | None

    def _validate(self) -> None:
        if self.at is None:
            raise IncorrectInputError("missing-at", "missing at")


class _ReadHandler:
    def __init__(self, read_model: Any) -> None:
        self._read_model = _require(read_model, "readModel")


@dataclass(frozen=True)
class ExpiredHoldsQuery(_AtQuery):
    """Asks for the holds expired at ``at``."""


class ExpiredHoldsHandler(_ReadHandler):
    """Lists holds that have expired at a given moment."""

    def handle(self, query: ExpiredHoldsQuery) -> list[ExpiredHold]:
        with _monitored("query", "ExpiredHolds", query):
            query._validate()
            return self._read_model.list_expired_holds(query.at)


@dataclass(frozen=True)
class OverdueCheckoutsQuery(_AtQuery):
    """Asks for the checkouts overdue at ``at``."""


class OverdueCheckoutsHandler(_ReadHandler):
    """Lists checkouts that are overdue at a given moment."""

    def handle(self, query: OverdueCheckoutsQuery) -> list[OverdueCheckout]:
        with _monitored("query", "OverdueCheckouts", query):
            query._validate()
            return self._read_model.list_overdue_checkouts(
                query.at, MAX_CHECKOUT_DURATION_DAYS
            )


@dataclass(frozen=True)
class PatronProfileQuery:
    patron_id: UUID | None

    def _validate(self) -> None:
        _require_ids((self.patron_id, "missing-patron-id", "missing patron id"))


class PatronProfileHandler(_ReadHandler):
    """Returns the profile of a patron."""

    def handle(self, query: PatronProfileQuery) -> PatronProfile:
        with _monitored("query", "PatronProfile", query):
            query._validate()
            return self._read_model.get_patron_profile(query.patron_id)