"""The application: every command and query handler in one place."""

from __future__ import annotations

from dataclasses import dataclass

from . import commands as cmd
from . import queries as qry


@dataclass(frozen=True)
class Commands:
    place_on_hold: cmd.PlaceOnHoldHandler
    cancel_hold: cmd.CancelHoldHandler
    check_out: cmd.CheckoutHandler
    return_book: cmd.ReturnBookHandler
    mark_overdue_checkout: cmd.MarkOverdueCheckoutHandler
    add_new_book: cmd.AddNewBookHandler


@dataclass(frozen=True)
class Queries:
    patron_profile: qry.PatronProfileHandler
    expired_holds: qry.ExpiredHoldsHandler
    overdue_checkouts: qry.OverdueCheckoutsHandler


@dataclass(frozen=True)
class Application:
    """Entry point that routes requests to command and query handlers."""

    commands: Commands
    queries: Queries