"""Scheduled jobs that sweep expired holds and overdue checkouts."""

from __future__ import annotations

import logging
import time
from datetime import datetime

from .app import Application
from .commands import CancelHoldCommand, MarkOverdueCheckoutCommand
from .queries import ExpiredHoldsQuery, OverdueCheckoutsQuery

_log = logging.getLogger(__name__)


class Job:
    """Batch operations run against the application."""

    def __init__(self, app: Application) -> None:
        self._app = app

    def cancel_expired_holds(self, at: datetime) -> None:
        """Cancel every hold that has expired by ``at``; stop at the first failure."""
        start = time.perf_counter()
        try:
            expired_holds = self._app.queries.expired_holds.handle(ExpiredHoldsQuery(at=at))
        except Exception:
            _log.exception("List expired holds fail")
            raise
        for hold in expired_holds:
            try:
                self._app.commands.cancel_hold.handle(
                    CancelHoldCommand(patron_id=hold.patron_id, book_id=hold.book_id)
                )
            except Exception:
                _log.exception(
                    "Cancel hold fail patronID=%s bookID=%s", hold.patron_id, hold.book_id
                )
                raise
        _log.info("Done! elapsed=%.3fs", time.perf_counter() - start)

    def mark_overdue_checkouts(self, at: datetime) -> None:
        """Mark every checkout overdue at ``at``; stop at the first failure."""
        start = time.perf_counter()
        try:
            overdue = self._app.queries.overdue_checkouts.handle(OverdueCheckoutsQuery(at=at))
        except Exception:
            _log.exception("List overdue checkouts fail")
            raise
        for checkout in overdue:
            try:
                self._app.commands.mark_overdue_checkout.handle(
                    MarkOverdueCheckoutCommand(
                        patron_id=checkout.patron_id,
                        book_id=checkout.book_id,
                        library_branch_id=checkout.library_branch_id,
                    )
                )
            except Exception:
                _log.exception("Cannot mark overdue checkout")
                raise
        _log.info("Done! elapsed=%.3fs", time.perf_counter() - start)