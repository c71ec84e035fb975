"""Consumer of catalogue events that feeds new books into lending."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from .app import Application
from .book import BookType
from .commands import AddNewBookCommand
from .errors import ErrorType, IncorrectInputError, SlugError

_log = logging.getLogger(__name__)

BOOK_INSTANCE_ADDED = "BookInstanceAdded"

_TIMESTAMP = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<frac>\d+))?(?P<tz>Z|[+-]\d{2}:\d{2})$",
    re.IGNORECASE,
)


@dataclass
class Message:
    """An event as delivered by the message broker."""

    uuid: str
    payload: bytes
    metadata: dict[str, str] = field(default_factory=dict)
    acked: bool = False

    @property
    def event_type(self) -> str:
        return self.metadata.get("eventType", "")

    def ack(self) -> None:
        self.acked = True


def _parse_uuid(value: object) -> UUID | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"invalid uuid: {value!r}")
    return UUID(value)


def _parse_time(value: object) -> datetime | None:
    if value is None:
        return None
    match = _TIMESTAMP.match(value) if isinstance(value, str) else None
    if match is None:
        raise ValueError(f"invalid timestamp: {value!r}")
    frac = (match["frac"] or "")[:6].ljust(6, "0")
    tz = "+00:00" if match["tz"].upper() == "Z" else match["tz"]
    return datetime.fromisoformat(f"{match['base']}.{frac}{tz}")


@dataclass(frozen=True)
class BookInstanceAdded:
    """A new copy of a book was added to the catalogue."""

    isbn: str = ""
    book_id: UUID | None = None
    book_type: str = ""
    library_branch_id: UUID | None = None
    when: datetime | None = None

    @classmethod
    def from_json(cls, payload: bytes | str) -> BookInstanceAdded:
        """Decode the event; raise ``ValueError`` on malformed input."""
        try:
            data = json.loads(payload)
            if not isinstance(data, dict):
                raise ValueError("event is not a JSON object")
            return cls(
                isbn=str(data.get("isbn") or ""),
                book_id=_parse_uuid(data.get("bookID")),
                book_type=str(data.get("bookType") or ""),
                library_branch_id=_parse_uuid(data.get("libraryBranchID")),
                when=_parse_time(data.get("when")),
            )
        except ValueError as exc:
            raise ValueError(f"unmarshal event: {exc}") from exc


def to_domain_book_type(book_type: str) -> BookType:
    if book_type == "Restricted":
        return BookType.RESTRICTED
    if book_type == "Circulating":
        return BookType.CIRCULATING
    raise IncorrectInputError("invalid-book-type", "invalid book type")


def to_add_new_book_command(
    book_id: UUID | None, book_type: str, library_branch_id: UUID | None
) -> AddNewBookCommand:
    return AddNewBookCommand(
        book_id=book_id,
        book_type=to_domain_book_type(book_type),
        library_branch_id=library_branch_id,
    )


def should_nack(err: BaseException | None) -> bool:
    """Whether a failure is worth redelivering; bad input never is."""
    current = err
    while current is not None:
        if isinstance(current, SlugError) and current.error_type is ErrorType.INCORRECT_INPUT:
            return False
        current = current.__cause__
    return err is not None


class CatalogueEventConsumer:
    """Turns catalogue events into lending commands."""

    def __init__(self, app: Application) -> None:
        if app is None:
            raise ValueError("missing app")
        self._app = app

    def handle_message(self, message: Message) -> None:
        """Dispatch one message by its event type; unknown types are ignored."""
        event_type = message.event_type
        _log.info(
            "Received event event_id=%s event_type=%s payload=%s",
            message.uuid,
            event_type,
            message.payload.decode("utf-8", errors="replace"),
        )
        if event_type == BOOK_INSTANCE_ADDED:
            self._handle_book_instance_added(message)
        else:
            _log.info("Have no handler, ignore event_id=%s", message.uuid)

    def _handle_book_instance_added(self, message: Message) -> None:
        event = BookInstanceAdded.from_json(message.payload)
        cmd = to_add_new_book_command(event.book_id, event.book_type, event.library_branch_id)
        self._app.commands.add_new_book.handle(cmd)

    def process_messages(self, messages: Iterable[Message]) -> None:
        """Handle each message in turn, logging failures and acknowledging every one."""
        for message in messages:
            try:
                self.handle_message(message)
            except Exception as exc:
                _log.error(
                    "Process message fail event_id=%s retryable=%s: %s",
                    message.uuid,
                    should_nack(exc),
                    exc,
                )
            message.ack()