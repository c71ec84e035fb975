from datetime import datetime, timezone
from uuid import UUID, uuid4

import pytest

from lendingdesk.errors import IncorrectInputError
from lendingdesk.patron import PatronType
from lendingdesk.queries import (
    MAX_CHECKOUT_DURATION_DAYS,
    ExpiredHold,
    ExpiredHoldsHandler,
    ExpiredHoldsQuery,
    ExpiredHoldsReadModel,
    OverdueCheckout,
    OverdueCheckoutsHandler,
    OverdueCheckoutsQuery,
    OverdueCheckoutsReadModel,
    PatronProfile,
    PatronProfileHandler,
    PatronProfileQuery,
    PatronProfileReadModel,
)


class FakeReadModel(ExpiredHoldsReadModel, OverdueCheckoutsReadModel, PatronProfileReadModel):
    def __init__(self):
        self.calls = []
        self.expired = []
        self.overdue = []
        self.profiles = {}

    def list_expired_holds(self, at):
        self.calls.append(("expired", at))
        return list(self.expired)

    def list_overdue_checkouts(self, at, max_checkout_duration_days):
        self.calls.append(("overdue", at, max_checkout_duration_days))
        return list(self.overdue)

    def get_patron_profile(self, patron_id):
        self.calls.append(("profile", patron_id))
        return self.profiles[patron_id]


def test_expired_holds_invalid_query():
    handler = ExpiredHoldsHandler(FakeReadModel())
    with pytest.raises(IncorrectInputError) as info:
        handler.handle(ExpiredHoldsQuery(at=None))
    assert info.value.slug == "missing-at"


def test_overdue_checkouts_invalid_query():
    handler = OverdueCheckoutsHandler(FakeReadModel())
    with pytest.raises(IncorrectInputError) as info:
        handler.handle(OverdueCheckoutsQuery(at=None))
    assert info.value.slug == "missing-at"


@pytest.mark.parametrize("patron_id", [None, UUID(int=0)])
def test_patron_profile_invalid_query(patron_id):
    handler = PatronProfileHandler(FakeReadModel())
    with pytest.raises(IncorrectInputError) as info:
        handler.handle(PatronProfileQuery(patron_id=patron_id))
    assert info.value.slug == "missing-patron-id"


@pytest.mark.parametrize(
    "handler_cls", [ExpiredHoldsHandler, OverdueCheckoutsHandler, PatronProfileHandler]
)
def test_handlers_require_read_model(handler_cls):
    with pytest.raises(ValueError):
        handler_cls(None)


def test_expired_holds_returns_read_model_result():
    model = FakeReadModel()
    at = datetime(2023, 1, 1, tzinfo=timezone.utc)
    hold = ExpiredHold(uuid4(), uuid4(), uuid4(), at)
    model.expired = [hold]
    result = ExpiredHoldsHandler(model).handle(ExpiredHoldsQuery(at=at))
    assert result == [hold]
    assert model.calls == [("expired", at)]


def test_overdue_checkouts_uses_max_duration():
    model = FakeReadModel()
    at = datetime(2023, 1, 1, tzinfo=timezone.utc)
    overdue = OverdueCheckout(uuid4(), uuid4(), uuid4())
    model.overdue = [overdue]
    result = OverdueCheckoutsHandler(model).handle(OverdueCheckoutsQuery(at=at))
    assert result == [overdue]
    assert model.calls == [("overdue", at, 60)]
    assert MAX_CHECKOUT_DURATION_DAYS == 60


def test_patron_profile_returns_profile():
    model = FakeReadModel()
    patron_id = uuid4()
    profile = PatronProfile(patron_id=patron_id, patron_type=PatronType.RESEARCHER)
    model.profiles[patron_id] = profile
    result = PatronProfileHandler(model).handle(PatronProfileQuery(patron_id=patron_id))
    assert result == profile
    assert result.holds == ()


def test_patron_profile_propagates_read_model_error():
    model = FakeReadModel()
    with pytest.raises(KeyError):
        PatronProfileHandler(model).handle(PatronProfileQuery(patron_id=uuid4()))