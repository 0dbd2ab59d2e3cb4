import pytest

from restaurant_backoffice.crud.order import can_transition, parse_status
from restaurant_backoffice.errors import InvalidArgument
from restaurant_backoffice.models import OrderStatusEnum as S


@pytest.mark.parametrize(
    "current, new",
    [
        (S.PENDING, S.CONFIRMED),
        (S.CONFIRMED, S.PREPARING),
        (S.PREPARING, S.READY),
        (S.READY, S.COMPLETED),
        (S.PENDING, S.READY),
        (S.PENDING, S.CANCELLED),
        (S.READY, S.CANCELLED),
        (S.PREPARING, S.PREPARING),
        (S.CANCELLED, S.CANCELLED),
    ],
)
def test_allowed_transitions(current, new):
    assert can_transition(current, new)


@pytest.mark.parametrize(
    "current, new",
    [
        (S.CONFIRMED, S.PENDING),
        (S.READY, S.PREPARING),
        (S.COMPLETED, S.CANCELLED),
        (S.COMPLETED, S.READY),
        (S.CANCELLED, S.PENDING),
        (S.CANCELLED, S.COMPLETED),
    ],
)
def test_rejected_transitions(current, new):
    assert not can_transition(current, new)


def test_parse_status_is_case_insensitive():
    assert parse_status("ready") is S.READY
    assert parse_status(S.CANCELLED) is S.CANCELLED


def test_parse_status_rejects_unknown_name():
    with pytest.raises(InvalidArgument) as exc_info:
        parse_status("SERVED")
    assert exc_info.value.identifier == "SERVED"
