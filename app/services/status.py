"""Event lifecycle status rules.

``cancelled`` and ``completed`` are set by administrators and are sticky:
capacity changes never move an event out of them. ``open`` and ``full`` are
derived from the capacity comparison alone. Events are never completed
automatically when their date passes.
"""

from typing import Union

from sqlalchemy import case
from sqlalchemy.sql.elements import ColumnElement

from app.models.event import Event, EventStatus

STICKY_STATUSES = (EventStatus.CANCELLED.value, EventStatus.COMPLETED.value)
CAPACITY_STATUSES = (EventStatus.OPEN.value, EventStatus.FULL.value)

STATUS_LABELS = {
    EventStatus.OPEN.value: "Open",
    EventStatus.FULL.value: "Full",
    EventStatus.CANCELLED.value: "Cancelled",
    EventStatus.COMPLETED.value: "Completed",
}


def _value(status: Union[str, EventStatus]) -> str:
    return status.value if isinstance(status, EventStatus) else status


def is_sticky(status: Union[str, EventStatus]) -> bool:
    return _value(status) in STICKY_STATUSES


def accepts_registrations(status: Union[str, EventStatus]) -> bool:
    """Whether registrations and cancellations may change the event's seats."""
    return not is_sticky(status)


def derive_status(
    max_capacity: int,
    current_participants: int,
    status: Union[str, EventStatus],
) -> EventStatus:
    """
    Compute the status an event should have.

    Args:
        max_capacity: Seats offered
        current_participants: Seats taken
        status: Current (or administrator-requested) status

    Returns:
        The sticky status unchanged, otherwise ``full`` at capacity and
        ``open`` below it
    """
    if is_sticky(status):
        return EventStatus(_value(status))
    if current_participants >= max_capacity:
        return EventStatus.FULL
    return EventStatus.OPEN


def capacity_status_expression(delta: int) -> ColumnElement:
    """
    SQL form of :func:`derive_status` for a guarded ``UPDATE``.

    The expression is evaluated against the row values before the update,
    so ``delta`` is the change being applied to ``current_participants``.
    """
    return case(
        (Event.status.in_(STICKY_STATUSES), Event.status),
        (Event.current_participants + delta >= Event.max_capacity, EventStatus.FULL.value),
        else_=EventStatus.OPEN.value,
    )


def status_label(status: Union[str, EventStatus]) -> str:
    value = _value(status)
    return STATUS_LABELS.get(value, value)
