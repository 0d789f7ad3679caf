"""Pure table allocation rules: best-fit ranking, buffer conflicts, slot grid."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import time
from typing import Iterable

from octopoz.domain.common.ids import TableId
from octopoz.domain.reservation.entities import Reservation
from octopoz.domain.table.entities import Table

DEFAULT_BUFFER_MINUTES = 120
DEFAULT_SLOT_STEP_MINUTES = 30
DEFAULT_OPENING_TIME = time(11, 0)
DEFAULT_CLOSING_TIME = time(21, 30)


@dataclass(frozen=True)
class SlotPolicy:
    step_minutes: int = DEFAULT_SLOT_STEP_MINUTES
    opening_time: time = field(default=DEFAULT_OPENING_TIME)
    closing_time: time = field(default=DEFAULT_CLOSING_TIME)
    buffer_minutes: int = DEFAULT_BUFFER_MINUTES

    def __post_init__(self) -> None:
        if self.step_minutes <= 0:
            raise ValueError("step_minutes must be > 0")
        if self.buffer_minutes < 0:
            raise ValueError("buffer_minutes must be >= 0")
        if self.closing_time < self.opening_time:
            raise ValueError("closing_time must not precede opening_time")


def _seconds_of_day(value: time) -> int:
    return value.hour * 3600 + value.minute * 60 + value.second


def format_slot(value: time) -> str:
    return f"{value.hour:02d}:{value.minute:02d}"


def parse_slot(value: str) -> time:
    hours, _, minutes = value.partition(":")
    if not hours.isdigit() or not minutes.isdigit():
        raise ValueError(f"invalid time of day: {value!r}")
    return time(int(hours), int(minutes))


def slot_grid(policy: SlotPolicy) -> list[time]:
    start = _seconds_of_day(policy.opening_time)
    end = _seconds_of_day(policy.closing_time)
    step = policy.step_minutes * 60
    return [
        time(second // 3600, (second % 3600) // 60)
        for second in range(start, end + 1, step)
    ]


def within_buffer(first: time, second: time, buffer_minutes: int) -> bool:
    gap = abs(_seconds_of_day(first) - _seconds_of_day(second))
    return gap < buffer_minutes * 60


def rank_best_fit(tables: Iterable[Table], party_size: int) -> list[Table]:
    """Order seatable tables smallest capacity first, then by table number."""
    candidates = [table for table in tables if table.seats(party_size)]
    return sorted(candidates, key=lambda table: (table.capacity, table.table_number))


def has_table_conflict(
    reservations: Iterable[Reservation],
    table_id: TableId,
    at: time,
    buffer_minutes: int,
) -> bool:
    return any(
        reservation.blocks_table
        and reservation.table_id == table_id
        and within_buffer(reservation.reservation_time, at, buffer_minutes)
        for reservation in reservations
    )


def compute_available_slots(
    tables: Iterable[Table],
    reservations: Iterable[Reservation],
    party_size: int,
    policy: SlotPolicy,
) -> list[str]:
    # Counts conflicting reservations against qualifying tables without binding
    # reservations to specific tables.
    qualifying = len(rank_best_fit(tables, party_size))
    if qualifying == 0:
        return []

    booked_times = [
        reservation.reservation_time for reservation in reservations if reservation.blocks_table
    ]
    slots: list[str] = []
    for candidate in slot_grid(policy):
        conflicting = sum(
            1 for booked in booked_times if within_buffer(booked, candidate, policy.buffer_minutes)
        )
        if conflicting < qualifying:
            slots.append(format_slot(candidate))
    return slots
