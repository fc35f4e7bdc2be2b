from __future__ import annotations

from datetime import date, datetime

from booking_core.domain.entities.booking import Booking
from booking_core.domain.entities.catalog import StaffMember
from booking_core.domain.entities.time_slot import SlotState, TimeSlot
from booking_core.domain.rules.time_grid import format_hhmm, grid_points, intervals_overlap, parse_hhmm


def work_window(staff: StaffMember) -> tuple[int, int] | None:
    """Work hours in minutes since midnight, or None if the window is empty or unparseable."""
    try:
        start = parse_hhmm(staff.work_start)
        end = parse_hhmm(staff.work_end)
    except ValueError:
        return None
    if end <= start:
        return None
    return start, end


def find_overlap(bookings: list[Booking], start: int, end: int) -> Booking | None:
    for booking in bookings:
        if booking.is_active and intervals_overlap(start, end, booking.start_minutes, booking.end_minutes):
            return booking
    return None


def build_slots(
    staff: StaffMember,
    day: date,
    duration_minutes: int,
    bookings: list[Booking],
    now: datetime,
    step_minutes: int,
) -> list[TimeSlot]:
    """
    Lay the slot grid over a staff member's work hours for one day.

    Each point is elapsed (today, at or before the current minute), booked (the
    requested duration would overlap an active booking) or available. Pure:
    callers pass in the bookings and the current time.
    """
    if not staff.available:
        return []
    window = work_window(staff)
    if window is None:
        return []

    is_today = day == now.date()
    now_minutes = now.hour * 60 + now.minute

    slots: list[TimeSlot] = []
    for point in grid_points(window[0], window[1], step_minutes, duration_minutes):
        if is_today and point <= now_minutes:
            state = SlotState.elapsed
        elif find_overlap(bookings, point, point + duration_minutes):
            state = SlotState.booked
        else:
            state = SlotState.available
        slots.append(TimeSlot(time=format_hhmm(point), state=state))
    return slots
