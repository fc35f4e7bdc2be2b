from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SlotState(str, Enum):
    available = "available"
    booked = "booked"
    elapsed = "elapsed"


@dataclass(frozen=True)
class TimeSlot:
    time: str  # HH:MM
    state: SlotState
