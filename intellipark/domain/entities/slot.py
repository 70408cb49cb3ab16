"""Slot statuses and the empty slot representation."""

from enum import Enum
from typing import Any


class SlotStatus(str, Enum):
    AVAILABLE = "Available"
    RESERVED = "Reserved"
    OCCUPIED = "Occupied"


def empty_slot_fields() -> dict[str, Any]:
    """Fields written to a slot document when it is released."""
    return {
        "status": SlotStatus.AVAILABLE.value,
        "reserved": False,
        "name": "",
        "email": "",
        "plate": "",
        "vehicle": "",
        "time": "",
        "bookedAt": "",
    }


def slot_code(number: int) -> str:
    """Zero-padded slot label, e.g. ``1 -> "01"``."""
    return f"{number:02d}"


def initial_slots(count: int) -> dict[str, dict[str, Any]]:
    return {slot_code(number): empty_slot_fields() for number in range(1, count + 1)}
