"""
rate_core/inventory.py

Live inventory ledger fed by feed events.

Keeps the latest total/available/booked room counts per
(property, room, date) and aggregates them per property to provide the
occupancy figures used as rule-matching context.
"""
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple
import logging
import threading

from pydantic import Field, model_validator

from rate_core.dates import DateLike, to_date
from rate_core.event_bus import Event, EventBus
from rate_core.models import CamelModel

logger = logging.getLogger(__name__)

INVENTORY_UPDATED = "inventory:updated"
BOOKING_CREATED = "booking:created"


class InventoryUpdate(CamelModel):
    """Payload of an ``inventory:updated`` event."""

    property_id: str
    room_id: str
    date: date
    total_rooms: int = Field(..., ge=0)
    available_rooms: int = Field(..., ge=0)
    booked_rooms: int = Field(..., ge=0)

    @model_validator(mode="after")
    def validate_counts(self):
        if self.booked_rooms > self.total_rooms:
            raise ValueError("bookedRooms cannot exceed totalRooms")
        if self.available_rooms + self.booked_rooms > self.total_rooms:
            raise ValueError("availableRooms + bookedRooms cannot exceed totalRooms")
        return self


class BookingCreated(CamelModel):
    """Payload of a ``booking:created`` event."""

    property_id: str
    room_id: str
    dates: List[date]
    channel: Optional[str] = None
    guest_name: Optional[str] = None


@dataclass(frozen=True)
class InventorySnapshot:
    total_rooms: int = 0
    available_rooms: int = 0
    booked_rooms: int = 0

    @property
    def occupancy_pct(self) -> float:
        if self.total_rooms <= 0:
            return 0.0
        return round(self.booked_rooms * 100 / self.total_rooms, 2)


class InventoryLedger:
    """
    Thread-safe inventory ledger.

    Example:
        >>> ledger = InventoryLedger()
        >>> ledger.attach(bus)
        >>> bus.publish(Event(event_type="inventory:updated", data={...}))
        >>> ledger.occupancy_for("prop-1", date(2025, 6, 20))
        72.0
    """

    def __init__(self):
        self._rooms: Dict[Tuple[str, str, date], InventorySnapshot] = {}
        self._lock = threading.RLock()

    def attach(self, bus: EventBus) -> None:
        """Subscribe the ledger to the inventory feed events."""
        bus.subscribe(INVENTORY_UPDATED, self.on_inventory_updated)
        bus.subscribe(BOOKING_CREATED, self.on_booking_created)

    def on_inventory_updated(self, event: Event) -> None:
        self.record(InventoryUpdate.model_validate(event.data))

    def on_booking_created(self, event: Event) -> None:
        self.record_booking(BookingCreated.model_validate(event.data))

    def record(self, update: InventoryUpdate) -> None:
        """Store the latest counts for a room on a date."""
        snapshot = InventorySnapshot(
            total_rooms=update.total_rooms,
            available_rooms=update.available_rooms,
            booked_rooms=update.booked_rooms,
        )
        with self._lock:
            self._rooms[(update.property_id, update.room_id, update.date)] = snapshot
        logger.debug(f"Inventory {update.property_id}/{update.room_id} on {update.date}: {snapshot}")

    def record_booking(self, booking: BookingCreated) -> None:
        """Move one room from available to booked for each booked date."""
        with self._lock:
            for night in booking.dates:
                key = (booking.property_id, booking.room_id, night)
                current = self._rooms.get(key)
                if current is None:
                    logger.warning(
                        f"Booking for {booking.property_id}/{booking.room_id} on {night} has no inventory record"
                    )
                    continue
                self._rooms[key] = InventorySnapshot(
                    total_rooms=current.total_rooms,
                    available_rooms=max(0, current.available_rooms - 1),
                    booked_rooms=min(current.total_rooms, current.booked_rooms + 1),
                )

    def snapshot_for(self, property_id: str, on_date: DateLike) -> Optional[InventorySnapshot]:
        """Counts for a property on a date, summed over its rooms."""
        night = to_date(on_date)
        with self._lock:
            rooms = [s for (pid, _, d), s in self._rooms.items() if pid == property_id and d == night]
        if not rooms:
            return None
        return InventorySnapshot(
            total_rooms=sum(s.total_rooms for s in rooms),
            available_rooms=sum(s.available_rooms for s in rooms),
            booked_rooms=sum(s.booked_rooms for s in rooms),
        )

    def occupancy_for(self, property_id: str, on_date: DateLike) -> Optional[float]:
        snapshot = self.snapshot_for(property_id, on_date)
        return snapshot.occupancy_pct if snapshot else None

    def occupancies(self, property_id: str, dates: Iterable[date]) -> List[float]:
        """Known occupancy figures for the given dates, unknown dates skipped."""
        values = []
        for night in dates:
            occupancy = self.occupancy_for(property_id, night)
            if occupancy is not None:
                values.append(occupancy)
        return values

    def clear(self) -> None:
        with self._lock:
            self._rooms.clear()


__all__ = [
    "INVENTORY_UPDATED",
    "BOOKING_CREATED",
    "InventoryUpdate",
    "BookingCreated",
    "InventorySnapshot",
    "InventoryLedger",
]
