from __future__ import annotations

import json
import logging
import re
import threading
from datetime import date, datetime
from pathlib import Path
from typing import Any

from booking_core.application.exceptions import StorageError
from booking_core.application.ports.booking_repository import BookingRepositoryPort
from booking_core.application.utils.slot_grid import find_overlap
from booking_core.domain.entities.booking import (
    BookedService,
    Booking,
    BookingStatus,
    CustomerInfo,
    PaymentStatus,
)

_SAFE_ID_RE = re.compile(r"^[A-Za-z0-9_-]+$")


class JsonBookingStore(BookingRepositoryPort):
    """One JSON file per staff member and day: <data_dir>/<staff_id>/<YYYY-MM-DD>.json."""

    def __init__(self, data_dir: str = "./data/bookings") -> None:
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._locks: dict[tuple[str, date], threading.Lock] = {}
        self._lock_lock = threading.Lock()  # Lock for managing locks dict
        self._index: dict[str, tuple[str, date]] | None = None
        self._index_lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def _get_lock(self, staff_id: str, day: date) -> threading.Lock:
        """Get or create the lock guarding one day file."""
        with self._lock_lock:
            key = (staff_id, day)
            if key not in self._locks:
                self._locks[key] = threading.Lock()
            return self._locks[key]

    def _get_file_path(self, staff_id: str, day: date) -> Path:
        if not _SAFE_ID_RE.match(staff_id):
            raise ValueError(f"Staff id {staff_id!r} cannot be used as a file name")
        return self._data_dir / staff_id / f"{day.isoformat()}.json"

    def _load_day(self, staff_id: str, day: date) -> list[Booking]:
        file_path = self._get_file_path(staff_id, day)
        if not file_path.exists():
            return []

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return [self._deserialize_booking(item) for item in data.get("bookings", [])]
        except (json.JSONDecodeError, AttributeError, KeyError, TypeError, ValueError, OSError) as e:
            self._logger.error(
                "Unreadable booking file",
                extra={"staff_id": staff_id, "date": day.isoformat(), "reason": str(e)},
            )
            raise StorageError(f"Booking file {file_path} cannot be read") from e

    def _save_day(self, staff_id: str, day: date, bookings: list[Booking]) -> None:
        """Save a day file atomically."""
        file_path = self._get_file_path(staff_id, day)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = file_path.with_suffix(".json.tmp")
        data = {
            "staff_id": staff_id,
            "date": day.isoformat(),
            "bookings": [self._serialize_booking(b) for b in bookings],
            "version": 1,
        }

        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            # Atomic rename
            temp_path.replace(file_path)
        except OSError:
            if temp_path.exists():
                temp_path.unlink(missing_ok=True)
            raise

    def _stored_days(self) -> list[tuple[str, date]]:
        days: list[tuple[str, date]] = []
        for file_path in self._data_dir.glob("*/*.json"):
            try:
                days.append((file_path.parent.name, date.fromisoformat(file_path.stem)))
            except ValueError:
                continue
        return sorted(days)

    def _get_index(self) -> dict[str, tuple[str, date]]:
        """booking_id -> (staff_id, date), built from the day files on first use."""
        with self._index_lock:
            if self._index is None:
                index: dict[str, tuple[str, date]] = {}
                for staff_id, day in self._stored_days():
                    try:
                        bookings = self._load_day(staff_id, day)
                    except (StorageError, ValueError):
                        # Left out of the index only; reads and writes of that day still fail.
                        continue
                    for booking in bookings:
                        index[booking.booking_id] = (staff_id, day)
                self._index = index
            return self._index

    def _serialize_booking(self, booking: Booking) -> dict[str, Any]:
        return {
            "booking_id": booking.booking_id,
            "staff_id": booking.staff_id,
            "date": booking.date.isoformat(),
            "start_time": booking.start_time,
            "services": [
                {
                    "service_id": s.service_id,
                    "name": s.name,
                    "price": s.price,
                    "duration_minutes": s.duration_minutes,
                }
                for s in booking.services
            ],
            "total_price": booking.total_price,
            "total_duration": booking.total_duration,
            "customer": {
                "name": booking.customer.name,
                "email": booking.customer.email,
                "phone": booking.customer.phone,
                "notes": booking.customer.notes,
            },
            "customer_id": booking.customer_id,
            "payment_method_id": booking.payment_method_id,
            "payment_status": booking.payment_status.value,
            "payment_proof": booking.payment_proof,
            "status": booking.status.value,
            "created_at": booking.created_at.isoformat(),
            "updated_at": booking.updated_at.isoformat() if booking.updated_at else None,
            "version": booking.version,
        }

    def _deserialize_booking(self, data: dict[str, Any]) -> Booking:
        customer = data.get("customer") or {}
        updated_at = data.get("updated_at")
        return Booking(
            booking_id=data["booking_id"],
            staff_id=data["staff_id"],
            date=date.fromisoformat(data["date"]),
            start_time=data["start_time"],
            services=tuple(
                BookedService(
                    service_id=s["service_id"],
                    name=s["name"],
                    price=int(s["price"]),
                    duration_minutes=int(s["duration_minutes"]),
                )
                for s in data.get("services", [])
            ),
            total_price=int(data["total_price"]),
            total_duration=int(data["total_duration"]),
            customer=CustomerInfo(
                name=customer.get("name", ""),
                email=customer.get("email", ""),
                phone=customer.get("phone", ""),
                notes=customer.get("notes") or "",
            ),
            customer_id=data.get("customer_id"),
            payment_method_id=data["payment_method_id"],
            payment_status=PaymentStatus(data["payment_status"]),
            payment_proof=data.get("payment_proof"),
            status=BookingStatus(data["status"]),
            created_at=datetime.fromisoformat(data["created_at"]),
            updated_at=datetime.fromisoformat(updated_at) if updated_at else None,
            version=int(data.get("version", 1)),
        )

    def get(self, booking_id: str) -> Booking | None:
        location = self._get_index().get(booking_id)
        if location is None:
            return None
        staff_id, day = location
        with self._get_lock(staff_id, day):
            for booking in self._load_day(staff_id, day):
                if booking.booking_id == booking_id:
                    return booking
        return None

    def list_for_staff_day(self, staff_id: str, day: date) -> list[Booking]:
        with self._get_lock(staff_id, day):
            return self._load_day(staff_id, day)

    def list_all(self) -> list[Booking]:
        bookings: list[Booking] = []
        for staff_id, day in self._stored_days():
            bookings.extend(self.list_for_staff_day(staff_id, day))
        return bookings

    def insert_if_free(self, booking: Booking) -> bool:
        index = self._get_index()
        with self._get_lock(booking.staff_id, booking.date):
            bookings = self._load_day(booking.staff_id, booking.date)
            if find_overlap(bookings, booking.start_minutes, booking.end_minutes):
                return False
            bookings.append(booking)
            self._save_day(booking.staff_id, booking.date, bookings)
        with self._index_lock:
            index[booking.booking_id] = (booking.staff_id, booking.date)
        return True

    def replace(self, booking: Booking, expected_version: int) -> bool:
        # Same lock as inserts: both rewrite the whole day file.
        with self._get_lock(booking.staff_id, booking.date):
            bookings = self._load_day(booking.staff_id, booking.date)
            for position, current in enumerate(bookings):
                if current.booking_id != booking.booking_id:
                    continue
                if current.version != expected_version:
                    return False
                bookings[position] = booking
                self._save_day(booking.staff_id, booking.date, bookings)
                return True
        return False
