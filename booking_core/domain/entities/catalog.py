from __future__ import annotations

from dataclasses import dataclass

PAYMENT_KIND_CASH = "cash"


@dataclass(frozen=True)
class Service:
    service_id: str
    name: str
    category: str
    price: int  # smallest currency unit
    duration_minutes: int
    active: bool = True
    description: str | None = None


@dataclass(frozen=True)
class StaffMember:
    staff_id: str
    name: str
    role: str
    work_start: str  # HH:MM
    work_end: str  # HH:MM
    available: bool = True


@dataclass(frozen=True)
class PaymentMethod:
    method_id: str
    name: str
    kind: str  # "qris" | "bank" | "cash"
    account_number: str | None = None
    account_name: str | None = None

    @property
    def requires_proof(self) -> bool:
        return self.kind != PAYMENT_KIND_CASH
