from __future__ import annotations

import threading
from dataclasses import replace

from booking_core.application.ports.catalog import CatalogPort
from booking_core.domain.entities.catalog import PaymentMethod, Service, StaffMember
from booking_core.infrastructure.catalog.catalog_data import PAYMENT_METHODS, SERVICES, STAFF


class MemoryCatalogStore(CatalogPort):
    def __init__(
        self,
        services: dict[str, Service] | None = None,
        staff: dict[str, StaffMember] | None = None,
        payment_methods: dict[str, PaymentMethod] | None = None,
    ) -> None:
        self._services = dict(SERVICES if services is None else services)
        self._staff = dict(STAFF if staff is None else staff)
        self._payment_methods = dict(PAYMENT_METHODS if payment_methods is None else payment_methods)
        self._lock = threading.Lock()

    def get_service(self, service_id: str) -> Service | None:
        return self._services.get(service_id.strip())

    def get_staff_member(self, staff_id: str) -> StaffMember | None:
        return self._staff.get(staff_id.strip())

    def get_payment_method(self, method_id: str) -> PaymentMethod | None:
        return self._payment_methods.get(method_id.strip().lower())

    def list_services(self, active_only: bool = True) -> list[Service]:
        services = list(self._services.values())
        if active_only:
            services = [s for s in services if s.active]
        return services

    def list_staff(self, available_only: bool = True) -> list[StaffMember]:
        staff = list(self._staff.values())
        if available_only:
            staff = [s for s in staff if s.available]
        return staff

    def list_payment_methods(self) -> list[PaymentMethod]:
        return list(self._payment_methods.values())

    def update_service(self, service_id: str, **changes) -> Service:
        """Admin-side edit. Existing bookings keep their own snapshot."""
        with self._lock:
            current = self._services.get(service_id)
            if current is None:
                raise KeyError(service_id)
            updated = replace(current, **changes)
            self._services[service_id] = updated
            return updated
