from __future__ import annotations

from abc import ABC, abstractmethod

from booking_core.domain.entities.catalog import PaymentMethod, Service, StaffMember


class CatalogPort(ABC):
    @abstractmethod
    def get_service(self, service_id: str) -> Service | None:
        """Get a service by id, active or not. None if unknown."""
        raise NotImplementedError

    @abstractmethod
    def get_staff_member(self, staff_id: str) -> StaffMember | None:
        """Get a staff member by id, available or not. None if unknown."""
        raise NotImplementedError

    @abstractmethod
    def get_payment_method(self, method_id: str) -> PaymentMethod | None:
        raise NotImplementedError

    @abstractmethod
    def list_services(self, active_only: bool = True) -> list[Service]:
        raise NotImplementedError

    @abstractmethod
    def list_staff(self, available_only: bool = True) -> list[StaffMember]:
        raise NotImplementedError

    @abstractmethod
    def list_payment_methods(self) -> list[PaymentMethod]:
        raise NotImplementedError
