from __future__ import annotations

from booking_core.application.exceptions import NotFoundError, ValidationError
from booking_core.application.ports.catalog import CatalogPort
from booking_core.domain.entities.catalog import Service, StaffMember


def resolve_services(catalog: CatalogPort, service_ids: list[str]) -> list[Service]:
    """Active services for the given ids, in request order."""
    if not service_ids:
        raise ValidationError("Select at least one service")
    if len(set(service_ids)) != len(service_ids):
        raise ValidationError("Each service can only be selected once")

    services: list[Service] = []
    for service_id in service_ids:
        service = catalog.get_service(service_id)
        if service is None:
            raise NotFoundError(f"Service {service_id} not found")
        if not service.active:
            raise ValidationError(f"Service {service.name} is not currently offered")
        if service.duration_minutes <= 0:
            raise ValidationError(f"Service {service.name} has no bookable duration")
        services.append(service)
    return services


def resolve_staff(catalog: CatalogPort, staff_id: str) -> StaffMember:
    staff = catalog.get_staff_member(staff_id)
    if staff is None:
        raise NotFoundError(f"Staff member {staff_id} not found")
    return staff
