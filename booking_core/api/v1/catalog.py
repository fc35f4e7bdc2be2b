from fastapi import APIRouter, Depends

from booking_core.api.v1.schemas import PaymentMethodSchema, ServiceSchema, StaffMemberSchema
from booking_core.application.ports.catalog import CatalogPort
from booking_core.wiring.dependencies import get_catalog

router = APIRouter()


@router.get("/catalog/services", response_model=list[ServiceSchema])
def list_services(category: str | None = None, catalog: CatalogPort = Depends(get_catalog)):
    services = catalog.list_services(active_only=True)
    if category and category != "all":
        services = [s for s in services if s.category == category]
    return [ServiceSchema.from_entity(s) for s in services]


@router.get("/catalog/staff", response_model=list[StaffMemberSchema])
def list_staff(catalog: CatalogPort = Depends(get_catalog)):
    return [StaffMemberSchema.from_entity(s) for s in catalog.list_staff(available_only=True)]


@router.get("/catalog/payment-methods", response_model=list[PaymentMethodSchema])
def list_payment_methods(catalog: CatalogPort = Depends(get_catalog)):
    return [PaymentMethodSchema.from_entity(m) for m in catalog.list_payment_methods()]
