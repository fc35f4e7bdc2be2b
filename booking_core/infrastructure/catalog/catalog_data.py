from __future__ import annotations

from booking_core.domain.entities.catalog import PaymentMethod, Service, StaffMember

SERVICES: dict[str, Service] = {
    "haircut": Service(
        service_id="haircut",
        name="Classic Haircut",
        category="haircut",
        price=50000,
        duration_minutes=30,
        description="Cut, wash and style.",
    ),
    "skin_fade": Service(
        service_id="skin_fade",
        name="Skin Fade",
        category="haircut",
        price=65000,
        duration_minutes=45,
    ),
    "beard_trim": Service(
        service_id="beard_trim",
        name="Beard Trim",
        category="shaving",
        price=30000,
        duration_minutes=15,
    ),
    "hot_towel_shave": Service(
        service_id="hot_towel_shave",
        name="Hot Towel Shave",
        category="shaving",
        price=45000,
        duration_minutes=30,
    ),
    "hair_coloring": Service(
        service_id="hair_coloring",
        name="Hair Coloring",
        category="treatment",
        price=150000,
        duration_minutes=90,
    ),
    "creambath": Service(
        service_id="creambath",
        name="Creambath",
        category="treatment",
        price=60000,
        duration_minutes=60,
        active=False,
    ),
    "groom_package": Service(
        service_id="groom_package",
        name="Grooming Package",
        category="package",
        price=120000,
        duration_minutes=75,
        description="Haircut, beard trim and hot towel shave.",
    ),
}

STAFF: dict[str, StaffMember] = {
    "1": StaffMember(staff_id="1", name="Raka", role="Senior Barber", work_start="09:00", work_end="17:00"),
    "2": StaffMember(staff_id="2", name="Dimas", role="Barber", work_start="12:00", work_end="20:00"),
    "3": StaffMember(staff_id="3", name="Yusuf", role="Hair Colorist", work_start="10:00", work_end="18:00"),
    "4": StaffMember(
        staff_id="4", name="Bagas", role="Junior Barber", work_start="09:00", work_end="17:00", available=False
    ),
}

PAYMENT_METHODS: dict[str, PaymentMethod] = {
    "qris": PaymentMethod(method_id="qris", name="QRIS", kind="qris"),
    "bca": PaymentMethod(
        method_id="bca", name="Bank BCA", kind="bank", account_number="1234567890", account_name="PT Outlook Barbershop"
    ),
    "bni": PaymentMethod(
        method_id="bni", name="Bank BNI", kind="bank", account_number="0987654321", account_name="PT Outlook Barbershop"
    ),
    "mandiri": PaymentMethod(
        method_id="mandiri",
        name="Bank Mandiri",
        kind="bank",
        account_number="1122334455",
        account_name="PT Outlook Barbershop",
    ),
    "cash": PaymentMethod(method_id="cash", name="Pay on Arrival", kind="cash"),
}
