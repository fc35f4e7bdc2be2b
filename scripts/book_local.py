#!/usr/bin/env python3
from __future__ import annotations

import argparse
from datetime import date, timedelta
from typing import Any

import httpx
from httpx import ConnectError


def build_payload(staff_id: str, day: str, start_time: str, service_ids: list[str], payment: str) -> dict[str, Any]:
    return {
        "staff_id": staff_id,
        "date": day,
        "start_time": start_time,
        "service_ids": service_ids,
        "customer": {
            "name": "Local Tester",
            "email": "tester@example.com",
            "phone": "081200000000",
            "notes": "",
        },
        "payment_method_id": payment,
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Book a slot against a running booking API and print the result")
    parser.add_argument("--base-url", default="http://127.0.0.1:8001/api/v1")
    parser.add_argument("--staff", default="1")
    parser.add_argument("--date", default=(date.today() + timedelta(days=1)).isoformat())
    parser.add_argument("--time", default="10:00")
    parser.add_argument("--service", action="append", dest="services", help="Repeat for more services")
    parser.add_argument("--payment", default="cash")
    parser.add_argument("--customer-id", default="local-tester")
    parser.add_argument("--confirm", action="store_true", help="Confirm the booking as staff afterwards")
    args = parser.parse_args()

    services = args.services or ["haircut"]
    customer = {"X-Actor-Id": args.customer_id, "X-Actor-Role": "customer"}
    staff = {"X-Actor-Id": "local-staff", "X-Actor-Role": "staff"}

    try:
        slots = httpx.get(
            f"{args.base_url}/staff/{args.staff}/slots",
            params={"date": args.date, "service_ids": services},
            timeout=10.0,
        )
    except ConnectError:
        print("Connection refused. Is the FastAPI server running?")
        print("Try: uvicorn booking_core.main:app --reload --port 8001")
        return

    print(f"Slots {slots.status_code}")
    if slots.status_code == 200:
        free = [s["time"] for s in slots.json() if s["state"] == "available"]
        print("  available: " + (", ".join(free) or "none"))

    resp = httpx.post(
        f"{args.base_url}/bookings",
        json=build_payload(args.staff, args.date, args.time, services, args.payment),
        headers=customer,
        timeout=10.0,
    )
    print(f"Create {resp.status_code}")
    print(resp.text)
    if resp.status_code != 201 or not args.confirm:
        return

    booking_id = resp.json()["booking_id"]
    resp = httpx.post(
        f"{args.base_url}/bookings/{booking_id}/transitions",
        json={"status": "confirmed"},
        headers=staff,
        timeout=10.0,
    )
    print(f"Confirm {resp.status_code}")
    print(resp.text)


if __name__ == "__main__":
    main()
