#!/usr/bin/env python3
"""Smoke test for the booking API against a running server."""

import sys
import time

import httpx


BASE_URL = "http://127.0.0.1:8001"


def create_booking() -> str | None:
    """Create a plumbing booking and return its id."""
    print("=" * 60)
    print("Testing POST /api/v1/bookings")
    print("=" * 60)

    payload = {
        "customer_name": "Smoke Tester",
        "service_type": "Leaky faucet",
        "address": "1 Test Street",
    }

    try:
        response = httpx.post(f"{BASE_URL}/api/v1/bookings", json=payload, timeout=10.0)
        response.raise_for_status()
        data = response.json()
        print(f"✅ Created booking {data['id']} with status {data['status']}")
        return data["id"]
    except httpx.HTTPStatusError as e:
        print(f"❌ HTTP Error: {e.response.status_code}")
        print(f"Response: {e.response.text}")
        return None
    except Exception as e:
        print(f"❌ Error: {e}")
        return None


def run_dispatch(booking_id: str) -> bool:
    """Force a dispatch tick and check the booking got a provider."""
    print("\n" + "=" * 60)
    print("Testing POST /api/v1/dispatch/tick")
    print("=" * 60)

    try:
        httpx.post(f"{BASE_URL}/api/v1/dispatch/tick", timeout=10.0).raise_for_status()
        response = httpx.get(f"{BASE_URL}/api/v1/bookings/{booking_id}", timeout=10.0)
        response.raise_for_status()
        data = response.json()
        print(f"Status: {data['status']}")
        print(f"Provider: {data['provider_name']}")
        print(f"Retry count: {data['retry_count']}")
        return data["status"] == "ASSIGNED"
    except httpx.HTTPStatusError as e:
        print(f"❌ HTTP Error: {e.response.status_code}")
        print(f"Response: {e.response.text}")
        return False
    except Exception as e:
        print(f"❌ Error: {e}")
        return False


def walk_lifecycle(booking_id: str) -> bool:
    """Drive the booking through start and completion as its provider."""
    print("\n" + "=" * 60)
    print("Testing POST /api/v1/bookings/{id}/status")
    print("=" * 60)

    try:
        for status in ("IN_PROGRESS", "COMPLETED"):
            response = httpx.post(
                f"{BASE_URL}/api/v1/bookings/{booking_id}/status",
                json={"status": status, "actor": "Mario Rossi"},
                timeout=10.0,
            )
            response.raise_for_status()
            print(f"  -> {response.json()['status']}")

        log = httpx.get(f"{BASE_URL}/api/v1/audit-log", params={"booking_id": booking_id}, timeout=10.0)
        log.raise_for_status()
        print(f"\nAudit log for {booking_id}:")
        for event in log.json():
            stamp = time.strftime("%H:%M:%S", time.localtime(event["timestamp"]))
            print(f"  {stamp} {event['actor']}: {event['from_status']} -> {event['to_status']}")
        return True
    except httpx.HTTPStatusError as e:
        print(f"❌ HTTP Error: {e.response.status_code}")
        print(f"Response: {e.response.text}")
        return False
    except Exception as e:
        print(f"❌ Error: {e}")
        return False


def main():
    print("\n🚀 Testing Booking API\n")

    try:
        httpx.get(f"{BASE_URL}/health", timeout=5.0)
        print("✅ Server is running\n")
    except Exception:
        print("❌ Server is not running!")
        print("   Please start it with: uvicorn app.main:app --reload --port 8001")
        sys.exit(1)

    booking_id = create_booking()
    if not booking_id:
        sys.exit(1)
    if not run_dispatch(booking_id):
        print("⚠️  Booking was not auto-assigned")
    walk_lifecycle(booking_id)

    print("\n" + "=" * 60)
    print("✅ Smoke test complete!")
    print("=" * 60 + "\n")


if __name__ == "__main__":
    main()
