#!/usr/bin/env python3
"""
Interactive local booking harness (no HTTP).

Usage:
  python3 scripts/dispatch_local.py

What it does:
- Builds the lifecycle and dispatch use cases through the project wiring
- Lets you create bookings, change their status and run dispatch ticks by hand
- Prints the booking list, stats and audit log after each command
"""

from __future__ import annotations

import shlex
import sys
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.application.exceptions import NotFoundError
from app.domain.entities.booking import BookingStatus
from app.wiring.dependencies import get_container


def _print_header() -> None:
    print("\nLocal Booking Harness")
    print("-" * 60)
    print("Commands:")
    print('  new "<customer>" "<service>" "<address>"')
    print("  status <booking_id> <STATUS> [actor] [provider_id]")
    print("  tick        -> run one auto-dispatch pass")
    print("  list [provider_id]")
    print("  log [limit]")
    print("  stats | clear | /quit")
    print("-" * 60)


def _print_bookings(bookings) -> None:
    if not bookings:
        print("(no bookings)")
        return
    for b in bookings:
        provider = b.provider_name or "-"
        print(
            f"{b.id[:8]}  {b.status.value:<11}  {b.service_type:<16}  "
            f"provider={provider:<14} retries={b.retry_count}"
        )


def main() -> None:
    container = get_container()
    lifecycle = container["lifecycle"]
    dispatch = container["dispatch"]
    _print_header()

    while True:
        try:
            line = input("\n> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            return

        if not line:
            continue
        try:
            parts = shlex.split(line)
        except ValueError as e:
            print(f"Could not parse command: {e}")
            continue

        cmd, args = parts[0].lower(), parts[1:]
        if cmd in ("/quit", "/exit", "quit"):
            print("Bye!")
            return

        try:
            if cmd == "new" and len(args) == 3:
                booking = lifecycle.create_booking(*args)
                print(f"Created {booking.id}")
            elif cmd == "status" and len(args) >= 2:
                booking_id = _expand_id(lifecycle, args[0])
                actor = args[2] if len(args) > 2 else "Admin"
                provider_id = args[3] if len(args) > 3 else None
                booking = lifecycle.transition(booking_id, BookingStatus(args[1].upper()), actor, provider_id)
                print(f"{booking.id[:8]} is now {booking.status.value}")
            elif cmd == "tick":
                assigned = dispatch.tick()
                print(f"Auto-assigned {len(assigned)} booking(s)")
                _print_bookings(assigned)
            elif cmd == "list":
                _print_bookings(lifecycle.list_bookings(provider_id=args[0] if args else None))
            elif cmd == "log":
                limit = int(args[0]) if args else 20
                for event in lifecycle.get_audit_log(limit=limit):
                    stamp = time.strftime("%H:%M:%S", time.localtime(event.timestamp))
                    print(f"{stamp} {event.booking_id[:8]} {event.actor}: {event.from_status} -> {event.to_status}")
            elif cmd == "stats":
                stats = lifecycle.get_stats()
                print(f"total={stats.total} active={stats.active} rejected={stats.rejected} pending={stats.pending}")
            elif cmd == "clear":
                lifecycle.clear_all()
                print("Cleared.")
            else:
                _print_header()
        except (NotFoundError, ValueError) as e:
            print(f"ERROR: {e}")


def _expand_id(lifecycle, prefix: str) -> str:
    """Allow the 8-character prefixes printed by `list`."""
    matches = [b.id for b in lifecycle.list_bookings() if b.id.startswith(prefix)]
    return matches[0] if len(matches) == 1 else prefix


if __name__ == "__main__":
    main()
