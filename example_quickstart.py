"""
Keypager Quick Start Example

Paginate an in-memory list of events with continuation tokens, then show
what happens when the data changes between two requests.

Features covered:
- Orderings (primary field + tie-break field)
- Walking pages with continuation tokens
- Page numbers and offsets
- Drift fallback

Run with: python example_quickstart.py
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from keypager import PageNumber, Pager, PageToken


# ============================================================================
# 1. DEFINE YOUR RECORDS
# ============================================================================


@dataclass
class Event:
    """Something that happened at a given time."""

    id: str
    created_at: datetime


class EventPager(Pager):
    """Events oldest first; ids break ties between events of the same second."""

    class Settings:
        orderings = {"created_at": "asc", "id": "asc"}
        page_size = 3


def build_events() -> list[Event]:
    start = datetime(2024, 1, 1)
    hours = [0, 1, 1, 1, 2, 3, 3, 4]
    return [Event(f"evt-{index}", start + timedelta(hours=hour)) for index, hour in enumerate(hours)]


# ============================================================================
# 2. MAIN
# ============================================================================


def main():
    events = build_events()

    print("📄 Walking all pages with continuation tokens")
    token = None
    while True:
        pager = EventPager(events).set_current_page(token)
        page = pager.paginate()
        if not page.items:
            break
        print(f"   {[e.id for e in page.items]} -> continue={page.next_token}")
        # The token travels through the client as a plain string.
        token = PageToken.from_string(page.next_token)

    print("\n🔢 Page number 2 (no continuation token in this mode)")
    pager = EventPager(events).set_current_page(PageNumber(2))
    print(f"   {[e.id for e in pager]} -> continue={pager.get_next_page_token()}")

    print("\n⚠️  Drift: the boundary event is deleted before the next request")
    pager = EventPager(events)
    list(pager)
    stale = pager.get_next_page_token()
    remaining = [e for e in events if e.id != "evt-2"]
    resumed = EventPager(remaining).set_current_page(stale)
    print(f"   {[e.id for e in resumed]} (drifted={resumed.drifted})")


if __name__ == "__main__":
    main()
