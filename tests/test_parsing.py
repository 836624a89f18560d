"""Unit tests for :mod:`lead_finder.parsing`."""
from __future__ import annotations

from lead_finder.models import Coordinates, NOT_STARTED
from lead_finder.parsing import classify_line, clean_business_name, parse_leads


def test_parse_single_listing_entry() -> None:
    markdown = "**Acme Plumbing**\n- Address: 1 Main St, Springfield\n- Phone: 555-1111\n---"

    records = parse_leads(markdown)

    assert len(records) == 1
    record = records[0]
    assert record.name == "Acme Plumbing"
    assert record.address == "1 Main St, Springfield"
    assert record.phone == "555-1111"
    assert record.category == ""
    assert record.website_url is None
    assert record.rating is None
    assert record.review_count is None
    assert record.coordinates is None
    assert record.scrape_state == NOT_STARTED


def test_parse_all_fields() -> None:
    markdown = """### 1. **Blue Door Bakery**
- Address: 9 Oak Rd, Portland, OR
- Type: Bakery
- Phone: (503) 555-0101
- Rating: 4.7 (1,204 reviews)
- Website: https://bluedoor.example/
- Coordinates: 45.5231, -122.6765
---
"""

    record = parse_leads(markdown, id_prefix="run")[0]

    assert record.id == "run-0"
    assert record.name == "1. Blue Door Bakery"
    assert record.category == "Bakery"
    assert record.phone == "(503) 555-0101"
    assert record.rating == 4.7
    assert record.review_count == 1204
    assert record.website_url == "https://bluedoor.example/"
    assert record.coordinates == Coordinates(45.5231, -122.6765)


def test_segments_without_name_or_address_are_dropped() -> None:
    markdown = """**No Address Cafe**
- Phone: 555-0000
---
- Address: 4 Nameless Way
---
**Kept Diner**
- Address: 5 Kept Ave
---
"""

    records = parse_leads(markdown, id_prefix="p")

    assert [record.name for record in records] == ["Kept Diner"]
    assert records[0].id == "p-2"


def test_coordinates_are_all_or_nothing() -> None:
    markdown = """**Half Pair**
- Address: 1 A St
- Coordinates: 45.1, not-a-number
---
**Single Value**
- Address: 2 B St
- Coordinates: 45.1
---
**Out Of Range**
- Address: 3 C St
- Coordinates: 145.0, 10.0
---
**Zero Is Valid**
- Address: 4 D St
- Coordinates: 0, 0
"""

    records = parse_leads(markdown)

    assert [record.coordinates for record in records] == [None, None, None, Coordinates(0.0, 0.0)]
    assert records[0].latitude is None
    assert records[0].longitude is None


def test_unparsable_rating_is_skipped_but_review_count_kept() -> None:
    fields = classify_line("- Rating: unrated (12 reviews)")

    assert fields == {"review_count": 12}


def test_unknown_lines_are_ignored() -> None:
    assert classify_line("- Hours: 9am - 5pm") == {}


def test_ids_are_unique_within_a_call() -> None:
    markdown = "**A**\n- Address: 1 St\n---\n**B**\n- Address: 2 St\n---\n**C**\n- Address: 3 St"

    records = parse_leads(markdown)

    assert len({record.id for record in records}) == 3


def test_empty_listing_returns_no_records() -> None:
    assert parse_leads("") == []
    assert parse_leads(None) == []
    assert parse_leads("---\n---\n") == []


def test_clean_business_name_strips_markdown() -> None:
    assert clean_business_name("  **Acme Plumbing**  ") == "Acme Plumbing"
    assert clean_business_name("## __Corner Shop__") == "Corner Shop"
    assert clean_business_name("- * Bullet Co") == "Bullet Co"
