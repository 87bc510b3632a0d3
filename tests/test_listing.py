from __future__ import annotations

from kitchen_sink_model import make_kitchen_sink

from binding_engine.listing import EntityListing


def test_entries_are_sorted_by_title() -> None:
    records = [make_kitchen_sink(n) for n in ("West", "East", "North")]
    entries = EntityListing().entries(records)
    assert [e.title for e in entries] == ["East", "North", "West"]
    assert entries[0].subtitle is None
    assert entries[0].record is records[1]


def test_custom_formatters() -> None:
    listing = EntityListing(
        title=lambda r: r[0].value.upper(),
        subtitle=lambda r: f"{r.field('bays').value} bays",
    )
    (entry,) = listing.entries([make_kitchen_sink("main")])
    assert entry.title == "MAIN"
    assert entry.subtitle == "4 bays"
