"""Tests for the catalog aggregator (summaries and product detail)."""

from __future__ import annotations

from decimal import Decimal

import pytest

from florify.engine.catalog import build_catalog, get_product_detail, list_catalog
from florify.engine.records import Listing, parse_listings
from florify.errors import NotFoundError
from florify.store.base import LISTINGS_TABLE


class TestBuildCatalog:
    """Pure fold over validated listings."""

    def test_lowest_price_and_listing_count(self, make_listing) -> None:
        listings = parse_listings([
            make_listing("a", "Red Roses", "45"),
            make_listing("b", "Red Roses", "38"),
            make_listing("c", "Red Roses", "41"),
        ])

        catalog = build_catalog(listings)

        summary = catalog["Red Roses"]
        assert summary.lowest_price == Decimal("38")
        assert summary.vendor_count == 3

    def test_same_vendor_counts_twice(self, make_listing) -> None:
        """vendor_count counts listings, not distinct vendors."""
        listings = parse_listings([
            make_listing("a", "Red Roses", "45"),
            make_listing("a", "Red Roses", "40"),
        ])

        summary = build_catalog(listings)["Red Roses"]

        assert summary.vendor_count == 2
        assert summary.lowest_price == Decimal("40")

    def test_first_seen_descriptive_fields_win(self, make_listing) -> None:
        listings = parse_listings([
            make_listing("a", "Garden Mix", "30", color="Pink", box_type="HB"),
            make_listing("b", "Garden Mix", "25", color="White", box_type="QB"),
        ])

        summary = build_catalog(listings)["Garden Mix"]

        assert summary.color == "Pink"
        assert summary.box_type == "HB"
        # Price still aggregates across both
        assert summary.lowest_price == Decimal("25")

    def test_insertion_order_preserved(self, make_listing) -> None:
        listings = parse_listings([
            make_listing("a", "Sunflowers", "12"),
            make_listing("a", "Red Roses", "45"),
            make_listing("b", "Sunflowers", "10"),
            make_listing("c", "Blue Tulips", "20"),
        ])

        assert list(build_catalog(listings)) == ["Sunflowers", "Red Roses", "Blue Tulips"]

    def test_empty_input(self) -> None:
        assert build_catalog([]) == {}

    def test_accepts_listing_models_directly(self) -> None:
        listing = Listing(listing_id="x", canonical_name="Peonies", vendor_id="v", price=Decimal("9.99"))

        summary = build_catalog([listing])["Peonies"]

        assert summary.category == "Other"
        assert summary.color == "Assorted"
        assert summary.stems_per_bunch == 1
        assert summary.box_type == "EB"


class TestParseListings:
    """Malformed rows are dropped, never fatal."""

    @pytest.mark.parametrize(
        "bad_price",
        [Decimal("NaN"), Decimal("Infinity"), Decimal("-1"), "abc", None],
    )
    def test_bad_prices_skipped(self, make_listing, bad_price) -> None:
        listings = parse_listings([
            make_listing("a", "Red Roses", "45"),
            make_listing("b", "Red Roses", bad_price),
        ])
        assert [l.vendor_id for l in listings] == ["a"]

    def test_missing_canonical_name_skipped(self, make_listing) -> None:
        assert parse_listings([make_listing("a", "", "10")]) == []

    def test_null_descriptive_fields_take_defaults(self, make_listing) -> None:
        listing = parse_listings([make_listing("a", "Red Roses", "10", color=None, units_per_box=None)])[0]
        assert listing.color == "Assorted"
        assert listing.units_per_box == 1


class TestCatalogFromStore:

    @pytest.mark.asyncio
    async def test_list_catalog_skips_corrupt_listing(self, memory_store, make_listing) -> None:
        await memory_store.put(LISTINGS_TABLE, make_listing("a", "Red Roses", "45"))
        await memory_store.put(LISTINGS_TABLE, make_listing("b", "Red Roses", Decimal("NaN")))
        await memory_store.put(LISTINGS_TABLE, make_listing("c", "Blue Tulips", "20"))

        catalog = await list_catalog(memory_store)

        assert [s.canonical_name for s in catalog] == ["Red Roses", "Blue Tulips"]
        assert catalog[0].vendor_count == 1

    @pytest.mark.asyncio
    async def test_single_listing_product_detail(self, memory_store, make_listing) -> None:
        await memory_store.put(
            LISTINGS_TABLE,
            make_listing("d", "Blue Tulips", "20", category="Tulips", color="Blue"),
        )

        detail = await get_product_detail(memory_store, "Blue Tulips")

        assert detail.canonical_name == "Blue Tulips"
        assert detail.category == "Tulips"
        assert detail.color == "Blue"
        assert len(detail.offers) == 1
        assert detail.offers[0].vendor_id == "d"
        assert detail.offers[0].price == Decimal("20")

    @pytest.mark.asyncio
    async def test_unknown_product_not_found(self, memory_store, make_listing) -> None:
        await memory_store.put(LISTINGS_TABLE, make_listing("d", "Blue Tulips", "20"))

        with pytest.raises(NotFoundError):
            await get_product_detail(memory_store, "Nonexistent")

    @pytest.mark.asyncio
    async def test_detail_lists_every_offer(self, memory_store, make_listing) -> None:
        for vendor, price in (("a", "45"), ("b", "38"), ("a", "50")):
            await memory_store.put(LISTINGS_TABLE, make_listing(vendor, "Red Roses", price))

        detail = await get_product_detail(memory_store, "Red Roses")

        assert sorted(o.price for o in detail.offers) == [Decimal("38"), Decimal("45"), Decimal("50")]
        assert {o.listing_id for o in detail.offers} == {"lst-001", "lst-002", "lst-003"}
