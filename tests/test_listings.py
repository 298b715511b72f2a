"""Tests for vendor listing management."""

from __future__ import annotations

from decimal import Decimal

import pytest

from florify.engine.acknowledgements import acknowledge_alert, get_unread_alert_count
from florify.errors import InvalidInputError, NotFoundError, OwnershipError
from florify.services.listings import (
    create_listing,
    delete_listing,
    list_vendor_listings,
    update_listing,
)
from florify.store.base import LISTINGS_TABLE


class TestCreateListing:

    @pytest.mark.asyncio
    async def test_defaults_applied(self, memory_store) -> None:
        listing = await create_listing(memory_store, "v1", "Rosaprima", "Red Roses", "45.00")

        assert listing.price == Decimal("45.00")
        assert listing.category == "Other"
        assert listing.color == "Assorted"
        assert listing.stems_per_bunch == 1
        assert listing.units_per_box == 1
        assert listing.box_type == "EB"
        assert listing.created_at is not None

        stored = await memory_store.get_by_key(LISTINGS_TABLE, {"listing_id": listing.listing_id})
        assert stored["vendor_name"] == "Rosaprima"
        assert stored["price"] == Decimal("45.00")

    @pytest.mark.asyncio
    async def test_descriptive_fields_kept(self, memory_store) -> None:
        listing = await create_listing(
            memory_store,
            "v1",
            "Alexandra Farms",
            "Blue Tulips",
            20,
            category="Tulips",
            color="Blue",
            stems_per_bunch=10,
            units_per_box=8,
            box_type="QB",
        )

        assert (listing.category, listing.color, listing.box_type) == ("Tulips", "Blue", "QB")
        assert listing.stems_per_bunch == 10
        assert listing.units_per_box == 8

    @pytest.mark.asyncio
    async def test_name_is_trimmed(self, memory_store) -> None:
        listing = await create_listing(memory_store, "v1", "Rosaprima", "  Red Roses ", "45")
        assert listing.canonical_name == "Red Roses"

    @pytest.mark.asyncio
    async def test_ids_are_unique(self, memory_store) -> None:
        first = await create_listing(memory_store, "v1", "Rosaprima", "Red Roses", "45")
        second = await create_listing(memory_store, "v1", "Rosaprima", "Red Roses", "45")
        assert first.listing_id != second.listing_id
        assert len(await memory_store.scan_all(LISTINGS_TABLE)) == 2

    @pytest.mark.parametrize(
        "name, price",
        [("", "10"), ("   ", "10"), ("Red Roses", None)],
    )
    @pytest.mark.asyncio
    async def test_missing_required_fields(self, memory_store, name, price) -> None:
        with pytest.raises(InvalidInputError):
            await create_listing(memory_store, "v1", "Rosaprima", name, price)

    @pytest.mark.parametrize("price", ["-1", "abc", Decimal("NaN"), "Infinity"])
    @pytest.mark.asyncio
    async def test_invalid_price_rejected(self, memory_store, price) -> None:
        with pytest.raises(InvalidInputError):
            await create_listing(memory_store, "v1", "Rosaprima", "Red Roses", price)

        assert await memory_store.scan_all(LISTINGS_TABLE) == []

    @pytest.mark.asyncio
    async def test_sub_cent_price_persisted_exactly(self, sql_store) -> None:
        listing = await create_listing(sql_store, "v1", "Rosaprima", "Red Roses", "12.345")

        stored = await sql_store.get_by_key(LISTINGS_TABLE, {"listing_id": listing.listing_id})

        assert listing.price == Decimal("12.345")
        assert stored["price"] == listing.price

    @pytest.mark.parametrize("price", ["12.3456789", "1" * 13])
    @pytest.mark.asyncio
    async def test_price_beyond_column_precision_rejected(self, memory_store, price) -> None:
        with pytest.raises(InvalidInputError):
            await create_listing(memory_store, "v1", "Rosaprima", "Red Roses", price)

    @pytest.mark.asyncio
    async def test_zero_price_allowed(self, memory_store) -> None:
        listing = await create_listing(memory_store, "v1", "Rosaprima", "Promo Mix", "0")
        assert listing.price == Decimal("0")


class TestListVendorListings:

    @pytest.mark.asyncio
    async def test_only_own_listings(self, memory_store) -> None:
        await create_listing(memory_store, "v1", "Rosaprima", "Sunflowers", "12")
        await create_listing(memory_store, "v1", "Rosaprima", "Red Roses", "45")
        await create_listing(memory_store, "v2", "Alexandra Farms", "Red Roses", "38")

        own = await list_vendor_listings(memory_store, "v1")

        # Vendor index range attribute is canonical_name
        assert [l.canonical_name for l in own] == ["Red Roses", "Sunflowers"]
        assert all(l.vendor_id == "v1" for l in own)

    @pytest.mark.asyncio
    async def test_unknown_vendor_empty(self, memory_store) -> None:
        assert await list_vendor_listings(memory_store, "nobody") == []


class TestUpdateListing:

    @pytest.mark.asyncio
    async def test_price_update(self, memory_store) -> None:
        listing = await create_listing(memory_store, "v1", "Rosaprima", "Red Roses", "45")

        updated = await update_listing(memory_store, "v1", listing.listing_id, price="43.50")

        assert updated.price == Decimal("43.50")
        assert updated.listing_id == listing.listing_id
        stored = await memory_store.get_by_key(LISTINGS_TABLE, {"listing_id": listing.listing_id})
        assert stored["price"] == Decimal("43.50")

    @pytest.mark.asyncio
    async def test_none_values_ignored(self, memory_store) -> None:
        listing = await create_listing(memory_store, "v1", "Rosaprima", "Red Roses", "45", color="Red")

        updated = await update_listing(memory_store, "v1", listing.listing_id, color=None, box_type="HB")

        assert updated.color == "Red"
        assert updated.box_type == "HB"

    @pytest.mark.asyncio
    async def test_nothing_to_update(self, memory_store) -> None:
        listing = await create_listing(memory_store, "v1", "Rosaprima", "Red Roses", "45")

        with pytest.raises(InvalidInputError):
            await update_listing(memory_store, "v1", listing.listing_id)
        with pytest.raises(InvalidInputError):
            await update_listing(memory_store, "v1", listing.listing_id, price=None)

    @pytest.mark.asyncio
    async def test_unknown_field_rejected(self, memory_store) -> None:
        listing = await create_listing(memory_store, "v1", "Rosaprima", "Red Roses", "45")

        with pytest.raises(InvalidInputError):
            await update_listing(memory_store, "v1", listing.listing_id, vendor_id="v2")
        with pytest.raises(InvalidInputError):
            await update_listing(memory_store, "v1", listing.listing_id, listing_id="lst-other")
        with pytest.raises(InvalidInputError):
            await update_listing(memory_store, "v1", listing.listing_id, created_at=None)

        stored = await memory_store.get_by_key(LISTINGS_TABLE, {"listing_id": listing.listing_id})
        assert stored["vendor_id"] == "v1"

    @pytest.mark.asyncio
    async def test_invalid_value_rejected(self, memory_store) -> None:
        listing = await create_listing(memory_store, "v1", "Rosaprima", "Red Roses", "45")

        with pytest.raises(InvalidInputError):
            await update_listing(memory_store, "v1", listing.listing_id, price="-5")
        with pytest.raises(InvalidInputError):
            await update_listing(memory_store, "v1", listing.listing_id, units_per_box=0)

        stored = await memory_store.get_by_key(LISTINGS_TABLE, {"listing_id": listing.listing_id})
        assert stored["price"] == Decimal("45")

    @pytest.mark.asyncio
    async def test_other_vendors_listing_forbidden(self, memory_store) -> None:
        listing = await create_listing(memory_store, "v1", "Rosaprima", "Red Roses", "45")

        with pytest.raises(OwnershipError):
            await update_listing(memory_store, "v2", listing.listing_id, price="1")

    @pytest.mark.asyncio
    async def test_missing_listing_not_found(self, memory_store) -> None:
        with pytest.raises(NotFoundError):
            await update_listing(memory_store, "v1", "nope", price="1")

    @pytest.mark.asyncio
    async def test_price_update_unreads_acknowledged_alert(self, memory_store) -> None:
        own = await create_listing(memory_store, "v1", "Rosaprima", "Red Roses", "45")
        await create_listing(memory_store, "v2", "Alexandra Farms", "Red Roses", "38")
        await acknowledge_alert(memory_store, "v1", "Red Roses")
        assert await get_unread_alert_count(memory_store, "v1") == 0

        await update_listing(memory_store, "v1", own.listing_id, price="43")

        assert await get_unread_alert_count(memory_store, "v1") == 1


class TestDeleteListing:

    @pytest.mark.asyncio
    async def test_delete_own_listing(self, memory_store) -> None:
        listing = await create_listing(memory_store, "v1", "Rosaprima", "Red Roses", "45")

        await delete_listing(memory_store, "v1", listing.listing_id)

        assert await memory_store.get_by_key(LISTINGS_TABLE, {"listing_id": listing.listing_id}) is None

    @pytest.mark.asyncio
    async def test_delete_other_vendors_listing_forbidden(self, memory_store) -> None:
        listing = await create_listing(memory_store, "v1", "Rosaprima", "Red Roses", "45")

        with pytest.raises(OwnershipError):
            await delete_listing(memory_store, "v2", listing.listing_id)

        assert await memory_store.get_by_key(LISTINGS_TABLE, {"listing_id": listing.listing_id}) is not None

    @pytest.mark.asyncio
    async def test_delete_missing_not_found(self, memory_store) -> None:
        with pytest.raises(NotFoundError):
            await delete_listing(memory_store, "v1", "nope")
