"""Tests for the Catalog Query — filtered, ordered, read-only views."""

from __future__ import annotations

import pytest

from marketledger.core.catalog import CatalogQuery, ListingView
from marketledger.core.errors import ListingNotFound
from marketledger.core.state import LedgerState
from marketledger.models.listing import Listing


def _listing(listing_id: int, owner: str | None = None, seller: str = "alice") -> Listing:
    return Listing(
        listing_id=listing_id, registry_ref="r", asset_id=listing_id,
        seller=seller, owner=owner, price=10 * listing_id, fee=1,
    )


@pytest.fixture
def state() -> LedgerState:
    state = LedgerState(listing_fee=1, operator="operator")
    # Insert out of order to check ordering does not depend on insertion.
    for listing in (
        _listing(3, owner="bob"),
        _listing(1),
        _listing(4, seller="carol"),
        _listing(2, owner="bob", seller="carol"),
        _listing(5, owner="dave"),
    ):
        state.put(listing)
    state.next_listing_id = 6
    state.sold_count = 3
    return state


class TestCatalogQuery:
    def test_list_unsold_ascending(self, state):
        catalog = CatalogQuery(state)
        assert [l.listing_id for l in catalog.list_unsold()] == [1, 4]

    def test_unsold_count_matches_counters(self, state):
        catalog = CatalogQuery(state)
        assert len(catalog.list_unsold()) == state.created_count - state.sold_count

    def test_list_owned_by(self, state):
        catalog = CatalogQuery(state)
        assert [l.listing_id for l in catalog.list_owned_by("bob")] == [2, 3]
        assert [l.listing_id for l in catalog.list_owned_by("dave")] == [5]
        assert catalog.list_owned_by("nobody") == []

    def test_list_created_by(self, state):
        catalog = CatalogQuery(state)
        assert [l.listing_id for l in catalog.list_created_by("carol")] == [2, 4]

    def test_get_listing(self, state):
        assert CatalogQuery(state).get_listing(3).owner == "bob"

    @pytest.mark.parametrize("listing_id", [0, 6, -1, 100])
    def test_get_listing_not_found(self, state, listing_id):
        with pytest.raises(ListingNotFound):
            CatalogQuery(state).get_listing(listing_id)

    def test_not_found_is_a_key_error(self, state):
        with pytest.raises(KeyError):
            CatalogQuery(state).get_listing(42)

    def test_find_listing(self, state):
        catalog = CatalogQuery(state)
        assert catalog.find_listing(1) is not None
        assert catalog.find_listing(42) is None

    def test_stats(self, state):
        stats = CatalogQuery(state).stats()
        assert stats.created == 5
        assert stats.sold == 3
        assert stats.unsold == 2
        assert stats.escrowed_fees == 2

    def test_queries_do_not_mutate(self, state):
        before = state.snapshot()
        catalog = CatalogQuery(state)
        catalog.list_unsold()
        catalog.list_owned_by("bob")
        catalog.stats()
        assert state.snapshot() == before


class TestListingView:
    def test_view_is_restartable(self, state):
        view = CatalogQuery(state).unsold()
        assert list(view) == list(view)
        assert len(view) == 2

    def test_view_is_a_snapshot(self, state):
        view = CatalogQuery(state).unsold()
        state.put(_listing(6))
        state.next_listing_id = 7
        assert [l.listing_id for l in view] == [1, 4]
        assert [l.listing_id for l in CatalogQuery(state).unsold()] == [1, 4, 6]

    def test_filter_composes(self, state):
        view = CatalogQuery(state).view().filter(lambda l: l.seller == "carol")
        narrowed = view.filter(lambda l: l.owner is None)
        assert [l.listing_id for l in narrowed] == [4]
        assert len(view) == 2

    def test_empty_view_is_falsy(self):
        assert not ListingView(())
        assert list(ListingView(())) == []
