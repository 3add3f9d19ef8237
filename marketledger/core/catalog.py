"""Catalog Query — read-only views over the listing set.

Views never mutate and never take the mutation guard.  Each view captures
a snapshot of the listings when it is created; iterating it is lazy and
can be restarted any number of times with identical results.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator

from marketledger.core.errors import ListingNotFound
from marketledger.core.state import LedgerState
from marketledger.models.listing import LedgerStats, Listing

ListingPredicate = Callable[[Listing], bool]


class ListingView:
    """Lazy, restartable filtered sequence of listings in ascending id order."""

    def __init__(
        self, listings: tuple[Listing, ...], predicate: ListingPredicate | None = None
    ) -> None:
        self._listings = listings
        self._predicate = predicate

    def __iter__(self) -> Iterator[Listing]:
        if self._predicate is None:
            return iter(self._listings)
        return (item for item in self._listings if self._predicate(item))

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __bool__(self) -> bool:
        return any(True for _ in self)

    def filter(self, predicate: ListingPredicate) -> ListingView:
        """Return a narrower view over the same snapshot."""
        if self._predicate is None:
            return ListingView(self._listings, predicate)
        outer = self._predicate
        return ListingView(self._listings, lambda item: outer(item) and predicate(item))


class CatalogQuery:
    """Filtered views over a ``LedgerState``.

    Examples
    --------
    >>> state = LedgerState(listing_fee=1, operator="operator")
    >>> CatalogQuery(state).list_unsold()
    []
    """

    def __init__(self, state: LedgerState) -> None:
        self._state = state

    def view(self) -> ListingView:
        """Return an unfiltered view of every listing ever created."""
        return ListingView(self._state.ordered_listings())

    def unsold(self) -> ListingView:
        return self.view().filter(lambda item: item.owner is None)

    def owned_by(self, party: str) -> ListingView:
        return self.view().filter(lambda item: item.owner == party)

    def created_by(self, seller: str) -> ListingView:
        return self.view().filter(lambda item: item.seller == seller)

    # ------------------------------------------------------------------
    # List-returning queries
    # ------------------------------------------------------------------

    def list_unsold(self) -> list[Listing]:
        """Return every listing without an owner, ascending by id."""
        return list(self.unsold())

    def list_owned_by(self, party: str) -> list[Listing]:
        """Return every listing whose owner is *party*, ascending by id."""
        return list(self.owned_by(party))

    def list_created_by(self, seller: str) -> list[Listing]:
        """Return every listing created by *seller*, sold or not."""
        return list(self.created_by(seller))

    def get_listing(self, listing_id: int) -> Listing:
        """Return the listing with *listing_id*.

        Raises
        ------
        ListingNotFound
            If *listing_id* was never created.
        """
        listing = self._state.get(listing_id)
        if listing is None:
            raise ListingNotFound(f"Listing {listing_id!r} was never created.")
        return listing

    def find_listing(self, listing_id: int) -> Listing | None:
        """Return the listing with *listing_id*, or ``None``."""
        return self._state.get(listing_id)

    def stats(self) -> LedgerStats:
        state = self._state
        unsold = self.list_unsold()
        return LedgerStats(
            created=state.created_count,
            sold=state.sold_count,
            unsold=len(unsold),
            listing_fee=state.listing_fee,
            escrowed_fees=sum(item.fee for item in unsold),
        )
