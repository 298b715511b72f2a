"""
Florify — Error kinds surfaced by the marketplace core.

Each kind also derives from the closest builtin so callers that only know
about LookupError / ValueError / PermissionError / RuntimeError still
catch them.
"""

from __future__ import annotations


class MarketplaceError(Exception):
    """Base class for all marketplace core errors."""


class NotFoundError(MarketplaceError, LookupError):
    """Requested canonical name, listing or vendor-owned product does not exist."""


class InvalidInputError(MarketplaceError, ValueError):
    """Caller supplied a malformed value (blank name, bad price, bad quantity)."""


class OwnershipError(MarketplaceError, PermissionError):
    """A vendor tried to act on a listing owned by another vendor."""


class StoreUnavailableError(MarketplaceError, RuntimeError):
    """Transient failure of the backing store. Not retried here."""


class PartialAcknowledgementError(StoreUnavailableError):
    """
    Acknowledge-all stopped part way through.

    Records written before the failure stay written; `acknowledged` says
    how many, `canonical_name` names the alert whose write failed.
    """

    def __init__(self, acknowledged: int, canonical_name: str, message: str):
        super().__init__(message)
        self.acknowledged = acknowledged
        self.canonical_name = canonical_name
