"""Claim repository protocol: the registry contract the claim service writes through."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from claimlens.domains.claims.models import Claim


@runtime_checkable
class IClaimRepository(Protocol):
    """Stores whole ``Claim`` aggregates by claim id.

    ``get`` and ``delete`` raise ``ClaimNotFoundError`` for an unknown id.
    Storage failures surface as ``PersistenceError``.
    """

    def get(self, claim_id: str) -> Claim:
        ...

    def put(self, claim: Claim) -> None:
        """Insert or replace the claim stored under ``claim.claim_id``."""
        ...

    def delete(self, claim_id: str) -> None:
        ...

    def exists(self, claim_id: str) -> bool:
        ...

    def list_ids(self) -> list[str]:
        """Stored claim ids, sorted."""
        ...
