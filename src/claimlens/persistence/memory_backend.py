"""In-memory claim repository for tests and one-shot CLI runs."""

from __future__ import annotations

import logging

from claimlens.domains.claims.models import Claim
from claimlens.exceptions import ClaimNotFoundError

log = logging.getLogger(__name__)


class MemoryClaimRepository:
    """Keeps deep copies of claims, so callers never share state with the registry."""

    def __init__(self) -> None:
        self._claims: dict[str, Claim] = {}

    def get(self, claim_id: str) -> Claim:
        claim = self._claims.get(claim_id)
        if claim is None:
            raise ClaimNotFoundError(claim_id)
        return claim.model_copy(deep=True)

    def put(self, claim: Claim) -> None:
        self._claims[claim.claim_id] = claim.model_copy(deep=True)
        log.debug("Stored claim %s in memory", claim.claim_id)

    def delete(self, claim_id: str) -> None:
        if self._claims.pop(claim_id, None) is None:
            raise ClaimNotFoundError(claim_id)
        log.info("Deleted claim %s", claim_id)

    def exists(self, claim_id: str) -> bool:
        return claim_id in self._claims

    def list_ids(self) -> list[str]:
        return sorted(self._claims)
