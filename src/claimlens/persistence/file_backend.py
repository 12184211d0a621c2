"""File-based claim repository: one JSON document per claim."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from pydantic import ValidationError

from claimlens.domains.claims.models import Claim
from claimlens.exceptions import ClaimNotFoundError, PersistenceError

log = logging.getLogger(__name__)


class FileClaimRepository:
    """Stores each claim as ``<base>/<claim_id>.json``, replaced atomically on write."""

    def __init__(self, base_path: Path) -> None:
        self._base = Path(base_path)
        self._base.mkdir(parents=True, exist_ok=True)

    @property
    def base_path(self) -> Path:
        return self._base

    def _claim_path(self, claim_id: str) -> Path:
        safe_id = claim_id.replace("/", "_").replace("\\", "_")
        return self._base / f"{safe_id}.json"

    def get(self, claim_id: str) -> Claim:
        path = self._claim_path(claim_id)
        if not path.is_file():
            raise ClaimNotFoundError(claim_id)
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(f"Failed to load claim {claim_id}: {exc}") from exc
        try:
            return Claim.model_validate_json(raw)
        except ValidationError as exc:
            raise PersistenceError(f"Stored claim {claim_id} is corrupt: {exc}") from exc

    def put(self, claim: Claim) -> None:
        path = self._claim_path(claim.claim_id)
        tmp = path.with_suffix(".json.tmp")
        try:
            tmp.write_text(claim.model_dump_json(indent=2), encoding="utf-8")
            os.replace(tmp, path)
        except OSError as exc:
            raise PersistenceError(f"Failed to save claim {claim.claim_id}: {exc}") from exc
        log.debug("Saved claim %s to %s", claim.claim_id, path)

    def delete(self, claim_id: str) -> None:
        path = self._claim_path(claim_id)
        if not path.is_file():
            raise ClaimNotFoundError(claim_id)
        try:
            path.unlink()
        except OSError as exc:
            raise PersistenceError(f"Failed to delete claim {claim_id}: {exc}") from exc
        log.info("Deleted claim %s", claim_id)

    def exists(self, claim_id: str) -> bool:
        return self._claim_path(claim_id).is_file()

    def list_ids(self) -> list[str]:
        return sorted(p.stem for p in self._base.glob("*.json"))
