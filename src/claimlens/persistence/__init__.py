"""Claim registry: repository protocol with memory and file implementations."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from claimlens.persistence.file_backend import FileClaimRepository
from claimlens.persistence.memory_backend import MemoryClaimRepository
from claimlens.persistence.protocols import IClaimRepository

if TYPE_CHECKING:
    from claimlens.core.config import AppSettings


def create_claim_repository(settings: AppSettings) -> IClaimRepository:
    """Build the repository selected by ``settings.persistence.backend``."""
    backend_type = settings.persistence.backend
    if backend_type == "file":
        return FileClaimRepository(Path(settings.persistence.store_path))
    if backend_type == "memory":
        return MemoryClaimRepository()
    raise ValueError(f"Unknown persistence backend: {backend_type!r}")


__all__ = [
    "IClaimRepository",
    "FileClaimRepository",
    "MemoryClaimRepository",
    "create_claim_repository",
]
