"""Output formatter protocol - the contract all claim exporters implement."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from claimlens.domains.claims.models import Claim


@runtime_checkable
class IOutputFormatter(Protocol):
    """Protocol for claim export formatters."""

    def format(self, claim: Claim, **kwargs: Any) -> bytes:
        """Render the claim's scrutiny report into output bytes."""
        ...

    def format_to_file(self, claim: Claim, path: Path, **kwargs: Any) -> Path:
        """Render and write to a file. Returns the output path."""
        ...

    @property
    def content_type(self) -> str:
        ...


__all__ = ["IOutputFormatter"]
