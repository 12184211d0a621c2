"""JSON scrutiny-report exporter."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from claimlens.domains.claims.models import Claim
from claimlens.formatters.scrutiny_report import build_scrutiny_report


class JSONFormatter:
    """Renders a claim's scrutiny report as indented camelCase JSON bytes."""

    def __init__(self, *, indent: int = 2) -> None:
        self._indent = indent

    def format(self, claim: Claim, **kwargs: Any) -> bytes:
        report = build_scrutiny_report(claim)
        return report.model_dump_json(indent=self._indent, by_alias=True).encode()

    def format_to_file(self, claim: Claim, path: Path, **kwargs: Any) -> Path:
        """Write JSON to *path* and return it."""
        path.write_bytes(self.format(claim, **kwargs))
        return path

    @property
    def content_type(self) -> str:
        return "application/json"

    @staticmethod
    def filename_for(claim: Claim) -> str:
        return f"claim-{claim.claim_id}-report.json"
