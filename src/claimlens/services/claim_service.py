"""Claim service: intake, page edits, processing, review and export."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Iterable, Optional, Union

from claimlens.domains.claims.models import (
    Claim,
    ClaimStatus,
    Page,
    ReviewDecision,
)
from claimlens.exceptions import ClaimStateError
from claimlens.formatters.json_formatter import JSONFormatter
from claimlens.formatters.protocols import IOutputFormatter
from claimlens.persistence.protocols import IClaimRepository
from claimlens.pipeline.claim_pipeline import ClaimPipeline
from claimlens.validation.summary import ClaimSummary, build_claim_summary

if TYPE_CHECKING:
    from claimlens.core.config import AppSettings
    from claimlens.interfaces.text_extraction import ITextExtractor

log = logging.getLogger(__name__)

DEFAULT_REVIEWER_ID = "reviewer-001"


class ClaimService:
    """Single writer for claims: every mutation loads, changes and stores one claim.

    Page edits on a claim that has already been processed trigger a full
    regroup, re-extraction and re-evaluation, never an incremental patch.
    """

    def __init__(
        self,
        repository: IClaimRepository,
        pipeline: ClaimPipeline,
        *,
        formatter: Optional[IOutputFormatter] = None,
    ) -> None:
        self._repository = repository
        self._pipeline = pipeline
        self._formatter = formatter or JSONFormatter()

    # ── Intake ──────────────────────────────────────────────────────

    def create_claim(
        self,
        patient_name: str,
        insurer: str,
        pages: Iterable[Page] = (),
    ) -> Claim:
        """Register a new pending claim.  Pages are numbered 1..n in the given order."""
        if not patient_name.strip() or not insurer.strip():
            raise ValueError("Patient name and insurer are required")
        claim = Claim(patient_name=patient_name.strip(), insurer=insurer.strip())
        claim.pages = [
            page.model_copy(update={"page_number": number})
            for number, page in enumerate(pages, start=1)
        ]
        self._repository.put(claim)
        log.info("Created claim %s with %d page(s)", claim.claim_id, len(claim.pages))
        return claim

    def get_claim(self, claim_id: str) -> Claim:
        return self._repository.get(claim_id)

    def delete_claim(self, claim_id: str) -> None:
        self._repository.delete(claim_id)

    def list_claims(self) -> list[Claim]:
        return [self._repository.get(claim_id) for claim_id in self._repository.list_ids()]

    def pending_claims(self) -> list[Claim]:
        """Pending claims, most recently submitted first."""
        pending = [c for c in self.list_claims() if c.status == ClaimStatus.PENDING]
        return sorted(pending, key=lambda c: c.submitted_at, reverse=True)

    # ── Page edits ──────────────────────────────────────────────────

    async def add_page(
        self,
        claim_id: str,
        *,
        raw_text: Optional[str] = None,
        source_path: str = "",
        media_type: str = "text/plain",
    ) -> Claim:
        """Append a page with the next sequence number."""
        claim = self._load_pending(claim_id, "modify pages of")
        claim.pages.append(
            Page(
                page_number=len(claim.pages) + 1,
                raw_text=raw_text,
                source_path=source_path,
                media_type=media_type,
            )
        )
        claim.touch()
        if claim.validation is not None:
            claim = await self._pipeline.run(claim)
        self._repository.put(claim)
        return claim

    def remove_page(self, claim_id: str, page_id: str) -> Claim:
        """Delete a page and renumber the remaining pages 1..n."""
        claim = self._load_pending(claim_id, "modify pages of")
        remaining = [p for p in claim.pages if p.page_id != page_id]
        if len(remaining) == len(claim.pages):
            raise KeyError(f"Page not found: {page_id}")
        ordered = sorted(remaining, key=lambda p: p.page_number)
        claim.pages = _renumber(ordered)
        claim.touch()
        claim = self._refresh(claim)
        self._repository.put(claim)
        log.info("Removed page %s from claim %s", page_id, claim_id)
        return claim

    def reorder_pages(self, claim_id: str, page_ids: list[str]) -> Claim:
        """Renumber pages to follow *page_ids*, which must list every page exactly once."""
        claim = self._load_pending(claim_id, "modify pages of")
        by_id = {p.page_id: p for p in claim.pages}
        if len(page_ids) != len(by_id) or set(page_ids) != set(by_id):
            raise ValueError("Page order must list every page of the claim exactly once")
        claim.pages = _renumber(by_id[page_id] for page_id in page_ids)
        claim.touch()
        claim = self._refresh(claim)
        self._repository.put(claim)
        return claim

    # ── Processing ──────────────────────────────────────────────────

    async def process(self, claim_id: str) -> Claim:
        """Classify, group, extract and evaluate a pending claim."""
        claim = self._load_pending(claim_id, "process")
        processed = await self._pipeline.run(claim)
        self._repository.put(processed)
        return processed

    def summary(self, claim_id: str) -> ClaimSummary:
        return build_claim_summary(self._repository.get(claim_id))

    # ── Review & export ─────────────────────────────────────────────

    def review(
        self,
        claim_id: str,
        decision: Union[ReviewDecision, str],
        note: str = "",
        reviewer_id: Optional[str] = None,
    ) -> Claim:
        """Record a reviewer decision.  Only pending claims can be reviewed."""
        try:
            decision = ReviewDecision(decision)
        except ValueError:
            raise ValueError(
                f"Invalid decision {decision!r}. Must be approve, reject, or request_info"
            ) from None
        claim = self._repository.get(claim_id)
        if claim.status != ClaimStatus.PENDING:
            raise ClaimStateError(f"Claim {claim_id} has already been reviewed")

        claim.status = decision.status
        claim.reviewer_note = note
        claim.reviewer_id = reviewer_id or DEFAULT_REVIEWER_ID
        claim.reviewed_at = datetime.now(timezone.utc).isoformat()
        claim.touch()
        self._repository.put(claim)
        log.info("Claim %s reviewed: %s", claim_id, claim.status.value)
        return claim

    def export(self, claim_id: str) -> bytes:
        return self._formatter.format(self._repository.get(claim_id))

    # ── Internals ───────────────────────────────────────────────────

    def _load_pending(self, claim_id: str, action: str) -> Claim:
        claim = self._repository.get(claim_id)
        if claim.status != ClaimStatus.PENDING:
            raise ClaimStateError(
                f"Cannot {action} claim {claim_id} with status {claim.status.value}"
            )
        return claim

    def _refresh(self, claim: Claim) -> Claim:
        if claim.validation is None:
            return claim
        return self._pipeline.rebuild(claim)


def _renumber(pages: Iterable[Page]) -> list[Page]:
    return [p.model_copy(update={"page_number": n}) for n, p in enumerate(pages, start=1)]


def create_claim_service(
    settings: AppSettings,
    text_extractor: Optional[ITextExtractor] = None,
) -> ClaimService:
    """Wire repository, rules engine and pipeline from application settings."""
    from claimlens.domains.claims.validation import create_rules_engine
    from claimlens.persistence import create_claim_repository
    from claimlens.providers.plain_text import PlainTextExtractor

    pipeline = ClaimPipeline(
        create_rules_engine(settings),
        text_extractor=text_extractor or PlainTextExtractor(),
        extraction_timeout=settings.classification.extraction_timeout_seconds,
        max_concurrent_pages=settings.classification.max_concurrent_pages,
    )
    return ClaimService(create_claim_repository(settings), pipeline)
