"""End-to-end claim processing over the four stages."""

from __future__ import annotations

import logging
from typing import Optional

from claimlens.domains.claims.classifier import PageClassifier
from claimlens.domains.claims.extractor import FieldExtractor
from claimlens.domains.claims.models import Claim
from claimlens.domains.claims.validation.engine import ClaimRulesEngine
from claimlens.interfaces.text_extraction import ITextExtractor
from claimlens.pipeline.stages import (
    ClassifiedPages,
    apply_tnc_eligibility,
    classify_pages,
    evaluate_documents,
    extract_documents,
    group_documents,
)

log = logging.getLogger(__name__)


class ClaimPipeline:
    """Turns a claim's pages into grouped, extracted and evaluated documents.

    The pipeline holds no claim state.  ``run`` and ``rebuild`` return a new
    Claim; the caller decides whether to persist it.
    """

    def __init__(
        self,
        engine: ClaimRulesEngine,
        *,
        text_extractor: Optional[ITextExtractor] = None,
        classifier: Optional[PageClassifier] = None,
        field_extractor: Optional[FieldExtractor] = None,
        extraction_timeout: float = 30.0,
        max_concurrent_pages: int = 4,
    ) -> None:
        self._engine = engine
        self._text_extractor = text_extractor
        self._classifier = classifier or PageClassifier()
        self._field_extractor = field_extractor or FieldExtractor()
        self._extraction_timeout = extraction_timeout
        self._max_concurrent_pages = max_concurrent_pages

    @property
    def engine(self) -> ClaimRulesEngine:
        return self._engine

    async def run(self, claim: Claim) -> Claim:
        """Classify every page, then regroup, re-extract and re-evaluate."""
        classified = await classify_pages(
            claim.pages,
            self._text_extractor,
            classifier=self._classifier,
            timeout=self._extraction_timeout,
            max_concurrent=self._max_concurrent_pages,
        )
        return self._finish(claim, classified)

    def rebuild(self, claim: Claim) -> Claim:
        """Regroup, re-extract and re-evaluate using the pages' current types."""
        return self._finish(claim, ClassifiedPages(pages=tuple(claim.pages)))

    def _finish(self, claim: Claim, classified: ClassifiedPages) -> Claim:
        grouped = group_documents(classified)
        extracted = extract_documents(grouped, self._field_extractor)
        report = evaluate_documents(extracted, self._engine, claim_id=claim.claim_id)
        extracted = apply_tnc_eligibility(extracted, report)

        result = claim.model_copy(
            deep=True,
            update={
                "pages": sorted(classified.pages, key=lambda p: p.page_number),
                "prescriptions": list(extracted.prescriptions),
                "bills": list(extracted.bills),
                "reports": list(extracted.reports),
                "validation": report,
            },
        )
        result.touch()
        log.info(
            "Processed claim %s: %d page(s), %d unassigned",
            claim.claim_id,
            len(classified.pages),
            len(grouped.unassigned),
        )
        return result
