"""The four claim-processing stages and their intermediate artifacts.

classify -> group -> extract -> evaluate.  Each stage takes the previous
stage's artifact and returns a new one; nothing is written back onto a
Claim until :class:`claimlens.pipeline.ClaimPipeline` assembles the result.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from claimlens.domains.claims.classifier import PageClassifier
from claimlens.domains.claims.extractor import FieldExtractor
from claimlens.domains.claims.grouping import GROUPED_TYPES, group_pages, partition_by_type
from claimlens.domains.claims.models import BillFields, DocumentType, LogicalDocument, Page
from claimlens.domains.claims.validation.engine import ClaimRulesEngine
from claimlens.exceptions import TextExtractionError
from claimlens.interfaces.text_extraction import ITextExtractor
from claimlens.validation.models import ClaimValidationReport

log = logging.getLogger(__name__)


# ── Artifacts ────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ClassifiedPages:
    pages: tuple[Page, ...] = ()


@dataclass(frozen=True)
class GroupedDocuments:
    prescriptions: tuple[LogicalDocument, ...] = ()
    bills: tuple[LogicalDocument, ...] = ()
    reports: tuple[LogicalDocument, ...] = ()
    unassigned: tuple[Page, ...] = ()


@dataclass(frozen=True)
class ExtractedDocuments:
    prescriptions: tuple[LogicalDocument, ...] = ()
    bills: tuple[LogicalDocument, ...] = ()
    reports: tuple[LogicalDocument, ...] = ()


# ── Stage 1: classify ───────────────────────────────────────────────


async def read_page_texts(
    pages: Iterable[Page],
    text_extractor: Optional[ITextExtractor],
    *,
    timeout: float = 30.0,
    max_concurrent: int = 4,
) -> list[Optional[str]]:
    """Fetch each page's text, in input order.

    Pages that already carry ``raw_text`` are not re-read.  A failed,
    timed-out or impossible extraction yields ``None`` for that page, so
    the next run asks the extractor again.
    """
    sem = asyncio.Semaphore(max_concurrent)

    async def _read(page: Page) -> Optional[str]:
        if page.raw_text is not None:
            return page.raw_text
        if text_extractor is None or not page.source_path:
            return None
        async with sem:
            try:
                text = await asyncio.wait_for(
                    text_extractor.extract(page.source_path, page.media_type),
                    timeout=timeout,
                )
            except TextExtractionError as exc:
                log.warning("Text extraction failed for page %d: %s", page.page_number, exc)
                return None
            except asyncio.TimeoutError:
                log.warning(
                    "Text extraction timed out after %.1fs for page %d", timeout, page.page_number
                )
                return None
            except Exception:
                log.exception("Unexpected text extraction failure for page %d", page.page_number)
                return None
        return text or ""

    return list(await asyncio.gather(*(_read(p) for p in pages)))


async def classify_pages(
    pages: Iterable[Page],
    text_extractor: Optional[ITextExtractor] = None,
    *,
    classifier: Optional[PageClassifier] = None,
    timeout: float = 30.0,
    max_concurrent: int = 4,
) -> ClassifiedPages:
    """Read and classify every page.  Input pages are not modified."""
    pages = list(pages)
    classifier = classifier or PageClassifier()
    texts = await read_page_texts(
        pages, text_extractor, timeout=timeout, max_concurrent=max_concurrent
    )

    classified = []
    for page, text in zip(pages, texts):
        # unread pages keep raw_text=None and classify as empty text
        result = classifier.classify(text or "")
        classified.append(
            page.model_copy(
                update={
                    "raw_text": text,
                    "document_type": result.document_type,
                    "confidence": result.confidence,
                    "classification_reason": result.reason,
                }
            )
        )
    log.info("Classified %d page(s)", len(classified))
    return ClassifiedPages(pages=tuple(classified))


# ── Stage 2: group ──────────────────────────────────────────────────


def group_documents(classified: ClassifiedPages) -> GroupedDocuments:
    """Regroup all pages from scratch; unknown pages stay unassigned."""
    buckets = partition_by_type(classified.pages)
    grouped = {t: tuple(group_pages(buckets[t], t)) for t in GROUPED_TYPES}
    return GroupedDocuments(
        prescriptions=grouped[DocumentType.PRESCRIPTION],
        bills=grouped[DocumentType.BILL],
        reports=grouped[DocumentType.REPORT],
        unassigned=tuple(sorted(buckets[DocumentType.UNKNOWN], key=lambda p: p.page_number)),
    )


# ── Stage 3: extract ────────────────────────────────────────────────


def extract_documents(
    grouped: GroupedDocuments,
    field_extractor: Optional[FieldExtractor] = None,
) -> ExtractedDocuments:
    """Attach extracted fields to each document (reports get none)."""
    field_extractor = field_extractor or FieldExtractor()

    def _extract(docs: tuple[LogicalDocument, ...]) -> tuple[LogicalDocument, ...]:
        return tuple(
            doc.model_copy(
                update={"extracted_fields": field_extractor.extract(doc.document_type, doc.text)}
            )
            for doc in docs
        )

    return ExtractedDocuments(
        prescriptions=_extract(grouped.prescriptions),
        bills=_extract(grouped.bills),
        reports=_extract(grouped.reports),
    )


# ── Stage 4: evaluate ───────────────────────────────────────────────


def evaluate_documents(
    extracted: ExtractedDocuments,
    engine: ClaimRulesEngine,
    *,
    claim_id: str = "",
) -> ClaimValidationReport:
    return engine.evaluate_documents(
        list(extracted.prescriptions),
        list(extracted.bills),
        claim_id=claim_id,
    )


def apply_tnc_eligibility(
    extracted: ExtractedDocuments, report: ClaimValidationReport
) -> ExtractedDocuments:
    """Mark bills holding an excluded line item as not T&C-eligible."""
    excluded_bills = {e.bill_id for e in report.policy_exclusions}
    bills = []
    for doc in extracted.bills:
        fields = doc.extracted_fields
        if isinstance(fields, BillFields):
            eligible = doc.document_id not in excluded_bills
            if fields.tnc_eligible != eligible:
                doc = doc.model_copy(
                    update={"extracted_fields": fields.model_copy(update={"tnc_eligible": eligible})}
                )
        bills.append(doc)
    return ExtractedDocuments(
        prescriptions=extracted.prescriptions,
        bills=tuple(bills),
        reports=extracted.reports,
    )
