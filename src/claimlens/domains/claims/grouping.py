"""Grouping of classified pages into logical documents.

Pages of one type are sorted by page number and split wherever the next
page number is not exactly one more than the previous.  A type whose
pages interleave with another document of the same type in the scan
order is merged or split purely on that contiguity; there is no other
document-boundary signal.
"""

from __future__ import annotations

import logging
from typing import Iterable

from claimlens.domains.claims.models import DocumentType, LogicalDocument, Page

log = logging.getLogger(__name__)

GROUPED_TYPES: tuple[DocumentType, ...] = (
    DocumentType.PRESCRIPTION,
    DocumentType.BILL,
    DocumentType.REPORT,
)


def group_pages(pages: Iterable[Page], document_type: DocumentType) -> list[LogicalDocument]:
    """Partition one type bucket into runs of consecutive page numbers."""
    ordered = sorted(pages, key=lambda p: p.page_number)
    if not ordered:
        return []

    runs: list[list[Page]] = [[ordered[0]]]
    for previous, current in zip(ordered, ordered[1:]):
        if current.page_number == previous.page_number + 1:
            runs[-1].append(current)
        else:
            runs.append([current])

    return [LogicalDocument(document_type=document_type, pages=run) for run in runs]


def partition_by_type(pages: Iterable[Page]) -> dict[DocumentType, list[Page]]:
    """Bucket pages by assigned type; unclassified pages land in ``unknown``."""
    buckets: dict[DocumentType, list[Page]] = {t: [] for t in (*GROUPED_TYPES, DocumentType.UNKNOWN)}
    for page in pages:
        buckets[page.document_type or DocumentType.UNKNOWN].append(page)
    return buckets


def group_claim_pages(pages: Iterable[Page]) -> dict[DocumentType, list[LogicalDocument]]:
    """Group every grouped type independently.  Unknown pages are not grouped."""
    buckets = partition_by_type(pages)
    grouped = {t: group_pages(buckets[t], t) for t in GROUPED_TYPES}
    log.info(
        "Grouped pages into %d prescription(s), %d bill(s), %d report(s); %d unknown page(s)",
        len(grouped[DocumentType.PRESCRIPTION]),
        len(grouped[DocumentType.BILL]),
        len(grouped[DocumentType.REPORT]),
        len(buckets[DocumentType.UNKNOWN]),
    )
    return grouped
