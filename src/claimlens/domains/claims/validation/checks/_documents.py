"""Helpers for selecting documents that carry extracted fields."""

from __future__ import annotations

from typing import Iterable, Iterator

from claimlens.domains.claims.models import BillFields, LogicalDocument, PrescriptionFields


def prescriptions_with_fields(
    documents: Iterable[LogicalDocument],
) -> Iterator[tuple[LogicalDocument, PrescriptionFields]]:
    for doc in documents:
        if isinstance(doc.extracted_fields, PrescriptionFields):
            yield doc, doc.extracted_fields


def bills_with_fields(
    documents: Iterable[LogicalDocument],
) -> Iterator[tuple[LogicalDocument, BillFields]]:
    for doc in documents:
        if isinstance(doc.extracted_fields, BillFields):
            yield doc, doc.extracted_fields
