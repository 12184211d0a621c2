"""Insurance claim domain module.

Canonical home for claim-specific logic:
- Models: ``Claim``, ``Page``, ``LogicalDocument``, ``PrescriptionFields``, ``BillFields``
- Classification: ``PageClassifier``
- Grouping: ``group_pages``, ``group_claim_pages``
- Extraction: ``FieldExtractor``
- Keyword tables: ``DOCUMENT_VOCABULARIES``, ``SPECIALIST_TERMS``
"""

from __future__ import annotations

from claimlens.domains.claims.classifier import PageClassification, PageClassifier
from claimlens.domains.claims.extractor import FieldExtractor
from claimlens.domains.claims.grouping import group_claim_pages, group_pages
from claimlens.domains.claims.models import (
    BillFields,
    Claim,
    ClaimStatus,
    DocumentType,
    LineItem,
    LogicalDocument,
    OrderKind,
    Page,
    PrescriptionFields,
    PrescriptionOrder,
    ReviewDecision,
)
from claimlens.domains.claims.vocabulary import DOCUMENT_VOCABULARIES, SPECIALIST_TERMS

__all__ = [
    # Models
    "BillFields",
    "Claim",
    "ClaimStatus",
    "DocumentType",
    "LineItem",
    "LogicalDocument",
    "OrderKind",
    "Page",
    "PrescriptionFields",
    "PrescriptionOrder",
    "ReviewDecision",
    # Stages
    "FieldExtractor",
    "PageClassification",
    "PageClassifier",
    "group_claim_pages",
    "group_pages",
    # Tables
    "DOCUMENT_VOCABULARIES",
    "SPECIALIST_TERMS",
]
