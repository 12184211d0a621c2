"""claimlens: page classification, field extraction and rule checks for insurance claims.

Typical use::

    from claimlens import AppSettings, Page, create_claim_service

    service = create_claim_service(AppSettings())
    claim = service.create_claim("Jane Doe", "Acme Health", pages)
    claim = await service.process(claim.claim_id)
    print(claim.validation.to_dict())
"""

from __future__ import annotations

from claimlens.core.config import AppSettings
from claimlens.domains.claims.classifier import PageClassifier
from claimlens.domains.claims.extractor import FieldExtractor
from claimlens.domains.claims.models import (
    Claim,
    ClaimStatus,
    DocumentType,
    LogicalDocument,
    Page,
)
from claimlens.domains.claims.validation.engine import ClaimRulesEngine
from claimlens.pipeline import ClaimPipeline
from claimlens.services.claim_service import ClaimService, create_claim_service
from claimlens.validation.models import ClaimValidationReport

__version__ = "0.1.0"

__all__ = [
    "AppSettings",
    "Claim",
    "ClaimPipeline",
    "ClaimRulesEngine",
    "ClaimService",
    "ClaimStatus",
    "ClaimValidationReport",
    "DocumentType",
    "FieldExtractor",
    "LogicalDocument",
    "Page",
    "PageClassifier",
    "create_claim_service",
]
