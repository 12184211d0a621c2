"""Scrutiny report: the exported view of a claim for reviewers and audit."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import Field

from claimlens.domains.claims.models import Claim, ClaimStatus, LogicalDocument
from claimlens.validation.models import ClaimSubtype, ClaimValidationReport, ReportModel
from claimlens.validation.summary import DocumentCounts, document_counts


class ExportedDocument(ReportModel):
    id: str
    pages: int
    page_numbers: list[int] = Field(default_factory=list)
    extracted_data: Optional[dict[str, Any]] = None


class ExportedDocuments(ReportModel):
    prescriptions: list[ExportedDocument] = Field(default_factory=list)
    bills: list[ExportedDocument] = Field(default_factory=list)


class ReviewBlock(ReportModel):
    status: ClaimStatus
    reviewer_note: str = ""
    reviewed_at: Optional[str] = None
    reviewer_id: Optional[str] = None


class ScrutinyReport(ReportModel):
    claim_id: str
    patient_name: str = ""
    insurer: str = ""
    submitted_at: str
    status: ClaimStatus
    claim_subtype: Optional[ClaimSubtype] = None
    summary: DocumentCounts
    business_checks: Optional[ClaimValidationReport] = None
    documents: ExportedDocuments
    review: ReviewBlock
    generated_at: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


def _export_document(doc: LogicalDocument) -> ExportedDocument:
    fields = doc.extracted_fields
    return ExportedDocument(
        id=doc.document_id,
        pages=len(doc.pages),
        page_numbers=doc.page_numbers,
        extracted_data=fields.model_dump(mode="json") if fields is not None else None,
    )


def build_scrutiny_report(claim: Claim) -> ScrutinyReport:
    report = claim.validation
    return ScrutinyReport(
        claim_id=claim.claim_id,
        patient_name=claim.patient_name,
        insurer=claim.insurer,
        submitted_at=claim.submitted_at,
        status=claim.status,
        claim_subtype=report.claim_subtype if report else None,
        summary=document_counts(claim),
        business_checks=report,
        documents=ExportedDocuments(
            prescriptions=[_export_document(d) for d in claim.prescriptions],
            bills=[_export_document(d) for d in claim.bills],
        ),
        review=ReviewBlock(
            status=claim.status,
            reviewer_note=claim.reviewer_note,
            reviewed_at=claim.reviewed_at,
            reviewer_id=claim.reviewer_id,
        ),
    )
