"""Reviewer summary: key issues and recommendations derived from a report."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from pydantic import Field

from claimlens.validation.models import (
    ClaimSubtype,
    ClaimValidationReport,
    ReportModel,
    ValidationIssue,
)

if TYPE_CHECKING:
    from claimlens.domains.claims.models import Claim

READY_FOR_REVIEW = "Claim appears ready for review"


class DocumentCounts(ReportModel):
    prescriptions: int = 0
    bills: int = 0
    reports: int = 0
    total_pages: int = 0


class ClaimTotals(ReportModel):
    eligible_amount: float = 0.0
    total_amount: float = 0.0


class ClaimSummary(ReportModel):
    """What a reviewer sees before opening the individual documents."""

    claim_id: str
    claim_subtype: Optional[ClaimSubtype] = None
    flags: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[ValidationIssue] = Field(default_factory=list)
    errors: list[ValidationIssue] = Field(default_factory=list)
    totals: ClaimTotals = Field(default_factory=ClaimTotals)
    document_summary: DocumentCounts = Field(default_factory=DocumentCounts)
    key_issues: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


def key_issues(report: ClaimValidationReport) -> list[str]:
    issues: list[str] = []
    if report.errors:
        issues.append(f"Critical: {len(report.errors)} errors detected")
    if report.warnings:
        issues.append(f"Warning: {len(report.warnings)} warnings found")
    if report.flags:
        issues.append(f"Flag: {len(report.flags)} flags raised")
    if report.amount_validation is not None and not report.amount_validation.is_valid:
        issues.append("Amount mismatch detected")
    if report.policy_exclusions:
        issues.append(f"{len(report.policy_exclusions)} excluded items found")
    return issues


def recommendations(report: ClaimValidationReport) -> list[str]:
    advice: list[str] = []
    if report.claim_subtype == ClaimSubtype.SPECIALIST:
        advice.append("Specialist claim - verify referral consistency")
        advice.append("Check treatment fulfillment against prescriptions")
    if report.errors:
        advice.append("Review and resolve all errors before approval")
    if report.policy_exclusions:
        advice.append("Exclude non-eligible amounts from calculation")
    if report.amount_validation is not None and not report.amount_validation.is_valid:
        advice.append("Verify bill totals match line item sums")
    return advice or [READY_FOR_REVIEW]


def document_counts(claim: Claim) -> DocumentCounts:
    return DocumentCounts(
        prescriptions=len(claim.prescriptions),
        bills=len(claim.bills),
        reports=len(claim.reports),
        total_pages=len(claim.pages),
    )


def build_claim_summary(claim: Claim) -> ClaimSummary:
    """Summarize a claim's latest report.

    An unevaluated claim gets document counts only.
    """
    report = claim.validation
    if report is None:
        return ClaimSummary(claim_id=claim.claim_id, document_summary=document_counts(claim))
    return ClaimSummary(
        claim_id=claim.claim_id,
        claim_subtype=report.claim_subtype,
        flags=list(report.flags),
        warnings=list(report.warnings),
        errors=list(report.errors),
        totals=ClaimTotals(
            eligible_amount=report.eligible_amount,
            total_amount=report.total_amount,
        ),
        document_summary=document_counts(claim),
        key_issues=key_issues(report),
        recommendations=recommendations(report),
    )
