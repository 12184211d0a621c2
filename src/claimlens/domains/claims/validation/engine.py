"""Claim rules engine: subtype gating plus always-run checks."""

from __future__ import annotations

import logging
from typing import Callable, Optional, TypeVar

from claimlens.domains.claims.models import Claim, LogicalDocument
from claimlens.domains.claims.validation.checks._documents import prescriptions_with_fields
from claimlens.domains.claims.validation.checks.common import (
    calculate_eligible_amount,
    calculate_total_amount,
    check_policy_exclusions,
    check_sign_seal,
    validate_amounts,
)
from claimlens.domains.claims.validation.checks.specialist import (
    check_treatment_fulfillment,
    check_visit_reason_consistency,
)
from claimlens.domains.claims.vocabulary import SPECIALIST_TERMS
from claimlens.validation.models import (
    AmountValidation,
    ClaimSubtype,
    ClaimValidationReport,
    IssueSeverity,
    IssueType,
    TreatmentFulfillment,
    ValidationIssue,
    VisitReasonConsistency,
)
from claimlens.validation.policy import DEFAULT_EXCLUSION_POLICY, ExclusionPolicy

log = logging.getLogger(__name__)

T = TypeVar("T")

MEDICAL_CLAIM_MESSAGE = "Standard medical claim - basic validation applied."


def determine_claim_subtype(
    prescriptions: list[LogicalDocument],
    specialist_terms: tuple[str, ...] = SPECIALIST_TERMS,
) -> ClaimSubtype:
    """Specialist if any prescription is flagged or names a specialist specialty."""
    for _, fields in prescriptions_with_fields(prescriptions):
        if fields.specialist_prescription:
            return ClaimSubtype.SPECIALIST
        specialty = (fields.doctor_specialty or "").lower()
        if any(term in specialty for term in specialist_terms):
            return ClaimSubtype.SPECIALIST
    return ClaimSubtype.MEDICAL


class ClaimRulesEngine:
    """Evaluates a claim's extracted documents against business rules.

    Evaluation is pure computation over extracted fields.  Each check runs
    independently; a failure in one is logged and replaced by its neutral
    result so the others still contribute to the report.
    """

    def __init__(
        self,
        policy: Optional[ExclusionPolicy] = None,
        *,
        amount_tolerance: float = 0.01,
        min_keyword_length: int = 3,
        specialist_terms: tuple[str, ...] = SPECIALIST_TERMS,
    ) -> None:
        self._policy = policy or DEFAULT_EXCLUSION_POLICY
        self._amount_tolerance = amount_tolerance
        self._min_keyword_length = min_keyword_length
        self._specialist_terms = specialist_terms

    @property
    def policy(self) -> ExclusionPolicy:
        return self._policy

    def evaluate(self, claim: Claim) -> ClaimValidationReport:
        """Evaluate a claim's prescriptions and bills."""
        return self.evaluate_documents(
            claim.prescriptions,
            claim.bills,
            claim_id=claim.claim_id,
        )

    def evaluate_documents(
        self,
        prescriptions: list[LogicalDocument],
        bills: list[LogicalDocument],
        *,
        claim_id: str = "",
    ) -> ClaimValidationReport:
        """Run every applicable check and assemble a fresh report."""
        subtype = self._guarded(
            "claim_subtype",
            lambda: determine_claim_subtype(prescriptions, self._specialist_terms),
            ClaimSubtype.MEDICAL,
        )
        report = ClaimValidationReport(
            claim_id=claim_id,
            claim_subtype=subtype,
            policy_source=self._policy.source,
        )

        if subtype == ClaimSubtype.SPECIALIST:
            self._run_specialist_checks(report, prescriptions, bills)
        else:
            # info severity, but reported in the warnings tier
            report.warnings.append(
                ValidationIssue(
                    type=IssueType.MEDICAL_CLAIM,
                    severity=IssueSeverity.INFO,
                    message=MEDICAL_CLAIM_MESSAGE,
                )
            )

        self._run_common_checks(report, prescriptions, bills)

        log.info(
            "Evaluated claim %s as %s: %d flag(s), %d warning(s), %d error(s)",
            claim_id or "<unsaved>",
            subtype.value,
            len(report.flags),
            len(report.warnings),
            len(report.errors),
        )
        return report

    # ── Check groups ────────────────────────────────────────────────

    def _run_specialist_checks(
        self,
        report: ClaimValidationReport,
        prescriptions: list[LogicalDocument],
        bills: list[LogicalDocument],
    ) -> None:
        consistency = self._guarded(
            "visit_reason_consistency",
            lambda: check_visit_reason_consistency(
                prescriptions, bills, min_keyword_length=self._min_keyword_length
            ),
            VisitReasonConsistency(),
        )
        report.visit_reason_consistency = consistency
        if not consistency.is_consistent:
            report.flags.append(
                ValidationIssue(
                    type=IssueType.VISIT_REASON_MISMATCH,
                    severity=IssueSeverity.WARNING,
                    message="Visit reason differs from referral reason.",
                    details=consistency.model_dump(mode="json", by_alias=True),
                )
            )

        fulfillment = self._guarded(
            "treatment_fulfillment",
            lambda: check_treatment_fulfillment(prescriptions, bills),
            TreatmentFulfillment(),
        )
        report.treatment_fulfillment = fulfillment
        if not fulfillment.is_fulfilled:
            report.warnings.append(
                ValidationIssue(
                    type=IssueType.TREATMENT_NOT_FULFILLED,
                    severity=IssueSeverity.WARNING,
                    message="Some prescribed treatments were not billed.",
                    details=list(fulfillment.missing_treatments),
                )
            )

    def _run_common_checks(
        self,
        report: ClaimValidationReport,
        prescriptions: list[LogicalDocument],
        bills: list[LogicalDocument],
    ) -> None:
        exclusions = self._guarded(
            "policy_exclusions",
            lambda: check_policy_exclusions(bills, self._policy),
            [],
        )
        report.policy_exclusions = exclusions
        if exclusions:
            report.errors.append(
                ValidationIssue(
                    type=IssueType.POLICY_EXCLUSION,
                    severity=IssueSeverity.ERROR,
                    message=f"{len(exclusions)} excluded items detected.",
                    details=[e.model_dump(mode="json", by_alias=True) for e in exclusions],
                )
            )

        amounts = self._guarded(
            "amount_validation",
            lambda: validate_amounts(bills, tolerance=self._amount_tolerance),
            AmountValidation(),
        )
        report.amount_validation = amounts
        if not amounts.is_valid and amounts.details is not None:
            report.errors.append(
                ValidationIssue(
                    type=IssueType.AMOUNT_MISMATCH,
                    severity=IssueSeverity.ERROR,
                    message="Bill total does not match line item sum.",
                    details=amounts.details.model_dump(mode="json", by_alias=True),
                )
            )

        missing = self._guarded("sign_seal", lambda: check_sign_seal(prescriptions), [])
        report.missing_sign_seal = missing
        if missing:
            report.warnings.append(
                ValidationIssue(
                    type=IssueType.MISSING_SIGN_SEAL,
                    severity=IssueSeverity.WARNING,
                    message=f"{len(missing)} documents missing doctor signature/seal.",
                    details=[m.model_dump(mode="json", by_alias=True) for m in missing],
                )
            )

        report.eligible_amount = self._guarded(
            "eligible_amount",
            lambda: calculate_eligible_amount(bills, exclusions),
            0.0,
        )
        report.total_amount = self._guarded(
            "total_amount",
            lambda: calculate_total_amount(bills),
            0.0,
        )

    @staticmethod
    def _guarded(name: str, check: Callable[[], T], fallback: T) -> T:
        try:
            return check()
        except Exception:
            log.exception("Claim check %s failed", name)
            return fallback
