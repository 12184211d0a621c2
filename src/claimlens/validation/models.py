"""Validation report models: issues, per-check results, and the claim report.

Attribute names are snake_case; the serialized form (``by_alias=True``)
uses camelCase keys so exported reports read ``isValid``,
``missingTreatments`` and so on.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ClaimSubtype(str, Enum):
    """Gates which checks run for a claim."""

    SPECIALIST = "specialist"
    MEDICAL = "medical"


class IssueSeverity(str, Enum):
    """Severity of a validation issue."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class IssueType(str, Enum):
    """Kind of business finding attached to a report."""

    VISIT_REASON_MISMATCH = "visit_reason_mismatch"
    TREATMENT_NOT_FULFILLED = "treatment_not_fulfilled"
    MEDICAL_CLAIM = "medical_claim"
    POLICY_EXCLUSION = "policy_exclusion"
    AMOUNT_MISMATCH = "amount_mismatch"
    MISSING_SIGN_SEAL = "missing_sign_seal"


class ExclusionReason(str, Enum):
    """Why a billed item was excluded."""

    EXCLUDED_ITEM = "excluded_item"
    EXCLUDED_CATEGORY = "excluded_category"


class ReportModel(BaseModel):
    """Base for report models: camelCase aliases, snake_case attributes."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ValidationIssue(ReportModel):
    """A single finding in one of the report's severity tiers."""

    type: IssueType
    severity: IssueSeverity
    message: str
    details: Any = None


class VisitReasonConsistency(ReportModel):
    is_consistent: bool = True
    prescription_reasons: list[str] = Field(default_factory=list)
    bill_reasons: list[str] = Field(default_factory=list)
    common_keywords: list[str] = Field(default_factory=list)
    note: Optional[str] = None


class TreatmentFulfillment(ReportModel):
    is_fulfilled: bool = True
    missing_treatments: list[str] = Field(default_factory=list)


class PolicyExclusion(ReportModel):
    """A billed line item disallowed by the exclusion policy."""

    item: str
    kind: str = ""
    reason: ExclusionReason
    amount: Optional[float] = None
    bill_id: str = ""


class AmountMismatch(ReportModel):
    bill_id: str
    calculated_total: float
    declared_total: float
    difference: float


class AmountValidation(ReportModel):
    is_valid: bool = True
    details: Optional[AmountMismatch] = None


class MissingSignSeal(ReportModel):
    prescription_id: str
    doctor_name: str = "Unknown"
    facility: str = "Unknown"


class ClaimValidationReport(ReportModel):
    """Output of one rules-engine pass over a claim.

    Recomputed wholesale on every evaluation; never patched in place.
    """

    claim_id: str = ""
    claim_subtype: ClaimSubtype = ClaimSubtype.MEDICAL
    flags: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[ValidationIssue] = Field(default_factory=list)
    errors: list[ValidationIssue] = Field(default_factory=list)
    eligible_amount: float = 0.0
    total_amount: float = 0.0
    visit_reason_consistency: Optional[VisitReasonConsistency] = None
    treatment_fulfillment: Optional[TreatmentFulfillment] = None
    policy_exclusions: list[PolicyExclusion] = Field(default_factory=list)
    amount_validation: Optional[AmountValidation] = None
    missing_sign_seal: list[MissingSignSeal] = Field(default_factory=list)
    policy_source: str = "builtin"
    evaluated_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    def issue_count(self) -> int:
        """Flags + warnings + errors, for queue display."""
        return len(self.flags) + len(self.warnings) + len(self.errors)

    def has_errors(self) -> bool:
        """Return True if any blocking issue exists."""
        return bool(self.errors)

    def to_dict(self) -> dict[str, Any]:
        """Plain structured data with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)
