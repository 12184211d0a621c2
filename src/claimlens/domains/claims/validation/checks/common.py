"""Checks run for every claim: exclusions, bill amounts, doctor sign/seal."""

from __future__ import annotations

from claimlens.domains.claims.models import LogicalDocument
from claimlens.domains.claims.validation.checks._documents import (
    bills_with_fields,
    prescriptions_with_fields,
)
from claimlens.validation.models import (
    AmountMismatch,
    AmountValidation,
    ExclusionReason,
    MissingSignSeal,
    PolicyExclusion,
)
from claimlens.validation.policy import ExclusionPolicy

UNKNOWN = "Unknown"


def check_policy_exclusions(
    bills: list[LogicalDocument], policy: ExclusionPolicy
) -> list[PolicyExclusion]:
    """Flag line items whose name or kind contains an excluded phrase."""
    exclusions: list[PolicyExclusion] = []
    for doc, fields in bills_with_fields(bills):
        for item in fields.line_items:
            name = (item.name or "").lower()
            kind = (item.kind or "").lower()
            by_item = any(phrase in name for phrase in policy.excluded_items)
            by_category = any(phrase in kind for phrase in policy.excluded_categories)
            if not (by_item or by_category):
                continue
            exclusions.append(
                PolicyExclusion(
                    item=item.name,
                    kind=item.kind,
                    reason=ExclusionReason.EXCLUDED_ITEM if by_item else ExclusionReason.EXCLUDED_CATEGORY,
                    amount=item.final if item.final else item.price,
                    bill_id=doc.document_id,
                )
            )
    return exclusions


def validate_amounts(bills: list[LogicalDocument], *, tolerance: float = 0.01) -> AmountValidation:
    """Compare each bill's line-item sum with its declared total.

    ``difference`` is declared minus calculated, so an under-declared bill
    reports a negative difference.

    Stops at the first bill outside *tolerance*.
    """
    for doc, fields in bills_with_fields(bills):
        calculated = sum(item.amount() for item in fields.line_items)
        declared = fields.total_paid_amount or 0.0
        difference = declared - calculated
        if round(abs(difference), 6) > tolerance:
            return AmountValidation(
                is_valid=False,
                details=AmountMismatch(
                    bill_id=doc.document_id,
                    calculated_total=round(calculated, 2),
                    declared_total=round(declared, 2),
                    difference=round(difference, 2),
                ),
            )
    return AmountValidation(is_valid=True)


def check_sign_seal(prescriptions: list[LogicalDocument]) -> list[MissingSignSeal]:
    """Prescriptions without a doctor signature or seal."""
    return [
        MissingSignSeal(
            prescription_id=doc.document_id,
            doctor_name=fields.doctor_name or UNKNOWN,
            facility=fields.facility_name or UNKNOWN,
        )
        for doc, fields in prescriptions_with_fields(prescriptions)
        if fields.doctor_sign_and_seal_present is not True
    ]


def calculate_eligible_amount(
    bills: list[LogicalDocument], exclusions: list[PolicyExclusion]
) -> float:
    """Sum of line-item amounts whose name is not in the exclusions list."""
    excluded_names = {e.item for e in exclusions}
    total = sum(
        item.amount()
        for _, fields in bills_with_fields(bills)
        for item in fields.line_items
        if item.name not in excluded_names
    )
    return round(total, 2)


def calculate_total_amount(bills: list[LogicalDocument]) -> float:
    """Sum of declared bill totals."""
    return round(sum(fields.total_paid_amount or 0.0 for _, fields in bills_with_fields(bills)), 2)
