"""Specialist-claim checks: visit-reason consistency and treatment fulfillment."""

from __future__ import annotations

from collections import Counter
from typing import Iterable

from claimlens.domains.claims.models import LogicalDocument
from claimlens.domains.claims.validation.checks._documents import (
    bills_with_fields,
    prescriptions_with_fields,
)
from claimlens.validation.models import TreatmentFulfillment, VisitReasonConsistency

INSUFFICIENT_DATA = "Insufficient data for comparison"
MAX_COMMON_KEYWORDS = 5


def find_common_keywords(reasons: Iterable[str], *, min_length: int = 3) -> list[str]:
    """Tokens longer than *min_length* that occur more than once, most frequent first."""
    counts = Counter(
        word
        for reason in reasons
        for word in reason.split()
        if len(word) > min_length
    )
    repeated = [(word, n) for word, n in counts.most_common() if n > 1]
    return [word for word, _ in repeated[:MAX_COMMON_KEYWORDS]]


def check_visit_reason_consistency(
    prescriptions: list[LogicalDocument],
    bills: list[LogicalDocument],
    *,
    min_keyword_length: int = 3,
) -> VisitReasonConsistency:
    """Consistent iff some reason keyword repeats across prescription and bill reasons."""
    rx_fields = [f for _, f in prescriptions_with_fields(prescriptions)]
    bill_fields = [f for _, f in bills_with_fields(bills)]
    if not rx_fields or not bill_fields:
        return VisitReasonConsistency(is_consistent=True, note=INSUFFICIENT_DATA)

    rx_reasons = [r for r in ((f.visit_reason or "").lower() for f in rx_fields) if r]
    bill_reasons = [r for r in ((f.visit_reason or "").lower() for f in bill_fields) if r]
    common = find_common_keywords([*rx_reasons, *bill_reasons], min_length=min_keyword_length)

    return VisitReasonConsistency(
        is_consistent=bool(common),
        prescription_reasons=rx_reasons,
        bill_reasons=bill_reasons,
        common_keywords=common,
    )


def check_treatment_fulfillment(
    prescriptions: list[LogicalDocument],
    bills: list[LogicalDocument],
) -> TreatmentFulfillment:
    """Every prescribed item must share a substring (either way) with some billed item."""
    rx_fields = [f for _, f in prescriptions_with_fields(prescriptions)]
    bill_fields = [f for _, f in bills_with_fields(bills)]
    if not rx_fields or not bill_fields:
        return TreatmentFulfillment(is_fulfilled=True)

    prescribed = [(o.item or "").lower() for f in rx_fields for o in f.prescription_orders]
    billed = [b for b in ((li.name or "").lower() for f in bill_fields for li in f.line_items) if b]

    missing = [
        item
        for item in prescribed
        if item and not any(name in item or item in name for name in billed)
    ]
    return TreatmentFulfillment(is_fulfilled=not missing, missing_treatments=missing)
