"""Claim domain models: pages, logical documents, extracted fields, claims.

This is the canonical location for claim data structures.  Document
field schemas carry a ``kind`` literal so a stored claim can be
deserialized without guessing which schema a document used.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator

from claimlens.validation.models import ClaimValidationReport

DEFAULT_VISIT_REASON = "General consultation"
DEFAULT_DOCTOR_NAME = "Dr. Unknown"
DEFAULT_SPECIALTY = "General Medicine"
DEFAULT_FACILITY_NAME = "Medical Facility"
DEFAULT_FACILITY_ADDRESS = "Address not specified"
PLACEHOLDER_ORDER_ITEM = "General medication"
PLACEHOLDER_LINE_ITEM = "General service"


class OrderKind(str, Enum):
    """What a prescribed order or billed item is."""

    MEDICINE = "medicine"
    SUPPLEMENT = "supplement"
    LAB = "lab"


class PrescriptionOrder(BaseModel):
    """A single prescribed medicine, supplement or lab investigation."""

    item: str
    kind: OrderKind = OrderKind.MEDICINE
    dose: Optional[str] = None
    frequency: Optional[str] = None


class LineItem(BaseModel):
    """A single billed line.

    ``kind`` is free text here: bills entered by hand may carry categories
    (``cosmetic``, ``elective``) outside :class:`OrderKind`.
    """

    name: str
    kind: str = OrderKind.MEDICINE.value
    brand: Optional[str] = None
    composition: Optional[str] = None
    price: Optional[float] = None
    discount: Optional[float] = None
    final: Optional[float] = None

    @model_validator(mode="after")
    def _derive_final(self) -> LineItem:
        # final = price - discount whenever both are known
        if self.price is not None and self.discount is not None:
            self.final = round(self.price - self.discount, 2)
        elif self.final is None and self.price is not None:
            self.final = self.price
        return self

    def amount(self) -> float:
        """Billed amount: ``final``, falling back to ``price``, then 0."""
        if self.final is not None:
            return self.final
        if self.price is not None:
            return self.price
        return 0.0


class PrescriptionFields(BaseModel):
    """Fields extracted from a prescription."""

    kind: Literal["prescription"] = "prescription"
    prescription_number: Optional[str] = None
    prescription_date: Optional[str] = None
    prescription_time: Optional[str] = None
    visit_reason: str = DEFAULT_VISIT_REASON
    doctor_sign_and_seal_present: bool = False
    doctor_name: Optional[str] = None
    doctor_specialty: str = DEFAULT_SPECIALTY
    diagnosis: list[str] = Field(default_factory=list)
    prescription_orders: list[PrescriptionOrder] = Field(default_factory=list)
    facility_name: str = DEFAULT_FACILITY_NAME
    facility_address: str = DEFAULT_FACILITY_ADDRESS
    specialist_prescription: bool = False


class BillFields(BaseModel):
    """Fields extracted from a bill."""

    kind: Literal["bill"] = "bill"
    bill_number: Optional[str] = None
    bill_date: Optional[str] = None
    bill_time: Optional[str] = None
    visit_reason: Optional[str] = None
    line_items: list[LineItem] = Field(default_factory=list)
    total_paid_amount: float = Field(default=0.0, ge=0.0)
    facility_name: str = DEFAULT_FACILITY_NAME
    facility_address: str = DEFAULT_FACILITY_ADDRESS
    tnc_eligible: bool = True


ExtractedFields = Annotated[
    Union[PrescriptionFields, BillFields],
    Field(discriminator="kind"),
]


def placeholder_order() -> PrescriptionOrder:
    return PrescriptionOrder(item=PLACEHOLDER_ORDER_ITEM, kind=OrderKind.MEDICINE)


def placeholder_line_item() -> LineItem:
    return LineItem(name=PLACEHOLDER_LINE_ITEM, price=0.0, discount=0.0, final=0.0)


def default_prescription_fields() -> PrescriptionFields:
    """Safe record returned when prescription extraction breaks down."""
    return PrescriptionFields(
        doctor_name=DEFAULT_DOCTOR_NAME,
        diagnosis=[DEFAULT_VISIT_REASON],
        prescription_orders=[placeholder_order()],
    )


def default_bill_fields() -> BillFields:
    """Safe record returned when bill extraction breaks down."""
    return BillFields(line_items=[placeholder_line_item()], total_paid_amount=0.0)


# ── Pages, documents, claims ─────────────────────────────────────────


def _new_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


class DocumentType(str, Enum):
    """Type assigned to a page by the classifier."""

    PRESCRIPTION = "prescription"
    BILL = "bill"
    REPORT = "report"
    UNKNOWN = "unknown"


class ClaimStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    REQUEST_INFO = "request_info"


class ReviewDecision(str, Enum):
    """A reviewer's verdict on a pending claim."""

    APPROVE = "approve"
    REJECT = "reject"
    REQUEST_INFO = "request_info"

    @property
    def status(self) -> ClaimStatus:
        return _DECISION_STATUS[self]


_DECISION_STATUS = {
    ReviewDecision.APPROVE: ClaimStatus.APPROVED,
    ReviewDecision.REJECT: ClaimStatus.REJECTED,
    ReviewDecision.REQUEST_INFO: ClaimStatus.REQUEST_INFO,
}


class Page(BaseModel):
    """One physical page of a claim submission."""

    page_id: str = Field(default_factory=_new_id)
    page_number: int = Field(ge=1)
    media_type: str = "text/plain"
    source_path: str = ""
    raw_text: Optional[str] = None
    document_type: Optional[DocumentType] = None
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    classification_reason: str = ""

    @property
    def is_classified(self) -> bool:
        return self.document_type is not None


class LogicalDocument(BaseModel):
    """A contiguous run of same-typed pages, e.g. a 3-page prescription.

    Membership is fixed at creation; regrouping replaces documents.
    """

    document_id: str = Field(default_factory=_new_id)
    document_type: DocumentType
    pages: list[Page] = Field(default_factory=list)
    extracted_fields: Optional[ExtractedFields] = None
    created_at: str = Field(default_factory=_utcnow)

    @property
    def page_numbers(self) -> list[int]:
        return [p.page_number for p in self.pages]

    @property
    def text(self) -> str:
        """Page texts joined in page order, one page per line block."""
        return "\n".join(p.raw_text or "" for p in self.pages)


class Claim(BaseModel):
    """Claim aggregate handed to and returned by the pipeline."""

    claim_id: str = Field(default_factory=_new_id)
    patient_name: str = ""
    insurer: str = ""
    status: ClaimStatus = ClaimStatus.PENDING
    pages: list[Page] = Field(default_factory=list)
    prescriptions: list[LogicalDocument] = Field(default_factory=list)
    bills: list[LogicalDocument] = Field(default_factory=list)
    reports: list[LogicalDocument] = Field(default_factory=list)
    validation: Optional[ClaimValidationReport] = None
    reviewer_note: str = ""
    reviewer_id: Optional[str] = None
    reviewed_at: Optional[str] = None
    submitted_at: str = Field(default_factory=_utcnow)
    updated_at: str = Field(default_factory=_utcnow)

    def touch(self) -> None:
        self.updated_at = _utcnow()

    def issue_count(self) -> int:
        """Quick flags count for queue display."""
        return self.validation.issue_count() if self.validation else 0
