"""Pattern-based field extraction for prescriptions and bills.

Every field falls back to a documented default when its pattern finds
nothing.  If extraction itself breaks down, the kind's default record is
returned instead, so callers always get a fully populated schema.
"""

from __future__ import annotations

import logging
import re
from typing import Optional, Union

from claimlens.domains.claims import field_patterns as fp
from claimlens.domains.claims.models import (
    DEFAULT_FACILITY_ADDRESS,
    DEFAULT_FACILITY_NAME,
    DEFAULT_SPECIALTY,
    DEFAULT_VISIT_REASON,
    BillFields,
    DocumentType,
    LineItem,
    OrderKind,
    PrescriptionFields,
    PrescriptionOrder,
    default_bill_fields,
    default_prescription_fields,
    placeholder_line_item,
    placeholder_order,
)
from claimlens.domains.claims.vocabulary import (
    KIND_KEYWORDS,
    SIGN_SEAL_TERMS,
    SPECIALIST_TERMS,
    SPECIALTIES,
)

log = logging.getLogger(__name__)


# ── Shared field helpers ─────────────────────────────────────────────


def extract_date(text: str) -> Optional[str]:
    """First date in document order as ``YYYY-MM-DD``; 2-digit years get ``20``."""
    match = fp.DATE_PATTERN.search(text)
    if not match:
        return None
    if match.group("iso_year"):
        year, month, day = match.group("iso_year", "iso_month", "iso_day")
    else:
        day, month, year = match.group("day", "month", "year")
        if len(year) == 2:
            year = f"20{year}"
    return f"{year}-{month.zfill(2)}-{day.zfill(2)}"


def extract_time(text: str) -> Optional[str]:
    """First ``H:MM[am|pm]`` converted to 24-hour ``HH:MM``."""
    match = fp.TIME_PATTERN.search(text)
    if not match:
        return None
    hour = int(match.group("hour"))
    meridiem = (match.group("meridiem") or "").lower()
    if meridiem == "pm" and hour != 12:
        hour += 12
    elif meridiem == "am" and hour == 12:
        hour = 0
    return f"{hour:02d}:{match.group('minute')}"


def _first_capture(pattern: re.Pattern[str], text: str, group: str) -> Optional[str]:
    for match in pattern.finditer(text):
        value = match.group(group).strip(" \t.-:")
        if value:
            return value
    return None


def extract_facility_name(text: str) -> str:
    return _first_capture(fp.FACILITY_NAME_PATTERN, text, "name") or DEFAULT_FACILITY_NAME


def extract_facility_address(text: str) -> str:
    return _first_capture(fp.FACILITY_ADDRESS_PATTERN, text, "address") or DEFAULT_FACILITY_ADDRESS


def extract_visit_reason(text: str) -> Optional[str]:
    return _first_capture(fp.VISIT_REASON_PATTERN, text, "reason")


def infer_kind(name: str) -> OrderKind:
    """Classify an order or line item name as supplement, lab or medicine."""
    lower = name.lower()
    for kind, keywords in KIND_KEYWORDS.items():
        if any(k in lower for k in keywords):
            return kind
    return OrderKind.MEDICINE


def parse_amount(raw: str) -> float:
    return float(raw.replace(",", ""))


def contains_any(text: str, terms: tuple[str, ...]) -> bool:
    lower = text.lower()
    return any(term in lower for term in terms)


# ── Prescription fields ──────────────────────────────────────────────


def extract_doctor_name(text: str) -> Optional[str]:
    name = _first_capture(fp.DOCTOR_NAME_PATTERN, text, "name")
    return f"Dr. {name}" if name else None


def extract_doctor_specialty(text: str) -> str:
    lower = text.lower()
    for keyword, display in SPECIALTIES:
        if keyword in lower:
            return display
    return DEFAULT_SPECIALTY


def extract_diagnosis(text: str) -> list[str]:
    found = (m.group("diagnosis").strip() for m in fp.DIAGNOSIS_PATTERN.finditer(text))
    return [d for d in found if d]


def extract_prescription_orders(text: str) -> list[PrescriptionOrder]:
    """Dosed medicine lines plus comma-separated lab investigations.

    Never empty: a single placeholder order stands in when nothing matches.
    """
    orders: list[PrescriptionOrder] = []
    for match in fp.MEDICINE_ORDER_PATTERN.finditer(text):
        item = match.group("item").strip()
        orders.append(
            PrescriptionOrder(
                item=item,
                kind=infer_kind(item),
                dose=match.group("dose").strip() or None,
                frequency=match.group("frequency"),
            )
        )
    for match in fp.LAB_ORDER_PATTERN.finditer(text):
        for raw in match.group("items").split(","):
            item = raw.strip()
            if item:
                orders.append(PrescriptionOrder(item=item, kind=OrderKind.LAB))
    return orders or [placeholder_order()]


def extract_prescription_fields(text: str) -> PrescriptionFields:
    return PrescriptionFields(
        prescription_number=_first_capture(fp.PRESCRIPTION_NUMBER_PATTERN, text, "identifier"),
        prescription_date=extract_date(text),
        prescription_time=extract_time(text),
        visit_reason=extract_visit_reason(text) or DEFAULT_VISIT_REASON,
        doctor_sign_and_seal_present=contains_any(text, SIGN_SEAL_TERMS),
        doctor_name=extract_doctor_name(text),
        doctor_specialty=extract_doctor_specialty(text),
        diagnosis=extract_diagnosis(text),
        prescription_orders=extract_prescription_orders(text),
        facility_name=extract_facility_name(text),
        facility_address=extract_facility_address(text),
        specialist_prescription=contains_any(text, SPECIALIST_TERMS),
    )


# ── Bill fields ──────────────────────────────────────────────────────


def extract_line_items(text: str) -> list[LineItem]:
    """Every ``<name> <amount>`` phrase that is not a summary line.

    Never empty: a single zero-amount placeholder stands in when nothing matches.
    """
    items: list[LineItem] = []
    for match in fp.LINE_ITEM_PATTERN.finditer(text):
        name = match.group("name").strip(" \t.-:/")
        if not name or fp.LINE_ITEM_SKIP_PATTERN.search(name):
            continue
        price = parse_amount(match.group("amount"))
        items.append(
            LineItem(
                name=name,
                kind=infer_kind(name).value,
                price=price,
                discount=0.0,
            )
        )
    return items or [placeholder_line_item()]


def extract_total(text: str) -> float:
    match = fp.TOTAL_PATTERN.search(text)
    return parse_amount(match.group("amount")) if match else 0.0


def extract_bill_fields(text: str) -> BillFields:
    return BillFields(
        bill_number=_first_capture(fp.BILL_NUMBER_PATTERN, text, "identifier"),
        bill_date=extract_date(text),
        bill_time=extract_time(text),
        visit_reason=extract_visit_reason(text),
        line_items=extract_line_items(text),
        total_paid_amount=extract_total(text),
        facility_name=extract_facility_name(text),
        facility_address=extract_facility_address(text),
        tnc_eligible=True,
    )


# ── Dispatcher ───────────────────────────────────────────────────────


class FieldExtractor:
    """Dispatches to the per-kind extraction and absorbs any failure."""

    def extract(
        self, kind: Union[DocumentType, str], text: str
    ) -> Optional[Union[PrescriptionFields, BillFields]]:
        """Extract the kind's field schema from concatenated document text.

        Returns ``None`` for kinds without a field schema (reports, unknown)
        and for unrecognized kind names.
        """
        try:
            kind = DocumentType(kind)
        except ValueError:
            log.warning("Unrecognized document kind %r; no fields extracted", kind)
            return None
        if kind == DocumentType.PRESCRIPTION:
            return self._safe(extract_prescription_fields, default_prescription_fields, text)
        if kind == DocumentType.BILL:
            return self._safe(extract_bill_fields, default_bill_fields, text)
        log.debug("No field schema for document type %s", kind.value)
        return None

    @staticmethod
    def _safe(extract, default, text: str):
        try:
            return extract(text or "")
        except Exception:
            log.warning("Field extraction failed; using default %s record", default.__name__, exc_info=True)
            return default()
