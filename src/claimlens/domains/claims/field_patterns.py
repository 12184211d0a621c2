"""Regex tables for field extraction from claim document text.

Patterns are deliberately permissive: a capitalized phrase next to a
number may be read as a line item.  Downstream rule thresholds are tuned
against that behavior, so the patterns are not meant to be tightened
into a grammar.  Horizontal whitespace (``[ \\t]``) is used wherever a
match must stay on one line.
"""

from __future__ import annotations

import re
from typing import Pattern

_AMOUNT = r"\d{1,3}(?:,\d{3})+(?:\.\d{1,2})?|\d+(?:\.\d{1,2})?"
_CURRENCY = r"(?:rs\.?|inr|usd)?[ \t]*[$₹]?"

# D/M/Y or D-M-Y with a 2 or 4 digit year; canonical Y-M-D is accepted too
# so already-normalized dates pass through unchanged.
DATE_PATTERN: Pattern[str] = re.compile(
    r"(?<!\d)(?:"
    r"(?P<iso_year>\d{4})-(?P<iso_month>\d{1,2})-(?P<iso_day>\d{1,2})"
    r"|(?P<day>\d{1,2})[/-](?P<month>\d{1,2})[/-](?P<year>\d{4}|\d{2})"
    r")(?!\d)"
)

TIME_PATTERN: Pattern[str] = re.compile(
    r"(?<![\d:])(?P<hour>\d{1,2}):(?P<minute>\d{2})(?:[ \t]*(?P<meridiem>[ap]m)\b)?",
    re.IGNORECASE,
)

DOCTOR_NAME_PATTERN: Pattern[str] = re.compile(
    r"\bdr\.?[ \t]+(?P<name>[a-z][a-z'.-]*(?:[ \t]+[a-z][a-z'.-]*){0,2})",
    re.IGNORECASE,
)

FACILITY_NAME_PATTERN: Pattern[str] = re.compile(
    r"\b(?:hospital|clinic|medical center|healthcare)\b[ \t]*:?[ \t]*(?P<name>[a-z][a-z &'-]*)",
    re.IGNORECASE,
)

FACILITY_ADDRESS_PATTERN: Pattern[str] = re.compile(
    r"\b(?:address|location)\b[ \t]*:?[ \t]*(?P<address>[^.\n]+)",
    re.IGNORECASE,
)


def identifier_pattern(keyword: str) -> Pattern[str]:
    """``<keyword> [no|number|#] <delimiter> <token>`` for document numbers."""
    return re.compile(
        rf"\b{keyword}\b"
        r"(?:[ \t]*(?:no\b\.?|number\b|#)[ \t]*[:#-]?|[ \t]*[:#-])"
        r"[ \t]*(?P<identifier>[a-z0-9][a-z0-9-]*)",
        re.IGNORECASE,
    )


PRESCRIPTION_NUMBER_PATTERN: Pattern[str] = identifier_pattern("prescription")
BILL_NUMBER_PATTERN: Pattern[str] = identifier_pattern("(?:bill|invoice)")

VISIT_REASON_PATTERN: Pattern[str] = re.compile(
    r"\b(?:visit reason|reason for visit|chief complaint|complaint)\b[ \t]*:?[ \t]*(?P<reason>[^.\n]+)",
    re.IGNORECASE,
)

DIAGNOSIS_PATTERN: Pattern[str] = re.compile(
    r"\b(?:diagnosis|diagnosed with)\b[ \t]*:?[ \t]*(?P<diagnosis>[^.\n]*)",
    re.IGNORECASE,
)

# "<name> <dose>[unit] <frequency>", e.g. "Paracetamol 500mg twice daily"
MEDICINE_ORDER_PATTERN: Pattern[str] = re.compile(
    r"(?<![\w-])(?P<item>[a-z][a-z -]*?)[ \t]+"
    r"(?P<dose>\d+(?:\.\d+)?(?![\d/:])[ \t]*(?:mg|mcg|ml|g|iu|units?)?)\b[ \t]*"
    r"(?P<frequency>(?:once|twice|thrice)(?:[ \t]+(?:daily|a[ \t]+day))?|daily|at[ \t]+night)\b",
    re.IGNORECASE,
)

# "Investigations: ECG, Lipid profile" -> one lab order per comma item
LAB_ORDER_PATTERN: Pattern[str] = re.compile(
    r"\b(?:investigations?|tests?[ \t]+advised|advised[ \t]+tests?|lab[ \t]+orders?)\b[ \t]*:[ \t]*(?P<items>[^.\n]+)",
    re.IGNORECASE,
)

LINE_ITEM_PATTERN: Pattern[str] = re.compile(
    r"(?<![\w-])(?P<name>[a-z][a-z .&()/-]*?)(?:[ \t]*:[ \t]*|[ \t]+)"
    rf"{_CURRENCY}[ \t]*(?P<amount>{_AMOUNT})(?![\d/:]|[.,]\d)",
    re.IGNORECASE,
)

# Summary and header lines that would otherwise read as line items.  Document
# number headers ("Invoice No: 4521") are read by the identifier patterns.
LINE_ITEM_SKIP_PATTERN: Pattern[str] = re.compile(
    r"\b(?:total|subtotal|amount|balance|tax|gst|discount|paid|due|date|time|age|phone|mobile|pin"
    r"|no|number|bill|invoice|receipt)\b",
    re.IGNORECASE,
)

TOTAL_PATTERN: Pattern[str] = re.compile(
    r"\b(?:grand[ \t]+)?total(?:[ \t]+(?:amount|paid|payable))?[ \t]*:?[ \t]*"
    rf"{_CURRENCY}[ \t]*(?P<amount>{_AMOUNT})",
    re.IGNORECASE,
)
