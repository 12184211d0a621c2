"""Keyword tables for claim document understanding.

These tables drive the page classifier, the specialist/sign-seal
detection in the field extractor, and subtype determination in the
rules engine.  All terms are lower-case and matched as substrings of
lower-cased text.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from claimlens.domains.claims.models import DocumentType, OrderKind

# One vocabulary per classifiable document type.  The sets are disjoint.
DOCUMENT_VOCABULARIES: Mapping[DocumentType, tuple[str, ...]] = MappingProxyType({
    DocumentType.PRESCRIPTION: (
        "prescription",
        "rx",
        "medication",
        "dosage",
        "frequency",
        "doctor",
        "physician",
        "diagnosis",
        "treatment",
        "medicine",
        "tablet",
        "capsule",
        "syrup",
        "injection",
    ),
    DocumentType.BILL: (
        "bill",
        "invoice",
        "total",
        "amount",
        "price",
        "cost",
        "payment",
        "charges",
        "line item",
        "subtotal",
        "tax",
        "discount",
        "final amount",
        "due amount",
    ),
    DocumentType.REPORT: (
        "report",
        "result",
        "test",
        "laboratory",
        "lab",
        "diagnostic",
        "finding",
        "analysis",
        "examination",
        "assessment",
        "evaluation",
    ),
})

# Used for both the extracted ``specialist_prescription`` flag and
# claim subtype determination.
SPECIALIST_TERMS: tuple[str, ...] = (
    "specialist",
    "cardiology",
    "neurology",
    "orthopedic",
    "dermatology",
)

SIGN_SEAL_TERMS: tuple[str, ...] = ("signature", "seal", "stamp", "signed")

# Searched in table order; the first hit wins.
SPECIALTIES: tuple[tuple[str, str], ...] = (
    ("cardiology", "Cardiology"),
    ("neurology", "Neurology"),
    ("orthopedic", "Orthopedics"),
    ("dermatology", "Dermatology"),
    ("pediatrics", "Pediatrics"),
    ("general", "General Medicine"),
)

KIND_KEYWORDS: Mapping[OrderKind, tuple[str, ...]] = MappingProxyType({
    OrderKind.SUPPLEMENT: (
        "supplement",
        "vitamin",
        "protein",
        "omega",
        "probiotic",
    ),
    OrderKind.LAB: (
        "test",
        "scan",
        "x-ray",
        "xray",
        "ecg",
        "mri",
        "ultrasound",
        "profile",
        "panel",
        "culture",
        "blood",
        "urine",
    ),
})
