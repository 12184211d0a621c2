"""Claim validation reports, exclusion policy and policy sources."""

from __future__ import annotations

from claimlens.validation.models import (
    ClaimSubtype,
    ClaimValidationReport,
    IssueSeverity,
    IssueType,
    ValidationIssue,
)
from claimlens.validation.policy import (
    DEFAULT_EXCLUSION_POLICY,
    ExclusionPolicy,
    load_exclusion_policy,
)

__all__ = [
    "ClaimSubtype",
    "ClaimValidationReport",
    "DEFAULT_EXCLUSION_POLICY",
    "ExclusionPolicy",
    "IssueSeverity",
    "IssueType",
    "ValidationIssue",
    "load_exclusion_policy",
]
