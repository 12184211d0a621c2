"""Startup validation: fail-fast on critical misconfigurations."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from claimlens.core.config import AppSettings

log = logging.getLogger(__name__)


def validate_settings(settings: AppSettings) -> None:
    """Validate application settings at startup. Raises ValueError on fatal misconfig."""
    _check_classification(settings)
    _check_rules(settings)
    _check_persistence(settings)


def _check_classification(settings: AppSettings) -> None:
    if settings.classification.extraction_timeout_seconds <= 0:
        raise ValueError(
            "CLAIMLENS_CLASSIFICATION_EXTRACTION_TIMEOUT_SECONDS must be positive, "
            f"got {settings.classification.extraction_timeout_seconds}."
        )
    if settings.classification.max_concurrent_pages < 1:
        raise ValueError(
            "CLAIMLENS_CLASSIFICATION_MAX_CONCURRENT_PAGES must be at least 1, "
            f"got {settings.classification.max_concurrent_pages}."
        )


def _check_rules(settings: AppSettings) -> None:
    """Reject a negative tolerance; warn when the policy file will fall back to defaults."""
    if settings.rules.amount_tolerance < 0:
        raise ValueError(
            f"CLAIMLENS_RULES_AMOUNT_TOLERANCE must not be negative, got {settings.rules.amount_tolerance}."
        )
    if settings.rules.min_keyword_length < 0:
        raise ValueError(
            f"CLAIMLENS_RULES_MIN_KEYWORD_LENGTH must not be negative, got {settings.rules.min_keyword_length}."
        )
    path = settings.rules.policy_path
    if settings.rules.policy_backend == "file" and path is not None and not path.is_file():
        log.warning(
            "CLAIMLENS_RULES_POLICY_PATH=%s does not exist. "
            "The built-in exclusion list will be used instead.",
            path,
        )


def _check_persistence(settings: AppSettings) -> None:
    """Warn about file persistence in containerized environments."""
    is_container = bool(
        os.environ.get("ECS_CONTAINER_METADATA_URI")
        or os.environ.get("KUBERNETES_SERVICE_HOST")
    )
    if is_container and settings.persistence.backend == "file":
        log.warning(
            "CLAIMLENS_PERSISTENCE_BACKEND=file in a container environment. "
            "Claims will be lost on container restart unless store_path is on a mounted volume."
        )
