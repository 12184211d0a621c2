"""Nested pydantic-settings configuration for claimlens.

Each group reads its own ``CLAIMLENS_<GROUP>_*`` environment variables::

    export CLAIMLENS_RULES_POLICY_PATH=/etc/claimlens/tnc_exclusions.yaml
    export CLAIMLENS_PERSISTENCE_BACKEND=memory
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

from pydantic_settings import BaseSettings


class ClassificationConfig(BaseSettings):
    """Page text extraction and classification.

    Env vars use ``CLAIMLENS_CLASSIFICATION_`` prefix.
    """

    model_config = {"env_prefix": "CLAIMLENS_CLASSIFICATION_"}

    extraction_timeout_seconds: float = 30.0
    max_concurrent_pages: int = 4


class RulesConfig(BaseSettings):
    """Business rule engine configuration.

    Env vars use ``CLAIMLENS_RULES_`` prefix.  With ``policy_backend=file``
    and no ``policy_path`` the packaged ``tnc_exclusions.yaml`` is used.
    """

    model_config = {"env_prefix": "CLAIMLENS_RULES_"}

    policy_backend: Literal["file", "memory"] = "file"
    policy_path: Optional[Path] = None
    amount_tolerance: float = 0.01
    min_keyword_length: int = 3


class PersistenceConfig(BaseSettings):
    """Claim registry configuration.

    Env vars use ``CLAIMLENS_PERSISTENCE_`` prefix.
    """

    model_config = {"env_prefix": "CLAIMLENS_PERSISTENCE_"}

    backend: Literal["file", "memory"] = "file"
    store_path: Path = Path("./claims")


class ObservabilityConfig(BaseSettings):
    """Logging configuration.

    Env vars use ``CLAIMLENS_OBSERVABILITY_`` prefix.
    """

    model_config = {"env_prefix": "CLAIMLENS_OBSERVABILITY_"}

    service_name: str = "claimlens"
    log_level: str = "INFO"


class AppSettings(BaseSettings):
    """Top-level settings aggregating all sub-configs."""

    classification: ClassificationConfig = ClassificationConfig()
    rules: RulesConfig = RulesConfig()
    persistence: PersistenceConfig = PersistenceConfig()
    observability: ObservabilityConfig = ObservabilityConfig()
