"""Claim validation: rules engine and check modules.

Factory function::

    from claimlens.domains.claims.validation import create_rules_engine
    engine = create_rules_engine(settings)
    report = engine.evaluate(claim)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from claimlens.core.config import AppSettings
    from claimlens.domains.claims.validation.engine import ClaimRulesEngine


def create_rules_engine(settings: AppSettings) -> ClaimRulesEngine:
    """Create a ClaimRulesEngine with its exclusion policy loaded once."""
    from claimlens.domains.claims.validation.engine import ClaimRulesEngine
    from claimlens.validation.policy import DEFAULT_POLICY_PATH, load_exclusion_policy

    backend_type = settings.rules.policy_backend

    if backend_type == "file":
        from claimlens.validation.backends.file_backend import FilePolicyBackend

        backend = FilePolicyBackend(settings.rules.policy_path or DEFAULT_POLICY_PATH)

    elif backend_type == "memory":
        from claimlens.validation.backends.memory_backend import MemoryPolicyBackend

        backend = MemoryPolicyBackend()

    else:
        raise ValueError(f"Unknown policy backend: {backend_type!r}")

    return ClaimRulesEngine(
        load_exclusion_policy(backend),
        amount_tolerance=settings.rules.amount_tolerance,
        min_keyword_length=settings.rules.min_keyword_length,
    )


__all__ = ["create_rules_engine"]
