"""Exclusion policy backend protocol - the contract all policy sources implement."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from claimlens.validation.policy import ExclusionPolicy


@runtime_checkable
class IPolicyBackend(Protocol):
    """Protocol for exclusion policy sources (file, memory)."""

    def load_policy(self) -> ExclusionPolicy:
        """Return the policy. Raises PolicyUnavailableError if it cannot be read."""
        ...
