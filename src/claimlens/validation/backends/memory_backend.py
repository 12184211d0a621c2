"""In-memory exclusion policy backend for testing."""

from __future__ import annotations

from typing import Iterable, Optional

from claimlens.validation.policy import DEFAULT_EXCLUSION_POLICY, ExclusionPolicy


class MemoryPolicyBackend:
    """Serves a policy built from the given phrases.

    Either list left as ``None`` takes the built-in defaults.
    """

    def __init__(
        self,
        excluded_items: Optional[Iterable[str]] = None,
        excluded_categories: Optional[Iterable[str]] = None,
    ) -> None:
        self._data = {
            "excluded_items": list(
                DEFAULT_EXCLUSION_POLICY.excluded_items if excluded_items is None else excluded_items
            ),
            "excluded_categories": list(
                DEFAULT_EXCLUSION_POLICY.excluded_categories
                if excluded_categories is None
                else excluded_categories
            ),
        }

    def load_policy(self) -> ExclusionPolicy:
        return ExclusionPolicy.from_mapping(self._data, source="memory")
