"""Exclusion policy: which billed items and categories the policy T&C disallow."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterable

from claimlens.exceptions import PolicyUnavailableError

if TYPE_CHECKING:
    from claimlens.validation.backends.protocol import IPolicyBackend

log = logging.getLogger(__name__)

BUILTIN_SOURCE = "builtin"

DEFAULT_POLICY_PATH = Path(__file__).resolve().parent / "data" / "tnc_exclusions.yaml"


@dataclass(frozen=True)
class ExclusionPolicy:
    """Lower-cased exclusion phrases matched as substrings."""

    excluded_items: tuple[str, ...] = ()
    excluded_categories: tuple[str, ...] = ()
    source: str = BUILTIN_SOURCE

    @classmethod
    def from_mapping(cls, data: dict[str, Any], *, source: str) -> ExclusionPolicy:
        """Build from ``{excluded_items: [...], excluded_categories: [...]}``.

        Raises:
            PolicyUnavailableError: If the mapping does not have that shape.
        """
        if not isinstance(data, dict):
            raise PolicyUnavailableError(f"Exclusion policy from {source} is not a mapping")
        try:
            items = _normalize(data.get("excluded_items", []))
            categories = _normalize(data.get("excluded_categories", []))
        except TypeError as exc:
            raise PolicyUnavailableError(f"Malformed exclusion policy from {source}: {exc}") from exc
        return cls(excluded_items=items, excluded_categories=categories, source=source)


def _normalize(values: Iterable[Any]) -> tuple[str, ...]:
    if isinstance(values, str):
        raise TypeError("expected a list of phrases, got a string")
    return tuple(str(v).strip().lower() for v in values if str(v).strip())


DEFAULT_EXCLUSION_POLICY = ExclusionPolicy(
    excluded_items=(
        "protein supplement",
        "cosmetic procedure",
        "vitamin supplements",
        "dietary supplements",
        "cosmetic surgery",
        "elective procedures",
    ),
    excluded_categories=(
        "cosmetic",
        "elective",
        "supplement",
    ),
)


def load_exclusion_policy(backend: IPolicyBackend | None) -> ExclusionPolicy:
    """Load the policy once, falling back to the built-in defaults.

    Evaluation never blocks on missing configuration: an unavailable source
    is logged as an advisory and the returned policy's ``source`` is
    ``"builtin"``.
    """
    if backend is None:
        return DEFAULT_EXCLUSION_POLICY
    try:
        policy = backend.load_policy()
    except PolicyUnavailableError as exc:
        log.warning("Exclusion policy unavailable (%s); using built-in defaults", exc)
        return DEFAULT_EXCLUSION_POLICY
    log.info(
        "Loaded exclusion policy from %s: %d item(s), %d categor(ies)",
        policy.source,
        len(policy.excluded_items),
        len(policy.excluded_categories),
    )
    return policy
