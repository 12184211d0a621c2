"""File-backed exclusion policy - loads YAML or JSON from disk."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from claimlens.exceptions import PolicyUnavailableError
from claimlens.validation.policy import ExclusionPolicy

log = logging.getLogger(__name__)


class FilePolicyBackend:
    """Reads ``{excluded_items, excluded_categories}`` from a YAML or JSON file.

    The file is read on every ``load_policy()`` call; the rules engine
    calls it once at construction.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load_policy(self) -> ExclusionPolicy:
        """Parse the policy file. Raises PolicyUnavailableError on any read/parse failure."""
        try:
            raw_text = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise PolicyUnavailableError(f"Cannot read exclusion policy {self._path}: {exc}") from exc

        data = self._parse(raw_text)
        return ExclusionPolicy.from_mapping(data, source=f"file:{self._path}")

    def _parse(self, raw_text: str) -> Any:
        try:
            if self._path.suffix in (".yaml", ".yml"):
                return yaml.safe_load(raw_text)
            return json.loads(raw_text)
        except (yaml.YAMLError, json.JSONDecodeError) as exc:
            raise PolicyUnavailableError(f"Invalid exclusion policy file {self._path}: {exc}") from exc
