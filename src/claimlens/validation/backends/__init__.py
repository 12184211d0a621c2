"""Exclusion policy sources."""

from __future__ import annotations

from claimlens.validation.backends.file_backend import FilePolicyBackend
from claimlens.validation.backends.memory_backend import MemoryPolicyBackend
from claimlens.validation.backends.protocol import IPolicyBackend

__all__ = ["IPolicyBackend", "FilePolicyBackend", "MemoryPolicyBackend"]
