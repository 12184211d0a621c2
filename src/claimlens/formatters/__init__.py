"""Claim export formatters.

Usage::

    from claimlens.formatters import JSONFormatter

    payload = JSONFormatter().format(claim)
"""

from __future__ import annotations

from claimlens.formatters.json_formatter import JSONFormatter
from claimlens.formatters.protocols import IOutputFormatter
from claimlens.formatters.scrutiny_report import ScrutinyReport, build_scrutiny_report

__all__ = [
    "IOutputFormatter",
    "JSONFormatter",
    "ScrutinyReport",
    "build_scrutiny_report",
]
