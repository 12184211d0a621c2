"""Claim rule checks: specialist-only and always-run checks."""
