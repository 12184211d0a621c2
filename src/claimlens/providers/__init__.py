"""Concrete text extraction providers."""

from claimlens.providers.plain_text import PlainTextExtractor

__all__ = ["PlainTextExtractor"]
