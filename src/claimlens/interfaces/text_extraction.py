"""Abstract text extraction provider."""

from __future__ import annotations

from abc import ABC, abstractmethod


class ITextExtractor(ABC):
    @abstractmethod
    async def extract(self, source_path: str, media_type: str) -> str:
        """Return the plain text of one page's stored content.

        Raises:
            TextExtractionError: If the content cannot be read or decoded.
        """
