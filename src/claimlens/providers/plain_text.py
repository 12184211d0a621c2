"""Text extraction for pages stored as plain-text files."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from claimlens.exceptions import TextExtractionError
from claimlens.interfaces.text_extraction import ITextExtractor

log = logging.getLogger(__name__)

SUPPORTED_MEDIA_TYPES = frozenset({"text/plain", "text/markdown"})


class PlainTextExtractor(ITextExtractor):
    """Reads UTF-8 text files off the event loop.

    Image and PDF media types need an OCR-capable extractor and are
    rejected with ``TextExtractionError``.
    """

    def __init__(self, *, encoding: str = "utf-8") -> None:
        self._encoding = encoding

    async def extract(self, source_path: str, media_type: str) -> str:
        if media_type not in SUPPORTED_MEDIA_TYPES:
            raise TextExtractionError(
                f"Unsupported media type {media_type!r}",
                path=source_path,
                media_type=media_type,
            )
        path = Path(source_path)
        try:
            text = await asyncio.to_thread(path.read_text, encoding=self._encoding)
        except (OSError, UnicodeDecodeError) as exc:
            raise TextExtractionError(str(exc), path=source_path, media_type=media_type) from exc
        log.debug("Read %d characters from %s", len(text), path)
        return text
