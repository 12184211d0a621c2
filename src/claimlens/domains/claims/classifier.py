"""Page classification by keyword vocabulary scoring.

Each vocabulary scores one point per distinct keyword present in the
lower-cased page text.  A type wins only with a strictly highest,
non-zero score; anything else is ``unknown``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping, Optional

from claimlens.domains.claims.models import DocumentType
from claimlens.domains.claims.vocabulary import DOCUMENT_VOCABULARIES

log = logging.getLogger(__name__)

BASE_CONFIDENCE = 0.90
CONFIDENCE_STEP = 0.02
MAX_CONFIDENCE = 0.98
AMBIGUOUS_CONFIDENCE = 0.1


@dataclass(frozen=True)
class PageClassification:
    """Result of classifying one page."""

    document_type: DocumentType
    confidence: float
    reason: str
    scores: dict[DocumentType, int] = field(default_factory=dict)


class PageClassifier:
    """Scores page text against per-type keyword vocabularies."""

    def __init__(
        self,
        vocabularies: Optional[Mapping[DocumentType, tuple[str, ...]]] = None,
    ) -> None:
        self._vocabularies = dict(vocabularies or DOCUMENT_VOCABULARIES)

    def score(self, text: str) -> dict[DocumentType, int]:
        """Count distinct vocabulary keywords present, per document type."""
        lower = text.lower()
        return {
            doc_type: sum(1 for keyword in keywords if keyword in lower)
            for doc_type, keywords in self._vocabularies.items()
        }

    def classify(self, text: Optional[str]) -> PageClassification:
        """Assign a document type, confidence and reason to page text."""
        if not text or not text.strip():
            return PageClassification(
                document_type=DocumentType.UNKNOWN,
                confidence=0.0,
                reason="no extractable text",
            )

        scores = self.score(text)
        winner, best = _strict_winner(scores)
        if winner is None:
            return PageClassification(
                document_type=DocumentType.UNKNOWN,
                confidence=AMBIGUOUS_CONFIDENCE,
                reason="no clear indicators",
                scores=scores,
            )

        confidence = round(min(BASE_CONFIDENCE + CONFIDENCE_STEP * best, MAX_CONFIDENCE), 2)
        log.debug("Classified page as %s (score=%d)", winner.value, best)
        return PageClassification(
            document_type=winner,
            confidence=confidence,
            reason=f"Contains {best} {winner.value}-related keywords",
            scores=scores,
        )


def _strict_winner(scores: dict[DocumentType, int]) -> tuple[Optional[DocumentType], int]:
    """Return the type whose score is > 0 and beats every other score."""
    if not scores:
        return None, 0
    best_type = max(scores, key=lambda t: scores[t])
    best = scores[best_type]
    if best <= 0:
        return None, 0
    if any(s >= best for t, s in scores.items() if t != best_type):
        return None, 0
    return best_type, best
