"""Explicit claim-processing pipeline: classify, group, extract, evaluate."""

from claimlens.pipeline.claim_pipeline import ClaimPipeline
from claimlens.pipeline.stages import (
    ClassifiedPages,
    ExtractedDocuments,
    GroupedDocuments,
    apply_tnc_eligibility,
    classify_pages,
    evaluate_documents,
    extract_documents,
    group_documents,
    read_page_texts,
)

__all__ = [
    "ClaimPipeline",
    "ClassifiedPages",
    "ExtractedDocuments",
    "GroupedDocuments",
    "apply_tnc_eligibility",
    "classify_pages",
    "evaluate_documents",
    "extract_documents",
    "group_documents",
    "read_page_texts",
]
