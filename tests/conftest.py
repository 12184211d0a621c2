"""Shared fixtures for claimlens tests."""

from __future__ import annotations

import pytest

from claimlens.domains.claims.models import Page
from claimlens.domains.claims.validation.engine import ClaimRulesEngine
from claimlens.persistence.memory_backend import MemoryClaimRepository
from claimlens.pipeline.claim_pipeline import ClaimPipeline
from claimlens.services.claim_service import ClaimService
from claimlens.validation.policy import DEFAULT_EXCLUSION_POLICY
from tests.fakes.claim_factory import BILL_TEXT, PRESCRIPTION_TEXT


@pytest.fixture
def engine() -> ClaimRulesEngine:
    return ClaimRulesEngine(DEFAULT_EXCLUSION_POLICY)


@pytest.fixture
def text_pages() -> list[Page]:
    """A prescription page followed by a bill page, text already read."""
    return [
        Page(page_number=1, raw_text=PRESCRIPTION_TEXT),
        Page(page_number=2, raw_text=BILL_TEXT),
    ]


@pytest.fixture
def pipeline(engine: ClaimRulesEngine) -> ClaimPipeline:
    return ClaimPipeline(engine)


@pytest.fixture
def service(pipeline: ClaimPipeline) -> ClaimService:
    return ClaimService(MemoryClaimRepository(), pipeline)
