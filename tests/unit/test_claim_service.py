"""Tests for ClaimService: intake, page edits, processing, review, export."""

from __future__ import annotations

import json

import pytest

from claimlens.domains.claims.models import ClaimStatus, DocumentType, Page, ReviewDecision
from claimlens.exceptions import ClaimNotFoundError, ClaimStateError
from claimlens.services.claim_service import ClaimService
from tests.fakes.claim_factory import BILL_TEXT, PRESCRIPTION_TEXT


def _page(text: str, number: int = 1) -> Page:
    return Page(page_number=number, raw_text=text)


class TestIntake:
    def test_create_numbers_pages_in_order(self, service: ClaimService) -> None:
        claim = service.create_claim(
            " Jane Doe ", "Acme", [_page("a", 7), _page("b", 3)]
        )
        assert claim.patient_name == "Jane Doe"
        assert claim.status == ClaimStatus.PENDING
        assert [(p.page_number, p.raw_text) for p in claim.pages] == [(1, "a"), (2, "b")]
        assert service.get_claim(claim.claim_id) == claim

    @pytest.mark.parametrize("patient,insurer", [("", "Acme"), ("Jane", "  ")])
    def test_patient_and_insurer_required(
        self, service: ClaimService, patient: str, insurer: str
    ) -> None:
        with pytest.raises(ValueError):
            service.create_claim(patient, insurer)

    def test_pending_claims_newest_first(self, service: ClaimService) -> None:
        older = service.create_claim("A", "X")
        newer = service.create_claim("B", "X")
        older.submitted_at = "2024-01-01T00:00:00+00:00"
        service._repository.put(older)
        service.review(service.create_claim("C", "X").claim_id, "reject")
        assert [c.claim_id for c in service.pending_claims()] == [newer.claim_id, older.claim_id]

    def test_delete_claim(self, service: ClaimService) -> None:
        claim = service.create_claim("A", "X")
        service.delete_claim(claim.claim_id)
        with pytest.raises(ClaimNotFoundError):
            service.get_claim(claim.claim_id)


class TestProcessing:
    @pytest.mark.asyncio
    async def test_process_populates_documents_and_report(self, service: ClaimService) -> None:
        claim = service.create_claim("Jane", "Acme", [_page(PRESCRIPTION_TEXT), _page(BILL_TEXT)])
        processed = await service.process(claim.claim_id)

        assert len(processed.prescriptions) == 1
        assert len(processed.bills) == 1
        assert processed.validation is not None
        assert service.get_claim(claim.claim_id).validation == processed.validation

    @pytest.mark.asyncio
    async def test_add_page_to_processed_claim_regroups(self, service: ClaimService) -> None:
        claim = service.create_claim("Jane", "Acme", [_page(BILL_TEXT)])
        await service.process(claim.claim_id)

        updated = await service.add_page(claim.claim_id, raw_text=PRESCRIPTION_TEXT)
        assert [p.page_number for p in updated.pages] == [1, 2]
        assert updated.pages[1].document_type == DocumentType.PRESCRIPTION
        assert len(updated.prescriptions) == 1

    @pytest.mark.asyncio
    async def test_add_page_to_unprocessed_claim_only_stores(self, service: ClaimService) -> None:
        claim = service.create_claim("Jane", "Acme")
        updated = await service.add_page(claim.claim_id, raw_text=BILL_TEXT)
        assert updated.pages[0].document_type is None
        assert updated.validation is None

    @pytest.mark.asyncio
    async def test_remove_page_renumbers_and_reevaluates(self, service: ClaimService) -> None:
        claim = service.create_claim(
            "Jane", "Acme", [_page(BILL_TEXT), _page(PRESCRIPTION_TEXT), _page(BILL_TEXT)]
        )
        processed = await service.process(claim.claim_id)
        assert len(processed.bills) == 2

        middle = processed.pages[1].page_id
        updated = service.remove_page(claim.claim_id, middle)
        assert [p.page_number for p in updated.pages] == [1, 2]
        assert [d.page_numbers for d in updated.bills] == [[1, 2]]
        assert updated.prescriptions == []
        assert updated.validation.total_amount == 800

    @pytest.mark.asyncio
    async def test_reorder_pages(self, service: ClaimService) -> None:
        claim = service.create_claim(
            "Jane", "Acme", [_page(BILL_TEXT), _page(PRESCRIPTION_TEXT), _page(BILL_TEXT)]
        )
        processed = await service.process(claim.claim_id)
        ids = [p.page_id for p in processed.pages]

        updated = service.reorder_pages(claim.claim_id, [ids[0], ids[2], ids[1]])
        by_id = {p.page_id: p.page_number for p in updated.pages}
        assert by_id == {ids[0]: 1, ids[2]: 2, ids[1]: 3}
        assert [d.page_numbers for d in updated.bills] == [[1, 2]]

    def test_reorder_requires_every_page(self, service: ClaimService) -> None:
        claim = service.create_claim("Jane", "Acme", [_page("a"), _page("b")])
        with pytest.raises(ValueError):
            service.reorder_pages(claim.claim_id, [claim.pages[0].page_id])

    def test_remove_unknown_page(self, service: ClaimService) -> None:
        claim = service.create_claim("Jane", "Acme", [_page("a")])
        with pytest.raises(KeyError):
            service.remove_page(claim.claim_id, "missing")


class TestReview:
    def test_review_sets_status_and_metadata(self, service: ClaimService) -> None:
        claim = service.create_claim("Jane", "Acme")
        reviewed = service.review(claim.claim_id, ReviewDecision.APPROVE, note="fine")
        assert reviewed.status == ClaimStatus.APPROVED
        assert reviewed.reviewer_note == "fine"
        assert reviewed.reviewer_id == "reviewer-001"
        assert reviewed.reviewed_at is not None

    def test_string_decision(self, service: ClaimService) -> None:
        claim = service.create_claim("Jane", "Acme")
        assert service.review(claim.claim_id, "request_info").status == ClaimStatus.REQUEST_INFO

    def test_invalid_decision(self, service: ClaimService) -> None:
        claim = service.create_claim("Jane", "Acme")
        with pytest.raises(ValueError):
            service.review(claim.claim_id, "maybe")

    @pytest.mark.asyncio
    async def test_reviewed_claim_is_locked(self, service: ClaimService) -> None:
        claim = service.create_claim("Jane", "Acme", [_page("a")])
        service.review(claim.claim_id, "reject", reviewer_id="r-9")

        with pytest.raises(ClaimStateError):
            service.review(claim.claim_id, "approve")
        with pytest.raises(ClaimStateError):
            await service.process(claim.claim_id)
        with pytest.raises(ClaimStateError):
            await service.add_page(claim.claim_id, raw_text="x")
        with pytest.raises(ClaimStateError):
            service.remove_page(claim.claim_id, claim.pages[0].page_id)


class TestSummaryAndExport:
    @pytest.mark.asyncio
    async def test_summary_and_export(self, service: ClaimService) -> None:
        claim = service.create_claim("Jane", "Acme", [_page(PRESCRIPTION_TEXT), _page(BILL_TEXT)])
        await service.process(claim.claim_id)

        summary = service.summary(claim.claim_id)
        assert summary.document_summary.total_pages == 2
        assert summary.recommendations

        exported = json.loads(service.export(claim.claim_id))
        assert exported["claimId"] == claim.claim_id
        assert exported["summary"] == {"prescriptions": 1, "bills": 1, "reports": 0, "totalPages": 2}
        assert exported["businessChecks"]["claimSubtype"] == "specialist"
        assert exported["review"]["status"] == "pending"
