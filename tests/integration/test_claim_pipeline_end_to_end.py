"""End-to-end claim processing: pages in, evaluated claim and report out."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from claimlens.core.config import AppSettings, PersistenceConfig
from claimlens.domains.claims.models import (
    BillFields,
    Claim,
    DocumentType,
    Page,
    PrescriptionFields,
)
from claimlens.domains.claims.validation.engine import ClaimRulesEngine
from claimlens.pipeline import ClaimPipeline
from claimlens.services.claim_service import create_claim_service
from claimlens.validation.models import ClaimSubtype, IssueType
from tests.fakes.claim_factory import BILL_TEXT, PRESCRIPTION_TEXT
from tests.fakes.fake_text_extractor import FakeTextExtractor, FlakyTextExtractor

CARDIAC_PRESCRIPTION = "\n".join(
    [
        "Prescription",
        "Dr. Rao",
        "Cardiology",
        "Visit reason: Cardiac checkup",
        "Atorvastatin 10mg once daily",
        "Doctor signature and seal",
    ]
)

CARDIAC_BILL = "\n".join(
    [
        "Bill No: B-102",
        "Visit reason: Cardiac checkup",
        "Consultation 500",
        "Atorvastatin 120",
        "Total: 620",
    ]
)


def _claim(*paths: str) -> Claim:
    return Claim(
        patient_name="Jane Doe",
        insurer="Acme",
        pages=[Page(page_number=n, source_path=p) for n, p in enumerate(paths, start=1)],
    )


class TestSpecialistClaim:
    @pytest.mark.asyncio
    async def test_prescription_and_bill(self, engine: ClaimRulesEngine) -> None:
        extractor = FakeTextExtractor({"rx.txt": PRESCRIPTION_TEXT, "bill.txt": BILL_TEXT})
        claim = await ClaimPipeline(engine, text_extractor=extractor).run(_claim("rx.txt", "bill.txt"))

        assert [p.document_type for p in claim.pages] == [DocumentType.PRESCRIPTION, DocumentType.BILL]
        assert [p.confidence for p in claim.pages] == [0.94, 0.94]

        rx = claim.prescriptions[0].extracted_fields
        assert isinstance(rx, PrescriptionFields)
        assert rx.doctor_name == "Dr. Smith"
        assert rx.doctor_specialty == "Cardiology"
        assert rx.prescription_date == "2024-06-05"
        assert rx.doctor_sign_and_seal_present is True

        bill = claim.bills[0].extracted_fields
        assert isinstance(bill, BillFields)
        assert [(li.name, li.kind, li.final) for li in bill.line_items] == [
            ("Cardiology consultation", "medicine", 500.0),
            ("ECG", "lab", 300.0),
        ]
        assert bill.total_paid_amount == 800
        assert bill.tnc_eligible is True

        report = claim.validation
        assert report.claim_subtype == ClaimSubtype.SPECIALIST
        assert report.amount_validation.is_valid
        assert report.missing_sign_seal == []
        assert report.policy_exclusions == []
        assert report.eligible_amount == 800
        assert report.total_amount == 800
        assert report.errors == []
        assert report.treatment_fulfillment.missing_treatments == ["general medication"]
        assert {i.type for i in report.flags} == {IssueType.VISIT_REASON_MISMATCH}
        assert {i.type for i in report.warnings} == {IssueType.TREATMENT_NOT_FULFILLED}

    @pytest.mark.asyncio
    async def test_consistent_and_fulfilled(self, engine: ClaimRulesEngine) -> None:
        extractor = FakeTextExtractor({"rx.txt": CARDIAC_PRESCRIPTION, "bill.txt": CARDIAC_BILL})
        claim = await ClaimPipeline(engine, text_extractor=extractor).run(_claim("rx.txt", "bill.txt"))

        report = claim.validation
        assert report.claim_subtype == ClaimSubtype.SPECIALIST
        assert report.visit_reason_consistency.is_consistent
        assert report.visit_reason_consistency.common_keywords == ["cardiac", "checkup"]
        assert report.treatment_fulfillment.is_fulfilled
        assert report.flags == [] and report.warnings == [] and report.errors == []
        assert report.eligible_amount == 620


class TestMixedClaim:
    @pytest.mark.asyncio
    async def test_excluded_item_marks_bill_ineligible(self, engine: ClaimRulesEngine) -> None:
        supplement_bill = "Invoice #77\nProtein supplement 400\nTotal: 400"
        extractor = FakeTextExtractor(
            {"rx.txt": PRESCRIPTION_TEXT, "bill.txt": BILL_TEXT, "bill2.txt": supplement_bill},
            failures={"scan.txt"},
        )
        claim = await ClaimPipeline(engine, text_extractor=extractor).run(
            _claim("rx.txt", "bill.txt", "scan.txt", "bill2.txt")
        )

        assert claim.pages[2].document_type == DocumentType.UNKNOWN
        assert [d.page_numbers for d in claim.bills] == [[2], [4]]
        assert [d.extracted_fields.tnc_eligible for d in claim.bills] == [True, False]

        report = claim.validation
        assert [e.item for e in report.policy_exclusions] == ["Protein supplement"]
        assert report.total_amount == 1200
        assert report.eligible_amount == 800
        assert [i.type for i in report.errors] == [IssueType.POLICY_EXCLUSION]


class TestTransientReadFailure:
    @pytest.mark.asyncio
    async def test_page_recovers_on_next_run(self, engine: ClaimRulesEngine) -> None:
        flaky = FlakyTextExtractor({"rx.txt": PRESCRIPTION_TEXT, "bill.txt": BILL_TEXT})
        pipeline = ClaimPipeline(engine, text_extractor=flaky)

        first = await pipeline.run(_claim("rx.txt", "bill.txt"))
        assert [p.document_type for p in first.pages] == [DocumentType.UNKNOWN] * 2
        assert first.prescriptions == [] and first.bills == []

        second = await pipeline.run(first)
        assert [p.document_type for p in second.pages] == [
            DocumentType.PRESCRIPTION,
            DocumentType.BILL,
        ]
        assert second.validation.total_amount == 800


class TestServiceWithFiles:
    @pytest.mark.asyncio
    async def test_process_persist_review_export(self, tmp_path: Path) -> None:
        pages_dir = tmp_path / "pages"
        pages_dir.mkdir()
        (pages_dir / "1.txt").write_text(CARDIAC_PRESCRIPTION)
        (pages_dir / "2.txt").write_text(CARDIAC_BILL)

        settings = AppSettings(
            persistence=PersistenceConfig(backend="file", store_path=tmp_path / "claims")
        )
        service = create_claim_service(settings)
        claim = service.create_claim(
            "Jane Doe",
            "Acme",
            [Page(page_number=n, source_path=str(pages_dir / f"{n}.txt")) for n in (1, 2)],
        )
        await service.process(claim.claim_id)

        # a fresh service over the same directory sees the stored result
        reloaded = create_claim_service(settings).get_claim(claim.claim_id)
        assert reloaded.validation.eligible_amount == 620
        assert reloaded.pages[0].raw_text == CARDIAC_PRESCRIPTION

        service.review(claim.claim_id, "approve", note="All documents in order")
        exported = json.loads(service.export(claim.claim_id))
        assert exported["review"]["status"] == "approved"
        assert exported["businessChecks"]["visitReasonConsistency"]["isConsistent"] is True
        assert (tmp_path / "claims" / f"{claim.claim_id}.json").is_file()
