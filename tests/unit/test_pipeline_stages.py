"""Tests for the individual pipeline stages and their artifacts."""

from __future__ import annotations

import pytest

from claimlens.domains.claims.models import (
    BillFields,
    DocumentType,
    LogicalDocument,
    Page,
    PrescriptionFields,
)
from claimlens.domains.claims.validation.engine import ClaimRulesEngine
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
from tests.fakes.claim_factory import BILL_TEXT, PRESCRIPTION_TEXT, make_bill
from tests.fakes.fake_text_extractor import (
    ExplodingTextExtractor,
    FakeTextExtractor,
    FlakyTextExtractor,
)


def _stored(number: int, path: str) -> Page:
    return Page(page_number=number, source_path=path, media_type="image/png")


class TestReadPageTexts:
    @pytest.mark.asyncio
    async def test_existing_text_is_not_reread(self) -> None:
        fake = FakeTextExtractor({"a.png": "fresh"})
        page = Page(page_number=1, source_path="a.png", raw_text="cached")
        assert await read_page_texts([page], fake) == ["cached"]
        assert fake.calls == []

    @pytest.mark.asyncio
    async def test_results_follow_input_order(self) -> None:
        fake = FakeTextExtractor({"a": "first", "b": "second"}, delays={"a": 0.05})
        texts = await read_page_texts([_stored(1, "a"), _stored(2, "b")], fake)
        assert texts == ["first", "second"]
        assert ("a", "image/png") in fake.calls

    @pytest.mark.asyncio
    async def test_extraction_failure_leaves_page_unread(self) -> None:
        fake = FakeTextExtractor({"b": "ok"}, failures={"a"})
        texts = await read_page_texts([_stored(1, "a"), _stored(2, "b")], fake)
        assert texts == [None, "ok"]

    @pytest.mark.asyncio
    async def test_timeout_leaves_page_unread(self) -> None:
        fake = FakeTextExtractor({"slow": "late"}, delays={"slow": 1.0})
        texts = await read_page_texts([_stored(1, "slow")], fake, timeout=0.01)
        assert texts == [None]

    @pytest.mark.asyncio
    async def test_unexpected_error_leaves_page_unread(self) -> None:
        texts = await read_page_texts([_stored(1, "x")], ExplodingTextExtractor())
        assert texts == [None]

    @pytest.mark.asyncio
    async def test_no_extractor_or_path(self) -> None:
        assert await read_page_texts([Page(page_number=1)], None) == [None]


class TestClassifyStage:
    @pytest.mark.asyncio
    async def test_classifies_without_mutating_input(self, text_pages: list[Page]) -> None:
        result = await classify_pages(text_pages)
        assert [p.document_type for p in result.pages] == [
            DocumentType.PRESCRIPTION,
            DocumentType.BILL,
        ]
        assert all(p.confidence > 0.9 for p in result.pages)
        assert all(p.document_type is None for p in text_pages)

    @pytest.mark.asyncio
    async def test_unreadable_page_is_unknown_with_zero_confidence(self) -> None:
        fake = FakeTextExtractor(failures={"scan.png"})
        result = await classify_pages([_stored(1, "scan.png")], fake)
        page = result.pages[0]
        assert page.document_type == DocumentType.UNKNOWN
        assert page.confidence == 0.0
        assert page.raw_text is None

    @pytest.mark.asyncio
    async def test_failed_read_is_retried_on_next_pass(self) -> None:
        flaky = FlakyTextExtractor({"rx.png": PRESCRIPTION_TEXT})
        first = await classify_pages([_stored(1, "rx.png")], flaky)
        assert first.pages[0].document_type == DocumentType.UNKNOWN

        second = await classify_pages(first.pages, flaky)
        assert second.pages[0].document_type == DocumentType.PRESCRIPTION
        assert second.pages[0].raw_text == PRESCRIPTION_TEXT
        assert len(flaky.calls) == 2


class TestGroupStage:
    def test_regroups_from_page_types(self) -> None:
        pages = (
            Page(page_number=1, document_type=DocumentType.PRESCRIPTION),
            Page(page_number=2, document_type=DocumentType.PRESCRIPTION),
            Page(page_number=3, document_type=DocumentType.BILL),
            Page(page_number=4, document_type=DocumentType.UNKNOWN),
            Page(page_number=5, document_type=DocumentType.PRESCRIPTION),
        )
        grouped = group_documents(ClassifiedPages(pages=pages))
        assert [d.page_numbers for d in grouped.prescriptions] == [[1, 2], [5]]
        assert [d.page_numbers for d in grouped.bills] == [[3]]
        assert grouped.reports == ()
        assert [p.page_number for p in grouped.unassigned] == [4]


class TestExtractStage:
    def test_extracts_per_document_kind(self) -> None:
        grouped = GroupedDocuments(
            prescriptions=(
                LogicalDocument(
                    document_type=DocumentType.PRESCRIPTION,
                    pages=[Page(page_number=1, raw_text=PRESCRIPTION_TEXT)],
                ),
            ),
            bills=(
                LogicalDocument(
                    document_type=DocumentType.BILL,
                    pages=[Page(page_number=2, raw_text=BILL_TEXT)],
                ),
            ),
            reports=(
                LogicalDocument(
                    document_type=DocumentType.REPORT,
                    pages=[Page(page_number=3, raw_text="Lab report")],
                ),
            ),
        )
        extracted = extract_documents(grouped)
        assert isinstance(extracted.prescriptions[0].extracted_fields, PrescriptionFields)
        assert isinstance(extracted.bills[0].extracted_fields, BillFields)
        assert extracted.reports[0].extracted_fields is None
        assert grouped.bills[0].extracted_fields is None

    def test_multi_page_document_text_is_concatenated(self) -> None:
        doc = LogicalDocument(
            document_type=DocumentType.BILL,
            pages=[
                Page(page_number=1, raw_text="Consultation 200"),
                Page(page_number=2, raw_text="Total: 200"),
            ],
        )
        extracted = extract_documents(GroupedDocuments(bills=(doc,)))
        fields = extracted.bills[0].extracted_fields
        assert isinstance(fields, BillFields)
        assert fields.total_paid_amount == 200
        assert [i.name for i in fields.line_items] == ["Consultation"]


class TestEvaluateStage:
    def test_evaluate_and_mark_ineligible_bills(self, engine: ClaimRulesEngine) -> None:
        clean = make_bill([("Consultation", 500)], 500)
        excluded = make_bill([("protein supplement", 50)], 50)
        extracted = ExtractedDocuments(bills=(clean, excluded))

        report = evaluate_documents(extracted, engine, claim_id="c-1")
        assert report.claim_id == "c-1"

        marked = apply_tnc_eligibility(extracted, report)
        flags = [d.extracted_fields.tnc_eligible for d in marked.bills]
        assert flags == [True, False]
        assert excluded.extracted_fields.tnc_eligible is True
