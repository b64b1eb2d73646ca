"""Tests for request and result models."""

from __future__ import annotations

import pytest
from pydantic import TypeAdapter, ValidationError

from studiodocs.core.categories import Category
from studiodocs.core.models import (
    BudgetItem,
    BudgetRequest,
    DocumentItem,
    DocumentKind,
    GenerationResult,
    ImageSection,
    OutputFormat,
    PresentationRequest,
    ScheduleRequest,
    ShoppingListRequest,
    TechnicalItem,
    TechnicalRequest,
)


class TestItems:
    def test_unknown_category_falls_back_to_outros(self):
        assert BudgetItem(number=1, name="x", category="jardinagem").category is Category.OUTROS
        assert BudgetItem(number=1, name="x", category=None).category is Category.OUTROS

    def test_rejects_invalid_fields(self):
        with pytest.raises(ValidationError):
            BudgetItem(number=0, name="x")
        with pytest.raises(ValidationError):
            BudgetItem(number=1, name="  ")
        with pytest.raises(ValidationError):
            BudgetItem(number=1, name="x", unit_price=-1)

    def test_discriminated_union(self):
        adapter = TypeAdapter(DocumentItem)
        item = adapter.validate_python({"kind": "technical", "number": 1, "name": "Mesa",
                                        "dimensions": {"width": 100}})
        assert isinstance(item, TechnicalItem)
        assert item.dimensions.width == 100


class TestRequests:
    def test_client_as_string(self):
        request = BudgetRequest(client="Ana Souza")
        assert request.client.name == "Ana Souza"

    def test_blank_client_rejected(self):
        with pytest.raises(ValidationError):
            BudgetRequest(client="   ")

    def test_duplicate_item_numbers_rejected(self):
        items = [{"number": 1, "name": "a"}, {"number": 1, "name": "b"}]
        with pytest.raises(ValidationError, match="duplicate item number 1"):
            BudgetRequest(client="Ana", items=items)
        with pytest.raises(ValidationError):
            ShoppingListRequest(client="Ana", items=items)

    def test_schedule_rooms_bounds(self):
        with pytest.raises(ValidationError):
            ScheduleRequest(client="Ana", service_type="decorexpress", rooms=11, start_date="2026-10-19")
        with pytest.raises(ValidationError):
            ScheduleRequest(client="Ana", service_type="decorexpress", rooms=0, start_date="2026-10-19")

    def test_shopping_image_references_respect_flag(self, shopping_request):
        assert len(shopping_request.image_references()) == 6
        shopping_request.include_images = False
        assert shopping_request.image_references() == []

    def test_technical_references_include_drawings(self, technical_request):
        refs = technical_request.image_references()
        assert any("dwg" in ref for ref in refs)
        technical_request.include_drawings = False
        assert not any("dwg" in ref for ref in technical_request.image_references())

    def test_presentation_sections(self):
        request = PresentationRequest(
            client="Ana",
            logo_url="https://img.test/ok/logo.png",
            include_moodboard=False,
            sections=[
                {"section": "renders", "images": [{"url": "https://img.test/ok/r2.png", "display_order": 2},
                                                  {"url": "https://img.test/ok/r1.png", "display_order": 1}]},
                {"section": "moodboard", "images": [{"url": "https://img.test/ok/m.png"}]},
            ],
        )
        assert [i.url for i in request.images_for(ImageSection.RENDERS)] == [
            "https://img.test/ok/r1.png", "https://img.test/ok/r2.png",
        ]
        refs = request.image_references()
        assert refs[0] == "https://img.test/ok/logo.png"
        assert "https://img.test/ok/m.png" not in refs


class TestGenerationResult:
    def test_ok(self):
        result = GenerationResult.ok(DocumentKind.BUDGET_WORKBOOK, b"data", "orcamento-ana.xlsx")
        assert result.success
        assert result.mime_type == OutputFormat.XLSX.mime_type
        assert result.error is None

    def test_failure_has_no_data(self):
        result = GenerationResult.failure(DocumentKind.PROPOSAL_PDF, "boom")
        assert not result.success
        assert result.data is None

    def test_invariant_enforced(self):
        with pytest.raises(ValidationError):
            GenerationResult(success=True)
        with pytest.raises(ValidationError):
            GenerationResult(success=False, data=b"x")

    def test_save(self, tmp_path):
        result = GenerationResult.ok(DocumentKind.PROPOSAL_PDF, b"%PDF", "proposta-ana.pdf")
        path = result.save(tmp_path / "out")
        assert path.read_bytes() == b"%PDF"

    def test_save_failure_raises(self, tmp_path):
        with pytest.raises(ValueError):
            GenerationResult.failure(None, "boom").save(tmp_path)


class TestDocumentKind:
    @pytest.mark.parametrize("kind", list(DocumentKind))
    def test_every_kind_has_format_and_prefix(self, kind):
        assert kind.output_format in OutputFormat
        assert kind.filename_prefix
