"""Tests for the generation orchestrator."""

from __future__ import annotations

from datetime import date

import pytest

from studiodocs.config import EngineConfig
from studiodocs.core.errors import InputError
from studiodocs.core.models import DocumentKind, OutputFormat, ScheduleRequest
from studiodocs.engine import GENERATORS, DocumentEngine
from studiodocs.generators.proposal_pdf import ProposalPdfGenerator


@pytest.fixture
def engine(resolver):
    return DocumentEngine(EngineConfig(), resolver=resolver)


class TestDocumentEngine:
    def test_every_kind_has_a_generator(self):
        assert set(GENERATORS) == set(DocumentKind)
        for kind, cls in GENERATORS.items():
            assert cls.kind is kind

    def test_budget_workbook_from_dict(self, engine):
        result = engine.render("budget_workbook", {
            "client": "Ana Souza",
            "items": [{"number": 1, "name": "Sofá", "category": "mobiliario", "unit_price": 100, "quantity": 2}],
        })
        assert result.success, result.error
        assert result.filename == "orcamento-ana-souza.xlsx"
        assert result.mime_type == OutputFormat.XLSX.mime_type
        assert result.data[:2] == b"PK"

    def test_model_request(self, engine, budget_request):
        result = engine.budget_deck(budget_request)
        assert result.success
        assert result.filename == "orcamento-ana-souza.pptx"

    def test_shopping_list_with_failing_images(self, engine, shopping_request):
        shopping_request.items[0].image_url = "https://img.test/missing/1.png"
        shopping_request.items[1].image_url = "https://img.test/down/2.png"
        result = engine.shopping_list(shopping_request)
        assert result.success
        assert result.filename == "lista-compras-ana-souza.pptx"

    def test_technical_deck(self, engine, technical_request):
        result = engine.technical_deck(technical_request)
        assert result.success
        assert result.filename == "detalhamento-bruno-lima.pptx"

    @pytest.mark.parametrize("method,kind", [
        ("proposal_pdf", DocumentKind.PROPOSAL_PDF),
        ("proposal_word", DocumentKind.PROPOSAL_WORD),
    ])
    def test_proposals(self, engine, proposal_request, method, kind):
        result = getattr(engine, method)(proposal_request)
        assert result.success
        assert result.kind is kind
        assert result.filename.endswith("." + kind.output_format.extension)

    def test_schedule(self, engine):
        request = ScheduleRequest(client="Ana", service_type="consultexpress", start_date=date(2026, 10, 19))
        assert engine.schedule_pdf(request).filename == "cronograma-ana.pdf"
        assert engine.schedule_deck(request).filename == "cronograma-ana.pptx"

    def test_presentation_logo_failure_is_not_fatal(self, engine):
        result = engine.presentation({"client": "Ana", "logo_url": "https://img.test/broken/logo.png"})
        assert result.success


class TestErrorBoundary:
    def test_unknown_kind(self, engine):
        result = engine.render("brochure", {"client": "Ana"})
        assert not result.success
        assert result.kind is None
        assert "brochure" in result.error

    def test_validation_error_is_reported(self, engine):
        result = engine.render(DocumentKind.BUDGET_DECK, {"client": "", "items": []})
        assert not result.success
        assert result.data is None
        assert result.error.startswith("Invalid request: client.name")

    def test_duplicate_numbers(self, engine):
        items = [{"number": 3, "name": "a"}, {"number": 3, "name": "b"}]
        result = engine.budget_workbook({"client": "Ana", "items": items})
        assert not result.success
        assert "duplicate item number 3" in result.error

    def test_wrong_request_model(self, engine, proposal_request):
        result = engine.budget_deck(proposal_request)
        assert not result.success
        assert "BudgetRequest" in result.error

    def test_unknown_theme(self, engine):
        result = engine.budget_deck({"client": "Ana", "theme": "neon"})
        assert not result.success
        assert "neon" in result.error

    def test_theme_by_name(self, engine):
        assert engine.budget_deck({"client": "Ana", "theme": "terracotta"}).success

    def test_renderer_failure_becomes_result(self, engine, monkeypatch):
        def explode(self, request):
            raise RuntimeError("disk on fire")

        monkeypatch.setattr(GENERATORS[DocumentKind.PROPOSAL_PDF], "render", explode)
        result = engine.proposal_pdf({"client": "Ana"})
        assert not result.success
        assert result.error == "Failed to generate proposal_pdf: disk on fire"

    def test_input_error_message_is_kept(self, engine, monkeypatch):
        def reject(self, request):
            raise InputError("no items to list")

        monkeypatch.setattr(GENERATORS[DocumentKind.PROPOSAL_PDF], "render", reject)
        result = engine.proposal_pdf({"client": "Ana"})
        assert not result.success
        assert result.error == "no items to list"


class TestGeneratorGenerate:
    def test_success_carries_filename(self, proposal_request):
        result = ProposalPdfGenerator().generate(proposal_request)
        assert result.success
        assert result.kind is DocumentKind.PROPOSAL_PDF
        assert result.filename.endswith(".pdf")
        assert result.data.startswith(b"%PDF")

    def test_failure_matches_engine_message(self, proposal_request, monkeypatch):
        def explode(self, request):
            raise RuntimeError("disk on fire")

        monkeypatch.setattr(ProposalPdfGenerator, "render", explode)
        result = ProposalPdfGenerator().generate(proposal_request)
        assert not result.success
        assert result.data is None
        assert result.error == "Failed to generate proposal_pdf: disk on fire"

    def test_empty_error_falls_back_to_type_name(self, proposal_request, monkeypatch):
        def explode(self, request):
            raise KeyError()

        monkeypatch.setattr(ProposalPdfGenerator, "render", explode)
        result = ProposalPdfGenerator().generate(proposal_request)
        assert result.error == "Failed to generate proposal_pdf: KeyError"
