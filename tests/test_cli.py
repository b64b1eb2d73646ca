"""Tests for the command-line interface."""

from __future__ import annotations

import json

from click.testing import CliRunner

from studiodocs.cli import main


class TestCli:
    def test_version(self):
        result = CliRunner().invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_themes(self):
        result = CliRunner().invoke(main, ["themes"])
        assert result.exit_code == 0
        assert "terracotta" in result.output

    def test_categories_and_kinds(self):
        runner = CliRunner()
        assert "maoDeObra" in runner.invoke(main, ["categories"]).output
        assert "budget_workbook" in runner.invoke(main, ["kinds"]).output

    def test_schedule_table(self):
        result = CliRunner().invoke(main, ["schedule", "consultexpress", "--start", "2026-10-19"])
        assert result.exit_code == 0
        assert "CONSULT EXPRESS" in result.output
        assert "16" in result.output

    def test_render(self, tmp_path):
        request = tmp_path / "budget.json"
        request.write_text(json.dumps({
            "client": "Ana Souza",
            "items": [{"number": 1, "name": "Sofá", "category": "mobiliario", "unit_price": 900}],
        }), encoding="utf-8")
        out = tmp_path / "out"
        result = CliRunner().invoke(main, ["render", "budget_workbook", str(request), "-o", str(out)])
        assert result.exit_code == 0, result.output
        assert (out / "orcamento-ana-souza.xlsx").exists()

    def test_render_invalid_request_exits_nonzero(self, tmp_path):
        request = tmp_path / "bad.json"
        request.write_text(json.dumps({"client": ""}), encoding="utf-8")
        result = CliRunner().invoke(main, ["render", "budget_deck", str(request), "-o", str(tmp_path)])
        assert result.exit_code == 1
        assert "failed" in result.output
