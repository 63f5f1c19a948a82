"""
Tests for the bookkee-parse command line entry point.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import io
import json

import pytest

from bookkee.cli import main


class TestCli:

    def test_parse_file(self, tmp_path, capsys):
        receipt = tmp_path / "receipt.txt"
        receipt.write_text("さくら食堂\n2025/09/10\n合計 ¥5,000\n", encoding="utf-8")

        assert main([str(receipt)]) == 0

        output = json.loads(capsys.readouterr().out)
        assert output == {"date": "2025-09-10", "amount": 5000, "notes": "さくら食堂"}

    def test_parse_stdin_with_today(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "stdin", io.StringIO("9-10\n金額 3,000\n"))

        assert main(["--today", "2025-10-01"]) == 0

        output = json.loads(capsys.readouterr().out)
        assert output == {"date": "2025-09-10", "amount": 3000, "notes": None}

    def test_verbose_reports_rule_and_candidates(self, tmp_path, capsys):
        receipt = tmp_path / "receipt.txt"
        receipt.write_text("2025/09/10\n小計 ¥900\n合計 ¥990\n", encoding="utf-8")

        assert main([str(receipt), "--verbose"]) == 0

        captured = capsys.readouterr()
        assert "via year_first" in captured.err
        assert "¥990" in captured.err
        assert json.loads(captured.out)["amount"] == 990

    def test_verbose_reports_priority_and_shadowed_rules(self, tmp_path, capsys):
        receipt = tmp_path / "receipt.txt"
        receipt.write_text("9/10 2025/08/01\n", encoding="utf-8")

        assert main([str(receipt), "--today", "2025-10-01", "-v"]) == 0

        captured = capsys.readouterr()
        assert "via year_first (priority 3)" in captured.err
        assert "also matched: 2025-09-10 via month_day (priority 8)" in captured.err
        assert json.loads(captured.out)["date"] == "2025-08-01"

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.txt")]) == 1
        assert "cannot read" in capsys.readouterr().err

    def test_invalid_today(self):
        with pytest.raises(SystemExit) as exc_info:
            main(["--today", "10/01/2025"])
        assert exc_info.value.code == 2
