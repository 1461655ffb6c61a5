"""Tests for CLI entry points."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

from click.testing import CliRunner

from cmmc_audit.cli.audit import audit_cli


class TestAuditCli:
    def test_requires_output(self):
        runner = CliRunner()
        result = runner.invoke(audit_cli, [])
        assert result.exit_code == 2
        assert "Missing option" in result.output

    @patch("cmmc_audit.core.auditor.run_audit")
    def test_defaults(self, mock_audit, tmp_path: Path):
        mock_audit.return_value = 0
        runner = CliRunner()
        result = runner.invoke(audit_cli, ["-o", str(tmp_path / "r.html")])
        assert result.exit_code == 0
        kwargs = mock_audit.call_args.kwargs
        assert kwargs["output_format"] is None
        assert kwargs["verbose"] is False
        assert kwargs["snapshot"] is None

    @patch("cmmc_audit.core.auditor.run_audit")
    def test_format_is_case_insensitive(self, mock_audit, tmp_path: Path):
        mock_audit.return_value = 0
        runner = CliRunner()
        runner.invoke(audit_cli, ["-o", str(tmp_path / "r.csv"), "-f", "csv"])
        assert mock_audit.call_args.kwargs["output_format"] == "CSV"

    def test_rejects_unknown_format(self, tmp_path: Path):
        runner = CliRunner()
        result = runner.invoke(audit_cli, ["-o", str(tmp_path / "r.pdf"), "-f", "pdf"])
        assert result.exit_code == 2

    @patch("cmmc_audit.core.auditor.run_audit")
    def test_exit_code_propagates(self, mock_audit, tmp_path: Path):
        mock_audit.return_value = 1
        runner = CliRunner()
        result = runner.invoke(audit_cli, ["-o", str(tmp_path / "r.html")])
        assert result.exit_code == 1

    def test_snapshot_end_to_end(self, snapshot_file: Path, tmp_path: Path):
        out = tmp_path / "report.html"
        runner = CliRunner()
        result = runner.invoke(
            audit_cli,
            ["-o", str(out), "--snapshot", str(snapshot_file), "-v"],
        )
        assert result.exit_code == 0
        assert "Report generated" in result.output
        assert out.read_text(encoding="utf-8").count('<tr class="pass">') == 9

    def test_unwritable_output(self, snapshot_file: Path, tmp_path: Path):
        runner = CliRunner()
        result = runner.invoke(
            audit_cli, ["-o", str(tmp_path / "missing" / "r.html"), "--snapshot", str(snapshot_file)]
        )
        assert result.exit_code == 1
        assert "Cannot write report" in result.output
