"""Integration tests for the command line inspector."""

import io

import pytest
from rich.console import Console

from hospital_finance import cli


@pytest.fixture
def output(monkeypatch):
    """Capture everything the CLI prints."""
    buffer = io.StringIO()
    monkeypatch.setattr(cli, "console", Console(file=buffer, width=200, color_system=None))
    monkeypatch.setenv("HOSPITAL_FINANCE_APP_ENV", "test")
    return buffer


@pytest.mark.integration
class TestCli:
    """Test exit codes and output of each command."""

    def test_hospitals_for_owner(self, output):
        assert cli.main(["--seed", "7", "hospitals", "--user", "owner-1"]) == 0

        text = output.getvalue()
        assert "general-1" in text
        assert "cardio-1" in text
        assert "trauma-1" not in text
        assert "2021, 2022, 2023, 2024" in text

    def test_show_record(self, output):
        code = cli.main(["--seed", "7", "show", "--user", "admin-1", "--hospital", "general-1", "--year", "2024"])

        assert code == 0
        text = output.getvalue()
        assert "Total Revenue" in text
        assert "Department Performance" in text
        assert "Salaries & Benefits" in text
        assert "Credit health" in text

    def test_show_formats_metrics_by_enum(self, output):
        """Percentage metrics print with %, currency metrics with $, every change with an arrow."""
        cli.main(["--seed", "7", "show", "--user", "admin-1", "--hospital", "general-1", "--year", "2024"])

        lines = output.getvalue().splitlines()
        margin = next(line for line in lines if "Profit Margin" in line)
        revenue = next(line for line in lines if "Total Revenue" in line)
        assert "$" not in margin
        assert margin.count("%") == 2
        assert "$" in revenue
        assert "↑" in margin or "↓" in margin

    def test_show_denied(self, output):
        code = cli.main(["show", "--user", "branch-2", "--hospital", "general-1", "--year", "2024"])

        assert code == cli.EXIT_DENIED
        assert "not authorized" in output.getvalue()

    def test_show_not_found(self, output):
        code = cli.main(["show", "--user", "admin-1", "--hospital", "general-1", "--year", "1999"])

        assert code == cli.EXIT_NOT_FOUND
        assert "No financial data" in output.getvalue()

    def test_peers(self, output):
        code = cli.main(["--seed", "7", "peers", "--user", "owner-1", "--hospital", "general-1", "--year", "2023"])

        assert code == 0
        assert "1 entitled peer(s)" in output.getvalue()

    def test_unknown_user(self, output):
        code = cli.main(["hospitals", "--user", "mallory"])

        assert code == cli.EXIT_UNKNOWN_USER
        assert "Unknown user" in output.getvalue()

    def test_missing_command_exits(self, output):
        with pytest.raises(SystemExit):
            cli.main([])
