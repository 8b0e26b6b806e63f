"""Tests for the CLI helpers, terminal output and main entry point."""

import sys

import pytest

import cli
import config as cfg
import main
import report
from sweep import income_sweep, savings_table
from tax import PensionContributions, TaxInputs, calculate_taxes


def _feed(monkeypatch, answers):
    it = iter(answers)
    monkeypatch.setattr("builtins.input", lambda _prompt="": next(it))


class TestFormatting:
    def test_fmt(self):
        assert cli.fmt(1_234.4) == "£1,234"
        assert cli.fmt(-50, 2) == "-£50.00"

    def test_rate_label(self):
        assert cli.rate_label(0.2) == "20%"
        assert cli.rate_label(0.138) == "13.8%"

    def test_strip_currency(self):
        assert cli._strip_currency("£45,000") == "45000"


class TestPrompts:
    def test_prompt_float_retries(self, monkeypatch, capsys):
        _feed(monkeypatch, ["abc", "-5", "12"])
        assert cli._prompt_float("Amount", 0, min_val=0) == 12
        out = capsys.readouterr().out
        assert "Invalid number" in out
        assert "Must be at least 0" in out

    def test_prompt_choice_retries(self, monkeypatch):
        _feed(monkeypatch, ["maybe", "YES"])
        assert cli._prompt_choice("Sure?", ["yes", "no"], "no") == "yes"

    def test_collect_inputs_defaults(self, monkeypatch):
        monkeypatch.setattr("builtins.input", lambda _prompt="": "")
        gross, inputs, voluntary = cli.collect_inputs()
        assert gross == cfg.DEFAULT_GROSS_INCOME
        assert voluntary == 1_000
        assert inputs.tax_year == cfg.DEFAULT_TAX_YEAR
        assert inputs.student_loan == "none"
        assert inputs.pension_contributions.auto_enrolment == 5.0
        assert inputs.tax_relief_at_source is True
        assert inputs.resident_in_scotland is False


class TestPrintReport:
    def test_sections(self, capsys):
        inputs = TaxInputs(student_loan="plan2")
        result = cli.print_report(60_000, inputs, voluntary=1_000)
        out = capsys.readouterr().out

        assert result == calculate_taxes(60_000, inputs)
        for title in ("YOUR INCOME", "DEDUCTIONS", "TAKE-HOME", "MARGINAL RATE", "PENSION TAX SAVINGS"):
            assert title in out
        assert "at 20%" in out
        assert "at 40%" in out
        assert "Paying in £1,000 saves" in out


class TestMain:
    def test_non_interactive(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["main.py", "--income", "40000", "--student-loan", "plan1"])
        main.main()
        out = capsys.readouterr().out
        assert "Student loan (plan1)" in out

    def test_unknown_tax_year_exits(self, monkeypatch):
        monkeypatch.setattr(sys, "argv", ["main.py", "--income", "40000", "--tax-year", "1990/91"])
        with pytest.raises(SystemExit):
            main.main()

    def test_chart(self, monkeypatch, tmp_path):
        path = tmp_path / "chart.png"
        monkeypatch.setattr(sys, "argv", ["main.py", "--income", "40000", "--chart", str(path)])
        main.main()
        assert path.exists()

    def test_auto_enrolment_sacrifice_flag(self):
        parser = main.build_parser()
        assert "Auto-enrolment contribution is also taken by salary sacrifice" in " ".join(parser.format_help().split())
        args = parser.parse_args(["--auto-enrolment-as-salary-sacrifice"])
        assert args.auto_enrolment_as_salary_sacrifice is True
        assert parser.parse_args([]).auto_enrolment_as_salary_sacrifice is False


def test_save_report_pdf(tmp_path):
    inputs = TaxInputs(pension_contributions=PensionContributions(salary_sacrifice=2_000))
    sweep = income_sweep(inputs, [0, 20_000, 60_000, 120_000])
    path = report.save_report(sweep, inputs, savings_table(60_000, inputs), str(tmp_path / "r.pdf"))
    assert (tmp_path / "r.pdf").stat().st_size > 0
    assert path.endswith("r.pdf")
