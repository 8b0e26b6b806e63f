"""
CLI interface for the UK take-home pay and pension calculator.

Interactive prompts plus box-drawn terminal output of a tax calculation,
its marginal rates and the pension savings table.
"""

from __future__ import annotations

import sys
from typing import Any, List, Optional, Tuple

import config as cfg
import tax
from sweep import SavingsTable, marginal_rate_breakdown, savings_table
from tax import BandBreakdown, PensionContributions, TaxInputs, TaxResult


# ═══════════════════════════════════════════════════════════════════
# Formatting helpers
# ═══════════════════════════════════════════════════════════════════

def fmt(val: float, decimals: int = 0) -> str:
    """Format number as £X,XXX (negatives as -£X,XXX)."""
    sign = "-" if val < 0 else ""
    return f"{sign}£{abs(val):,.{decimals}f}"


def pct(val: float, decimals: int = 1) -> str:
    return f"{val:.{decimals}f}%"


def rate_label(rate: float) -> str:
    """0.2 -> '20%', 0.138 -> '13.8%'."""
    return f"{rate * 100:.4g}%"


# ═══════════════════════════════════════════════════════════════════
# Input collection (CLI)
# ═══════════════════════════════════════════════════════════════════

def _strip_currency(s: str) -> str:
    """Remove currency symbols, commas, spaces."""
    return s.replace("£", "").replace(",", "").replace(" ", "")


def _prompt_float(
    label: str,
    default: Any,
    min_val: float | None = None,
    max_val: float | None = None,
    currency: bool = False,
) -> float:
    while True:
        raw = input(f"  {label} [{default}]: ").strip()
        if not raw:
            return float(_strip_currency(str(default))) if currency else float(default)
        try:
            val = float(_strip_currency(raw) if currency else raw.replace("%", ""))
            if min_val is not None and val < min_val:
                print(f"    Must be at least {min_val}")
                continue
            if max_val is not None and val > max_val:
                print(f"    Must be at most {max_val}")
                continue
            return val
        except ValueError:
            print("    Invalid number, try again.")


def _prompt_choice(label: str, options: list[str], default: str) -> str:
    opts = "/".join(options)
    while True:
        raw = input(f"  {label} ({opts}) [{default}]: ").strip().lower()
        if not raw:
            return default
        if raw in options:
            return raw
        print(f"    Choose from: {opts}")


def collect_inputs() -> Tuple[float, TaxInputs, float]:
    """Prompt for income, elections and a voluntary contribution to test."""
    print("\n  Enter your details (press Enter for defaults):\n")

    gross = _prompt_float("Annual gross income", f"£{cfg.DEFAULT_GROSS_INCOME:,}", 0, currency=True)
    year = _prompt_choice("Tax year", cfg.available_tax_years(), cfg.DEFAULT_TAX_YEAR)
    scotland = _prompt_choice("Scottish taxpayer?", ["yes", "no"], "no")
    plan = _prompt_choice("Student loan", list(cfg.STUDENT_LOAN_PLANS), "none")
    ni = _prompt_choice("Pay National Insurance?", ["yes", "no"], "yes")
    sacrifice = _prompt_float("Salary sacrifice into pension", "£0", 0, currency=True)
    ae = _prompt_float("Auto-enrolment contribution %", 5.0, 0, 100)
    ae_sacrifice = _prompt_choice("Auto-enrolment via salary sacrifice?", ["yes", "no"], "no")
    personal = _prompt_float("Personal pension contribution (net)", "£0", 0, currency=True)
    ras = _prompt_choice("Tax relief at source?", ["yes", "no"], "yes")
    voluntary = _prompt_float("Voluntary contribution to test", "£1,000", 0, currency=True)

    inputs = TaxInputs(
        tax_year=year,
        resident_in_scotland=scotland == "yes",
        student_loan=plan,
        no_ni=ni == "no",
        pension_contributions=PensionContributions(
            salary_sacrifice=sacrifice,
            auto_enrolment=ae,
            personal=personal,
        ),
        auto_enrolment_as_salary_sacrifice=ae_sacrifice == "yes",
        tax_relief_at_source=ras == "yes",
    )
    return gross, inputs, voluntary


# ═══════════════════════════════════════════════════════════════════
# Box-drawing CLI output
# ═══════════════════════════════════════════════════════════════════

W = 78  # box width (characters)
_H = "═"
_V = "║"


def _box_top(title: str) -> str:
    inner = W - 2
    return (
        f"╔{_H * inner}╗\n"
        f"{_V}  {title:<{inner - 2}}{_V}\n"
        f"╠{_H * inner}╣"
    )


def _box_line(text: str = "") -> str:
    inner = W - 4
    if len(text) > inner:
        text = text[:inner]
    return f"{_V}  {text:<{inner}}{_V}"


def _box_row(label: str, value: str, lw: int = 38) -> str:
    return _box_line(f"{label:<{lw}}{value}")


def _box_bottom() -> str:
    return f"╚{_H * (W - 2)}╝"


def _print_section(title: str, rows: List[str]) -> None:
    """Print a titled box with content rows."""
    print(_box_top(title))
    for r in rows:
        print(r)
    print(_box_bottom())
    print()


def _breakdown_rows(label: str, result: BandBreakdown) -> List[str]:
    rows = [_box_row(label, fmt(result.total, 2))]
    for entry in result.breakdown:
        rows.append(_box_row(f"  at {rate_label(entry.rate)}", fmt(entry.amount, 2)))
    return rows


# ═══════════════════════════════════════════════════════════════════
# CLI Section Printers
# ═══════════════════════════════════════════════════════════════════

def _print_income(r: TaxResult, inputs: TaxInputs) -> None:
    region = "Scotland" if inputs.resident_in_scotland else "England, Wales & NI"
    rows = [
        _box_row("Tax year", inputs.tax_year),
        _box_row("Tax region", region),
        _box_row("Gross income", fmt(r.gross_income)),
        _box_row("Pay after salary sacrifice", fmt(r.income_after_salary_sacrifice)),
        _box_line(),
        _box_row("Auto-enrolment contribution", fmt(r.auto_enrolment_contribution)),
        _box_row("Personal contribution (gross)", fmt(r.grossed_personal_contribution)),
        _box_row("Pension pot this year", fmt(r.pension_pot)),
        _box_line(),
        _box_row("Adjusted net income", fmt(r.adjusted_net_income)),
        _box_row("Personal allowance", fmt(r.personal_allowance)),
        _box_row("Taxable income", fmt(r.taxable_income)),
    ]
    _print_section("YOUR INCOME", rows)


def _print_deductions(r: TaxResult, inputs: TaxInputs) -> None:
    rows = _breakdown_rows("Income tax", r.income_tax)
    rows += _breakdown_rows("National Insurance", r.employee_ni)
    rows.append(_box_row(f"Student loan ({inputs.student_loan})",
                         fmt(r.student_loan_repayments, 2)))
    rows.append(_box_line())
    rows.append(_box_row("Combined taxes", fmt(r.combined_taxes, 2)))
    rows.append(_box_line())
    rows.append(_box_row("Employer NI (paid by employer)", fmt(r.employer_ni.total, 2)))
    _print_section("DEDUCTIONS", rows)


def _print_take_home(r: TaxResult) -> None:
    rows = [
        _box_row("Take-home pay (annual)", fmt(r.take_home_pay)),
        _box_row("Take-home pay (monthly)", fmt(r.take_home_pay / 12)),
        _box_row("Pension pot", fmt(r.pension_pot)),
        _box_row("Your money (pot + take-home)", fmt(r.your_money)),
    ]
    _print_section("TAKE-HOME", rows)


def _print_marginal(m: dict) -> None:
    breakdown = (
        f"{pct(m['income_tax_pct'])} IT + "
        f"{pct(m['ni_pct'])} NI + "
        f"{pct(m['sl_pct'])} SL"
    )
    rows = [
        _box_row("Marginal rate", pct(m["total_marginal_pct"])),
        _box_row("  Breakdown", breakdown),
        _box_row("Effective rate", pct(m["effective_pct"])),
    ]
    _print_section("MARGINAL RATE", rows)


def _print_savings(table: SavingsTable, voluntary: Optional[float], saving: Optional[float]) -> None:
    h1 = f"{'Pay in':>9}  {'In pot':>9}  {'Tax saved':>10}  {'Costs you':>10}  {'Relief':>7}"
    rows = [_box_line(h1), _box_line("─" * (W - 6))]

    for row in table.rows:
        marker = " <<" if row.contribution == table.best_rate_contribution else ""
        line = (
            f"{fmt(row.contribution):>9}  "
            f"{fmt(row.grossed_contribution):>9}  "
            f"{fmt(row.tax_saving):>10}  "
            f"{fmt(row.net_cost):>10}  "
            f"{pct(row.relief_rate * 100, 0):>7}"
            f"{marker}"
        )
        rows.append(_box_line(line))

    if voluntary is not None and saving is not None:
        rows.append(_box_line())
        rows.append(_box_line(
            f"Paying in {fmt(voluntary)} saves {fmt(saving, 2)} in combined taxes."
        ))

    _print_section("PENSION TAX SAVINGS", rows)


# ═══════════════════════════════════════════════════════════════════
# Entry points
# ═══════════════════════════════════════════════════════════════════

def print_report(gross: float, inputs: TaxInputs, voluntary: Optional[float] = None) -> TaxResult:
    """Calculate and print every section for *gross* and *inputs*."""
    result = tax.calculate_taxes(gross, inputs)
    marginal = marginal_rate_breakdown(gross, inputs)
    table = savings_table(gross, inputs)
    saving = tax.calculate_tax_savings(gross, inputs, voluntary) if voluntary is not None else None

    print()
    _print_income(result, inputs)
    _print_deductions(result, inputs)
    _print_take_home(result)
    _print_marginal(marginal)
    _print_savings(table, voluntary, saving)
    return result


def run_cli() -> Tuple[float, TaxInputs]:
    """Run the interactive CLI workflow. Returns the income and inputs used."""
    # Ensure box-drawing characters render on Windows
    try:
        sys.stdout.reconfigure(encoding="utf-8")
    except (AttributeError, OSError):
        pass
    print()
    print("=" * W)
    print("  UK Take-Home Pay & Pension Calculator")
    print("=" * W)

    gross, inputs, voluntary = collect_inputs()
    print_report(gross, inputs, voluntary)
    return gross, inputs


if __name__ == "__main__":
    run_cli()
