"""
Chart export for the take-home pay calculator.

One figure, three panels:
  - Take-home pay and combined taxes against gross income
  - Marginal and effective deduction rates against gross income
  - Tax saved by each voluntary pension contribution level

The output format follows the file extension (``.png``, ``.pdf``, ...).
"""

from __future__ import annotations

from typing import Optional

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.ticker import FuncFormatter
import numpy as np

import config as cfg
from sweep import SavingsTable, SweepResult
from tax import TaxInputs

# ═══════════════════════════════════════════════════════════════════
# Style constants
# ═══════════════════════════════════════════════════════════════════

BG = "#0a101f"
CARD = "#131b2e"
TEXT = "#f1f5f9"
INDIGO = "#818cf8"
EMERALD = "#34d399"
AMBER = "#fbbf24"
RED = "#f87171"
SLATE = "#94a3b8"
BORDER = "#1e293b"

A4W, A4H = 8.27, 11.69


# ═══════════════════════════════════════════════════════════════════
# Axis formatters
# ═══════════════════════════════════════════════════════════════════

def _gbp_fmt(x, _):
    if abs(x) >= 1e6:
        return f"£{x / 1e6:.1f}M"
    if abs(x) >= 1e3:
        return f"£{x / 1e3:.0f}k"
    return f"£{x:.0f}"


def _pct_fmt(x, _):
    return f"{x:.0f}%"


GBP_FMT = FuncFormatter(_gbp_fmt)
PCT_FMT = FuncFormatter(_pct_fmt)


# ═══════════════════════════════════════════════════════════════════
# Style helpers
# ═══════════════════════════════════════════════════════════════════

def _style(fig, *axes):
    """Apply dark theme to figure and all axes."""
    fig.patch.set_facecolor(BG)
    for ax in axes:
        ax.set_facecolor(CARD)
        ax.tick_params(colors=TEXT, labelsize=8)
        ax.xaxis.label.set_color(TEXT)
        ax.yaxis.label.set_color(TEXT)
        ax.title.set_color(TEXT)
        for spine in ax.spines.values():
            spine.set_color(BORDER)
        ax.grid(True, alpha=0.15, color=SLATE)


def _legend(ax, loc="upper left"):
    ax.legend(loc=loc, fontsize=8, facecolor=CARD, edgecolor=BORDER, labelcolor=TEXT)


def _mark_taper(ax, inputs: TaxInputs):
    """Shade the personal allowance taper zone on a gross-income axis."""
    pa = cfg.get_tax_year(inputs.tax_year).personal_allowance
    taper_end = pa.taper_threshold + 2 * pa.basic_allowance
    ax.axvspan(pa.taper_threshold, taper_end, alpha=0.08, color=RED)
    ax.annotate(f"PA taper (>£{pa.taper_threshold / 1e3:.0f}k)",
                xy=(pa.taper_threshold, ax.get_ylim()[1] * 0.92),
                fontsize=7, color=RED, alpha=0.8)


# ═══════════════════════════════════════════════════════════════════
# Panels
# ═══════════════════════════════════════════════════════════════════

def _panel_take_home(ax, sweep: SweepResult, inputs: TaxInputs):
    x = sweep.incomes
    ax.plot(x, sweep.take_home, color=EMERALD, linewidth=2, label="Take-home pay")
    ax.plot(x, sweep.combined_taxes, color=INDIGO, linewidth=2, label="Combined taxes")
    if np.any(sweep.pension_pot > 0):
        ax.plot(x, sweep.pension_pot, color=AMBER, linewidth=1.5,
                linestyle="--", label="Pension pot")
    ax.xaxis.set_major_formatter(GBP_FMT)
    ax.yaxis.set_major_formatter(GBP_FMT)
    ax.set_xlabel("Gross income")
    ax.set_title(f"Take-Home Pay ({inputs.tax_year})", fontsize=11, pad=10)
    _legend(ax)
    _mark_taper(ax, inputs)


def _panel_rates(ax, sweep: SweepResult, inputs: TaxInputs):
    x = sweep.incomes
    ax.plot(x, sweep.marginal_rate * 100, color=AMBER, linewidth=1.5,
            label="Marginal rate")
    ax.plot(x, sweep.effective_rate * 100, color=SLATE, linewidth=2,
            linestyle="--", label="Effective rate")
    ax.set_ylim(0, max(80.0, float(np.max(sweep.marginal_rate)) * 100 + 5))
    ax.axhline(50, color=RED, linewidth=1, linestyle="--", alpha=0.5)
    ax.xaxis.set_major_formatter(GBP_FMT)
    ax.yaxis.set_major_formatter(PCT_FMT)
    ax.set_xlabel("Gross income")
    ax.set_title("Marginal and Effective Deduction Rates", fontsize=11, pad=10)
    _legend(ax, loc="upper right")
    _mark_taper(ax, inputs)


def _panel_savings(ax, table: SavingsTable):
    contribs = [r.contribution for r in table.rows]
    savings = [r.tax_saving for r in table.rows]
    costs = [r.net_cost for r in table.rows]

    x = np.arange(len(contribs))
    w = 0.35
    ax.bar(x - w / 2, costs, w, color=INDIGO, label="Net cost to you")
    ax.bar(x + w / 2, savings, w, color=EMERALD, label="Tax saved")
    ax.set_xticks(x)
    ax.set_xticklabels([f"£{int(c):,}" for c in contribs],
                       fontsize=7.5, rotation=45, ha="right")
    ax.yaxis.set_major_formatter(GBP_FMT)
    ax.set_xlabel("Voluntary pension contribution (net)")
    ax.set_title(f"Pension Tax Savings at £{table.gross_income:,.0f}",
                 fontsize=11, pad=10)
    _legend(ax)


# ═══════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════

def build_figure(
    sweep: SweepResult,
    inputs: TaxInputs,
    table: Optional[SavingsTable] = None,
) -> plt.Figure:
    """Lay out the chart panels on a single A4 figure."""
    n_panels = 3 if table is not None else 2
    fig, axes = plt.subplots(n_panels, 1, figsize=(A4W, A4H),
                             constrained_layout=True)
    _style(fig, *axes)

    _panel_take_home(axes[0], sweep, inputs)
    _panel_rates(axes[1], sweep, inputs)
    if table is not None:
        _panel_savings(axes[2], table)
    return fig


def save_report(
    sweep: SweepResult,
    inputs: TaxInputs,
    table: Optional[SavingsTable],
    path: str = "take_home_report.png",
) -> str:
    """Render and save the chart. Returns the file path."""
    fig = build_figure(sweep, inputs, table)
    fig.savefig(path, facecolor=fig.get_facecolor(), dpi=150)
    plt.close(fig)
    return path
