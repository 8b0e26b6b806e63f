"""
Analysis built on the take-home pay pipeline.

  - Marginal and effective rate breakdown for a single salary
  - Income sweep: the full pipeline across a grid of gross incomes
  - Savings table: tax saved by a range of voluntary pension contributions

Sweep outputs are numpy arrays so they can be charted directly.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence

import numpy as np

import config as cfg
import tax
from tax import TaxInputs

logger = logging.getLogger(__name__)


# ─── Data Classes ─────────────────────────────────────────────────────

@dataclass
class SweepResult:
    """Pipeline outputs across a grid of gross incomes, all shape (n,)."""

    incomes: np.ndarray = field(repr=False)
    income_tax: np.ndarray = field(repr=False)
    employee_ni: np.ndarray = field(repr=False)
    employer_ni: np.ndarray = field(repr=False)
    student_loan: np.ndarray = field(repr=False)
    combined_taxes: np.ndarray = field(repr=False)
    take_home: np.ndarray = field(repr=False)
    pension_pot: np.ndarray = field(repr=False)
    effective_rate: np.ndarray = field(repr=False)   # combined / gross, 0 at zero income
    marginal_rate: np.ndarray = field(repr=False)    # d(combined) / d(gross)


@dataclass
class SavingsRow:
    """One row of the voluntary contribution savings table."""

    contribution: float          # net amount paid personally
    grossed_contribution: float  # what lands in the pot
    tax_saving: float
    net_cost: float              # contribution - tax_saving
    relief_rate: float           # tax_saving / grossed_contribution


@dataclass
class SavingsTable:
    gross_income: float
    rows: list[SavingsRow]
    best_rate_contribution: Optional[float]   # None if nothing saves tax


# ─── Marginal Rate Breakdown ────────────────────────────────────────

def marginal_rate_breakdown(gross_income: float, inputs: TaxInputs) -> Dict[str, float]:
    """Marginal and effective rate breakdown for a single salary.

    Uses a £1 delta to compute the marginal rate of each component.

    Parameters
    ----------
    gross_income : float
        Annual gross salary.
    inputs : TaxInputs
        Tax year, residency and pension elections.

    Returns
    -------
    dict
        Keys: ``'income_tax_pct'``, ``'ni_pct'``, ``'sl_pct'``,
        ``'total_marginal_pct'``, ``'effective_pct'``.
    """
    now = tax.calculate_taxes(gross_income, inputs)
    plus_one = tax.calculate_taxes(gross_income + 1.0, inputs)

    it_marginal = plus_one.income_tax.total - now.income_tax.total
    ni_marginal = plus_one.employee_ni.total - now.employee_ni.total
    sl_marginal = plus_one.student_loan_repayments - now.student_loan_repayments
    total_marginal = it_marginal + ni_marginal + sl_marginal

    effective = now.combined_taxes / gross_income if gross_income > 0 else 0.0

    return {
        "income_tax_pct": round(it_marginal * 100, 2),
        "ni_pct": round(ni_marginal * 100, 2),
        "sl_pct": round(sl_marginal * 100, 2),
        "total_marginal_pct": round(total_marginal * 100, 2),
        "effective_pct": round(effective * 100, 2),
    }


# ─── Income Sweep ───────────────────────────────────────────────────

def default_incomes() -> np.ndarray:
    return np.arange(cfg.SWEEP_MIN, cfg.SWEEP_MAX + cfg.SWEEP_STEP, cfg.SWEEP_STEP, dtype=float)


def income_sweep(inputs: TaxInputs, incomes: Optional[Sequence[float]] = None) -> SweepResult:
    """Evaluate the pipeline at every gross income in *incomes*.

    Parameters
    ----------
    inputs : TaxInputs
        Elections held fixed across the sweep.
    incomes : sequence of float, optional
        Gross incomes to evaluate. Defaults to ``SWEEP_MIN`` to
        ``SWEEP_MAX`` in ``SWEEP_STEP`` steps.

    Returns
    -------
    SweepResult
    """
    incomes = default_incomes() if incomes is None else np.asarray(incomes, dtype=float)
    n = len(incomes)
    t0 = time.time()

    it = np.zeros(n)
    ee_ni = np.zeros(n)
    er_ni = np.zeros(n)
    sl = np.zeros(n)
    combined = np.zeros(n)
    take_home = np.zeros(n)
    pot = np.zeros(n)

    for i, gross in enumerate(incomes):
        res = tax.calculate_taxes(float(gross), inputs)
        it[i] = res.income_tax.total
        ee_ni[i] = res.employee_ni.total
        er_ni[i] = res.employer_ni.total
        sl[i] = res.student_loan_repayments
        combined[i] = res.combined_taxes
        take_home[i] = res.take_home_pay
        pot[i] = res.pension_pot

    safe = np.where(incomes > 0, incomes, 1.0)
    effective = np.where(incomes > 0, combined / safe, 0.0)
    if n > 1:
        marginal = np.gradient(combined, incomes)
    else:
        marginal = np.zeros(n)

    logger.info("Swept %d incomes in %.2fs", n, time.time() - t0)

    return SweepResult(
        incomes=incomes,
        income_tax=it,
        employee_ni=ee_ni,
        employer_ni=er_ni,
        student_loan=sl,
        combined_taxes=combined,
        take_home=take_home,
        pension_pot=pot,
        effective_rate=effective,
        marginal_rate=marginal,
    )


# ─── Savings Table ──────────────────────────────────────────────────

def savings_table(
    gross_income: float,
    inputs: TaxInputs,
    contributions: Sequence[float] = cfg.SAVINGS_CONTRIBUTIONS,
) -> SavingsTable:
    """Tax saved by each voluntary personal contribution in *contributions*.

    Each level replaces the personal contribution in *inputs* (see
    :func:`tax.calculate_tax_savings`). The contribution with the highest
    relief rate is reported as ``best_rate_contribution``; the first one
    wins a tie, so the smallest amount reaching the best rate is shown.
    """
    rows: list[SavingsRow] = []
    best: Optional[float] = None
    best_rate = 0.0

    for contribution in contributions:
        saving = tax.calculate_tax_savings(gross_income, inputs, contribution)
        grossed = tax.gross_personal_contribution(contribution, inputs.tax_relief_at_source)
        rate = saving / grossed if grossed > 0 else 0.0

        rows.append(SavingsRow(
            contribution=float(contribution),
            grossed_contribution=grossed,
            tax_saving=saving,
            net_cost=contribution - saving,
            relief_rate=rate,
        ))

        # small tolerance so float noise doesn't move the pick
        if rate > best_rate + 1e-9:
            best_rate = rate
            best = float(contribution)

    return SavingsTable(gross_income=gross_income, rows=rows, best_rate_contribution=best)
