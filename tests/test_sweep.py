"""Tests for the marginal rate, income sweep and savings table analysis."""

import numpy as np
import pytest

import config as cfg
from sweep import income_sweep, marginal_rate_breakdown, savings_table
from tax import TaxInputs


class TestMarginalRateBreakdown:
    def test_basic_rate_taxpayer(self):
        """£30k: 20% tax + 8% NI, effective (3,486 + 1,394.40) / 30,000."""
        m = marginal_rate_breakdown(30_000, TaxInputs())
        assert m["income_tax_pct"] == pytest.approx(20.0)
        assert m["ni_pct"] == pytest.approx(8.0)
        assert m["sl_pct"] == pytest.approx(0.0)
        assert m["total_marginal_pct"] == pytest.approx(28.0)
        assert m["effective_pct"] == pytest.approx(16.27)

    def test_with_student_loan(self):
        m = marginal_rate_breakdown(40_000, TaxInputs(student_loan="plan2"))
        assert m["sl_pct"] == pytest.approx(9.0)
        assert m["total_marginal_pct"] == pytest.approx(37.0)

    def test_taper_odd_pound(self):
        """£110,001 -> £110,002 loses £1 of allowance: 2 x 40% on £1."""
        m = marginal_rate_breakdown(110_001, TaxInputs())
        assert m["income_tax_pct"] == pytest.approx(80.0)
        assert m["ni_pct"] == pytest.approx(2.0)

    def test_zero_income_effective_rate(self):
        assert marginal_rate_breakdown(0, TaxInputs())["effective_pct"] == 0.0


class TestIncomeSweep:
    def test_shapes_and_identities(self):
        incomes = [0, 10_000, 50_000, 100_000, 150_000]
        s = income_sweep(TaxInputs(student_loan="plan2"), incomes)

        for arr in (s.income_tax, s.employee_ni, s.employer_ni, s.student_loan,
                    s.combined_taxes, s.take_home, s.pension_pot,
                    s.effective_rate, s.marginal_rate):
            assert arr.shape == (5,)

        np.testing.assert_allclose(s.combined_taxes, s.income_tax + s.employee_ni + s.student_loan)
        np.testing.assert_allclose(s.take_home + s.combined_taxes, s.incomes)
        assert s.take_home[0] == 0
        assert s.effective_rate[0] == 0

    def test_combined_taxes_monotonic(self):
        s = income_sweep(TaxInputs(resident_in_scotland=True))
        assert np.all(np.diff(s.combined_taxes) >= 0)

    def test_default_grid(self):
        s = income_sweep(TaxInputs())
        expected = (cfg.SWEEP_MAX - cfg.SWEEP_MIN) // cfg.SWEEP_STEP + 1
        assert len(s.incomes) == expected
        assert s.incomes[0] == cfg.SWEEP_MIN
        assert s.incomes[-1] == cfg.SWEEP_MAX

    def test_single_income(self):
        s = income_sweep(TaxInputs(), [40_000])
        assert s.marginal_rate.tolist() == [0.0]

    def test_pension_pot_tracked(self):
        s = income_sweep(TaxInputs(), [20_000, 40_000])
        assert np.all(s.pension_pot == 0)


class TestSavingsTable:
    def test_rows(self):
        table = savings_table(100_000, TaxInputs(), [0, 1_000])
        assert [r.contribution for r in table.rows] == [0, 1_000]

        zero, thousand = table.rows
        assert zero.tax_saving == pytest.approx(0)
        assert zero.relief_rate == 0.0
        assert thousand.grossed_contribution == pytest.approx(1_250)
        assert thousand.tax_saving == pytest.approx(500)
        assert thousand.net_cost == pytest.approx(500)
        assert thousand.relief_rate == pytest.approx(0.4)
        assert table.best_rate_contribution == 1_000

    def test_taper_zone_tie_picks_smallest(self):
        """At £110k both £1,000 and £8,000 are relieved at 60%."""
        table = savings_table(110_000, TaxInputs(), [0, 1_000, 8_000])
        assert table.rows[1].relief_rate == pytest.approx(0.6)
        assert table.rows[2].relief_rate == pytest.approx(0.6)
        assert table.best_rate_contribution == 1_000

    def test_nothing_saved(self):
        table = savings_table(10_000, TaxInputs(), [0, 500])
        assert table.best_rate_contribution is None

    def test_default_contributions(self):
        table = savings_table(50_000, TaxInputs())
        assert len(table.rows) == len(cfg.SAVINGS_CONTRIBUTIONS)
