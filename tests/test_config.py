"""Tests for the tax-year constants table."""

import pytest

import config as cfg
from config import UnknownTaxYearError


@pytest.fixture(params=sorted(cfg.TAX_YEARS))
def constants(request):
    return cfg.get_tax_year(request.param)


def test_get_tax_year_returns_table_entry():
    assert cfg.get_tax_year("2024/25") is cfg.TAX_YEARS["2024/25"]


def test_unknown_tax_year_lists_available():
    with pytest.raises(UnknownTaxYearError, match="2025/26"):
        cfg.get_tax_year("2030/31")


def test_unknown_tax_year_is_value_error():
    assert issubclass(UnknownTaxYearError, ValueError)


def test_default_tax_year_exists():
    assert cfg.DEFAULT_TAX_YEAR in cfg.TAX_YEARS


@pytest.mark.parametrize("region", ["rest_of_uk", "scotland"])
def test_band_limits_strictly_increasing(constants, region):
    bands = getattr(constants.income_tax, region)
    limits = [limit for _, limit in bands]
    assert all(b > a for a, b in zip(limits, limits[1:]))
    assert limits[-1] == float("inf")
    assert all(0 <= rate <= 1 for rate, _ in bands)


def test_ni_thresholds_below_uel(constants):
    ni = constants.national_insurance
    assert ni.primary_threshold < ni.upper_earnings_limit
    assert ni.secondary_threshold < ni.upper_earnings_limit
    assert len(ni.employee_rates) == 2
    assert len(ni.employer_rates) == 2


def test_student_loan_plans_are_known(constants):
    assert set(constants.student_loan.thresholds) <= set(cfg.STUDENT_LOAN_PLANS) - {"none"}


def test_plan5_only_from_2025():
    assert "plan5" in cfg.TAX_YEARS["2025/26"].student_loan.thresholds
    assert "plan5" not in cfg.TAX_YEARS["2024/25"].student_loan.thresholds


def test_constants_are_frozen(constants):
    with pytest.raises(AttributeError):
        constants.personal_allowance.basic_allowance = 0


def test_student_loan_thresholds_read_only(constants):
    with pytest.raises(TypeError):
        constants.student_loan.thresholds["plan2"] = 0


def test_tax_year_table_read_only():
    with pytest.raises(TypeError):
        cfg.TAX_YEARS["2099/00"] = cfg.TAX_YEARS[cfg.DEFAULT_TAX_YEAR]
    assert "2099/00" not in cfg.TAX_YEARS
