"""
UK tax-year constants for the take-home pay and pension calculator.

All monetary values in GBP per year. Income tax band limits are measured
on *taxable* income (after the personal allowance), so a band list starts
at zero and the final band runs to infinity.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import List, Mapping, Tuple


# ─── Errors ──────────────────────────────────────────────────────────

class UnknownTaxYearError(ValueError):
    """Raised when a tax year has no constants in ``TAX_YEARS``."""


class UnknownStudentLoanPlanError(ValueError):
    """Raised for a student loan plan outside the configured set."""


# ─── Shape of one tax year ───────────────────────────────────────────

# (rate, upper limit); limits strictly increasing, last one inf
Band = Tuple[float, float]


@dataclass(frozen=True)
class PersonalAllowance:
    basic_allowance: float
    taper_threshold: float        # allowance drops £1 per £2 above this


@dataclass(frozen=True)
class IncomeTaxBands:
    rest_of_uk: Tuple[Band, ...]
    scotland: Tuple[Band, ...]


@dataclass(frozen=True)
class NationalInsurance:
    """Class 1 NI parameters.

    ``employee_rates`` and ``employer_rates`` are (main rate, upper rate)
    pairs: the first applies between the relevant threshold and the upper
    earnings limit, the second to everything above it.
    """

    primary_threshold: float      # employee floor
    secondary_threshold: float    # employer floor
    upper_earnings_limit: float
    employee_rates: Tuple[float, float]
    employer_rates: Tuple[float, float]


@dataclass(frozen=True)
class StudentLoan:
    default_rate: float
    postgrad_rate: float
    thresholds: Mapping[str, float]    # read-only


@dataclass(frozen=True)
class TaxYearConstants:
    """Everything the calculation pipeline reads for one tax year."""

    personal_allowance: PersonalAllowance
    income_tax: IncomeTaxBands
    national_insurance: NationalInsurance
    student_loan: StudentLoan


# ─── General ─────────────────────────────────────────────────────────

STUDENT_LOAN_PLANS = ("none", "plan1", "plan2", "plan4", "plan5", "postgrad")

# Net contribution is 80% of gross at basic rate: gross = net / 0.8
RELIEF_AT_SOURCE_FACTOR = 1.25

INF = float("inf")

# ── Personal Allowance (frozen since 2021/22) ────────────────────────
_PERSONAL_ALLOWANCE = PersonalAllowance(
    basic_allowance=12_570,
    taper_threshold=100_000,
)

# ── Income Tax (England, Wales & NI) ─────────────────────────────────
_RUK_BANDS = (
    (0.20, 37_700),    # basic rate
    (0.40, 125_140),   # higher rate
    (0.45, INF),       # additional rate
)

# ── Income Tax (Scotland) ────────────────────────────────────────────
_SCOTLAND_BANDS_2023 = (
    (0.19, 2_162),     # starter
    (0.20, 13_118),    # basic
    (0.21, 31_092),    # intermediate
    (0.42, 125_140),   # higher
    (0.47, INF),       # top
)

_SCOTLAND_BANDS_2024 = (
    (0.19, 2_306),
    (0.20, 13_991),
    (0.21, 31_092),
    (0.42, 62_430),
    (0.45, 125_140),   # advanced
    (0.48, INF),
)

_SCOTLAND_BANDS_2025 = (
    (0.19, 2_827),
    (0.20, 14_921),
    (0.21, 31_092),
    (0.42, 62_430),
    (0.45, 125_140),
    (0.48, INF),
)

# ── Student Loans ────────────────────────────────────────────────────
SL_DEFAULT_RATE = 0.09
SL_POSTGRAD_RATE = 0.06


# ─── The table ───────────────────────────────────────────────────────

TAX_YEARS: Mapping[str, TaxYearConstants] = MappingProxyType({
    "2023/24": TaxYearConstants(
        personal_allowance=_PERSONAL_ALLOWANCE,
        income_tax=IncomeTaxBands(rest_of_uk=_RUK_BANDS, scotland=_SCOTLAND_BANDS_2023),
        national_insurance=NationalInsurance(
            primary_threshold=12_570,
            secondary_threshold=9_100,
            upper_earnings_limit=50_270,
            employee_rates=(0.12, 0.02),
            employer_rates=(0.138, 0.138),
        ),
        student_loan=StudentLoan(
            default_rate=SL_DEFAULT_RATE,
            postgrad_rate=SL_POSTGRAD_RATE,
            thresholds=MappingProxyType({
                "plan1": 22_015,
                "plan2": 27_295,
                "plan4": 27_660,
                "postgrad": 21_000,
            }),
        ),
    ),
    "2024/25": TaxYearConstants(
        personal_allowance=_PERSONAL_ALLOWANCE,
        income_tax=IncomeTaxBands(rest_of_uk=_RUK_BANDS, scotland=_SCOTLAND_BANDS_2024),
        national_insurance=NationalInsurance(
            primary_threshold=12_570,
            secondary_threshold=9_100,
            upper_earnings_limit=50_270,
            employee_rates=(0.08, 0.02),
            employer_rates=(0.138, 0.138),
        ),
        student_loan=StudentLoan(
            default_rate=SL_DEFAULT_RATE,
            postgrad_rate=SL_POSTGRAD_RATE,
            thresholds=MappingProxyType({
                "plan1": 24_990,
                "plan2": 27_295,
                "plan4": 31_395,
                "postgrad": 21_000,
            }),
        ),
    ),
    "2025/26": TaxYearConstants(
        personal_allowance=_PERSONAL_ALLOWANCE,
        income_tax=IncomeTaxBands(rest_of_uk=_RUK_BANDS, scotland=_SCOTLAND_BANDS_2025),
        national_insurance=NationalInsurance(
            primary_threshold=12_570,
            secondary_threshold=5_000,
            upper_earnings_limit=50_270,
            employee_rates=(0.08, 0.02),
            employer_rates=(0.15, 0.15),
        ),
        student_loan=StudentLoan(
            default_rate=SL_DEFAULT_RATE,
            postgrad_rate=SL_POSTGRAD_RATE,
            thresholds=MappingProxyType({
                "plan1": 26_065,
                "plan2": 28_470,
                "plan4": 32_745,
                "plan5": 25_000,
                "postgrad": 21_000,
            }),
        ),
    ),
})

DEFAULT_TAX_YEAR = "2025/26"


def get_tax_year(tax_year: str) -> TaxYearConstants:
    """Return the constants for *tax_year* (e.g. ``"2025/26"``).

    Raises
    ------
    UnknownTaxYearError
        If the table has no entry for *tax_year*.
    """
    try:
        return TAX_YEARS[tax_year]
    except KeyError:
        available = ", ".join(sorted(TAX_YEARS))
        raise UnknownTaxYearError(
            f"Unknown tax year {tax_year!r}. Available: {available}"
        ) from None


def available_tax_years() -> List[str]:
    return sorted(TAX_YEARS)


# ─── CLI / analysis defaults ─────────────────────────────────────────

DEFAULT_GROSS_INCOME = 50_000

SWEEP_MIN = 0
SWEEP_MAX = 200_000
SWEEP_STEP = 500

# Net voluntary personal contributions tabulated by the savings table
SAVINGS_CONTRIBUTIONS = [0, 500, 1_000, 2_000, 5_000, 10_000, 20_000]
