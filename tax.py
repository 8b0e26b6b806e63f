"""
UK take-home pay calculation pipeline.

Income tax, employee/employer National Insurance, student loan
repayments, personal allowance taper and pension pot accumulation for a
single gross income in a single tax year. Every function is pure: the
constants table is read, never written, and nothing is carried between
calls.

Not modelled: the tapered annual allowance on pension contributions, and
higher/additional-rate pension relief claimed through self assessment.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from typing import Sequence, Tuple

import config as cfg
from config import TaxYearConstants, UnknownStudentLoanPlanError

logger = logging.getLogger(__name__)


# ─── Data Classes ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class BandBreakdownEntry:
    """Tax charged at a single rate."""

    rate: float
    amount: float


@dataclass(frozen=True)
class BandBreakdown:
    """Total tax plus the per-rate amounts that make it up.

    Bands that received no income are left out, so ``breakdown`` only
    lists the rates actually charged, lowest band first.
    """

    total: float
    breakdown: Tuple[BandBreakdownEntry, ...] = ()


NOTHING_DUE = BandBreakdown(total=0.0, breakdown=())


@dataclass(frozen=True)
class PensionContributions:
    """Pension elections for the year.

    ``salary_sacrifice`` and ``personal`` are amounts in GBP;
    ``auto_enrolment`` is a percentage of income after salary sacrifice.
    """

    salary_sacrifice: float = 0.0
    auto_enrolment: float = 0.0
    personal: float = 0.0         # net of relief at source, if any


@dataclass(frozen=True)
class TaxInputs:
    """Everything besides gross income that the pipeline needs."""

    tax_year: str = cfg.DEFAULT_TAX_YEAR
    resident_in_scotland: bool = False
    student_loan: str = "none"
    no_ni: bool = False
    pension_contributions: PensionContributions = field(default_factory=PensionContributions)
    auto_enrolment_as_salary_sacrifice: bool = False
    tax_relief_at_source: bool = True

    def __post_init__(self) -> None:
        if self.student_loan not in cfg.STUDENT_LOAN_PLANS:
            raise UnknownStudentLoanPlanError(
                f"Student loan plan must be one of {', '.join(cfg.STUDENT_LOAN_PLANS)}; "
                f"got {self.student_loan!r}"
            )


@dataclass(frozen=True)
class TaxResult:
    """Output of :func:`calculate_taxes`."""

    gross_income: float
    income_after_salary_sacrifice: float   # the figure NI and student loan are charged on
    auto_enrolment_contribution: float
    grossed_personal_contribution: float
    adjusted_net_income: float
    personal_allowance: float
    taxable_income: float
    income_tax: BandBreakdown
    employee_ni: BandBreakdown
    employer_ni: BandBreakdown             # informational, not part of combined_taxes
    student_loan_repayments: float
    combined_taxes: float
    take_home_pay: float
    pension_pot: float
    your_money: float


# ─── Helpers ─────────────────────────────────────────────────────────

def _charge(amount: float, rate: float) -> BandBreakdownEntry:
    """Tax a capped slice of income at a flat rate."""
    return BandBreakdownEntry(rate=rate, amount=amount * rate)


# ─── Band Allocation ─────────────────────────────────────────────────

def allocate_bands(income: float, bands: Sequence[Tuple[float, float]]) -> BandBreakdown:
    """Spread *income* across progressive bands, lowest first.

    Parameters
    ----------
    income : float
        Non-negative income to allocate.
    bands : sequence of (rate, upper_limit)
        Limits measured from zero, strictly increasing.

    Returns
    -------
    BandBreakdown
        Total tax and one entry per band that received income.

    Notes
    -----
    The last band's limit must be large enough (normally ``inf``) to
    absorb all income. Anything above the last limit goes untaxed; that
    is a configuration error, not something checked here.
    """
    remaining = income
    previous_limit = 0.0
    total = 0.0
    breakdown = []

    for rate, upper_limit in bands:
        if remaining <= 0:
            break
        in_band = min(remaining, upper_limit - previous_limit)
        entry = _charge(in_band, rate)
        total += entry.amount
        breakdown.append(entry)
        remaining -= in_band
        previous_limit = upper_limit

    return BandBreakdown(total=total, breakdown=tuple(breakdown))


# ─── Personal Allowance ─────────────────────────────────────────────

def tapered_personal_allowance(income: float, constants: TaxYearConstants) -> float:
    """Personal allowance after the taper on *income* (adjusted net income).

    The allowance falls by £1 for every whole £2 above the taper
    threshold; odd pounds are rounded down before the reduction, so
    threshold + 1 still keeps the full allowance.
    """
    pa = constants.personal_allowance
    if income > pa.taper_threshold:
        reduction = math.floor((income - pa.taper_threshold) / 2)
        return max(0, pa.basic_allowance - reduction)
    return pa.basic_allowance


# ─── Income Tax ──────────────────────────────────────────────────────

def income_tax(
    taxable_income: float,
    constants: TaxYearConstants,
    resident_in_scotland: bool = False,
) -> BandBreakdown:
    """Income tax on *taxable_income* using Scottish or rest-of-UK bands."""
    if resident_in_scotland:
        bands = constants.income_tax.scotland
    else:
        bands = constants.income_tax.rest_of_uk
    return allocate_bands(taxable_income, bands)


# ─── National Insurance ─────────────────────────────────────────────

def national_insurance(
    income: float,
    constants: TaxYearConstants,
    employer: bool = False,
    no_ni: bool = False,
) -> BandBreakdown:
    """Class 1 National Insurance on *income*.

    Nothing is charged below the primary (employee) or secondary
    (employer) threshold. The main rate applies up to the upper earnings
    limit and the upper rate to everything above it.

    Parameters
    ----------
    income : float
        Annual earnings subject to NI.
    constants : TaxYearConstants
        Tax-year table entry.
    employer : bool
        Use the secondary threshold and employer rates.
    no_ni : bool
        Short-circuit to nothing due (e.g. over state pension age).

    Returns
    -------
    BandBreakdown
        Up to two entries: main rate then upper rate.
    """
    if no_ni:
        return NOTHING_DUE

    ni = constants.national_insurance
    threshold = ni.secondary_threshold if employer else ni.primary_threshold
    rates = ni.employer_rates if employer else ni.employee_rates

    remaining = max(0.0, income - threshold)
    total = 0.0
    breakdown = []

    main_band = min(remaining, ni.upper_earnings_limit - threshold)
    if main_band > 0:
        entry = _charge(main_band, rates[0])
        total += entry.amount
        breakdown.append(entry)
        remaining -= main_band

    if remaining > 0:
        entry = _charge(remaining, rates[1])
        total += entry.amount
        breakdown.append(entry)

    return BandBreakdown(total=total, breakdown=tuple(breakdown))


# ─── Student Loan ───────────────────────────────────────────────────

def student_loan_repayment(income: float, plan: str, constants: TaxYearConstants) -> float:
    """Annual student loan repayment for *plan* on *income*.

    Raises
    ------
    UnknownStudentLoanPlanError
        If the tax year has no threshold for *plan*.
    """
    if plan == "none":
        return 0.0

    sl = constants.student_loan
    try:
        threshold = sl.thresholds[plan]
    except KeyError:
        raise UnknownStudentLoanPlanError(
            f"No repayment threshold for {plan!r} in this tax year"
        ) from None

    if income <= threshold:
        return 0.0
    rate = sl.postgrad_rate if plan == "postgrad" else sl.default_rate
    return (income - threshold) * rate


# ─── Pension Contributions ──────────────────────────────────────────

def gross_personal_contribution(personal_contribution: float, tax_relief_at_source: bool = True) -> float:
    """Gross up a net personal contribution paid under relief at source.

    Only basic-rate relief is added; any higher-rate relief is claimed
    separately and does not reach the pot here.
    """
    if tax_relief_at_source:
        return personal_contribution * cfg.RELIEF_AT_SOURCE_FACTOR
    return personal_contribution


# ─── Full Pipeline ──────────────────────────────────────────────────

def calculate_taxes(gross_income: float, inputs: TaxInputs) -> TaxResult:
    """Run the full take-home pay pipeline for one gross income.

    Order matters: salary sacrifice (and auto-enrolment, when that is
    sacrificed too) comes off before NI and student loan are charged,
    while every pension contribution reduces adjusted net income before
    the allowance taper and income tax.

    Parameters
    ----------
    gross_income : float
        Annual gross salary.
    inputs : TaxInputs
        Tax year, residency, student loan plan and pension elections.

    Returns
    -------
    TaxResult

    Raises
    ------
    UnknownTaxYearError
        If ``inputs.tax_year`` is not in the constants table.
    """
    constants = cfg.get_tax_year(inputs.tax_year)
    pensions = inputs.pension_contributions

    # 1-3. Salary sacrifice, auto-enrolment, then auto-enrolment as sacrifice
    income_after_sacrifice = max(0.0, gross_income - pensions.salary_sacrifice)
    auto_enrolment = income_after_sacrifice * pensions.auto_enrolment / 100
    if inputs.auto_enrolment_as_salary_sacrifice:
        income_after_sacrifice -= auto_enrolment

    # 4-6. Charged on pay after sacrifice
    employee_ni = national_insurance(income_after_sacrifice, constants, False, inputs.no_ni)
    employer_ni = national_insurance(income_after_sacrifice, constants, True, inputs.no_ni)
    student_loan = student_loan_repayment(income_after_sacrifice, inputs.student_loan, constants)

    # 7-8. Pension pot for the year
    personal = gross_personal_contribution(pensions.personal, inputs.tax_relief_at_source)
    pension_pot = pensions.salary_sacrifice + auto_enrolment + personal

    # 9-12. Allowance taper and income tax on adjusted net income
    adjusted_net_income = max(0.0, gross_income - pension_pot)
    allowance = tapered_personal_allowance(adjusted_net_income, constants)
    taxable_income = max(0.0, adjusted_net_income - allowance)
    it = income_tax(taxable_income, constants, inputs.resident_in_scotland)

    # 13-14. Employer NI is not a personal deduction
    combined = it.total + employee_ni.total + student_loan
    take_home = adjusted_net_income - combined

    logger.debug(
        "%s gross=%.2f after_sacrifice=%.2f pot=%.2f ani=%.2f pa=%.2f "
        "it=%.2f ni=%.2f sl=%.2f take_home=%.2f",
        inputs.tax_year, gross_income, income_after_sacrifice, pension_pot,
        adjusted_net_income, allowance, it.total, employee_ni.total,
        student_loan, take_home,
    )

    return TaxResult(
        gross_income=gross_income,
        income_after_salary_sacrifice=income_after_sacrifice,
        auto_enrolment_contribution=auto_enrolment,
        grossed_personal_contribution=personal,
        adjusted_net_income=adjusted_net_income,
        personal_allowance=allowance,
        taxable_income=taxable_income,
        income_tax=it,
        employee_ni=employee_ni,
        employer_ni=employer_ni,
        student_loan_repayments=student_loan,
        combined_taxes=combined,
        take_home_pay=take_home,
        pension_pot=pension_pot,
        your_money=pension_pot + take_home,
    )


def with_personal_contribution(inputs: TaxInputs, personal: float) -> TaxInputs:
    """Copy of *inputs* with only the personal pension contribution replaced."""
    contributions = replace(inputs.pension_contributions, personal=personal)
    return replace(inputs, pension_contributions=contributions)


def calculate_tax_savings(
    gross_income: float,
    inputs: TaxInputs,
    voluntary_pension_contribution: float,
) -> float:
    """Reduction in combined taxes from paying a voluntary pension contribution.

    The voluntary amount replaces the personal contribution in *inputs*;
    the result is combined taxes without it minus combined taxes with it.
    Positive means the contribution saves tax.
    """
    with_voluntary = calculate_taxes(
        gross_income, with_personal_contribution(inputs, voluntary_pension_contribution)
    )
    without_voluntary = calculate_taxes(gross_income, inputs)
    saving = without_voluntary.combined_taxes - with_voluntary.combined_taxes
    logger.debug("Voluntary £%.2f on £%.2f saves £%.2f",
                 voluntary_pension_contribution, gross_income, saving)
    return saving
