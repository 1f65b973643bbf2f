"""Mortgage payment and affordability calculations.

Pure functions: Decimal in, dataclass out. No I/O.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum

from homefit.config import settings

TWO_PLACES = Decimal("0.01")


class AffordabilitySignal(Enum):
    COMFORTABLE = "Comfortable"
    STRETCH = "Stretch"
    OUT_OF_REACH = "Out of reach"


@dataclass(frozen=True)
class AffordabilityResult:
    max_monthly_payment: Decimal
    max_loan_amount: Decimal
    max_property_price: Decimal
    msr_cap: Decimal
    tdsr_cap: Decimal
    ltv_cap: Decimal


def monthly_payment(principal: Decimal, annual_rate: Decimal, term_years: int) -> Decimal:
    """Calculate fixed monthly mortgage payment."""
    if principal <= 0:
        return Decimal("0")
    if annual_rate <= 0:
        return (principal / (term_years * 12)).quantize(TWO_PLACES, ROUND_HALF_UP)

    r = annual_rate / 12
    n = term_years * 12
    # M = P * [r(1+r)^n] / [(1+r)^n - 1]
    factor = (1 + r) ** n
    payment = principal * (r * factor) / (factor - 1)
    return payment.quantize(TWO_PLACES, ROUND_HALF_UP)


def max_loan_for_payment(payment: Decimal, annual_rate: Decimal, term_years: int) -> Decimal:
    """Largest principal a fixed monthly payment can service (inverse annuity)."""
    if payment <= 0:
        return Decimal("0")
    n = term_years * 12
    if annual_rate <= 0:
        return (payment * n).quantize(TWO_PLACES, ROUND_HALF_UP)

    r = annual_rate / 12
    # P = M * [1 - (1+r)^-n] / r
    loan = payment * (1 - (1 + r) ** -n) / r
    return loan.quantize(TWO_PLACES, ROUND_HALF_UP)


def estimated_financing(
    price: Decimal,
    loan_years: int | None = None,
    annual_rate: Decimal | None = None,
    ltv: Decimal | None = None,
) -> Decimal:
    """Monthly payment on a resale purchase financed at the configured LTV."""
    loan_years = loan_years or settings.default_loan_years
    annual_rate = annual_rate if annual_rate is not None else Decimal(str(settings.default_interest_rate))
    ltv = ltv if ltv is not None else Decimal(str(settings.resale_ltv))
    return monthly_payment(price * ltv, annual_rate, loan_years)


def calculate_affordability(
    monthly_income: Decimal,
    down_payment: Decimal,
    loan_years: int,
    annual_rate: Decimal,
    other_debts: Decimal = Decimal("0"),
) -> AffordabilityResult:
    """Maximum purchase price under MSR, TDSR and resale LTV limits.

    Args:
        monthly_income: Gross household monthly income
        down_payment: Cash + CPF available for the downpayment
        loan_years: Loan tenure in years
        annual_rate: Annual interest rate (e.g. 0.026 for 2.6%)
        other_debts: Existing monthly debt obligations
    """
    msr_cap = monthly_income * Decimal(str(settings.msr_limit))
    tdsr_cap = monthly_income * Decimal(str(settings.tdsr_limit)) - other_debts
    max_payment = max(Decimal("0"), min(msr_cap, tdsr_cap))

    max_loan = max_loan_for_payment(max_payment, annual_rate, loan_years)

    ltv_cap = down_payment / (1 - Decimal(str(settings.resale_ltv)))
    max_price = min(max_loan + down_payment, ltv_cap)

    return AffordabilityResult(
        max_monthly_payment=max_payment.quantize(TWO_PLACES, ROUND_HALF_UP),
        max_loan_amount=max_loan,
        max_property_price=max_price.quantize(TWO_PLACES, ROUND_HALF_UP),
        msr_cap=msr_cap.quantize(TWO_PLACES, ROUND_HALF_UP),
        tdsr_cap=tdsr_cap.quantize(TWO_PLACES, ROUND_HALF_UP),
        ltv_cap=ltv_cap.quantize(TWO_PLACES, ROUND_HALF_UP),
    )


def affordability_signal(price: Decimal, budget: Decimal) -> AffordabilitySignal:
    if price <= budget * Decimal("0.95"):
        return AffordabilitySignal.COMFORTABLE
    if price <= budget:
        return AffordabilitySignal.STRETCH
    return AffordabilitySignal.OUT_OF_REACH
