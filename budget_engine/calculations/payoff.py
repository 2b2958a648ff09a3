"""
Credit Card Payoff Calculator

How long does it take to clear a card balance with a fixed monthly
payment, and how much interest does that cost?

Each month interest accrues on the outstanding balance at apr / 12,
then the payment is applied (the last payment only covers what is
left). A payment that only covers the interest never reduces the
balance, so the result is "never repaid" rather than an endless
schedule.
"""

from decimal import ROUND_HALF_UP, Decimal
from math import fsum

from budget_engine.models.results import (
    CreditCardPaymentRow,
    CreditCardPayoffInputs,
    CreditCardPayoffResult,
)


# Balances below this are treated as paid off
_SETTLED = 1e-9


def _round_half_up(value: float, fraction_digits: int) -> Decimal:
    quantum = Decimal(1).scaleb(-fraction_digits)
    return Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)


def monthly_rate(apr: float) -> float:
    """Monthly interest rate for an APR given in percent."""
    return apr / 100 / 12


def compute_interest_only_minimum(
    balance: float,
    apr: float,
    fraction_digits: int = 2,
) -> float:
    """
    The first month's interest, rounded to currency precision.

    Paying exactly this amount keeps the balance where it is.
    """
    return float(_round_half_up(balance * monthly_rate(apr), fraction_digits))


def compute_credit_card_payoff(
    balance: float,
    apr: float,
    monthly_payment: float,
    fraction_digits: int = 2,
    max_months: int = 1200,
) -> CreditCardPayoffResult:
    """
    Build the payoff schedule for a fixed monthly payment.

    Args:
        balance: Current balance (> 0)
        apr: Annual percentage rate in percent (>= 0)
        monthly_payment: Payment made every month (> 0)
        fraction_digits: Currency precision used to compare against the
                         interest-only minimum
        max_months: Schedules longer than this are reported as never repaid

    Raises:
        pydantic.ValidationError: If any input is out of range
    """
    inputs = CreditCardPayoffInputs(
        balance=balance,
        apr=apr,
        monthly_payment=monthly_payment,
    )
    rate = monthly_rate(inputs.apr)

    never_repaid = CreditCardPayoffResult(
        never_repaid=True,
        months=0,
        total_interest=0.0,
        schedule=[],
        inputs=inputs,
        monthly_rate=rate,
    )

    if rate > 0:
        first_interest = inputs.balance * rate
        minimum = compute_interest_only_minimum(inputs.balance, inputs.apr, fraction_digits)
        paying_minimum = (
            _round_half_up(inputs.monthly_payment, fraction_digits)
            == _round_half_up(minimum, fraction_digits)
        )
        if inputs.monthly_payment <= first_interest or paying_minimum:
            return never_repaid

    schedule: list[CreditCardPaymentRow] = []
    outstanding = inputs.balance

    while outstanding > _SETTLED:
        if len(schedule) >= max_months:
            return never_repaid

        interest = outstanding * rate
        payment = min(inputs.monthly_payment, outstanding + interest)
        principal = payment - interest
        outstanding -= principal
        if outstanding < _SETTLED:
            outstanding = 0.0

        schedule.append(CreditCardPaymentRow(
            month=len(schedule) + 1,
            payment=payment,
            interest=interest,
            principal=principal,
            remaining=outstanding,
        ))

    return CreditCardPayoffResult(
        never_repaid=False,
        months=len(schedule),
        total_interest=fsum(row.interest for row in schedule),
        schedule=schedule,
        inputs=inputs,
        monthly_rate=rate,
    )
