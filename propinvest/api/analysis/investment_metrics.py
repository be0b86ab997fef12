"""
Investment Metrics - ROI, cash flow, cap rate and gross yield for a property
"""

import math
from typing import Optional

from pydantic import BaseModel

from propinvest.core.config import MetricsPolicy

DEFAULT_POLICY = MetricsPolicy()


class InvestmentMetrics(BaseModel):
    """Floored metrics as exposed to consumers"""
    roi: float
    cash_flow: float
    cap_rate: float
    gross_yield: float


class FinancingDetails(BaseModel):
    """Purchase financing figures shown alongside a single property"""
    down_payment: float
    loan_amount: float
    monthly_payment: float
    price_per_sqft: float


def _effective_price(price: float, policy: MetricsPolicy) -> float:
    if price is None or not math.isfinite(price) or price <= 0:
        return policy.default_price
    return price


def _effective_rent(monthly_rent: float) -> float:
    if monthly_rent is None or not math.isfinite(monthly_rent) or monthly_rent < 0:
        return 0.0
    return monthly_rent


def _floored(value: float, floor: float) -> float:
    # Overflowing inputs (tiny prices, huge rents) collapse to the floor
    if not math.isfinite(value):
        return floor
    return max(value, floor)


def calculate_raw_metrics(
    price: float,
    monthly_rent: float,
    policy: MetricsPolicy = DEFAULT_POLICY
) -> InvestmentMetrics:
    """Unfloored formulas; a zero or negative price is replaced by the default price"""
    price = _effective_price(price, policy)
    monthly_rent = _effective_rent(monthly_rent)
    annual_rent = monthly_rent * 12

    cap_rate = (annual_rent / price) * 100
    return InvestmentMetrics(
        roi=((annual_rent - price * policy.expense_ratio) / price) * 100,
        cash_flow=monthly_rent - price * policy.monthly_cost_ratio,
        cap_rate=cap_rate,
        gross_yield=cap_rate,
    )


def calculate_investment_metrics(
    price: float,
    monthly_rent: float,
    policy: MetricsPolicy = DEFAULT_POLICY
) -> InvestmentMetrics:
    """
    Investment metrics with the display floors applied

    Args:
        price: Purchase price
        monthly_rent: Monthly rent
        policy: Formula constants and floors

    Returns:
        InvestmentMetrics where no value falls below its floor
    """
    raw = calculate_raw_metrics(price, monthly_rent, policy)
    return InvestmentMetrics(
        roi=_floored(raw.roi, policy.min_roi),
        cash_flow=_floored(raw.cash_flow, policy.min_cash_flow),
        cap_rate=_floored(raw.cap_rate, policy.min_cap_rate),
        gross_yield=_floored(raw.gross_yield, policy.min_gross_yield),
    )


def calculate_monthly_payment(
    principal: float,
    interest_rate: float,
    years: int
) -> float:
    """Fixed-rate amortized monthly payment"""
    num_payments = years * 12
    if num_payments <= 0:
        return principal
    monthly_rate = interest_rate / 12
    if monthly_rate == 0:
        return principal / num_payments
    growth = math.pow(1 + monthly_rate, num_payments)
    return principal * (monthly_rate * growth) / (growth - 1)


def calculate_financing(
    price: float,
    square_feet: Optional[float] = None,
    policy: MetricsPolicy = DEFAULT_POLICY
) -> FinancingDetails:
    price = _effective_price(price, policy)
    down_payment = price * policy.down_payment_ratio
    loan_amount = price - down_payment
    return FinancingDetails(
        down_payment=down_payment,
        loan_amount=loan_amount,
        monthly_payment=calculate_monthly_payment(loan_amount, policy.interest_rate, policy.loan_years),
        price_per_sqft=price / square_feet if square_feet else 0.0,
    )
