"""
Analysis package for investment metrics and portfolio summaries
"""

from .investment_metrics import (
    InvestmentMetrics,
    FinancingDetails,
    calculate_investment_metrics,
    calculate_financing,
)
from .portfolio import PortfolioSummary, summarize_portfolio

__all__ = [
    "InvestmentMetrics",
    "FinancingDetails",
    "calculate_investment_metrics",
    "calculate_financing",
    "PortfolioSummary",
    "summarize_portfolio",
]
