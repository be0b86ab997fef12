"""
Portfolio summary over the canonical property collection
"""

from typing import Dict, List, Sequence

import pandas as pd
from pydantic import BaseModel

from propinvest.models.property import CanonicalProperty

TOP_N = 3


class PortfolioSummary(BaseModel):
    total_properties: int
    total_value: float
    average_roi: float
    total_cash_flow: float
    average_cap_rate: float
    property_types: Dict[str, int]
    top_roi: List[str]  # property ids
    top_cash_flow: List[str]


def summarize_portfolio(properties: Sequence[CanonicalProperty]) -> PortfolioSummary:
    """Aggregate value, returns and type mix; an empty collection yields zeros"""
    if not properties:
        return PortfolioSummary(
            total_properties=0,
            total_value=0.0,
            average_roi=0.0,
            total_cash_flow=0.0,
            average_cap_rate=0.0,
            property_types={},
            top_roi=[],
            top_cash_flow=[],
        )

    df = pd.DataFrame([
        {
            "id": prop.id,
            "price": prop.price,
            "roi": prop.roi,
            "cash_flow": prop.cash_flow,
            "cap_rate": prop.cap_rate,
            "property_type": prop.property_type.value,
        }
        for prop in properties
    ])

    # Stable sorts so ties keep collection order
    top_roi = df.sort_values("roi", ascending=False, kind="mergesort").head(TOP_N)
    top_cash_flow = df.sort_values("cash_flow", ascending=False, kind="mergesort").head(TOP_N)

    return PortfolioSummary(
        total_properties=len(df),
        total_value=float(df["price"].sum()),
        average_roi=float(df["roi"].mean()),
        total_cash_flow=float(df["cash_flow"].sum()),
        average_cap_rate=float(df["cap_rate"].mean()),
        property_types={str(k): int(v) for k, v in df["property_type"].value_counts(sort=False).items()},
        top_roi=top_roi["id"].tolist(),
        top_cash_flow=top_cash_flow["id"].tolist(),
    )
