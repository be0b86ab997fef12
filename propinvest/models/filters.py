"""
Filter and sort specifications for the property collection
"""

import enum
from typing import Optional

from pydantic import BaseModel

from .property import PropertyType


class SortOption(str, enum.Enum):
    PRICE = "price"
    ROI = "roi"
    CASH_FLOW = "cashflow"
    CAP_RATE = "caprate"
    BEDROOMS = "bedrooms"
    BATHROOMS = "bathrooms"


class PropertyFilters(BaseModel):
    """Optional predicates; an absent field never excludes a record"""

    search: str = ""
    property_type: Optional[PropertyType] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    min_bedrooms: Optional[int] = None
    min_bathrooms: Optional[float] = None
    min_roi: Optional[float] = None
    min_cash_flow: Optional[float] = None

    class Config:
        frozen = True
