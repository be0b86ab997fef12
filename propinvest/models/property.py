"""
Canonical property model definition
"""

import enum
from typing import Optional

from pydantic import BaseModel, Field


class PropertyType(str, enum.Enum):
    SINGLE_FAMILY = "Single Family"
    MULTI_FAMILY = "Multi-family"
    CONDO = "Condo"
    APARTMENT = "Apartment"
    TOWNHOUSE = "Townhouse"
    VACANT_LAND = "Vacant Land"


class CanonicalProperty(BaseModel):
    """One normalized property record with its derived investment metrics"""

    id: str
    address: str = Field(min_length=1)
    city: str = Field(min_length=1)
    state: str = Field(min_length=1)
    zip_code: str = ""

    bedrooms: int = Field(ge=0)
    bathrooms: float = Field(ge=0)
    square_feet: Optional[float] = None
    lot_size: Optional[float] = None
    year_built: Optional[int] = None
    property_type: PropertyType = PropertyType.SINGLE_FAMILY

    price: float = Field(gt=0)
    monthly_rent: float
    yearly_taxes: float
    yearly_insurance: float
    yearly_maintenance: float
    vacancy_rate: float

    roi: float
    cash_flow: float
    cap_rate: float
    gross_yield: float

    description: Optional[str] = None
    image_url: Optional[str] = None

    class Config:
        frozen = True

    def __repr__(self):
        return f"<CanonicalProperty(id={self.id}, price={self.price}, type={self.property_type.value})>"


class TransformationError(BaseModel):
    """A source row that was skipped, with the reason"""

    row: int  # 1-indexed source row number
    reason: str

    class Config:
        frozen = True

    def __str__(self) -> str:
        return f"Row {self.row}: {self.reason}"
