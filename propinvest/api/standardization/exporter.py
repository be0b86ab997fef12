"""
Exporter - writes canonical records in the fixed 15-column target layout
"""

from typing import Any, Dict, List, Sequence

import pandas as pd

from propinvest.models.property import CanonicalProperty

# Target columns in exact order
EXPORT_COLUMNS = [
    "address", "city", "state", "zip_code", "price", "bedrooms", "bathrooms",
    "square_feet", "year_built", "property_type", "monthly_rent", "yearly_taxes",
    "yearly_insurance", "maintenance_percentage", "vacancy_rate",
]

EXPORT_FILENAME = "transformed_real_estate_data.csv"


def to_export_row(prop: CanonicalProperty) -> Dict[str, Any]:
    # maintenance_percentage holds the yearly maintenance amount
    return {
        "address": prop.address,
        "city": prop.city,
        "state": prop.state,
        "zip_code": prop.zip_code,
        "price": prop.price,
        "bedrooms": prop.bedrooms,
        "bathrooms": prop.bathrooms,
        "square_feet": prop.square_feet,
        "year_built": prop.year_built,
        "property_type": prop.property_type.value,
        "monthly_rent": prop.monthly_rent,
        "yearly_taxes": prop.yearly_taxes,
        "yearly_insurance": prop.yearly_insurance,
        "maintenance_percentage": prop.yearly_maintenance,
        "vacancy_rate": prop.vacancy_rate,
    }


def to_dataframe(properties: Sequence[CanonicalProperty]) -> pd.DataFrame:
    """Records as a DataFrame with exactly the export columns, in order"""
    rows: List[Dict[str, Any]] = [to_export_row(prop) for prop in properties]
    df = pd.DataFrame(rows, columns=EXPORT_COLUMNS)
    # Keep whole-number columns integral even when some values are missing
    for column in ("bedrooms", "year_built"):
        df[column] = df[column].astype("Int64")
    return df


def export_csv(properties: Sequence[CanonicalProperty]) -> str:
    return to_dataframe(properties).to_csv(index=False)
