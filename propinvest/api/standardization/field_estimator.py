"""
Field Estimator - fills absent or invalid canonical fields with documented fallbacks
"""

import math
import re
from typing import Any, Mapping, NamedTuple, Optional

import structlog

from propinvest.core.config import EstimationPolicy
from propinvest.models.property import PropertyType
from .field_mapper import ColumnMapping

logger = structlog.get_logger(__name__)


DEFAULT_PRICE_SOURCE = "default"

# Ordered classification rules: first rule with a matching keyword wins.
PROPERTY_TYPE_RULES = [
    (("single", "detached"), PropertyType.SINGLE_FAMILY),
    (("multi", "duplex"), PropertyType.MULTI_FAMILY),
    (("condo", "townhouse"), PropertyType.CONDO),
    (("apartment",), PropertyType.APARTMENT),
]

_CURRENCY_RE = re.compile(r"[$€£¥,\s]")


class PriceEstimate(NamedTuple):
    value: float
    source: str


def parse_number(value: Any) -> Optional[float]:
    """Parse a cell as a finite number, tolerating currency symbols and thousands separators"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        cleaned = _CURRENCY_RE.sub("", str(value))
        if not cleaned:
            return None
        try:
            number = float(cleaned)
        except ValueError:
            return None
    if not math.isfinite(number):
        return None
    return number


def round_half_up(value: float) -> int:
    """Round to the nearest whole currency unit, halves upward"""
    return int(math.floor(value + 0.5))


def classify_property_type(text: Optional[str]) -> Optional[PropertyType]:
    """Classify free text into the property vocabulary, None when no rule matches"""
    if not text:
        return None
    lowered = text.lower()
    for keywords, property_type in PROPERTY_TYPE_RULES:
        if any(keyword in lowered for keyword in keywords):
            return property_type
    return None


class FieldEstimator:
    """Derives canonical field values from a source row, never raising"""

    def __init__(self, policy: Optional[EstimationPolicy] = None):
        self.policy = policy or EstimationPolicy()

    def _positive(self, row: Mapping[str, Any], mapping: ColumnMapping, field: str) -> Optional[float]:
        number = parse_number(mapping.value(row, field))
        if number is not None and number > 0:
            return number
        return None

    def estimate_price(self, row: Mapping[str, Any], mapping: ColumnMapping) -> PriceEstimate:
        """First monetary proxy column holding a positive number, else the default price"""
        for header in mapping.headers_for("price"):
            number = parse_number(mapping.cell(row, header))
            if number is not None and number > 0:
                return PriceEstimate(number, header)
        return PriceEstimate(self.policy.default_price, DEFAULT_PRICE_SOURCE)

    def determine_property_type(self, row: Mapping[str, Any], mapping: ColumnMapping) -> PropertyType:
        for header in mapping.headers_for("property_type"):
            property_type = classify_property_type(mapping.cell(row, header))
            if property_type is not None:
                return property_type
        return PropertyType.SINGLE_FAMILY

    def rent_rate(self, property_type: PropertyType) -> float:
        if property_type == PropertyType.MULTI_FAMILY:
            return self.policy.multi_family_rent_rate
        if property_type == PropertyType.CONDO:
            return self.policy.condo_rent_rate
        return self.policy.base_rent_rate

    def estimate_rent(self, price: float, property_type: PropertyType) -> int:
        return round_half_up(price * self.rent_rate(property_type))

    def monthly_rent(
        self,
        row: Mapping[str, Any],
        mapping: ColumnMapping,
        price: float,
        property_type: PropertyType
    ) -> float:
        sourced = self._positive(row, mapping, "monthly_rent")
        if sourced is not None:
            return sourced
        return self.estimate_rent(price, property_type)

    def estimate_vacancy_rate(self, property_type: PropertyType) -> float:
        if property_type == PropertyType.MULTI_FAMILY:
            return self.policy.multi_family_vacancy
        if property_type == PropertyType.SINGLE_FAMILY:
            return self.policy.single_family_vacancy
        return self.policy.default_vacancy

    def vacancy_rate(self, row: Mapping[str, Any], mapping: ColumnMapping, property_type: PropertyType) -> float:
        sourced = parse_number(mapping.value(row, "vacancy_rate"))
        if sourced is not None and 0 <= sourced < 1:
            return sourced
        return self.estimate_vacancy_rate(property_type)

    def yearly_taxes(self, row: Mapping[str, Any], mapping: ColumnMapping, price: float) -> float:
        sourced = self._positive(row, mapping, "yearly_taxes")
        return sourced if sourced is not None else round_half_up(price * self.policy.tax_rate)

    def yearly_insurance(self, row: Mapping[str, Any], mapping: ColumnMapping, price: float) -> float:
        sourced = self._positive(row, mapping, "yearly_insurance")
        return sourced if sourced is not None else round_half_up(price * self.policy.insurance_rate)

    def yearly_maintenance(self, row: Mapping[str, Any], mapping: ColumnMapping, price: float) -> float:
        sourced = self._positive(row, mapping, "yearly_maintenance")
        return sourced if sourced is not None else round_half_up(price * self.policy.maintenance_rate)

    def bedrooms(self, row: Mapping[str, Any], mapping: ColumnMapping) -> int:
        number = parse_number(mapping.value(row, "bedrooms"))
        if number is None or number < 0:
            return self.policy.default_bedrooms
        return int(number)

    def bathrooms(self, row: Mapping[str, Any], mapping: ColumnMapping) -> float:
        number = parse_number(mapping.value(row, "bathrooms"))
        if number is None or number < 0:
            return self.policy.default_bathrooms
        return number

    def optional_positive(self, row: Mapping[str, Any], mapping: ColumnMapping, field: str) -> Optional[float]:
        """Square footage, lot size and similar fields stay absent when not sourced"""
        return self._positive(row, mapping, field)

    def year_built(self, row: Mapping[str, Any], mapping: ColumnMapping) -> Optional[int]:
        number = self._positive(row, mapping, "year_built")
        return int(number) if number is not None else None
