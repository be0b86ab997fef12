from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence

from propinvest.models.filters import PropertyFilters, SortOption
from propinvest.models.property import CanonicalProperty


SORT_KEYS: Dict[SortOption, Callable[[CanonicalProperty], float]] = {
    SortOption.PRICE: lambda p: p.price,
    SortOption.ROI: lambda p: p.roi,
    SortOption.CASH_FLOW: lambda p: p.cash_flow,
    SortOption.CAP_RATE: lambda p: p.cap_rate,
    SortOption.BEDROOMS: lambda p: p.bedrooms,
    SortOption.BATHROOMS: lambda p: p.bathrooms,
}


def searchable_text(prop: CanonicalProperty) -> str:
    return f"{prop.address} {prop.city} {prop.state} {prop.zip_code}".lower()


def matches_filters(prop: CanonicalProperty, filters: PropertyFilters) -> bool:
    """True when the record satisfies every predicate that is present."""
    if filters.search:
        if filters.search.lower() not in searchable_text(prop):
            return False

    if filters.property_type is not None and prop.property_type != filters.property_type:
        return False

    if filters.min_price is not None and prop.price < filters.min_price:
        return False
    if filters.max_price is not None and prop.price > filters.max_price:
        return False

    if filters.min_bedrooms is not None and prop.bedrooms < filters.min_bedrooms:
        return False
    if filters.min_bathrooms is not None and prop.bathrooms < filters.min_bathrooms:
        return False

    if filters.min_roi is not None and prop.roi < filters.min_roi:
        return False
    if filters.min_cash_flow is not None and prop.cash_flow < filters.min_cash_flow:
        return False

    return True


def apply_filters(
    properties: Sequence[CanonicalProperty],
    filters: Optional[PropertyFilters] = None,
) -> List[CanonicalProperty]:
    if filters is None:
        return list(properties)
    return [prop for prop in properties if matches_filters(prop, filters)]


def sort_properties(
    properties: Sequence[CanonicalProperty],
    sort_by: SortOption,
) -> List[CanonicalProperty]:
    # sorted() stays stable with reverse=True, so ties keep collection order
    return sorted(properties, key=SORT_KEYS[SortOption(sort_by)], reverse=True)


def filter_and_sort(
    properties: Sequence[CanonicalProperty],
    filters: Optional[PropertyFilters] = None,
    sort_by: Optional[SortOption] = None,
) -> List[CanonicalProperty]:
    filtered = apply_filters(properties, filters)
    if sort_by is None:
        return filtered
    return sort_properties(filtered, sort_by)
