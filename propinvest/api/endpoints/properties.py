from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel

from propinvest.core.exceptions import not_found_exception
from propinvest.core.logging import get_logger
from propinvest.api.analysis.investment_metrics import FinancingDetails, calculate_financing
from propinvest.api.analysis.portfolio import PortfolioSummary, summarize_portfolio
from propinvest.api.search.filters import filter_and_sort
from propinvest.api.standardization.exporter import EXPORT_FILENAME, export_csv
from propinvest.db.property_store import PropertyStore, get_property_store
from propinvest.models.filters import PropertyFilters, SortOption
from propinvest.models.property import CanonicalProperty, PropertyType

logger = get_logger(__name__)
router = APIRouter()


class PropertyListResponse(BaseModel):
    properties: List[CanonicalProperty]
    total: int
    sort_by: Optional[SortOption] = None


class PropertyDetailResponse(BaseModel):
    record: CanonicalProperty
    financing: FinancingDetails


def get_filters(
    search: str = Query("", description="Search by address, city, state or ZIP"),
    property_type: Optional[PropertyType] = Query(None, description="Exact property type"),
    min_price: Optional[float] = Query(None, description="Minimum price"),
    max_price: Optional[float] = Query(None, description="Maximum price"),
    min_bedrooms: Optional[int] = Query(None, description="Minimum bedrooms"),
    min_bathrooms: Optional[float] = Query(None, description="Minimum bathrooms"),
    min_roi: Optional[float] = Query(None, description="Minimum ROI (%)"),
    min_cash_flow: Optional[float] = Query(None, description="Minimum monthly cash flow"),
) -> PropertyFilters:
    """Build the filter specification from query parameters"""
    return PropertyFilters(
        search=search,
        property_type=property_type,
        min_price=min_price,
        max_price=max_price,
        min_bedrooms=min_bedrooms,
        min_bathrooms=min_bathrooms,
        min_roi=min_roi,
        min_cash_flow=min_cash_flow,
    )


@router.get("/", response_model=PropertyListResponse)
async def list_properties(
    filters: PropertyFilters = Depends(get_filters),
    sort_by: Optional[SortOption] = Query(None, description="Sort descending by this key"),
    store: PropertyStore = Depends(get_property_store)
):
    """List properties with filtering and sorting options."""
    logger.info("Properties list requested",
                filters=filters.model_dump(exclude_defaults=True),
                sort_by=sort_by)

    properties = filter_and_sort(store.all(), filters, sort_by)
    return PropertyListResponse(properties=properties, total=len(properties), sort_by=sort_by)


@router.get("/summary", response_model=PortfolioSummary)
async def portfolio_summary(
    filters: PropertyFilters = Depends(get_filters),
    store: PropertyStore = Depends(get_property_store)
):
    """Portfolio totals, averages and top performers for the filtered set."""
    return summarize_portfolio(filter_and_sort(store.all(), filters))


@router.get("/export")
async def export_properties(
    filters: PropertyFilters = Depends(get_filters),
    sort_by: Optional[SortOption] = Query(None),
    store: PropertyStore = Depends(get_property_store)
):
    """Download the filtered records in the fixed 15-column layout."""
    properties = filter_and_sort(store.all(), filters, sort_by)
    logger.info("Properties export requested", total=len(properties))
    return Response(
        content=export_csv(properties),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'}
    )


@router.get("/{property_id}", response_model=PropertyDetailResponse)
async def get_property(property_id: str, store: PropertyStore = Depends(get_property_store)):
    """Single property with purchase financing details."""
    prop = store.get(property_id)
    if prop is None:
        raise not_found_exception(f"Property {property_id} not found")
    return PropertyDetailResponse(
        record=prop,
        financing=calculate_financing(prop.price, prop.square_feet)
    )
