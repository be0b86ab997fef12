import pytest
from fastapi.testclient import TestClient

from propinvest.main import app
from propinvest.db.property_store import property_store
from propinvest.api.standardization.field_mapper import FieldMapper
from propinvest.api.standardization.data_transformer import DataTransformer
from propinvest.models.property import CanonicalProperty, PropertyType


@pytest.fixture
def client():
    """Create a test client for the FastAPI application."""
    property_store.clear()
    yield TestClient(app)
    property_store.clear()


@pytest.fixture
def transformer():
    return DataTransformer(field_mapper=FieldMapper(config_path=None))


@pytest.fixture
def sample_csv():
    """Source table with non-canonical headers and a few gaps."""
    return (
        "Property Address,City,State,Zip,Beds,Baths,Living_SqFt,Year_Built,Property_Type,Last_Sale_Price\n"
        "12 Elm St,Springfield,IL,62701,3,2,1600,1995,Single Family Detached,350000\n"
        "48 Oak Ave,Chicago,IL,60601,6,4,3200,1972,Duplex unit,\"$520,000\"\n"
        ",Peoria,IL,61602,2,1,900,1960,Condo,150000\n"
        "9 Lake Rd,Evanston,IL,60201,2,2,1100,2005,Condo,410000\n"
    )


def make_property(
    id: str,
    price: float,
    property_type: PropertyType = PropertyType.SINGLE_FAMILY,
    bedrooms: int = 3,
    bathrooms: float = 2,
    roi: float = 5.0,
    cash_flow: float = 500.0,
    cap_rate: float = 7.0,
    address: str = "1 Main St",
    city: str = "Springfield",
    state: str = "IL",
    zip_code: str = "62701",
) -> CanonicalProperty:
    return CanonicalProperty(
        id=id,
        address=address,
        city=city,
        state=state,
        zip_code=zip_code,
        bedrooms=bedrooms,
        bathrooms=bathrooms,
        property_type=property_type,
        price=price,
        monthly_rent=round(price * 0.008),
        yearly_taxes=round(price * 0.012),
        yearly_insurance=round(price * 0.005),
        yearly_maintenance=round(price * 0.01),
        vacancy_rate=0.05,
        roi=roi,
        cash_flow=cash_flow,
        cap_rate=cap_rate,
        gross_yield=max(cap_rate, 3.0),
    )


@pytest.fixture
def property_factory():
    return make_property
