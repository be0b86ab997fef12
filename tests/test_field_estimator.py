import pytest

from propinvest.api.standardization.field_estimator import (
    DEFAULT_PRICE_SOURCE,
    FieldEstimator,
    classify_property_type,
    parse_number,
    round_half_up,
)
from propinvest.api.standardization.field_mapper import FieldMapper
from propinvest.core.config import EstimationPolicy
from propinvest.models.property import PropertyType


@pytest.fixture
def estimator():
    return FieldEstimator()


def _mapping(headers):
    return FieldMapper().build_mapping(headers)


@pytest.mark.parametrize("raw, expected", [
    ("350000", 350000.0),
    ("$1,250,000", 1250000.0),
    (" 2.5 ", 2.5),
    ("-10", -10.0),
    (42, 42.0),
    ("", None),
    ("n/a", None),
    ("nan", None),
    ("inf", None),
    (None, None),
])
def test_parse_number(raw, expected):
    assert parse_number(raw) == expected


def test_round_half_up():
    assert round_half_up(2800.4) == 2800
    assert round_half_up(2800.5) == 2801
    assert round_half_up(4200.0) == 4200


@pytest.mark.parametrize("text, expected", [
    ("Single Family Residence", PropertyType.SINGLE_FAMILY),
    ("DETACHED house", PropertyType.SINGLE_FAMILY),
    ("Duplex unit", PropertyType.MULTI_FAMILY),
    ("multi-family 4 units", PropertyType.MULTI_FAMILY),
    ("Townhouse", PropertyType.CONDO),
    ("condo", PropertyType.CONDO),
    ("Apartment complex", PropertyType.APARTMENT),
    ("single unit in multi building", PropertyType.SINGLE_FAMILY),
    ("Vacant lot", None),
    ("", None),
    (None, None),
])
def test_classify_property_type(text, expected):
    assert classify_property_type(text) == expected


def test_price_from_first_proxy_with_positive_value(estimator):
    mapping = _mapping(["last_sale_price", "assessed_value"])
    row = {"last_sale_price": "0", "assessed_value": "185,000"}

    estimate = estimator.estimate_price(row, mapping)
    assert estimate.value == 185000
    assert estimate.source == "assessed_value"


def test_price_skips_unparsable_cells(estimator):
    mapping = _mapping(["sale_price", "market_value"])
    row = {"sale_price": "call agent", "market_value": "275000"}

    assert estimator.estimate_price(row, mapping).source == "market_value"


def test_price_falls_back_to_default(estimator):
    mapping = _mapping(["address", "city"])
    estimate = estimator.estimate_price({"address": "1 Main", "city": "Austin"}, mapping)

    assert estimate.value == 200000
    assert estimate.source == DEFAULT_PRICE_SOURCE


def test_price_default_is_overridable():
    estimator = FieldEstimator(EstimationPolicy(default_price=99000))
    mapping = _mapping(["address"])
    assert estimator.estimate_price({"address": "x"}, mapping).value == 99000


def test_property_type_checks_columns_in_fixed_order(estimator):
    mapping = _mapping(["description", "property_type"])
    row = {"description": "Lovely apartment near park", "property_type": "Duplex"}

    assert estimator.determine_property_type(row, mapping) == PropertyType.MULTI_FAMILY


def test_property_type_moves_on_when_column_has_no_match(estimator):
    mapping = _mapping(["property_type", "description"])
    row = {"property_type": "RES", "description": "Condo with a view"}

    assert estimator.determine_property_type(row, mapping) == PropertyType.CONDO


def test_property_type_defaults_to_single_family(estimator):
    mapping = _mapping(["property_type"])
    assert estimator.determine_property_type({"property_type": ""}, mapping) == PropertyType.SINGLE_FAMILY


@pytest.mark.parametrize("property_type, expected", [
    (PropertyType.SINGLE_FAMILY, 2800),
    (PropertyType.MULTI_FAMILY, 3500),
    (PropertyType.CONDO, 2450),
    (PropertyType.APARTMENT, 2800),
])
def test_rent_percentage_by_type(estimator, property_type, expected):
    assert estimator.estimate_rent(350000, property_type) == expected


def test_sourced_rent_wins_over_estimate(estimator):
    mapping = _mapping(["monthly_rent"])
    assert estimator.monthly_rent({"monthly_rent": "$1,950"}, mapping, 350000, PropertyType.SINGLE_FAMILY) == 1950


def test_invalid_sourced_rent_is_estimated(estimator):
    mapping = _mapping(["monthly_rent"])
    assert estimator.monthly_rent({"monthly_rent": "0"}, mapping, 350000, PropertyType.SINGLE_FAMILY) == 2800


@pytest.mark.parametrize("property_type, expected", [
    (PropertyType.MULTI_FAMILY, 0.08),
    (PropertyType.SINGLE_FAMILY, 0.05),
    (PropertyType.CONDO, 0.06),
    (PropertyType.APARTMENT, 0.06),
])
def test_vacancy_rate_table(estimator, property_type, expected):
    assert estimator.estimate_vacancy_rate(property_type) == expected


def test_vacancy_rate_uses_valid_source_fraction(estimator):
    mapping = _mapping(["vacancy_rate"])
    assert estimator.vacancy_rate({"vacancy_rate": "0.1"}, mapping, PropertyType.SINGLE_FAMILY) == 0.1
    assert estimator.vacancy_rate({"vacancy_rate": "12"}, mapping, PropertyType.SINGLE_FAMILY) == 0.05


def test_expense_estimates_are_independent_percentages_of_price(estimator):
    mapping = _mapping(["address"])
    row = {"address": "1 Main"}

    assert estimator.yearly_taxes(row, mapping, 350000) == 4200
    assert estimator.yearly_insurance(row, mapping, 350000) == 1750
    assert estimator.yearly_maintenance(row, mapping, 350000) == 3500


def test_sourced_taxes_used_when_positive(estimator):
    mapping = _mapping(["annual_tax_amount"])
    assert estimator.yearly_taxes({"annual_tax_amount": "3,900"}, mapping, 350000) == 3900
    assert estimator.yearly_taxes({"annual_tax_amount": "-5"}, mapping, 350000) == 4200


def test_bedroom_and_bathroom_defaults(estimator):
    mapping = _mapping(["beds", "baths"])
    assert estimator.bedrooms({"beds": "", "baths": ""}, mapping) == 3
    assert estimator.bathrooms({"beds": "", "baths": ""}, mapping) == 2
    assert estimator.bedrooms({"beds": "4", "baths": "2.5"}, mapping) == 4
    assert estimator.bathrooms({"beds": "4", "baths": "2.5"}, mapping) == 2.5


def test_optional_fields_stay_absent(estimator):
    mapping = _mapping(["sqft", "year_built"])
    row = {"sqft": "unknown", "year_built": ""}

    assert estimator.optional_positive(row, mapping, "square_feet") is None
    assert estimator.year_built(row, mapping) is None
