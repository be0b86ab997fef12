import pytest

from propinvest.api.standardization.field_mapper import (
    FieldMapper,
    find_best_match,
    find_ranked_matches,
    normalize_header,
)
from propinvest.core.exceptions import ConfigurationException


def test_normalize_header_trims_quotes_and_case():
    assert normalize_header('  "Property_Address" ') == "property_address"
    assert normalize_header(None) == ""


def test_first_candidate_wins_over_header_order():
    headers = ["market_value", "last_sale_price"]
    assert find_best_match(headers, ["last_sale_price", "market_value"]) == "last_sale_price"


def test_ties_broken_by_header_order():
    headers = ["Sale Price Adjusted", "Sale Price"]
    assert find_best_match(headers, ["sale price"]) == "Sale Price Adjusted"


def test_substring_match_is_case_insensitive():
    assert find_best_match(["ID", "Owner", "BEDROOMS_TOTAL"], ["bedrooms"]) == "BEDROOMS_TOTAL"


def test_no_match_returns_none():
    assert find_best_match(["foo", "bar"], ["city", "municipality"]) is None
    assert find_best_match([], ["city"]) is None


def test_duplicate_headers_resolve_to_first_occurrence():
    headers = ["city", "City"]
    assert find_best_match(headers, ["city"]) == "city"


def test_short_abbreviation_matches_whole_token_only():
    headers = ["Street Addr", "Town", "St", "last_sale_price"]
    assert find_best_match(headers, ["state", "province", "st"]) == "St"


def test_short_abbreviation_not_found_inside_words():
    assert find_best_match(["Street", "last_sale_price"], ["st"]) is None


def test_resolution_is_deterministic():
    headers = ["Addr 1", "Address Line", "property_address"]
    candidates = ["property_address", "street_address", "address"]
    results = {find_best_match(headers, candidates) for _ in range(10)}
    assert results == {"property_address"}


def test_ranked_matches_keep_candidate_order_without_repeats():
    headers = ["assessed_value", "last_sale_price"]
    ranked = find_ranked_matches(headers, ["last_sale_price", "sale_price", "assessed_value", "price"])
    assert ranked == ["last_sale_price", "assessed_value"]


def test_build_mapping_reports_not_found_as_none():
    mapper = FieldMapper()
    mapping = mapper.build_mapping(["Street Addr", "Town", "St", "last_sale_price"])

    report = mapping.report()
    assert report["address"] == "Street Addr"
    assert report["city"] == "Town"
    assert report["state"] == "St"
    assert report["price"] == "last_sale_price"
    assert report["zip_code"] is None
    assert report["property_type"] is None
    assert "zip_code" in mapping.unresolved()


def test_mapping_value_strips_and_blanks_to_none():
    mapping = FieldMapper().build_mapping(["City", "State"])
    assert mapping.value({"City": "  Austin ", "State": ""}, "city") == "Austin"
    assert mapping.value({"City": "  Austin ", "State": "   "}, "state") is None
    assert mapping.value({"City": "Austin"}, "zip_code") is None


def test_fuzzy_suggestion_for_unresolved_field():
    mapper = FieldMapper(fuzzy_threshold=0.6)
    assert mapper.suggest_header("year_built", ["Yr Built", "Owner"]) == "Yr Built"
    assert mapper.suggest_header("year_built", ["Owner Name"]) is None


def test_yaml_config_overrides_candidates(tmp_path):
    config = tmp_path / "columns.yaml"
    config.write_text(
        "column_candidates:\n"
        "  city: [locality]\n"
        "ranked_candidates:\n"
        "  price: [asking]\n"
    )
    mapper = FieldMapper(config_path=str(config))
    mapping = mapper.build_mapping(["Locality", "City", "Asking", "Price"])

    assert mapping.header_for("city") == "Locality"
    assert mapping.headers_for("price") == ["Asking"]
    # Untouched fields keep their defaults
    assert mapper.config.column_candidates["state"] == ["state", "province", "st"]


def test_missing_yaml_config_falls_back_to_defaults(tmp_path):
    mapper = FieldMapper(config_path=str(tmp_path / "missing.yaml"))
    assert mapper.config.column_candidates["city"] == ["city", "municipality", "town"]


def test_invalid_yaml_config_raises(tmp_path):
    config = tmp_path / "columns.yaml"
    config.write_text("column_candidates:\n  city: locality\n")
    with pytest.raises(ConfigurationException):
        FieldMapper(config_path=str(config))
