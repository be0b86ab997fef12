"""
Field Mapper - resolves arbitrary source headers to canonical field names
"""

import re
from typing import Dict, List, Optional, Sequence, Mapping, Tuple

import structlog
import yaml
from fuzzywuzzy import fuzz, process

from propinvest.core.config import get_absolute_path, settings
from propinvest.core.exceptions import ConfigurationException

logger = structlog.get_logger(__name__)


# Candidate header fragments per canonical field, highest priority first.
DEFAULT_COLUMN_CANDIDATES: Dict[str, List[str]] = {
    "address": ["property_address", "street_address", "address", "addr", "street"],
    "city": ["city", "municipality", "town"],
    "state": ["state", "province", "st"],
    "zip_code": ["zip", "zipcode", "postal_code", "zip_code", "postal"],
    "bedrooms": ["bedrooms", "bedroom_count", "beds"],
    "bathrooms": ["bathrooms", "bathroom_count", "baths"],
    "square_feet": ["living_sqft", "sqft", "square_feet", "total_sqft", "square_footage"],
    "lot_size": ["lot_size", "lot_sqft", "lot_area", "acreage"],
    "year_built": ["built_year", "year_built", "construction_year"],
    "monthly_rent": ["monthly_rent", "monthlyrent", "rent_estimate", "market_rent", "rental"],
    "yearly_taxes": ["tax_amount", "taxes", "property_tax", "annual_tax"],
    "yearly_insurance": ["yearly_insurance", "annual_insurance", "insurance"],
    "yearly_maintenance": ["maintenance"],
    "vacancy_rate": ["vacancy"],
    "description": ["remarks", "listing_description", "description"],
    "image_url": ["image_url", "photo_url", "image", "photo"],
}

# Fields whose candidates are each tried in turn rather than collapsed to one header.
DEFAULT_RANKED_CANDIDATES: Dict[str, List[str]] = {
    "price": [
        "last_sale_price",
        "sale_price",
        "est_equity",
        "total_assessed_value",
        "assessed_value",
        "market_value",
        "list_price",
        "price",
    ],
    "property_type": ["property_type", "property_description", "type", "description"],
}

_QUOTES = "\"'`"
_TOKEN_SPLIT_RE = re.compile(r"[^0-9a-z]+")
_ABBREVIATION_MAX_LEN = 2


def normalize_header(header: Optional[str]) -> str:
    """Trim whitespace and surrounding quotes, then case-fold"""
    if header is None:
        return ""
    return str(header).strip().strip(_QUOTES).strip().casefold()


def _header_matches(normalized_header: str, candidate: str) -> bool:
    fragment = candidate.strip().casefold()
    if not fragment:
        return False
    if len(fragment) <= _ABBREVIATION_MAX_LEN:
        # Short abbreviations ("st") only match a whole token, never a substring.
        return fragment in _TOKEN_SPLIT_RE.split(normalized_header)
    return fragment in normalized_header


def find_best_match(headers: Sequence[str], candidates: Sequence[str]) -> Optional[str]:
    """
    Return the first header containing a candidate fragment.

    Candidates are tried in priority order; for each one the headers are
    scanned in their original order. The original header text is returned,
    or None when nothing matches.
    """
    normalized = [normalize_header(h) for h in headers]
    for candidate in candidates:
        for original, header_lower in zip(headers, normalized):
            if _header_matches(header_lower, candidate):
                return original
    return None


def find_ranked_matches(headers: Sequence[str], candidates: Sequence[str]) -> List[str]:
    """Resolve every candidate independently, keeping candidate order and dropping repeats"""
    resolved: List[str] = []
    for candidate in candidates:
        match = find_best_match(headers, [candidate])
        if match is not None and match not in resolved:
            resolved.append(match)
    return resolved


class ColumnMappingConfig:
    """Candidate lists, optionally overridden from a YAML file"""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path or settings.COLUMN_MAPPING_CONFIG_PATH
        self.column_candidates: Dict[str, List[str]] = {
            field: list(names) for field, names in DEFAULT_COLUMN_CANDIDATES.items()
        }
        self.ranked_candidates: Dict[str, List[str]] = {
            field: list(names) for field, names in DEFAULT_RANKED_CANDIDATES.items()
        }
        if self.config_path:
            self._load_config()

    def _load_config(self):
        """Merge candidate overrides from the YAML file onto the defaults"""
        config_file = get_absolute_path(self.config_path)
        if not config_file.exists():
            logger.warning("Column mapping config not found, using defaults", path=self.config_path)
            return

        try:
            with open(config_file, "r") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationException(
                "Column mapping config is not valid YAML",
                error_code="INVALID_COLUMN_MAPPING_CONFIG",
                details={"path": str(config_file), "error": str(e)}
            )

        self._merge(self.column_candidates, data.get("column_candidates") or {})
        self._merge(self.ranked_candidates, data.get("ranked_candidates") or {})
        logger.info("Column mapping config loaded", path=self.config_path)

    def _merge(self, target: Dict[str, List[str]], overrides: Mapping[str, object]):
        for field, names in overrides.items():
            if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
                raise ConfigurationException(
                    f"Candidates for '{field}' must be a list of strings",
                    error_code="INVALID_COLUMN_MAPPING_CONFIG",
                    details={"field": field}
                )
            target[field] = names


class ColumnMapping:
    """Header resolution for one batch, with typed access to row cells"""

    def __init__(
        self,
        headers: Sequence[str],
        fields: Dict[str, Optional[str]],
        ranked: Dict[str, List[str]],
        suggestions: Optional[Dict[str, str]] = None
    ):
        self.headers: Tuple[str, ...] = tuple(headers)
        self.fields = fields
        self.ranked = ranked
        self.suggestions = suggestions or {}

    def header_for(self, field: str) -> Optional[str]:
        return self.fields.get(field)

    def headers_for(self, field: str) -> List[str]:
        return list(self.ranked.get(field, []))

    def cell(self, row: Mapping[str, object], header: Optional[str]) -> Optional[str]:
        """Stripped cell text for a header, None when missing or blank"""
        if header is None:
            return None
        value = row.get(header)
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    def value(self, row: Mapping[str, object], field: str) -> Optional[str]:
        return self.cell(row, self.header_for(field))

    def report(self) -> Dict[str, Optional[str]]:
        """Canonical field -> resolved header (None when not found)"""
        report = dict(self.fields)
        for field, headers in self.ranked.items():
            report[field] = headers[0] if headers else None
        return report

    def unresolved(self) -> List[str]:
        return [field for field, header in self.report().items() if header is None]


class FieldMapper:
    """Maps source table headers onto canonical property fields"""

    def __init__(self, config_path: Optional[str] = None, fuzzy_threshold: Optional[float] = None):
        self.config = ColumnMappingConfig(config_path)
        threshold = settings.FUZZY_SUGGESTION_THRESHOLD if fuzzy_threshold is None else fuzzy_threshold
        self.fuzzy_threshold = threshold * 100  # Convert to percentage

    def build_mapping(self, headers: Sequence[str]) -> ColumnMapping:
        """
        Resolve every canonical field against the headers of a batch

        Args:
            headers: Source header names in their original order

        Returns:
            ColumnMapping reused for every row of the batch
        """
        fields = {
            field: find_best_match(headers, candidates)
            for field, candidates in self.config.column_candidates.items()
        }
        ranked = {
            field: find_ranked_matches(headers, candidates)
            for field, candidates in self.config.ranked_candidates.items()
        }
        mapping = ColumnMapping(headers, fields, ranked)

        for field in mapping.unresolved():
            suggestion = self.suggest_header(field, headers)
            if suggestion:
                mapping.suggestions[field] = suggestion

        logger.info(
            "Column mapping built",
            resolved={k: v for k, v in mapping.report().items() if v is not None},
            unresolved=mapping.unresolved()
        )
        return mapping

    def suggest_header(self, field: str, headers: Sequence[str]) -> Optional[str]:
        """
        Closest header to an unresolved field name by fuzzy similarity.

        Only used for the mapping report; suggestions never resolve a field.
        """
        choices = [h for h in headers if normalize_header(h)]
        if not choices:
            return None

        best_match = process.extractOne(
            field.replace("_", " "),
            choices,
            scorer=fuzz.token_sort_ratio
        )
        if best_match and best_match[1] >= self.fuzzy_threshold:
            logger.debug("Closest header suggested",
                        field=field,
                        header=best_match[0],
                        score=best_match[1])
            return best_match[0]
        return None
