"""
Data Transformer - turns source rows into canonical property records
"""

from typing import Dict, List, Mapping, Optional, Sequence

import structlog
from pydantic import BaseModel

from propinvest.core.config import EstimationPolicy, MetricsPolicy, settings
from propinvest.models.property import CanonicalProperty, TransformationError
from propinvest.api.analysis.investment_metrics import calculate_investment_metrics
from .field_estimator import FieldEstimator, PriceEstimate
from .field_mapper import ColumnMapping, FieldMapper

logger = structlog.get_logger(__name__)

EXPORT_COLUMN_COUNT = 15
MISSING_LOCATION_REASON = "Missing critical address information"

# Fields listed in the column-mapping section of the summary, in report order.
SUMMARY_MAPPING_FIELDS = [
    "address", "city", "state", "zip_code", "price", "bedrooms", "bathrooms",
    "square_feet", "year_built", "property_type", "monthly_rent", "yearly_taxes",
    "yearly_insurance", "yearly_maintenance", "vacancy_rate",
]


class RowTrace(BaseModel):
    """Estimation reasoning for one row, kept for the summary"""
    row: int
    price: float
    price_source: str
    property_type: str
    monthly_rent: float
    vacancy_rate: float


class RowResult(BaseModel):
    """Outcome of one source row: a record or the reason it was skipped"""
    row: int
    record: Optional[CanonicalProperty] = None
    error: Optional[TransformationError] = None
    trace: Optional[RowTrace] = None

    @property
    def ok(self) -> bool:
        return self.record is not None


class BatchResult(BaseModel):
    """Everything one ingestion pass produces"""
    records: List[CanonicalProperty] = []
    errors: List[TransformationError] = []
    column_mapping: Dict[str, Optional[str]] = {}
    column_suggestions: Dict[str, str] = {}
    summary: str = ""
    total_rows: int = 0
    total_columns: int = 0
    warnings: List[str] = []
    batch_error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.batch_error is None


class DataTransformer:
    """Per-row resolution, estimation and metric derivation"""

    def __init__(
        self,
        field_mapper: Optional[FieldMapper] = None,
        estimation_policy: Optional[EstimationPolicy] = None,
        metrics_policy: Optional[MetricsPolicy] = None,
        summary_sample_rows: Optional[int] = None
    ):
        self.field_mapper = field_mapper or FieldMapper()
        self.estimator = FieldEstimator(estimation_policy)
        self.metrics_policy = metrics_policy or MetricsPolicy()
        self.summary_sample_rows = (
            settings.SUMMARY_SAMPLE_ROWS if summary_sample_rows is None else summary_sample_rows
        )
        logger.info("Data transformer initialized")

    def transform(
        self,
        headers: Sequence[str],
        rows: Sequence[Mapping[str, str]],
        warnings: Optional[List[str]] = None
    ) -> BatchResult:
        """
        Transform a whole batch

        Args:
            headers: Source headers in original order
            rows: One header->cell mapping per source row
            warnings: Parser warnings to carry into the result

        Returns:
            BatchResult with records, per-row errors, mapping report and summary
        """
        mapping = self.field_mapper.build_mapping(headers)

        results = [self.transform_row(index + 1, row, mapping) for index, row in enumerate(rows)]

        records = [result.record for result in results if result.ok]
        errors = [result.error for result in results if result.error is not None]
        traces = [result.trace for result in results if result.trace is not None]

        summary = self.build_summary(
            total_rows=len(rows),
            total_columns=len(headers),
            record_count=len(records),
            mapping=mapping,
            traces=traces[:self.summary_sample_rows],
            errors=errors,
        )

        logger.info("Batch transformed",
                   rows_in=len(rows),
                   rows_out=len(records),
                   errors=len(errors))

        return BatchResult(
            records=records,
            errors=errors,
            column_mapping=mapping.report(),
            column_suggestions=dict(mapping.suggestions),
            summary=summary,
            total_rows=len(rows),
            total_columns=len(headers),
            warnings=list(warnings or []),
        )

    def transform_row(self, row_number: int, row: Mapping[str, str], mapping: ColumnMapping) -> RowResult:
        """Transform one row; failures come back as a skipped result, never raised"""
        try:
            return self._transform_row(row_number, row, mapping)
        except Exception as e:
            logger.warning("Row transformation failed", row=row_number, error=str(e))
            return RowResult(
                row=row_number,
                error=TransformationError(row=row_number, reason=str(e) or type(e).__name__)
            )

    def _transform_row(self, row_number: int, row: Mapping[str, str], mapping: ColumnMapping) -> RowResult:
        address = mapping.value(row, "address")
        city = mapping.value(row, "city")
        state = mapping.value(row, "state")
        if not address or not city or not state:
            logger.debug("Row skipped, missing location", row=row_number)
            return RowResult(
                row=row_number,
                error=TransformationError(row=row_number, reason=MISSING_LOCATION_REASON)
            )

        estimator = self.estimator
        price: PriceEstimate = estimator.estimate_price(row, mapping)
        property_type = estimator.determine_property_type(row, mapping)
        monthly_rent = estimator.monthly_rent(row, mapping, price.value, property_type)
        vacancy_rate = estimator.vacancy_rate(row, mapping, property_type)
        metrics = calculate_investment_metrics(price.value, monthly_rent, self.metrics_policy)

        record = CanonicalProperty(
            id=f"property-{row_number}",
            address=address,
            city=city,
            state=state,
            zip_code=mapping.value(row, "zip_code") or "",
            bedrooms=estimator.bedrooms(row, mapping),
            bathrooms=estimator.bathrooms(row, mapping),
            square_feet=estimator.optional_positive(row, mapping, "square_feet"),
            lot_size=estimator.optional_positive(row, mapping, "lot_size"),
            year_built=estimator.year_built(row, mapping),
            property_type=property_type,
            price=price.value,
            monthly_rent=monthly_rent,
            yearly_taxes=estimator.yearly_taxes(row, mapping, price.value),
            yearly_insurance=estimator.yearly_insurance(row, mapping, price.value),
            yearly_maintenance=estimator.yearly_maintenance(row, mapping, price.value),
            vacancy_rate=vacancy_rate,
            roi=metrics.roi,
            cash_flow=metrics.cash_flow,
            cap_rate=metrics.cap_rate,
            gross_yield=metrics.gross_yield,
            description=mapping.value(row, "description"),
            image_url=mapping.value(row, "image_url"),
        )

        trace = RowTrace(
            row=row_number,
            price=price.value,
            price_source=price.source,
            property_type=property_type.value,
            monthly_rent=monthly_rent,
            vacancy_rate=vacancy_rate,
        )
        return RowResult(row=row_number, record=record, trace=trace)

    def build_summary(
        self,
        total_rows: int,
        total_columns: int,
        record_count: int,
        mapping: ColumnMapping,
        traces: Sequence[RowTrace],
        errors: Sequence[TransformationError]
    ) -> str:
        """Human-readable transformation report"""
        policy = self.estimator.policy
        report = mapping.report()

        lines = [
            "TRANSFORMATION SUMMARY",
            "=====================",
            "",
            f"Original CSV: {total_rows} rows, {total_columns} columns",
            f"Transformed CSV: {record_count} rows, {EXPORT_COLUMN_COUNT} columns",
            f"Errors: {len(errors)}",
            "",
            "Column Mappings:",
        ]
        for field in SUMMARY_MAPPING_FIELDS:
            header = report.get(field)
            if header is not None:
                lines.append(f"  {field}: {header}")
            elif field in mapping.suggestions:
                lines.append(f"  {field}: NOT FOUND (closest header: {mapping.suggestions[field]})")
            else:
                lines.append(f"  {field}: NOT FOUND")

        for trace in traces:
            share = (trace.monthly_rent / trace.price) * 100 if trace.price else 0.0
            lines.extend([
                "",
                f"Row {trace.row} Processing:",
                f"  Price: ${_money(trace.price)} (from {trace.price_source})",
                f"  Property Type: {trace.property_type}",
                f"  Monthly Rent: ${_money(trace.monthly_rent)} ({share:.2f}% of price)",
                f"  Vacancy Rate: {trace.vacancy_rate * 100:.1f}%",
            ])

        lines.extend([
            "",
            "ESTIMATION LOGIC APPLIED:",
            f"- Monthly Rent: {policy.base_rent_rate * 100:g}% of price "
            f"({policy.multi_family_rent_rate * 100:g}% multi-family, {policy.condo_rent_rate * 100:g}% condo)",
            f"- Yearly Taxes: {policy.tax_rate * 100:g}% of price if not available",
            f"- Yearly Insurance: {policy.insurance_rate * 100:g}% of price if not available",
            f"- Maintenance: {policy.maintenance_rate * 100:g}% of price annually if not available",
            f"- Vacancy Rate: {policy.single_family_vacancy * 100:g}% single family, "
            f"{policy.multi_family_vacancy * 100:g}% multi-family, {policy.default_vacancy * 100:g}% other",
            f"- Default Price: ${_money(policy.default_price)}",
            f"- Default Bedrooms: {policy.default_bedrooms}, Bathrooms: {policy.default_bathrooms:g}",
            "",
            "ERRORS ENCOUNTERED:",
        ])
        lines.extend(str(error) for error in errors)
        return "\n".join(lines)


def _money(value: float) -> str:
    return f"{value:,.0f}" if float(value).is_integer() else f"{value:,.2f}"
