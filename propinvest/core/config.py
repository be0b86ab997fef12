"""
Application configuration
"""

from typing import List, Optional
from pathlib import Path

from pydantic import BaseModel
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""

    # Logging Settings
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True  # False renders human-readable console lines

    # API Settings
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Property Investment Normalizer"

    # CORS Settings
    BACKEND_CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Column Mapping
    COLUMN_MAPPING_CONFIG_PATH: Optional[str] = None
    FUZZY_SUGGESTION_THRESHOLD: float = 0.6  # 60% similarity for closest-header hints

    # Ingestion
    DEFAULT_DELIMITER: Optional[str] = None  # None means sniff from the sample
    SUMMARY_SAMPLE_ROWS: int = 3
    MAX_UPLOAD_BYTES: int = 20 * 1024 * 1024

    class Config:
        env_file = ".env"
        case_sensitive = True

    def get_cors_origins(self) -> List[str]:
        """Return the list of allowed CORS origins"""
        if self.BACKEND_CORS_ORIGINS:
            origins = [origin.strip() for origin in self.BACKEND_CORS_ORIGINS.split(",") if origin.strip()]
            return origins if origins else self.CORS_ORIGINS
        return self.CORS_ORIGINS


class EstimationPolicy(BaseModel):
    """Fallback constants used by the field estimator"""

    default_price: float = 200000.0

    # Monthly rent as a fraction of price
    base_rent_rate: float = 0.008
    multi_family_rent_rate: float = 0.010
    condo_rent_rate: float = 0.007

    # Vacancy rates by property type
    multi_family_vacancy: float = 0.08
    single_family_vacancy: float = 0.05
    default_vacancy: float = 0.06

    # Yearly expenses as a fraction of price
    tax_rate: float = 0.012
    insurance_rate: float = 0.005
    maintenance_rate: float = 0.010

    default_bedrooms: int = 3
    default_bathrooms: float = 2.0

    class Config:
        frozen = True


class MetricsPolicy(BaseModel):
    """Formula constants and display floors for investment metrics"""

    default_price: float = 200000.0
    expense_ratio: float = 0.02  # yearly costs deducted from rent in ROI
    monthly_cost_ratio: float = 0.004  # monthly costs deducted in cash flow

    min_roi: float = 1.0
    min_cash_flow: float = 50.0
    min_cap_rate: float = 2.0
    min_gross_yield: float = 3.0

    # Financing assumptions for the property detail view
    down_payment_ratio: float = 0.2
    interest_rate: float = 0.065
    loan_years: int = 30

    class Config:
        frozen = True


# Create global settings instance
settings = Settings()


# Helper function to get absolute path
def get_absolute_path(relative_path: str) -> Path:
    """Convert relative path to absolute path"""
    path = Path(relative_path)
    if path.is_absolute():
        return path
    return Path.cwd() / path
