"""
Data Ingestion Service

CONTRACT:
    Input:  CandleRequest
    Output: FetchResult

RESPONSIBILITIES:
    - Fetch klines from public exchange endpoints
    - Fall back across providers on outage, rate limit or bad payload
    - Normalize every payload shape to an ascending Candle list

NO INDICATOR LOGIC - Pure data fetching and transformation.
"""

from signal_engine.services.data_ingestion.interface import (
    DataIngestionServiceInterface,
    FetchResult,
)
from signal_engine.services.data_ingestion.multi_source import (
    MultiSourceFetcher,
    get_data_ingestion_service,
)
from signal_engine.services.data_ingestion.normalizer import normalize
from signal_engine.services.data_ingestion.providers import (
    DEFAULT_PROVIDERS,
    ProviderDescriptor,
    ProviderRequest,
)

__all__ = [
    "DataIngestionServiceInterface",
    "FetchResult",
    "MultiSourceFetcher",
    "get_data_ingestion_service",
    "normalize",
    "DEFAULT_PROVIDERS",
    "ProviderDescriptor",
    "ProviderRequest",
]
