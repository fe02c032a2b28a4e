"""
Data Ingestion Service Interface

Defines the contract for the data ingestion layer.
"""

from abc import abstractmethod
from dataclasses import dataclass

from signal_engine.services.base import BaseService
from signal_engine.schemas.market import Candle, CandleRequest


@dataclass
class FetchResult:
    """Candle series from the first provider that returned enough history."""

    instrument: str
    source: str
    candles: list[Candle]


class DataIngestionServiceInterface(BaseService[CandleRequest, FetchResult]):
    """
    Data Ingestion Service Contract.

    INPUT: CandleRequest
        - instrument: Symbol to fetch
        - interval: Candle interval
        - limit: Number of most recent candles to keep

    OUTPUT: FetchResult
        - source: Provider that served the data
        - candles: Ascending candle series, at most `limit` long

    RAISES: AllSourcesExhausted when every provider failed
    """

    @property
    def name(self) -> str:
        return "DataIngestionService"

    @abstractmethod
    async def execute(self, input_data: CandleRequest) -> FetchResult:
        """Fetch and normalize a candle series."""
        pass

    @abstractmethod
    async def fetch(self, instrument: str, interval: str, limit: int) -> FetchResult:
        """Fetch a candle series for one instrument."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check the service has providers to query."""
        pass
