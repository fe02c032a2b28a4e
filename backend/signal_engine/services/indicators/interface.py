"""
Indicator Engine Service Interface

Defines the contract for the indicator calculation layer.
"""

from abc import abstractmethod
from dataclasses import dataclass

import numpy as np

from signal_engine.services.base import BaseService
from signal_engine.schemas.market import Candle


@dataclass
class IndicatorSeries:
    """Indicator arrays aligned index-for-index with the input candles."""

    closes: np.ndarray
    rsi: np.ndarray
    bb_upper: np.ndarray
    bb_middle: np.ndarray
    bb_lower: np.ndarray
    velocity: np.ndarray
    acceleration: np.ndarray
    atr: np.ndarray

    def __len__(self) -> int:
        return len(self.closes)


class IndicatorServiceInterface(BaseService[list[Candle], IndicatorSeries]):
    """
    Indicator Engine Service Contract.

    INPUT: list[Candle] (ascending)

    OUTPUT: IndicatorSeries
        - One value per candle, NaN during each indicator's warm-up
    """

    @property
    def name(self) -> str:
        return "IndicatorService"

    @abstractmethod
    async def execute(self, input_data: list[Candle]) -> IndicatorSeries:
        """Calculate indicators for a candle series."""
        pass

    @abstractmethod
    def calculate(self, candles: list[Candle]) -> IndicatorSeries:
        """Synchronous calculation (pure computation, no I/O)."""
        pass

    async def health_check(self) -> bool:
        """Indicator service is always healthy (pure computation)."""
        return True
