"""
Base Service Interface

All services inherit from this base class.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")


class BaseService(ABC, Generic[InputT, OutputT]):
    """
    Base class for all services.

    Each service:
    - Has a defined input type
    - Has a defined output type
    - Can check its health
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Service name for logging."""
        pass

    @abstractmethod
    async def execute(self, input_data: InputT) -> OutputT:
        """
        Execute the service's main function.

        Args:
            input_data: Validated input conforming to InputT schema

        Returns:
            Output conforming to OutputT schema

        Raises:
            ServiceError: If execution fails
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if service is healthy and can process requests."""
        pass


class ServiceError(Exception):
    """Base exception for service errors."""

    def __init__(self, service_name: str, message: str, details: dict = None):
        self.service_name = service_name
        self.message = message
        self.details = details or {}
        super().__init__(f"[{service_name}] {message}")


class MalformedResponse(ServiceError):
    """A provider payload did not match its declared response shape."""

    def __init__(self, message: str, details: dict = None):
        super().__init__("CandleNormalizer", message, details)


class AllSourcesExhausted(ServiceError):
    """Every candle provider failed for one fetch."""

    def __init__(self, instrument: str, failures: dict[str, str]):
        self.instrument = instrument
        self.failures = failures
        super().__init__(
            "MultiSourceFetcher",
            f"All {len(failures)} sources failed for {instrument}",
            details={"failures": failures},
        )
