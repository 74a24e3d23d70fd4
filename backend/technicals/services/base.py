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
    - Can validate its inputs
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

    async def validate_input(self, input_data: InputT) -> InputT:
        """
        Validate input data.
        Default implementation returns input as-is (Pydantic handles validation).
        Override for custom validation logic.
        """
        return input_data


class ServiceError(Exception):
    """Base exception for service errors."""

    def __init__(self, service_name: str, message: str, details: dict = None):
        self.service_name = service_name
        self.message = message
        self.details = details or {}
        super().__init__(f"[{service_name}] {message}")


class ValidationError(ServiceError):
    """Input validation error."""
    pass


class InvalidSeriesError(ValidationError):
    """
    The price series is structurally unusable (empty, non-numeric, non-finite,
    ragged). Always surfaced to the caller; no partial report is produced.
    """

    def __init__(self, message: str, details: dict = None):
        super().__init__("SeriesBuffer", message, details)


class InsufficientDataError(ServiceError):
    """
    An indicator needs more bars than the series holds.

    Raised by the numeric kernels and caught at the module boundary, where it
    becomes an "unavailable" result instead of failing the pipeline.
    """

    def __init__(self, indicator: str, required: int, available: int):
        self.indicator = indicator
        self.required = required
        self.available = available
        super().__init__(
            indicator,
            f"Insufficient data: {indicator} needs {required} bars, got {available}",
            {"required": required, "available": available},
        )

    @property
    def reason(self) -> str:
        return self.message


def require_bars(indicator: str, required: int, available: int) -> None:
    """Raise InsufficientDataError when fewer than `required` bars are available."""
    if available < required:
        raise InsufficientDataError(indicator, required, available)
