"""
StockPro Technicals Services

Service layer containing all business logic.
Each service has a defined interface (contract) and implementation.
"""

from technicals.services.base import (
    BaseService,
    InsufficientDataError,
    InvalidSeriesError,
    ServiceError,
)

__all__ = [
    "BaseService",
    "ServiceError",
    "InvalidSeriesError",
    "InsufficientDataError",
]
