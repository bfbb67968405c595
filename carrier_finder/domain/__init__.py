"""Domain layer - Core carrier finder models and errors.

This module contains immutable domain models and typed errors
used throughout the application. No external dependencies.
"""

from .errors import (
    CarrierFinderError,
    CityNotFoundError,
    ConfigurationError,
    DataLoadError,
)
from .models import (
    CityName,
    CompositePlan,
    CompositeSegment,
    Driver,
    DriverRow,
    Indices,
    RouteMatch,
    SearchResults,
)

__all__ = [
    # Models
    "CityName",
    "DriverRow",
    "Driver",
    "Indices",
    "RouteMatch",
    "CompositeSegment",
    "CompositePlan",
    "SearchResults",
    # Errors
    "CarrierFinderError",
    "CityNotFoundError",
    "DataLoadError",
    "ConfigurationError",
]
