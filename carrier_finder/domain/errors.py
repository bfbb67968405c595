"""Typed domain errors for the carrier finder.

All errors inherit from CarrierFinderError and can optionally wrap a
root cause exception for debugging. Nothing in the search core is fatal:
these are raised by adapters (unreadable input) and by the strict query
entry point, never by index construction or planning.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass
class CarrierFinderError(Exception):
    """Base error for the carrier finder domain.

    Attributes:
        message: Human-readable error description
        cause: Optional underlying exception that caused this error
    """

    message: str
    cause: Optional[Exception] = field(default=None, repr=False)

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def __post_init__(self) -> None:
        super().__init__(self.message)


@dataclass
class CityNotFoundError(CarrierFinderError):
    """One or both query endpoints are absent from the known-city set.

    Attributes:
        cities: Canonical names of the unknown cities
        suggestions: Known cities resembling the unknown ones
    """

    cities: Tuple[str, ...] = ()
    suggestions: Tuple[str, ...] = ()


@dataclass
class DataLoadError(CarrierFinderError):
    """Required input data could not be read.

    Attributes:
        file_path: Path to the file that failed to load
    """

    file_path: Optional[str] = None


@dataclass
class ConfigurationError(CarrierFinderError):
    """Invalid configuration value.

    Attributes:
        setting_name: Name of the problematic setting
        expected_type: Expected type or format
    """

    setting_name: str = ""
    expected_type: Optional[str] = None
