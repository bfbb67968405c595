"""Data adapters - Implementations of CarrierRepositoryPort.

Available implementations:
- CSVCarrierRepository: Loads carriers, cities and route chains from CSV
- InMemoryCarrierRepository: Serves already tokenized rows
"""

from .csv_repository import CSVCarrierRepository
from .memory_repository import InMemoryCarrierRepository

__all__ = ["CSVCarrierRepository", "InMemoryCarrierRepository"]
