"""Ports layer - Abstract interfaces (Protocols) for the application.

Ports define the contracts between the search core and the adapters
that feed it data, so the core stays free of file formats.
"""

from .data import CarrierRepositoryPort

__all__ = ["CarrierRepositoryPort"]
