"""Services layer - Application orchestration.

Available services:
- CarrierSearchService: Point-to-point carrier search facade
"""

from .carrier_search import CarrierSearchService

__all__ = ["CarrierSearchService"]
