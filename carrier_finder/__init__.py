"""Top-level package for the carrier finder.

Matches carriers to point-to-point requests over a transportation
network built from free-text trip histories: exact history matches,
route (geo) matches and multi-carrier composite itineraries.
"""

from .services import CarrierSearchService

__all__ = ["CarrierSearchService"]
