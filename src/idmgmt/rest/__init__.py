"""
Templated REST resource client used by the managers.
"""

from idmgmt.rest.client import (
    PreparedRequest,
    RestClient,
    serialize_query,
)

__all__ = [
    "PreparedRequest",
    "RestClient",
    "serialize_query",
]
