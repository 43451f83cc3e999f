"""
Middleware package for the Rental Listing API.
"""

from .request_context import RequestContextMiddleware

__all__ = [
    "RequestContextMiddleware"
]
