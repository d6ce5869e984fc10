"""Routers package for API endpoints.

This package contains the FastAPI routers for the email discovery service.
"""

from mailfinder.routers import candidates, discovery

__all__ = ["candidates", "discovery"]
