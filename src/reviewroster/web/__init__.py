"""HTTP API for ReviewRoster.

This package contains the FastAPI application factory, request logging
middleware, error handlers and route definitions.
"""

from __future__ import annotations

from reviewroster.web.app import create_app, install_services

__all__ = ["create_app", "install_services"]
