"""FastAPI REST API for sheet calculation.

This module provides a REST API for packing piece lists onto sheets,
editing piece lists in sessions, and exporting results.

Usage:
    uvicorn telas.web:app --reload
"""

from telas.web.app import app, create_app

__all__ = ["app", "create_app"]
