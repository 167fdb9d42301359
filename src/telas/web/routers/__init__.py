"""API routers for the REST API."""

from telas.web.routers.export import router as export_router
from telas.web.routers.pack import router as pack_router
from telas.web.routers.sessions import router as sessions_router
from telas.web.routers.validate import router as validate_router

__all__ = [
    "export_router",
    "pack_router",
    "sessions_router",
    "validate_router",
]
