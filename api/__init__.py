"""HTTP boundary: authentication, schemas, error rendering and routers."""
from .auth import AuthFailure, StaticTokenVerifier, SupabaseTokenVerifier, TokenVerifier, current_user
from .deps import AppServices, get_services
from .errors import ValidationFailure, install_error_handlers
from .jobs import router as jobs_router
from .library import router as library_router
from .media import router as media_router
from .routes import router

__all__ = [
    "AppServices",
    "AuthFailure",
    "StaticTokenVerifier",
    "SupabaseTokenVerifier",
    "TokenVerifier",
    "ValidationFailure",
    "current_user",
    "get_services",
    "install_error_handlers",
    "jobs_router",
    "library_router",
    "media_router",
    "router",
]
