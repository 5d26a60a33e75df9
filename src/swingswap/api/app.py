"""FastAPI application factory."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from swingswap import __version__
from swingswap.config import get_settings


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Swingswap API",
        description="Cross-chain swap execution through the Swing aggregator",
        version=__version__,
        debug=settings.debug,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.debug else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routes
    from swingswap.api.routes import health, swaps

    app.include_router(health.router, tags=["Health"])
    app.include_router(swaps.router, tags=["Swaps"])

    return app
