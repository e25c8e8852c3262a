"""FastAPI application factory.

Routers
-------
All endpoint groups are mounted under their respective path prefix:

    /recipes   URL preview and paste extraction
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from clipper.api.routers import recipes as recipes_router


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    app = FastAPI(
        title="Recipe Clipper API",
        description=(
            "Turns recipe web pages and pasted recipe text into a normalized "
            "record of title, description, ingredients and instructions."
        ),
        version="0.1.0",
    )

    # Allow browser frontends on any origin (tighten for production).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(recipes_router.router, prefix="/recipes", tags=["recipes"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn clipper.api.app:app --reload
app = create_app()
