"""
Main application module for the fracture service.

This file sets up the FastAPI application, configures CORS so browser
clients can make cross-origin requests and exposes a simple health
check endpoint.  Routers for the mesh and fracture APIs are included
under the `/api` namespace.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routes_fracture import router as fracture_router
from .api.routes_meshes import router as meshes_router
from .services.meshes_store import init_db


def create_app() -> FastAPI:
    """Factory to create and configure the FastAPI application.

    Returns:
        FastAPI: The configured FastAPI application instance.
    """
    app = FastAPI(title="Fracture service")

    # The SQLite schema must exist before any request is processed.
    @app.on_event("startup")  # type: ignore[misc]
    async def startup_event() -> None:
        init_db()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/api/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(meshes_router, prefix="/api", tags=["meshes"])
    app.include_router(fracture_router, prefix="/api", tags=["fracture"])

    return app


# Uvicorn imports this instance when running `uvicorn fracture.main:app`
# from within the backend directory.
app = create_app()
