"""
api/server.py
-------------
FastAPI application entry point.

Run dev server:
    cd backend
    uvicorn api.server:app --reload --port 5002

Endpoints:
    GET  /health
    GET  /api/health
    POST /api/recommendations
    GET  /api/places/search
    GET  /api/places/details/{place_id}
    GET  /api/places/nearby
    GET  /api/places/autocomplete
    GET  /api/places/geocode
    GET  /api/places/distance
    POST /api/feedback
    GET  /api/feedback/stats
    GET  /api/feedback/pack/{pack_id}
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

import config
from api.routes import feedback, health, places, recommendations
from main import ServiceContainer, build_container
from modules.observability.logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _format_error(err: dict) -> str:
    loc = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
    return f"{loc}: {err.get('msg', 'invalid')}" if loc else err.get("msg", "invalid")


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [_format_error(err) for err in exc.errors()]
    logger.info("Rejected %s %s: %s", request.method, request.url.path, "; ".join(details))
    return JSONResponse(
        status_code=400,
        content={"error": {"message": "Validation Error", "details": details}},
    )


async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": {"message": str(exc.detail)}},
        headers=getattr(exc, "headers", None),
    )


def create_app(container: Optional[ServiceContainer] = None) -> FastAPI:
    """Build the app; tests pass their own container."""
    setup_logging()
    app = FastAPI(
        title="Family Trip Recommendations API",
        version="1.0.0",
        description=(
            "Family-friendly destination packs built from Google Maps Platform "
            "places, reviews and OpenWeatherMap conditions."
        ),
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.container = container or build_container()

    # Allow the frontend (any origin during development)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)

    app.include_router(health.router,                                    tags=["Health"])
    app.include_router(recommendations.router, prefix="/api",            tags=["Recommendations"])
    app.include_router(places.router,          prefix="/api/places",     tags=["Places"])
    app.include_router(feedback.router,        prefix="/api/feedback",   tags=["Feedback"])
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("api.server:app", host="0.0.0.0", port=config.PORT, reload=True)
