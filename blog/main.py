"""
Blog preview server

Serves the built JSON artifact tree the way the static host does, so the
client renderers can be pointed at a local build. Pages are never rendered
here.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from blog.config import get_settings
from blog.middleware import ArtifactCacheMiddleware, SecurityHeadersMiddleware
from blog.services.artifact_storage import INDEX_FILE

logger = logging.getLogger(__name__)

DATA_MOUNT = "/blog/data"


def _check_index(output_dir: Path) -> str:
    """Return 'ok' if the summary index has been built, else 'missing'."""
    return "ok" if (output_dir / INDEX_FILE).is_file() else "missing"


def create_app(output_dir: Path | None = None) -> FastAPI:
    """Build the preview app serving *output_dir* (defaults to settings)."""
    output_dir = output_dir or get_settings().output_dir

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("Serving blog artifacts from %s at %s", output_dir, DATA_MOUNT)
        yield

    app = FastAPI(
        title="Blog Preview",
        description="Local preview of the static blog's JSON artifacts",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(ArtifactCacheMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)

    @app.get("/health")
    async def health_check() -> JSONResponse:
        """Report whether the summary index exists."""
        index_status = _check_index(output_dir)
        if index_status != "ok":
            logger.warning("Health check degraded: %s not built", INDEX_FILE)
        result: dict[str, Any] = {
            "status": "ok" if index_status == "ok" else "degraded",
            "service": "blog-preview",
            "checks": {"index": index_status},
        }
        return JSONResponse(content=result, status_code=200)

    app.mount(DATA_MOUNT, StaticFiles(directory=output_dir, check_dir=False), name="data")
    return app


app = create_app()
