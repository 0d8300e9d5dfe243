"""FastAPI application main entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

load_dotenv()

from .middleware import register_error_handlers
from .routes import graph, notes
from ..services.config import configure_logging, get_config

logger = logging.getLogger(__name__)

config = get_config()
configure_logging(config.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan handler to run startup tasks."""
    root = get_config().notes_root
    root.mkdir(parents=True, exist_ok=True)
    logger.info("Serving notes from %s", root)
    yield


app = FastAPI(
    title="Notegraph API",
    description="Markdown note tree with editor and graph views",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(notes.router, tags=["notes"])
app.include_router(graph.router, tags=["graph"])


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


__all__ = ["app"]
