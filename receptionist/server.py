"""FastAPI server for the Nexus AI Receptionist.

Run with:
    uvicorn receptionist.server:app --reload --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

import logging
import uuid
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from receptionist.agent import create_receptionist
from receptionist.api.routes import router
from receptionist.config import CORS_ORIGINS, SERVER_HOST, SERVER_PORT

# ── Logging ──────────────────────────────────────────────────────────
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifespan: initialise / tear-down shared resources ────────────────
@asynccontextmanager
async def lifespan(application: FastAPI):
    """Build the receptionist (store seeding included) once per process."""
    logger.info("Initialising receptionist…")
    application.state.receptionist = create_receptionist()
    logger.info("Receptionist ready.")
    yield
    application.state.receptionist.shutdown()


app = FastAPI(
    title="Nexus AI Receptionist",
    description=(
        "Grounded AI receptionist — answers questions from each tenant's "
        "business profile and knowledge base and books appointments."
    ),
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_request_id(request: Request, call_next) -> Response:
    """Attach a unique request ID to every request for log correlation."""
    request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
    request.state.request_id = request_id
    logger.info(
        "[%s] %s %s", request_id, request.method, request.url.path,
    )
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


app.include_router(router, prefix="/api")


@app.get("/")
async def root():
    return {
        "service": "Nexus AI Receptionist",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/health",
    }


if __name__ == "__main__":
    logger.info("Starting receptionist API server on %s:%d", SERVER_HOST, SERVER_PORT)
    uvicorn.run(
        "receptionist.server:app",
        host=SERVER_HOST,
        port=SERVER_PORT,
        reload=True,
    )
