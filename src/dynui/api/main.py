"""FastAPI application for the dynamic UI agent."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dynui import __version__
from dynui.core.errors import ConfigurationError
from dynui.core.logging import configure_logging

from .routes import chat_router

logger = logging.getLogger(__name__)

configure_logging()

app = FastAPI(
    title="Dynamic UI Agent API",
    description="Structured UI responses from natural language",
    version=__version__,
)

# Configure CORS for local frontends
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(chat_router)


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError) -> JSONResponse:
    """Report missing backend configuration without a traceback."""
    logger.error(f"Configuration error: {exc}")
    return JSONResponse(
        status_code=500,
        content={"error": "Failed to generate response"},
    )


@app.get("/")
def root() -> dict:
    """Root endpoint."""
    return {"message": "Dynamic UI Agent API", "version": __version__}


@app.get("/health")
def health() -> dict:
    """Health check endpoint."""
    return {"status": "healthy"}
