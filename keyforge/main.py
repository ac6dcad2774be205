"""keyforge - Main FastAPI Application."""

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from keyforge import __version__
from keyforge.api import catalog_router, jose_router, keys_router
from keyforge.config import get_settings
from keyforge.core.errors import (
    DecryptionFailure,
    EncodingFailure,
    EncryptionFailure,
    InvalidKeyEncoding,
    KeyforgeError,
    KeySizeInvalid,
    SerializationFailure,
    SignatureInvalid,
    Unsupported,
)
from keyforge.core.logging import RequestLoggingMiddleware, get_logger, setup_logging

settings = get_settings()
setup_logging(json_output=settings.json_logs, level=settings.log_level)

logger = get_logger(__name__)

ERROR_STATUS: dict[type[KeyforgeError], int] = {
    InvalidKeyEncoding: status.HTTP_400_BAD_REQUEST,
    Unsupported: status.HTTP_400_BAD_REQUEST,
    KeySizeInvalid: status.HTTP_400_BAD_REQUEST,
    SignatureInvalid: status.HTTP_400_BAD_REQUEST,
    EncryptionFailure: status.HTTP_422_UNPROCESSABLE_ENTITY,
    DecryptionFailure: status.HTTP_422_UNPROCESSABLE_ENTITY,
    EncodingFailure: status.HTTP_500_INTERNAL_SERVER_ERROR,
    SerializationFailure: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(exc: KeyforgeError) -> int:
    for error_type in type(exc).__mro__:
        if error_type in ERROR_STATUS:
            return ERROR_STATUS[error_type]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


app = FastAPI(
    title="keyforge",
    description="Key material toolbox: asymmetric key formats, RSA encryption, JWK and JWS",
    version=__version__,
)

app.add_middleware(RequestLoggingMiddleware)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(KeyforgeError)
async def keyforge_error_handler(request: Request, exc: KeyforgeError) -> JSONResponse:
    """Map core failures to HTTP status codes."""
    status_code = status_for(exc)
    logger.warning(
        "request failed",
        path=request.url.path,
        error=type(exc).__name__,
        status_code=status_code,
    )
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "error": type(exc).__name__},
    )


# Include routers
app.include_router(keys_router, prefix=settings.api_prefix)
app.include_router(jose_router, prefix=settings.api_prefix)
app.include_router(catalog_router, prefix=settings.api_prefix)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "keyforge",
        "version": __version__,
        "docs": "/docs",
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
