"""
FastAPI application entry point for the invoicing actions backend.

This module creates the FastAPI app instance and registers all routers.
"""

import logging
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from invoicing.config import settings
from invoicing.routes.auth import router as auth_router
from invoicing.routes.health import router as health_router
from invoicing.routes.invoices import api_router as invoices_api_router
from invoicing.routes.invoices import router as invoices_router
from invoicing.schemas.invoices import InvoiceFormState, InvoiceValidationError

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


def _get_cors_origins() -> list[str]:
    """
    Get allowed CORS origins based on environment.

    - ENVIRONMENT=production: Uses CORS_ORIGINS (explicit list)
    - anything else: Allows all origins for local dev
    """
    if settings.is_production():
        origins = [origin.strip() for origin in settings.CORS_ORIGINS if origin.strip()]
        logger.info(f"CORS configured for production with {len(origins)} allowed origins")
        return origins

    logger.info(f"CORS configured for {settings.ENVIRONMENT}: allowing all origins")
    return ["*"]


app = FastAPI(
    title="Invoicing Actions API",
    description="Create, update and delete invoices; sign in with credentials",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc"
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Log detailed request validation errors for debugging."""
    logger.error(
        f"Validation error on {request.method} {request.url.path}: {exc.errors()}"
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "validation_error",
            "details": exc.errors(),
        }
    )


@app.exception_handler(InvoiceValidationError)
async def invoice_validation_exception_handler(request: Request, exc: InvoiceValidationError):
    """
    Render invoice validation errors raised by the raising action variants.

    The body has the same shape as the form state the collecting variants
    return, so the form renders both the same way.
    """
    logger.info(
        f"Invoice validation failed on {request.method} {request.url.path}: "
        f"fields={list(exc.errors.keys())}"
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=InvoiceFormState(errors=exc.errors, message=str(exc)).model_dump()
    )


cors_origins = _get_cors_origins()
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(health_router)
app.include_router(auth_router)
app.include_router(invoices_router)
app.include_router(invoices_api_router)

logger.info("FastAPI app initialized successfully")
