"""
FastAPI Application Entry Point.

This is the main application file for the Shop Ledger service.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from shopledger.app.core.config import settings
from shopledger.app.core.observability import ObservabilityMiddleware, configure_logging
from shopledger.app.core.redis_client import ping_redis, close_redis
from shopledger.app.api.v1.router import router as api_v1_router
from shopledger.app.db.session import engine, Base
from shopledger.app.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)

# Import models to ensure they are registered with Base
from shopledger.app.models.rental_unit import RentalUnit
from shopledger.app.models.bill import Bill, BillItem
from shopledger.app.models.payment import Payment
from shopledger.app.models.family import FamilyMember, FamilyExpense, FamilyIncome, BankDeposit
from shopledger.app.models.audit_log import AuditLog

configure_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup/shutdown.

    Creates database tables on startup.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()
    await close_redis()

# Initialize FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.api_version,
    debug=settings.debug,
    description="Rent, billing and family budget ledger for rented shop units",
    lifespan=lifespan,
)

app.add_middleware(ObservabilityMiddleware)

# Register global exception handlers
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint.

    Reads keep working without Redis, but bill writes cannot take their
    lock, so the service reports itself degraded.
    """
    redis_ok = await ping_redis()
    return {
        "status": "healthy" if redis_ok else "degraded",
        "app_name": settings.app_name,
        "version": settings.api_version,
        "redis": "ok" if redis_ok else "unavailable",
    }


# Include API v1 router
app.include_router(api_v1_router, prefix=f"/{settings.api_version}")


@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint.

    Returns:
        dict: Welcome message and API documentation links
    """
    return {
        "message": "Welcome to Shop Ledger API",
        "docs": "/docs",
        "health": "/health",
    }
