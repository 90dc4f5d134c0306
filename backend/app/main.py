"""
Standup Journal FastAPI Application Entry Point.

Run with: uvicorn app.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from app.api.routes import (
    auth,
    entries,
    health,
    monthly_reports,
    weekly_summaries,
)
from app.config import get_settings
from app.errors import (
    JournalError,
    journal_exception_handler,
    store_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)

settings = get_settings()


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup/shutdown."""
    configure_logging()
    logging.getLogger(__name__).info("Starting %s (%s)", settings.app_name, settings.environment)
    yield


app = FastAPI(
    title=settings.app_name,
    description=(
        "Daily standup journal with weekly summaries and monthly reports.\n\n"
        "All error responses follow the `{code, message, details}` envelope."
    ),
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Exception handlers (most specific first)
app.add_exception_handler(JournalError, journal_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(SQLAlchemyError, store_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# Include routers
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(entries.router)
app.include_router(weekly_summaries.router)
app.include_router(monthly_reports.router)
