# hackathon_service/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

from hackathon_service.api.v1.api import api_router
from hackathon_service.core.config import settings
from hackathon_service.core.error_handlers import (
    app_error_handler,
    rate_limit_error_handler,
    request_validation_error_handler,
)
from hackathon_service.core.exceptions import AppError
from hackathon_service.core.limiter import limiter

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Hackathon service starting for {settings.EVENT_NAME} ({settings.ENV})")
    yield
    logger.info("Hackathon service shutting down")


app = FastAPI(
    title="Hackathon Event Service",
    version="1.0.0",
    description="""
        Registration, profiles, workshops, RSVP admission and the admin
        dashboard for a single hackathon.

        ## Authentication

        Every endpoint except `/registration/options` requires a JWT from the
        identity provider in the `Authorization: Bearer <token>` header.
        Admin endpoints additionally require an active admin record.
        """,
    lifespan=lifespan,
)

app.state.limiter = limiter

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_error_handler)
app.add_exception_handler(RateLimitExceeded, rate_limit_error_handler)

app.include_router(api_router, prefix="/api/v1")


@app.get("/")
def read_root():
    return {"status": "Hackathon service is running", "event": settings.EVENT_NAME}
