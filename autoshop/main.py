import logging
import os
import time
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

# Load env from autoshop/.env
package_dir = os.path.dirname(os.path.abspath(__file__))
if "PYTEST_CURRENT_TEST" not in os.environ:
    load_dotenv(dotenv_path=os.path.join(package_dir, ".env"))

# Import after dotenv is loaded
from autoshop.core.config import settings, validate_config
from autoshop.core.logging import configure_logging
from autoshop.core.middleware.request_id import RequestIdMiddleware
from autoshop.core.validation import validate_env
from autoshop.core.errors import (
    AppError,
    app_error_handler,
    http_error_handler,
    request_validation_handler,
    unhandled_exception_handler,
)
from autoshop.api import entitlements, health, plans, usage

configure_logging(settings.ENV)
validate_env()
validate_config(strict=getattr(settings, "CONFIG_STRICT", False))


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger = logging.getLogger("autoshop")
    logger.info("Starting autoshop entitlements service...")
    app.state.startup_time = time.time()
    try:
        yield
    finally:
        logging.getLogger("autoshop").info("Stopping autoshop entitlements service...")


app = FastAPI(title="Autoshop - Plan Entitlements", lifespan=lifespan)

app.add_middleware(RequestIdMiddleware)

app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(StarletteHTTPException, http_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.root_router, tags=["health"])
app.include_router(plans.router, tags=["plans"])
app.include_router(entitlements.router, tags=["entitlements"])
app.include_router(usage.router, tags=["usage"])
