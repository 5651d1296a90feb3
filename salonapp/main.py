import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .config import ALLOWED_ORIGINS
from .database import Base, engine
from .domain.appointments import router as appointments_router
from .domain.billing import admin_router, auth_router
from .domain.billing import router as billing_router
from .domain.booking import router as public_booking_router
from .domain.catalog import professionals_router, services_router
from .domain.clients import router as clients_router
from .domain.dashboard import router as dashboard_router
from .domain.finance import router as finance_router
from .domain.settings import router as settings_router
from .exceptions import SalonError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"🚀 Salon Agenda API {__version__} starting")
    try:
        Base.metadata.create_all(bind=engine)
    except Exception as e:
        # Concurrent workers race on CREATE TABLE; the loser sees the winner's tables
        if "already exists" not in str(e):
            logger.error(f"❌ Could not create tables: {e}")
            raise
    logger.info("✅ Database schema ready")
    yield
    logger.info("👋 Salon Agenda API stopped")


app = FastAPI(title="Salon Agenda API", version=__version__, lifespan=lifespan)


@app.exception_handler(SalonError)
async def salon_error_handler(request: Request, exc: SalonError):
    """Render domain errors as {"detail": ...} with their status code"""
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


def jsonable_errors(exc: RequestValidationError) -> list:
    # ctx may hold exception instances (e.g. ValueError from a validator)
    errors = []
    for error in exc.errors():
        error = dict(error)
        if "ctx" in error:
            error["ctx"] = {k: str(v) for k, v in error["ctx"].items()}
        errors.append(error)
    return errors


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """A missing or malformed Authorization header is a 401, not a 422"""
    errors = jsonable_errors(exc)
    if any("authorization" in str(error.get("loc", "")).lower() for error in errors):
        logger.warning(f"⚠️ Rejected {request.url.path}: no usable Authorization header")
        return JSONResponse(
            status_code=401,
            content={"detail": "Not authenticated. Please provide a valid Bearer token in the Authorization header."},
        )

    logger.warning(f"⚠️ Invalid request to {request.url.path}: {errors}")
    return JSONResponse(status_code=422, content={"detail": errors})


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(f"❌ {request.method} {request.url.path} failed: {e}")
        raise
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(f"{request.method} {request.url.path} {response.status_code} ({elapsed_ms:.0f}ms)")
    return response


logger.info(f"CORS origins: {ALLOWED_ORIGINS}")
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)

# Operator (authenticated) routes
for operator_router in (
    auth_router,
    billing_router,
    admin_router,
    clients_router,
    professionals_router,
    services_router,
    appointments_router,
    finance_router,
    settings_router,
    dashboard_router,
):
    app.include_router(operator_router)

# Visitor (public) routes
app.include_router(public_booking_router)


@app.get("/")
async def root():
    return {"service": "Salon Agenda API", "version": __version__}


@app.get("/health")
async def health():
    return {"status": "healthy"}
