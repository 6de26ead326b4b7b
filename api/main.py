import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from auth import router as auth_router
from core import db
from core.logging_config import setup_logging
from service_requests import repository as service_requests_repository
from service_requests import router as service_requests_router

setup_logging()

logger = logging.getLogger(__name__)


def cors_origins() -> list[str]:
    raw = os.environ.get("CORS_ORIGINS", "").strip() or "http://localhost:4200,http://127.0.0.1:4200"
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Initialize the DB pool once per process and make sure the table exists.
    await db.init_pool()
    try:
        await service_requests_repository.ensure_schema()
        yield
    finally:
        await db.close_pool()


app = FastAPI(title="Service Request Management API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Malformed input is a client error: 400 instead of FastAPI's 422.
    if request.url.path == auth_router.LOGIN_PATH:
        return auth_router.malformed_login_response()
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


app.include_router(auth_router.router, tags=["auth"])
app.include_router(service_requests_router.router, tags=["service-requests"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/health/db")
async def health_db() -> JSONResponse:
    try:
        await db.ping()
    except Exception:
        logger.exception("database_health_check_failed")
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"status": "unavailable"})
    return JSONResponse(content={"status": "ok"})


@app.get("/")
def root() -> dict:
    return {"message": "service request management api"}
