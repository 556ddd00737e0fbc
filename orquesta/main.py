from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
import os

from orquesta.database import engine, SessionLocal
from orquesta.database import Base
import orquesta.models  # noqa: F401  register all models
from orquesta.models.usuario import Usuario
from orquesta.config import settings
from orquesta.exceptions import OrquestaError
from orquesta.services.usuario_service import hash_password
from orquesta.routers import health, auth, programas, alumnos, instrumentos, asignaciones, movimientos
import logging

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI):
    # Ensure DB exists and tables are created (for dev mode without alembic)
    if settings.DATABASE_URL.startswith("sqlite:///./"):
        os.makedirs("data", exist_ok=True)
    Base.metadata.create_all(bind=engine)

    # Create first admin user if no users exist yet
    db = SessionLocal()
    try:
        if not db.query(Usuario).first():
            admin = Usuario(
                nombre=settings.FIRST_ADMIN_NAME,
                email=settings.FIRST_ADMIN_EMAIL.lower(),
                hashed_password=hash_password(settings.FIRST_ADMIN_PASS),
                rol="admin",
                is_active=True,
            )
            db.add(admin)
            db.commit()
            logger.info("Creado el primer usuario administrador: %s", settings.FIRST_ADMIN_EMAIL)
    finally:
        db.close()

    yield


app = FastAPI(
    title="Orquesta",
    description="Programa educativo de la orquesta: alumnos, instrumentos, asignaciones e inventario",
    version="1.0.0",
    lifespan=lifespan,
)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if settings.APP_ENV == "production":
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response


app.add_middleware(SecurityHeadersMiddleware)


# --- Error responses: {"error": <code>, "detail": <message>} ---
@app.exception_handler(OrquestaError)
async def orquesta_error_handler(request: Request, exc: OrquestaError):
    return JSONResponse(
        {"error": exc.code, "detail": exc.detail},
        status_code=exc.status_code,
        headers=exc.headers,
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    codes = {401: "unauthorized", 403: "forbidden", 404: "not_found", 405: "method_not_allowed", 409: "conflict"}
    return JSONResponse(
        {"error": codes.get(exc.status_code, "http_error"), "detail": exc.detail},
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        {
            "error": "validation_error",
            "detail": "Datos de entrada inválidos o incompletos.",
            "errors": jsonable_encoder(exc.errors()),
        },
        status_code=400,
    )


@app.exception_handler(Exception)
async def internal_error_handler(request: Request, exc: Exception):
    logger.exception("Error no controlado en %s %s", request.method, request.url.path)
    return JSONResponse(
        {"error": "internal", "detail": "Error interno del servidor."},
        status_code=500,
    )


app.include_router(health.router)
app.include_router(auth.router)
app.include_router(programas.router)
app.include_router(alumnos.router)
app.include_router(instrumentos.router)
app.include_router(asignaciones.router)
app.include_router(movimientos.router)
