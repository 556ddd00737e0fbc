import logging
import time
from collections import defaultdict

from fastapi import APIRouter, Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from orquesta.config import settings
from orquesta.database import get_db
from orquesta.exceptions import ForbiddenError, RateLimitError, UnauthorizedError, ValidationError
from orquesta.schemas.usuario import LoginRequest, RegisterRequest, TokenClaims, TokenResponse, UsuarioResponse
from orquesta.security import InvalidToken, issue_token, verify_token
from orquesta.services.usuario_service import (
    ADMIN_ROLES, DEFAULT_ROLE, VALID_ROLES, authenticate, create_usuario,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

bearer_scheme = HTTPBearer(auto_error=False)

# ── Rate limiting (in-memory, per IP) ──────────────────────────────────────
_login_attempts: dict[str, list[float]] = defaultdict(list)
_RATE_LIMIT_WINDOW = 60   # seconds
_RATE_LIMIT_MAX = 10      # max attempts per window


def _check_rate_limit(ip: str) -> bool:
    now = time.time()
    _login_attempts[ip] = [t for t in _login_attempts[ip] if now - t < _RATE_LIMIT_WINDOW]
    if len(_login_attempts[ip]) >= _RATE_LIMIT_MAX:
        return False
    _login_attempts[ip].append(now)
    return True


def _reset_rate_limit(ip: str) -> None:
    """Clear failed attempts after successful login."""
    _login_attempts.pop(ip, None)


# ── Dependencies ───────────────────────────────────────────────────────────
def require_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> TokenClaims:
    """Dependency — any authenticated caller. Missing token 401, bad token 403."""
    if credentials is None:
        raise UnauthorizedError("Token de autenticación no proporcionado.")
    try:
        return verify_token(credentials.credentials)
    except InvalidToken as e:
        logger.info("Token rechazado: %s", e)
        raise ForbiddenError("Token de autenticación inválido o expirado.")


def require_admin(claims: TokenClaims = Depends(require_user)) -> TokenClaims:
    """Dependency — administrative role, gates every mutating endpoint."""
    if claims.rol not in ADMIN_ROLES:
        raise ForbiddenError("Acceso denegado. No tiene el rol permitido para esta acción.")
    return claims


def optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> TokenClaims | None:
    if credentials is None:
        return None
    try:
        return verify_token(credentials.credentials)
    except InvalidToken:
        return None


# ── Routes ─────────────────────────────────────────────────────────────────
@router.post("/register", response_model=UsuarioResponse, status_code=201)
def register(
    data: RegisterRequest,
    db: Session = Depends(get_db),
    caller: TokenClaims | None = Depends(optional_user),
):
    rol = data.rol or DEFAULT_ROLE
    if rol not in VALID_ROLES:
        raise ValidationError(f"Rol inválido. Valores permitidos: {', '.join(VALID_ROLES)}.")
    if rol != DEFAULT_ROLE and (caller is None or caller.rol not in ADMIN_ROLES):
        raise ForbiddenError("Solo un administrador puede registrar usuarios con el rol solicitado.")
    usuario = create_usuario(db, data, rol=rol)
    logger.info(
        "AUDIT: usuario '%s' registrado (rol=%s) por %s",
        usuario.email, rol, caller.email if caller else "registro público",
    )
    return usuario


@router.post("/login", response_model=TokenResponse)
def login(request: Request, data: LoginRequest, db: Session = Depends(get_db)):
    ip = request.client.host if request.client else "unknown"
    if not _check_rate_limit(ip):
        raise RateLimitError("Demasiados intentos. Inténtelo de nuevo en un momento.")
    usuario = authenticate(db, data.email, data.password)
    if usuario is None:
        logger.warning("AUDIT: inicio de sesión fallido para '%s' desde %s", data.email, ip)
        raise UnauthorizedError("Email o contraseña incorrectos.")
    if not usuario.is_active:
        logger.warning("AUDIT: intento de acceso con cuenta desactivada '%s' desde %s", data.email, ip)
        raise ForbiddenError("La cuenta está desactivada.")
    _reset_rate_limit(ip)
    logger.info("AUDIT: inicio de sesión '%s' (rol=%s) desde %s", usuario.email, usuario.rol, ip)
    return TokenResponse(
        token=issue_token(usuario),
        expires_in=settings.TOKEN_MAX_AGE,
        usuario=UsuarioResponse.model_validate(usuario),
    )


@router.get("/me", response_model=TokenClaims)
def me(claims: TokenClaims = Depends(require_user)):
    return claims
