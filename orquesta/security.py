"""Signed, time-limited bearer tokens.

Tokens are itsdangerous ``URLSafeTimedSerializer`` payloads carrying the
user's id, name, e-mail and role. Verification only checks the signature and
age; the claims are trusted as-is for the lifetime of the token.
"""
import logging

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from orquesta.config import settings
from orquesta.models.usuario import Usuario
from orquesta.schemas.usuario import TokenClaims

logger = logging.getLogger(__name__)

_SALT = "orquesta-api-token"


class InvalidToken(Exception):
    pass


def _serializer() -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(settings.SECRET_KEY, salt=_SALT)


def issue_token(usuario: Usuario) -> str:
    claims = TokenClaims(id=usuario.id, nombre=usuario.nombre, email=usuario.email, rol=usuario.rol)
    return _serializer().dumps(claims.model_dump())


def verify_token(token: str, max_age: int | None = None) -> TokenClaims:
    """Return the claims of a valid token, raise ``InvalidToken`` otherwise."""
    if max_age is None:
        max_age = settings.TOKEN_MAX_AGE
    try:
        data = _serializer().loads(token, max_age=max_age)
    except SignatureExpired as e:
        raise InvalidToken("Token expirado.") from e
    except BadSignature as e:
        raise InvalidToken("Token inválido.") from e
    try:
        return TokenClaims.model_validate(data)
    except ValueError as e:
        logger.warning("Token con firma válida pero payload inesperado: %s", e)
        raise InvalidToken("Token inválido.") from e
