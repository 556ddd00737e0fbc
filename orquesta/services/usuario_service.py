from sqlalchemy.orm import Session
from sqlalchemy import select
from passlib.context import CryptContext
from orquesta.exceptions import ConflictError, NotFoundError
from orquesta.models.usuario import Usuario
from orquesta.schemas.usuario import RegisterRequest

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

VALID_ROLES = ("usuario", "admin")
ADMIN_ROLES = {"admin"}
DEFAULT_ROLE = "usuario"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def get_usuario(db: Session, usuario_id: int) -> Usuario:
    usuario = db.get(Usuario, usuario_id)
    if not usuario:
        raise NotFoundError("Usuario no encontrado.")
    return usuario


def get_usuario_by_email(db: Session, email: str) -> Usuario | None:
    return db.scalar(select(Usuario).where(Usuario.email == email.lower()))


def create_usuario(db: Session, data: RegisterRequest, rol: str = DEFAULT_ROLE) -> Usuario:
    if get_usuario_by_email(db, data.email):
        raise ConflictError("El email ya está registrado.")
    usuario = Usuario(
        nombre=data.nombre,
        email=data.email.lower(),
        hashed_password=hash_password(data.password),
        rol=rol,
    )
    db.add(usuario)
    db.commit()
    db.refresh(usuario)
    return usuario


def authenticate(db: Session, email: str, password: str) -> Usuario | None:
    usuario = get_usuario_by_email(db, email)
    if not usuario or not verify_password(password, usuario.hashed_password):
        return None
    return usuario
