from datetime import datetime
from pydantic import BaseModel, EmailStr, Field


class RegisterRequest(BaseModel):
    nombre: str = Field(..., min_length=2, max_length=128)
    email: EmailStr
    password: str = Field(..., min_length=8)
    rol: str | None = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UsuarioResponse(BaseModel):
    id: int
    nombre: str
    email: str
    rol: str
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class TokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    expires_in: int
    usuario: UsuarioResponse


class TokenClaims(BaseModel):
    """Payload carried inside the signed bearer token."""
    id: int
    nombre: str
    email: str
    rol: str
