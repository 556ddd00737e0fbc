import logging
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

_DEFAULT_SECRET = "change-me-in-production"


class Settings(BaseSettings):
    APP_ENV: str = "development"
    SECRET_KEY: str = _DEFAULT_SECRET
    DATABASE_URL: str = "sqlite:///./data/orquesta.db"
    TOKEN_MAX_AGE: int = 8 * 60 * 60  # seconds
    FIRST_ADMIN_NAME: str = "Administrador"
    FIRST_ADMIN_EMAIL: str = "admin@orquesta.org"
    FIRST_ADMIN_PASS: str = "admin123"
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"


settings = Settings()

if settings.SECRET_KEY == _DEFAULT_SECRET:
    if settings.APP_ENV == "production":
        raise RuntimeError("SECRET_KEY debe configurarse en producción. Revise el archivo .env.")
    else:
        logger.warning("SECRET_KEY tiene el valor por defecto; configúrelo en .env para producción")

if settings.FIRST_ADMIN_PASS == "admin123":
    logger.warning("FIRST_ADMIN_PASS tiene el valor por defecto 'admin123'; cámbielo en .env")
