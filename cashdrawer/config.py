# cashdrawer/config.py
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuración del servicio. Se lee del entorno (prefijo CASHDRAWER_) o de .env"""

    model_config = SettingsConfigDict(
        env_prefix="CASHDRAWER_", env_file=".env", extra="ignore"
    )

    APP_NAME: str = "Atlas Caja"

    # SQLite o PostgreSQL (el índice parcial de sesiones activas no existe en MySQL)
    DATABASE_URL: str = "sqlite:///./sql_app.db"

    # JWT (el login vive fuera de este servicio, aquí solo se valida el token)
    SECRET_KEY: str = "atlas_erp_secret_key_change_me_in_prod"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 12  # 12 horas

    # Costo de bcrypt para los PIN de gerente
    PIN_HASH_ROUNDS: int = Field(default=10, ge=10, le=16)

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
