"""Configuracion central del servicio de reviews.

Lee variables de entorno y expone parametros usados por store, servicios y API.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Repo / env paths
PACKAGE_DIR = Path(__file__).resolve().parent
if PACKAGE_DIR.parent.name == "backend":
    REPO_ROOT = PACKAGE_DIR.parent.parent
else:
    REPO_ROOT = PACKAGE_DIR.parent

ENV_PATH = PACKAGE_DIR / ".env"
ENV_EXAMPLE = PACKAGE_DIR / ".env.example"

DEFAULT_REVIEWS_PATH = REPO_ROOT / "data" / "playreviews" / "reviews.json"
DEFAULT_APPS_PATH = REPO_ROOT / "data" / "playreviews" / "apps.json"


def _ensure_env_file() -> None:
    """Crear `backend/playreviews/.env` desde su `.env.example` si falta."""
    if ENV_PATH.exists():
        return
    if not ENV_EXAMPLE.exists():
        return
    try:
        ENV_PATH.write_text(ENV_EXAMPLE.read_text(encoding="utf-8"), encoding="utf-8")
    except OSError:
        # Read-only installs keep running on environment variables alone.
        return


# Ensure env exists before pydantic reads it
_ensure_env_file()


class Settings(BaseSettings):
    """Parametros de configuracion de la aplicacion.

    Se cargan desde entorno/.env con pydantic-settings.
    """

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    ########################################
    # App
    ########################################
    app_name: str = Field(default="GPlay Reviews", validation_alias="APP_NAME")
    app_version: str = Field(default="1.0.0", validation_alias="APP_VERSION")

    ########################################
    # Store
    ########################################
    reviews_path: Path = Field(default=DEFAULT_REVIEWS_PATH, validation_alias="REVIEWS_PATH")
    apps_path: Path = Field(default=DEFAULT_APPS_PATH, validation_alias="APPS_PATH")
    seed_mock_data: bool = Field(default=True, validation_alias="SEED_MOCK_DATA")

    ########################################
    # Query / reply limits
    ########################################
    default_page_size: int = Field(default=20, validation_alias="DEFAULT_PAGE_SIZE")
    max_page_size: int = Field(default=100, validation_alias="MAX_PAGE_SIZE")
    max_reply_length: int = Field(default=350, validation_alias="MAX_REPLY_LENGTH")

    ########################################
    # Logging
    ########################################
    log_enabled: bool = Field(default=False, validation_alias="LOG_ENABLED")
    log_to_file: bool = Field(default=False, validation_alias="LOG_TO_FILE")
    log_file_name: str = Field(default="playreviews.log", validation_alias="LOG_FILE_NAME")
    log_debug: bool = Field(default=False, validation_alias="LOG_DEBUG")


settings = Settings()


def reload_settings() -> None:
    """Recarga `settings` desde entorno y `backend/playreviews/.env`."""
    new_settings = Settings()
    for field_name in Settings.model_fields:
        setattr(settings, field_name, getattr(new_settings, field_name))
