# sheet_i18n/shared/config.py
from enum import Enum
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

class AppEnv(str, Enum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"

class Settings(BaseSettings):
    """
    Central Configuration Registry.
    Process-wide defaults; per-project values live in PluginOptions.
    """

    # --- Application Meta ---
    APP_NAME: str = "sheet-i18n"
    APP_ENV: AppEnv = AppEnv.DEVELOPMENT
    DEBUG: bool = False

    # --- Logging & Observability ---
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "console"  # 'json' or 'console'
    OTEL_SERVICE_NAME: str = "sheet-i18n"
    OTEL_EXPORTER_OTLP_ENDPOINT: Optional[str] = None

    # --- Acceleration ---
    # Dotted module name or path of the compiled converter
    ACCELERATION_MODULE: str = "sheet_i18n_native"
    USE_ACCELERATION: bool = False

    # --- Watcher ---
    WATCH_DEBOUNCE_MS: int = 300

    # --- Source Reading ---
    READ_RETRY_ATTEMPTS: int = 3

    model_config = SettingsConfigDict(env_file=".env", env_prefix="SHEET_I18N_", extra="ignore")

settings = Settings()
