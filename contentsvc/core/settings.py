"""Définition et chargement des paramètres de configuration du service de contenus.

Objectif du module
------------------
- Centraliser les paramètres (env/.env) via Pydantic Settings
- Résoudre le fichier `.env` à utiliser selon la stratégie: ENV_FILE > .env.{APP_ENV} > .env
"""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Détermination du fichier .env à utiliser avec priorité:
# 1) ENV_FILE (chemin explicite)
# 2) .env.{APP_ENV} si présent
# 3) .env (défaut)
_cwd = Path.cwd()
_env_file_from_env = os.getenv("ENV_FILE")
if _env_file_from_env:
    _ENV_FILE_PATH = _env_file_from_env
else:
    _app_env = os.getenv("APP_ENV", "dev")
    _candidate_specific = _cwd / f".env.{_app_env}"
    _candidate_default = _cwd / ".env"
    if _candidate_specific.exists():
        _ENV_FILE_PATH = _candidate_specific
    else:
        _ENV_FILE_PATH = _candidate_default


class Settings(BaseSettings):
    """Modèle de configuration chargé depuis l'environnement et .env."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE_PATH,
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=False,
    )
    APP_NAME: str = "content-service"
    APP_ENV: str = "dev"
    APP_DEBUG: bool = True
    APP_HOST: str = "0.0.0.0"
    APP_PORT: int = 8000

    # Provider (backend de gestion de contenus)
    PROVIDER_BASE_URL: str = "http://localhost:9000"
    PROVIDER_API_KEY: str | None = None
    PROVIDER_TIMEOUT_S: float = 10.0
    PROVIDER_MAX_CONNECTIONS: int = 50
    # En-têtes entrants relayés tels quels vers le provider
    FORWARDED_HEADERS: list[str] = [
        "x-authenticated-user-token",
        "x-authenticated-userid",
        "x-channel-id",
        "x-app-id",
        "x-device-id",
    ]

    # Cache taxonomie (frameworks)
    REDIS_URL: str | None = None
    REQUIRE_REDIS: bool = False
    TAXONOMY_CACHE_PREFIX: str = "framework:"
    TAXONOMY_CACHE_TTL_S: int = 0  # 0 = pas d'expiration côté service

    # Contenus
    CONTENT_CODE_PREFIX: str = "org.content."
    DEFAULT_LANGUAGE: str = "en"
    CONTENT_DEFAULT_CONTENT_TYPES: list[str] = ["Resource", "Collection", "LessonPlan"]

    # Notifications
    NOTIFY_ENABLED: bool = False
    NOTIFY_WEBHOOK_URL: str | None = None

    OTLP_ENDPOINT: str | None = None


def get_settings() -> Settings:
    """Construit et retourne la configuration de l'application."""
    return Settings()
