"""
Tests pour la résolution des variables d'environnement.

Ce module teste le chargement des settings à partir d'un fichier .env désigné par ENV_FILE.
"""

from __future__ import annotations

import importlib
from pathlib import Path

CUSTOM_TIMEOUT_S = 2.5
CUSTOM_TTL_S = 600


def test_settings_reads_env_file(tmp_path: Path, monkeypatch) -> None:
    """
    Teste que les settings lisent correctement les fichiers d'environnement.

    Vérifie que les variables définies dans un fichier .env personnalisé sont chargées, y compris
    les listes JSON.
    """
    env = tmp_path / ".env.custom"
    env.write_text(
        "PROVIDER_BASE_URL=http://provider.internal\n"
        f"PROVIDER_TIMEOUT_S={CUSTOM_TIMEOUT_S}\n"
        f"TAXONOMY_CACHE_TTL_S={CUSTOM_TTL_S}\n"
        'CONTENT_DEFAULT_CONTENT_TYPES=["Resource"]\n',
        encoding="utf-8",
    )
    monkeypatch.setenv("ENV_FILE", str(env))

    # Reload settings module to pick up new ENV_FILE
    settings_mod = importlib.import_module("contentsvc.core.settings")
    importlib.reload(settings_mod)
    s = settings_mod.get_settings()

    assert s.PROVIDER_BASE_URL == "http://provider.internal"
    assert s.PROVIDER_TIMEOUT_S == CUSTOM_TIMEOUT_S
    assert s.TAXONOMY_CACHE_TTL_S == CUSTOM_TTL_S
    assert s.CONTENT_DEFAULT_CONTENT_TYPES == ["Resource"]

    monkeypatch.delenv("ENV_FILE")
    importlib.reload(settings_mod)


def test_defaults_without_env_file(monkeypatch, tmp_path: Path) -> None:
    """Teste les valeurs par défaut quand aucun fichier .env n'existe."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("ENV_FILE", raising=False)
    settings_mod = importlib.import_module("contentsvc.core.settings")
    importlib.reload(settings_mod)
    s = settings_mod.get_settings()

    assert s.APP_NAME == "content-service"
    assert s.TAXONOMY_CACHE_TTL_S == 0
    assert s.CONTENT_CODE_PREFIX == "org.content."
