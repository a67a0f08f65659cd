"""
Endpoint de santé pour vérifier la disponibilité de l'API et de son cache.

Expose `/health` pour signaler l'état général de l'application et le backend du cache de taxonomies.
"""


from fastapi import APIRouter

from contentsvc.core.container import container

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    """Vérifie la disponibilité de l'API et le backend du cache."""
    return {
        "status": "ok",
        "cache": getattr(container, "storage_backend", "unknown"),
        "provider": container.settings.PROVIDER_BASE_URL,
        "notifications": container.settings.NOTIFY_ENABLED,
    }
