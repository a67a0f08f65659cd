"""Configuration de test pour pytest avec gestion des chemins.

Ce module ajoute la racine du projet au sys.path (imports `contentsvc...`) et fournit les fixtures
communes: provider simulé, store mémoire, cache de taxonomies et orchestrateur.
"""

import os
import sys

import pytest

# Ensure project root is on sys.path so that
# imports like `from contentsvc...` resolve.
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from contentsvc.domain.orchestrator import LifecycleOrchestrator  # noqa: E402
from contentsvc.domain.taxonomy_cache import TaxonomyCache  # noqa: E402
from contentsvc.infra.cache_store import InMemoryCacheStore  # noqa: E402
from tests.fakes import RecordingNotifier, make_provider  # noqa: E402


@pytest.fixture
def provider():
    """Provider simulé: chaque méthode est un AsyncMock."""
    return make_provider()


@pytest.fixture
def store():
    return InMemoryCacheStore()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def orchestrator(provider, store, notifier):
    """Orchestrateur branché sur le provider simulé et un store mémoire."""
    return LifecycleOrchestrator(
        provider,
        TaxonomyCache(provider, store),
        notifier=notifier,
        code_prefix="org.test.",
        content_content_types=["Resource"],
    )
