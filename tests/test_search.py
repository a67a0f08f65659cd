"""Tests pour la recherche et son enrichissement par la taxonomie."""

from __future__ import annotations

import pytest

from contentsvc.domain.errors import UpstreamError, ValidationError
from tests.fakes import failed, ok

FRAMEWORK_ID = "NCF"
RESULT_COUNT = 2


def _search_result() -> dict:
    return {
        "count": RESULT_COUNT,
        "content": [{"identifier": "do_1"}, {"identifier": "do_2"}],
        "facets": [{"name": "subject", "values": [{"name": "math"}, {"name": "science"}]}],
    }


def _framework() -> dict:
    return {
        "framework": {
            "categories": [
                {
                    "code": "subject",
                    "terms": [
                        {"name": "Science", "index": 1, "translations": '{"fr": "Sciences"}'},
                        {"name": "Math", "index": 2},
                    ],
                }
            ]
        }
    }


@pytest.mark.asyncio
async def test_search_requires_filters(orchestrator, provider) -> None:
    """Teste qu'une recherche sans filtres est refusée."""
    with pytest.raises(ValidationError):
        await orchestrator.search({"query": "x"})

    provider.composite_search.assert_not_awaited()


@pytest.mark.asyncio
async def test_search_forwards_filters_without_adding_content_type(orchestrator, provider) -> None:
    """Teste que les filtres sont relayés tels quels, projection en plus, sans muter l'appelant."""
    request = {"filters": {"status": ["Live"]}}

    await orchestrator.search(request, fields=["name", "identifier"])

    body = provider.composite_search.await_args.args[0]
    assert body == {
        "request": {"filters": {"status": ["Live"]}, "fields": ["name", "identifier"]}
    }
    assert "fields" not in request


@pytest.mark.asyncio
async def test_search_keeps_caller_content_type(orchestrator, provider) -> None:
    """Teste qu'un contentType fourni par l'appelant n'est pas écrasé."""
    await orchestrator.search({"filters": {"contentType": ["Course"]}})

    body = provider.composite_search.await_args.args[0]
    assert body["request"]["filters"]["contentType"] == ["Course"]


@pytest.mark.asyncio
async def test_search_enriches_facets_with_framework(orchestrator, provider) -> None:
    """Teste l'enrichissement des facettes quand un framework est fourni."""
    provider.composite_search.return_value = ok(_search_result())
    provider.get_framework.return_value = ok(_framework())

    outcome = await orchestrator.search({"filters": {}}, framework=FRAMEWORK_ID, language="fr")

    values = outcome.result["facets"][0]["values"]
    assert [v["name"] for v in values] == ["science", "math"]
    assert values[0]["translations"] == "Sciences"
    provider.get_framework.assert_awaited_once()


@pytest.mark.asyncio
async def test_search_without_framework_skips_taxonomy(orchestrator, provider) -> None:
    """Teste qu'aucune taxonomie n'est lue sans framework."""
    provider.composite_search.return_value = ok(_search_result())

    outcome = await orchestrator.search({"filters": {}})

    assert outcome.result["count"] == RESULT_COUNT
    provider.get_framework.assert_not_awaited()


@pytest.mark.asyncio
async def test_search_returns_raw_result_when_framework_fails(orchestrator, provider) -> None:
    """Teste que l'échec de la taxonomie n'échoue pas la recherche."""
    provider.composite_search.return_value = ok(_search_result())
    provider.get_framework.return_value = failed("ERR_FRAMEWORK_NOT_FOUND", "unknown framework")

    outcome = await orchestrator.search({"filters": {}}, framework=FRAMEWORK_ID)

    assert outcome.result == _search_result()


@pytest.mark.asyncio
async def test_search_provider_failure_is_raised(orchestrator, provider) -> None:
    """Teste la remontée d'un échec de la recherche provider."""
    provider.composite_search.return_value = failed()

    with pytest.raises(UpstreamError):
        await orchestrator.search({"filters": {}})


@pytest.mark.asyncio
async def test_search_content_forces_object_type(orchestrator, provider) -> None:
    """Teste que la recherche de contenus impose l'objectType et rien d'autre."""
    await orchestrator.search_content({"filters": {"objectType": ["Asset"]}})

    filters = provider.composite_search.await_args.args[0]["request"]["filters"]
    assert filters == {"objectType": ["Content"]}


@pytest.mark.asyncio
async def test_search_plugins_forces_types(orchestrator, provider) -> None:
    """Teste que la recherche de plugins impose objectType et contentType."""
    with pytest.raises(ValidationError):
        await orchestrator.search_plugins({})

    await orchestrator.search_plugins({"filters": {"contentType": ["Resource"]}})

    filters = provider.plugins_search.await_args.args[0]["request"]["filters"]
    assert filters == {"objectType": ["content"], "contentType": ["plugin"]}
