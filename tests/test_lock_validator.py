"""Tests pour la validation du verrouillage des contenus."""

from __future__ import annotations

import pytest

from contentsvc.core import messages as msg
from contentsvc.core.http_constants import HTTP_BAD_GATEWAY, HTTP_INTERNAL_SERVER_ERROR, HTTP_OK
from contentsvc.domain.errors import UpstreamError, ValidationError
from contentsvc.domain.lock_validator import LockValidator
from contentsvc.infra.provider_client import ProviderTransportError
from tests.fakes import failed, ok

CONTENT_ID = "do_1"
OWNER = "user-1"
COLLABORATOR = "user-2"


def _content(status: str) -> dict:
    return {
        "content": {
            "identifier": CONTENT_ID,
            "status": status,
            "createdBy": OWNER,
            "collaborators": [COLLABORATOR],
        }
    }


@pytest.mark.asyncio
async def test_live_content_denied_for_regular_operation(provider) -> None:
    """Teste le refus d'un verrou sur un contenu Live hors libération."""
    provider.get_by_id.return_value = ok(_content("Live"))

    decision = await LockValidator(provider).validate(CONTENT_ID, OWNER)

    assert decision.allowed is False
    assert decision.reason == msg.LOCK_NOT_DRAFT


@pytest.mark.asyncio
async def test_live_content_allowed_for_release(provider) -> None:
    """Teste qu'une libération est autorisée quel que soit l'état."""
    provider.get_by_id.return_value = ok(_content("Live"))

    decision = await LockValidator(provider).validate(CONTENT_ID, OWNER, is_release_operation=True)

    assert decision.allowed is True
    assert decision.content["identifier"] == CONTENT_ID


@pytest.mark.asyncio
async def test_draft_allowed_for_collaborator(provider) -> None:
    """Teste l'accord pour un collaborateur sur un brouillon."""
    provider.get_by_id.return_value = ok(_content("Draft"))

    decision = await LockValidator(provider).validate(CONTENT_ID, COLLABORATOR)

    assert decision.allowed is True
    assert decision.reason == msg.LOCK_VALIDATED
    assert provider.get_by_id.await_args.args[:2] == (CONTENT_ID, {"mode": "edit"})


@pytest.mark.asyncio
async def test_decision_ignores_unrelated_snapshot_fields(provider) -> None:
    """Teste que seuls statut, créateur et collaborateurs pèsent dans la décision."""
    snapshot = {
        "status": "Draft",
        "createdBy": OWNER,
        "collaborators": None,
        "versionKey": 1700000000001,
        "badgeAssertions": [{"assertionId": 1, "badgeId": 2, "issuerId": 3}],
    }
    provider.get_by_id.return_value = ok({"content": snapshot})

    decision = await LockValidator(provider).validate(CONTENT_ID, OWNER)

    assert decision.allowed is True
    assert decision.content == snapshot


@pytest.mark.asyncio
async def test_draft_denied_for_stranger(provider) -> None:
    """Teste le refus pour un utilisateur ni propriétaire ni collaborateur."""
    provider.get_by_id.return_value = ok(_content("Draft"))

    decision = await LockValidator(provider).validate(CONTENT_ID, "user-3")

    assert decision.allowed is False
    assert decision.reason == msg.LOCK_NOT_AUTHORIZED


@pytest.mark.asyncio
async def test_fetch_failure_is_reported_not_raised(provider) -> None:
    """Teste qu'un échec de lecture est signalé sans exception."""
    provider.get_by_id.return_value = failed("ERR_NOT_FOUND", None)

    decision = await LockValidator(provider).validate(CONTENT_ID, OWNER)

    assert decision.fetch_failed is True
    assert decision.reason == msg.LOCK_FETCH_FAILED


@pytest.mark.asyncio
async def test_transport_failure_is_reported(provider) -> None:
    """Teste qu'une erreur réseau est aussi signalée comme lecture impossible."""
    provider.get_by_id.side_effect = ProviderTransportError(HTTP_BAD_GATEWAY, "unreachable")

    decision = await LockValidator(provider).validate(CONTENT_ID, OWNER)

    assert decision.allowed is False
    assert decision.fetch_failed is True


@pytest.mark.asyncio
async def test_validate_lock_envelope_on_success(orchestrator, provider) -> None:
    """Teste le résultat de validate_lock: validation, message et instantané."""
    provider.get_by_id.return_value = ok(_content("Draft"))

    outcome = await orchestrator.validate_lock(
        {"resourceId": CONTENT_ID, "apiName": "createLock"}, OWNER
    )

    assert outcome.status_code == HTTP_OK
    assert outcome.result["validation"] is True
    assert outcome.result["contentdata"]["identifier"] == CONTENT_ID


@pytest.mark.asyncio
async def test_validate_lock_denial_is_a_success_response(orchestrator, provider) -> None:
    """Teste qu'un refus est renvoyé en 200 avec validation à False."""
    provider.get_by_id.return_value = ok(_content("Review"))

    outcome = await orchestrator.validate_lock({"resourceId": CONTENT_ID}, OWNER)

    assert outcome.result == {"validation": False, "message": msg.LOCK_NOT_DRAFT}


@pytest.mark.asyncio
async def test_validate_lock_release_on_live_content(orchestrator, provider) -> None:
    """Teste que `retireLock` est accepté sur un contenu publié."""
    provider.get_by_id.return_value = ok(_content("Live"))

    outcome = await orchestrator.validate_lock(
        {"resourceId": CONTENT_ID, "apiName": "retireLock"}, OWNER
    )

    assert outcome.result["validation"] is True


@pytest.mark.asyncio
async def test_validate_lock_fetch_failure_is_500(orchestrator, provider) -> None:
    """Teste qu'une lecture impossible produit un échec 500 portant le résultat."""
    provider.get_by_id.return_value = failed(None, None)

    with pytest.raises(UpstreamError) as exc:
        await orchestrator.validate_lock({"resourceId": CONTENT_ID}, OWNER)

    assert exc.value.status_code == HTTP_INTERNAL_SERVER_ERROR
    assert exc.value.result == {"validation": False, "message": msg.LOCK_FETCH_FAILED}


@pytest.mark.asyncio
async def test_validate_lock_requires_resource_id(orchestrator) -> None:
    """Teste le refus d'une validation sans `resourceId`."""
    with pytest.raises(ValidationError):
        await orchestrator.validate_lock({"apiName": "createLock"}, OWNER)
