"""Tests pour les profils de validation des charges utiles."""

from __future__ import annotations

import pytest

from contentsvc.domain.validation import RequestValidator

VALID_CREATE = {
    "name": "Photosynthèse",
    "mimeType": "application/pdf",
    "contentType": "Resource",
    "createdBy": "user-1",
    "description": "champ libre accepté",
}


def test_create_profile_accepts_complete_payload() -> None:
    """Teste qu'une création complète est valide (champs additionnels tolérés)."""
    assert RequestValidator().validate(VALID_CREATE, "create") is True


@pytest.mark.parametrize("missing", ["name", "mimeType", "contentType", "createdBy"])
def test_create_profile_rejects_missing_field(missing: str) -> None:
    """Teste le refus d'une création à laquelle il manque un champ requis."""
    payload = {k: v for k, v in VALID_CREATE.items() if k != missing}

    assert RequestValidator().validate(payload, "create") is False


def test_create_profile_rejects_empty_name() -> None:
    """Teste le refus d'un nom vide."""
    assert RequestValidator().validate({**VALID_CREATE, "name": ""}, "create") is False


def test_update_profile() -> None:
    """Teste le profil de mise à jour: non vide, sans champs en lecture seule."""
    validator = RequestValidator()

    assert validator.validate({"name": "Nouveau"}, "update") is True
    assert validator.validate({"keywords": ["bio"]}, "update") is True
    assert validator.validate({}, "update") is False
    assert validator.validate({"identifier": "do_9"}, "update") is False


def test_non_dict_payload_is_invalid() -> None:
    """Teste qu'une charge utile non objet est invalide."""
    assert RequestValidator().validate(["name"], "create") is False


def test_unknown_profile_raises() -> None:
    """Teste qu'un profil inconnu est une erreur de programmation."""
    with pytest.raises(KeyError):
        RequestValidator().validate({}, "delete")
