"""Enrichissement des facettes de recherche par la taxonomie du framework.

Une facette `{name, values: [{name, count}, ...]}` dont le nom correspond au `code` d'une catégorie
reçoit, pour chaque valeur reconnue (comparaison insensible à la casse avec le nom d'un terme), la
description, l'index d'affichage, le compte et le libellé traduit du terme. Aucune valeur n'est
ajoutée ni retirée; les valeurs de la facette sont ensuite triées par index croissant, les valeurs
sans index restant en fin de liste dans leur ordre d'origine.
"""

from __future__ import annotations

import json
from typing import Any

import structlog

log = structlog.get_logger(__name__)

_COPIED_TERM_FIELDS = ("description", "index", "count")


def parse_translation(data: Any, language: str) -> str | None:
    """Extrait le libellé `language` d'un blob JSON `{locale: libellé}`.

    Retourne None si le blob est illisible ou si la langue est absente.
    """
    try:
        translations = data if isinstance(data, dict) else json.loads(data)
    except (TypeError, ValueError) as exc:
        log.debug("translation_parse_failed", language=language, error=repr(exc))
        return None
    if not isinstance(translations, dict):
        return None
    return translations.get(language) or None


def _sort_key(value: dict[str, Any]) -> tuple[bool, Any]:
    index = value.get("index")
    return (index is None, index if index is not None else 0)


class FacetEnricher:
    """Fusionne facettes de recherche et catégories de taxonomie."""

    def enrich(
        self,
        facets: list[dict[str, Any]],
        categories: list[dict[str, Any]],
        language: str,
    ) -> list[dict[str, Any]]:
        """Annote les facettes en place et les retourne."""
        by_code = {c.get("code"): c for c in categories or [] if c.get("code")}
        for facet in facets or []:
            category = by_code.get(facet.get("name"))
            if category is None:
                continue
            terms = {
                str(t.get("name")).lower(): t
                for t in category.get("terms") or []
                if t.get("name") is not None
            }
            values = facet.get("values") or []
            for value in values:
                name = value.get("name")
                if not isinstance(name, str):
                    continue
                term = terms.get(name.lower())
                if term is None:
                    continue
                for field in _COPIED_TERM_FIELDS:
                    if field in term:
                        value[field] = term[field]
                value["translations"] = parse_translation(term.get("translations"), language)
            facet["values"] = sorted(values, key=_sort_key)
        return facets
