"""Tests pour l'enrichissement des facettes par la taxonomie."""

from __future__ import annotations

from contentsvc.domain.facets import FacetEnricher, parse_translation

SCIENCE_INDEX = 1
MATH_INDEX = 2


def _categories() -> list[dict]:
    return [
        {
            "code": "subject",
            "terms": [
                {
                    "name": "Science",
                    "index": SCIENCE_INDEX,
                    "description": "Sciences de la vie",
                    "translations": '{"fr": "Sciences", "en": "Science"}',
                },
                {"name": "Math", "index": MATH_INDEX, "translations": {"fr": "Mathématiques"}},
            ],
        }
    ]


def test_enrich_annotates_and_sorts_by_index() -> None:
    """Teste l'exemple Math/Science: annotation puis tri par index croissant."""
    facets = [{"name": "subject", "values": [{"name": "math"}, {"name": "science"}]}]

    FacetEnricher().enrich(facets, _categories(), "fr")

    values = facets[0]["values"]
    assert [v["name"] for v in values] == ["science", "math"]
    assert values[0]["index"] == SCIENCE_INDEX
    assert values[0]["description"] == "Sciences de la vie"
    assert values[0]["translations"] == "Sciences"
    assert values[1]["translations"] == "Mathématiques"


def test_unmatched_values_keep_order_after_indexed_ones() -> None:
    """Teste que les valeurs sans terme restent en fin de liste, dans leur ordre d'origine."""
    facets = [
        {
            "name": "subject",
            "values": [{"name": "art"}, {"name": "math"}, {"name": "music"}, {"name": "science"}],
        }
    ]

    FacetEnricher().enrich(facets, _categories(), "en")

    assert [v["name"] for v in facets[0]["values"]] == ["science", "math", "art", "music"]
    assert "index" not in facets[0]["values"][2]


def test_facet_without_category_is_untouched() -> None:
    """Teste qu'une facette sans catégorie correspondante n'est pas modifiée."""
    before = [{"name": "zeta", "count": 2}, {"name": "alpha", "count": 1}]
    facets = [{"name": "medium", "values": [dict(v) for v in before]}]

    FacetEnricher().enrich(facets, _categories(), "en")

    assert facets[0]["values"] == before


def test_count_is_kept_when_term_has_none() -> None:
    """Teste que le compte de la recherche est conservé si le terme n'en porte pas."""
    search_count = 7
    facets = [{"name": "subject", "values": [{"name": "Math", "count": search_count}]}]

    FacetEnricher().enrich(facets, _categories(), "en")

    assert facets[0]["values"][0]["count"] == search_count
    # langue absente du blob -> pas de libellé
    assert facets[0]["values"][0]["translations"] is None


def test_parse_translation_handles_bad_input() -> None:
    """Teste le repli silencieux sur None pour un blob illisible."""
    assert parse_translation("{not json", "fr") is None
    assert parse_translation(None, "fr") is None
    assert parse_translation('["fr"]', "fr") is None
    assert parse_translation('{"fr": "Bonjour"}', "fr") == "Bonjour"
