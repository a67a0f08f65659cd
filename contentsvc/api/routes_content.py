"""
Routes du cycle de vie des contenus et de la recherche.

Ce module regroupe les endpoints `/v1/content` (recherche, création, transitions, retrait en lot,
badges, signalements, verrouillage) et `/v1/plugins/search`. Chaque endpoint délègue à
l'orchestrateur et met le résultat en enveloppe standard.
"""

from fastapi import APIRouter, Depends

from contentsvc.api.deps import acting_user, forwarded_headers, get_orchestrator, trace_id
from contentsvc.api.schemas import ContentRequest, RetireRequest
from contentsvc.apigw.errors import success_response
from contentsvc.domain.orchestrator import LifecycleOrchestrator

router = APIRouter(prefix="/v1/content", tags=["content"])
plugins_router = APIRouter(prefix="/v1/plugins", tags=["plugins"])

orchestrator_dep = Depends(get_orchestrator)
headers_dep = Depends(forwarded_headers)
user_dep = Depends(acting_user)
trace_dep = Depends(trace_id)


def _projection(fields: str | None) -> list[str] | None:
    """`fields=name,identifier` -> `["name", "identifier"]`."""
    if not fields:
        return None
    return [f.strip() for f in fields.split(",") if f.strip()]


@router.post("/search")
async def search_content(
    payload: ContentRequest,
    framework: str | None = None,
    lang: str | None = None,
    fields: str | None = None,
    orchestrator: LifecycleOrchestrator = orchestrator_dep,
    headers: dict = headers_dep,
    trace: str | None = trace_dep,
):
    """
    Recherche de contenus (`objectType=Content`), enrichie si `framework` est fourni.

    Paramètres:
    - payload: `{"request": {"filters": {...}, "fields": [...], ...}}`
    - framework: identifiant de taxonomie pour annoter les facettes
    - lang: langue des libellés traduits (défaut configuré sinon)
    - fields: projection, liste de champs séparés par des virgules
    """
    outcome = await orchestrator.search_content(
        payload.request,
        fields=_projection(fields),
        framework=framework,
        language=lang,
        headers=headers,
    )
    return success_response(outcome, trace)


@router.post("/composite/search")
async def composite_search(
    payload: ContentRequest,
    framework: str | None = None,
    lang: str | None = None,
    fields: str | None = None,
    orchestrator: LifecycleOrchestrator = orchestrator_dep,
    headers: dict = headers_dep,
    trace: str | None = trace_dep,
):
    """Recherche composite tous types d'objets, mêmes options que `/search`."""
    outcome = await orchestrator.search(
        payload.request,
        fields=_projection(fields),
        framework=framework,
        language=lang,
        headers=headers,
    )
    return success_response(outcome, trace)


@router.post("/create")
async def create_content(
    payload: ContentRequest,
    orchestrator: LifecycleOrchestrator = orchestrator_dep,
    headers: dict = headers_dep,
    trace: str | None = trace_dep,
):
    """Crée un contenu; retourne `{content_id, versionKey}`."""
    outcome = await orchestrator.create(payload.request, headers=headers)
    return success_response(outcome, trace)


@router.patch("/update/{content_id}")
async def update_content(
    content_id: str,
    payload: ContentRequest,
    orchestrator: LifecycleOrchestrator = orchestrator_dep,
    headers: dict = headers_dep,
    trace: str | None = trace_dep,
):
    """Met à jour un contenu avec le `versionKey` courant relu chez le provider."""
    outcome = await orchestrator.update(content_id, payload.request, headers=headers)
    return success_response(outcome, trace)


@router.get("/read/mycontent/{created_by}")
async def get_my_content(
    created_by: str,
    orchestrator: LifecycleOrchestrator = orchestrator_dep,
    headers: dict = headers_dep,
    trace: str | None = trace_dep,
):
    outcome = await orchestrator.get_my_content(created_by, headers=headers)
    return success_response(outcome, trace)


@router.get("/read/{content_id}")
async def get_content(
    content_id: str,
    mode: str | None = None,
    fields: str | None = None,
    orchestrator: LifecycleOrchestrator = orchestrator_dep,
    headers: dict = headers_dep,
    trace: str | None = trace_dep,
):
    """Lecture d'un contenu; `mode` et `fields` sont relayés au provider."""
    query = {k: v for k, v in {"mode": mode, "fields": fields}.items() if v}
    outcome = await orchestrator.get_content(content_id, query or None, headers=headers)
    return success_response(outcome, trace)


@router.post("/review/{content_id}")
async def review_content(
    content_id: str,
    payload: ContentRequest,
    orchestrator: LifecycleOrchestrator = orchestrator_dep,
    headers: dict = headers_dep,
    trace: str | None = trace_dep,
):
    outcome = await orchestrator.review(content_id, payload.request, headers=headers)
    return success_response(outcome, trace)


@router.post("/publish/{content_id}")
async def publish_content(
    content_id: str,
    payload: ContentRequest,
    orchestrator: LifecycleOrchestrator = orchestrator_dep,
    headers: dict = headers_dep,
    trace: str | None = trace_dep,
):
    """Publie un contenu (`request.content.lastPublishedBy` requis)."""
    outcome = await orchestrator.publish(content_id, payload.request, headers=headers)
    return success_response(outcome, trace)


@router.post("/unlisted/publish/{content_id}")
async def unlisted_publish_content(
    content_id: str,
    payload: ContentRequest,
    orchestrator: LifecycleOrchestrator = orchestrator_dep,
    headers: dict = headers_dep,
    trace: str | None = trace_dep,
):
    outcome = await orchestrator.unlisted_publish(content_id, payload.request, headers=headers)
    return success_response(outcome, trace)


@router.post("/reject/{content_id}")
async def reject_content(
    content_id: str,
    payload: ContentRequest,
    orchestrator: LifecycleOrchestrator = orchestrator_dep,
    headers: dict = headers_dep,
    trace: str | None = trace_dep,
):
    outcome = await orchestrator.reject(content_id, payload.request, headers=headers)
    return success_response(outcome, trace)


@router.delete("/retire")
async def retire_contents(
    payload: RetireRequest,
    user: str | None = user_dep,
    orchestrator: LifecycleOrchestrator = orchestrator_dep,
    headers: dict = headers_dep,
    trace: str | None = trace_dep,
):
    """
    Retrait en lot de contenus appartenant tous à l'utilisateur authentifié.

    Paramètres:
    - payload: `{"request": {"contentIds": ["do_1", ...]}}`
    - en-tête `X-Authenticated-Userid`: acteur
    """
    outcome = await orchestrator.retire_batch(payload.content_ids(), user, headers=headers)
    return success_response(outcome, trace)


@router.post("/copy/{content_id}")
async def copy_content(
    content_id: str,
    payload: ContentRequest,
    orchestrator: LifecycleOrchestrator = orchestrator_dep,
    headers: dict = headers_dep,
    trace: str | None = trace_dep,
):
    outcome = await orchestrator.copy(content_id, payload.request, headers=headers)
    return success_response(outcome, trace)


@router.post("/badge/assign/{content_id}")
async def assign_badge(
    content_id: str,
    payload: ContentRequest,
    orchestrator: LifecycleOrchestrator = orchestrator_dep,
    headers: dict = headers_dep,
    trace: str | None = trace_dep,
):
    """Attribue une assertion de badge (`request.content.badgeAssertion`); 409 si doublon."""
    outcome = await orchestrator.assign_badge(content_id, payload.request, headers=headers)
    return success_response(outcome, trace)


@router.post("/badge/revoke/{content_id}")
async def revoke_badge(
    content_id: str,
    payload: ContentRequest,
    orchestrator: LifecycleOrchestrator = orchestrator_dep,
    headers: dict = headers_dep,
    trace: str | None = trace_dep,
):
    """Révoque une assertion de badge par `assertionId`; 404 si absente."""
    outcome = await orchestrator.revoke_badge(content_id, payload.request, headers=headers)
    return success_response(outcome, trace)


@router.post("/flag/accept/{content_id}")
async def accept_flag(
    content_id: str,
    payload: ContentRequest,
    orchestrator: LifecycleOrchestrator = orchestrator_dep,
    headers: dict = headers_dep,
    trace: str | None = trace_dep,
):
    outcome = await orchestrator.accept_flag(content_id, payload.request, headers=headers)
    return success_response(outcome, trace)


@router.post("/flag/reject/{content_id}")
async def reject_flag(
    content_id: str,
    payload: ContentRequest,
    orchestrator: LifecycleOrchestrator = orchestrator_dep,
    headers: dict = headers_dep,
    trace: str | None = trace_dep,
):
    outcome = await orchestrator.reject_flag(content_id, payload.request, headers=headers)
    return success_response(outcome, trace)


@router.post("/flag/{content_id}")
async def flag_content(
    content_id: str,
    payload: ContentRequest,
    orchestrator: LifecycleOrchestrator = orchestrator_dep,
    trace: str | None = trace_dep,
):
    """Accuse réception d'un signalement (résultat vide)."""
    outcome = await orchestrator.flag(content_id, payload.request)
    return success_response(outcome, trace)


@router.post("/upload/url/{content_id}")
async def upload_url(
    content_id: str,
    payload: ContentRequest,
    orchestrator: LifecycleOrchestrator = orchestrator_dep,
    headers: dict = headers_dep,
    trace: str | None = trace_dep,
):
    """URL d'upload pré-signée (`request.content.fileName` requis)."""
    outcome = await orchestrator.upload_url(content_id, payload.request, headers=headers)
    return success_response(outcome, trace)


@router.post("/lock/validate")
async def validate_lock(
    payload: ContentRequest,
    user: str | None = user_dep,
    orchestrator: LifecycleOrchestrator = orchestrator_dep,
    headers: dict = headers_dep,
    trace: str | None = trace_dep,
):
    """
    Valide le verrouillage d'un contenu pour l'utilisateur authentifié.

    Paramètres:
    - payload: `{"request": {"resourceId": "...", "apiName": "createLock" | "retireLock" | ...}}`
    """
    outcome = await orchestrator.validate_lock(payload.request, user, headers=headers)
    return success_response(outcome, trace)


@plugins_router.post("/search")
async def search_plugins(
    payload: ContentRequest,
    orchestrator: LifecycleOrchestrator = orchestrator_dep,
    headers: dict = headers_dep,
    trace: str | None = trace_dep,
):
    """Recherche de plugins (types forcés à `content` / `plugin`)."""
    outcome = await orchestrator.search_plugins(payload.request, headers=headers)
    return success_response(outcome, trace)
