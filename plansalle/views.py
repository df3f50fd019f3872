# plansalle/views.py
from __future__ import annotations

"""
Vues JSON de l’application "plansalle".

Contenu :
- Sonde de santé (sante)
- Opérations synchrones du cœur : score, affectation initiale, réparation,
  reclassement d’une case, redimensionnement
- Démarrage et polling des tâches Celery (solve_start / improve_start / solve_status)
- Export du document normalisé via un cache éphémère (export / download)

Points notables :
- Toutes les entrées sont le document {version, room, pupils, rules, assignment},
  éventuellement enveloppé dans {"document": ..., "options": ...}.
- Les erreurs de validation du cœur deviennent des réponses explicites
  {"status": "FAILURE", "error": ..., "category": ...} (HTTP 400).
- Après une édition de la salle, l’affectation est réparée ; si la réparation
  est impossible on repart d’une affectation vide (jamais d’erreur 500).
"""

import json
import logging
import secrets
from typing import Any, Callable, Dict, Tuple

from django.core.cache import cache
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from .affectation import construire_affectation_initiale, reparer_affectation
from .erreurs import ErreurEntree, ErreurPlacement
from .modele.salle import TypeCase
from .plan import PlanDeClasse, lire_affectation
from .score import evaluer_affectation
from .tasks import graine_depuis

logger = logging.getLogger(__name__)

DUREE_CACHE_EXPORT: int = 3600


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _lire_json(request: HttpRequest) -> Dict[str, Any]:
    try:
        data = json.loads((request.body or b"{}").decode("utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ErreurEntree("JSON invalide") from exc
    if not isinstance(data, dict):
        raise ErreurEntree("Objet JSON attendu")
    return data


def _document(data: Dict[str, Any]) -> Dict[str, Any]:
    doc = data.get("document", data)
    if not isinstance(doc, dict):
        raise ErreurEntree("Document JSON invalide")
    return doc


def _echec(exc: ErreurPlacement, status: int = 400) -> JsonResponse:
    return JsonResponse({"status": "FAILURE", **exc.vers_dict()}, status=status)


def _operation(fn: Callable[[Dict[str, Any]], Dict[str, Any]]) -> Callable[[HttpRequest], HttpResponse]:
    """Enveloppe commune : lecture JSON, appel, conversion des erreurs du cœur."""

    def vue(request: HttpRequest) -> HttpResponse:
        try:
            return JsonResponse({"status": "SUCCESS", **fn(_lire_json(request))})
        except ErreurPlacement as exc:
            return _echec(exc)

    vue.__name__ = fn.__name__
    vue.__doc__ = fn.__doc__
    return csrf_exempt(require_POST(vue))


def _reparer_ou_vider(plan: PlanDeClasse, affectation: Dict[str, str], graine: int) -> Tuple[Dict[str, str], Dict[str, str]]:
    """Répare l’affectation ; en cas d’échec, affectation vide + message d’erreur."""
    try:
        return reparer_affectation(plan, affectation, graine), {}
    except ErreurPlacement as exc:
        logger.info("réparation impossible, affectation vidée : %s", exc)
        return {}, exc.vers_dict()


# ---------------------------------------------------------------------------
# Santé
# ---------------------------------------------------------------------------

def sante(request: HttpRequest) -> HttpResponse:
    """
    Sonde de santé (sans DB ni cache), utile pour le load balancer.
    """
    return JsonResponse({"ok": True, "service": "plansalle", "version": 1})


# ---------------------------------------------------------------------------
# Opérations synchrones
# ---------------------------------------------------------------------------

@_operation
def score(data: Dict[str, Any]) -> Dict[str, Any]:
    """Score {total, hardBreaks} de l’affectation du document."""
    doc = _document(data)
    plan = PlanDeClasse.depuis_document(doc)
    return evaluer_affectation(plan, lire_affectation(doc)).vers_dict()


@_operation
def affectation_initiale(data: Dict[str, Any]) -> Dict[str, Any]:
    """Affectation de départ reproductible (options.seed)."""
    plan = PlanDeClasse.depuis_document(_document(data))
    affectation = construire_affectation_initiale(plan, graine_depuis(data.get("options")))
    return {"assignment": affectation, "score": evaluer_affectation(plan, affectation).vers_dict()}


@_operation
def reparer(data: Dict[str, Any]) -> Dict[str, Any]:
    """Répare l’affectation du document ; vide en cas d’échec (avec le motif)."""
    doc = _document(data)
    plan = PlanDeClasse.depuis_document(doc)
    affectation, erreur = _reparer_ou_vider(plan, lire_affectation(doc), graine_depuis(data.get("options")))
    return {"assignment": affectation, "repair_error": erreur or None}


@_operation
def case(data: Dict[str, Any]) -> Dict[str, Any]:
    """Reclasse une case {r, c, kind} puis répare ; renvoie le document mis à jour."""
    doc = _document(data)
    plan = PlanDeClasse.depuis_document(doc)
    try:
        r, c = int(data["r"]), int(data["c"])
        type_case = TypeCase(str(data.get("kind", TypeCase.SIEGE.value)))
    except (KeyError, TypeError, ValueError) as exc:
        raise ErreurEntree(f"Case invalide: {exc!r}") from exc
    plan.salle.classer_case(r, c, type_case)
    affectation, erreur = _reparer_ou_vider(plan, lire_affectation(doc), graine_depuis(data.get("options")))
    return {"document": plan.vers_document(affectation), "repair_error": erreur or None}


@_operation
def redimensionner(data: Dict[str, Any]) -> Dict[str, Any]:
    """Redimensionne la salle {rows, cols} puis répare ; renvoie le document mis à jour."""
    doc = _document(data)
    plan = PlanDeClasse.depuis_document(doc)
    try:
        rangees, colonnes = int(data["rows"]), int(data["cols"])
    except (KeyError, TypeError, ValueError) as exc:
        raise ErreurEntree(f"Dimensions invalides: {exc!r}") from exc
    plan.salle.redimensionner(rangees, colonnes)
    affectation, erreur = _reparer_ou_vider(plan, lire_affectation(doc), graine_depuis(data.get("options")))
    return {"document": plan.vers_document(affectation), "repair_error": erreur or None}


# ---------------------------------------------------------------------------
# Celery : démarrage + polling
# ---------------------------------------------------------------------------

@csrf_exempt
@require_POST
def solve_start(request: HttpRequest) -> HttpResponse:
    """
    Lance la tâche Celery de résolution complète :
    - Body : {"document": ..., "options": {restarts, iters, t0, t1, seed}}
    - Réponse : {"task_id": "..."} à poller via solve_status
    """
    from .tasks import t_resoudre_plan

    try:
        data = _lire_json(request)
    except ErreurPlacement as exc:
        return _echec(exc)
    task = t_resoudre_plan.delay(data)
    return JsonResponse({"task_id": task.id})


@csrf_exempt
@require_POST
def improve_start(request: HttpRequest) -> HttpResponse:
    """
    Lance la tâche Celery d’amélioration (une passe depuis l’affectation courante).
    """
    from .tasks import t_ameliorer_plan

    try:
        data = _lire_json(request)
    except ErreurPlacement as exc:
        return _echec(exc)
    task = t_ameliorer_plan.delay(data)
    return JsonResponse({"task_id": task.id})


@require_GET
def solve_status(request: HttpRequest, task_id: str) -> HttpResponse:
    """
    Polling d’état (PENDING / STARTED / PROGRESS / SUCCESS / FAILURE).
    PROGRESS renvoie aussi le meilleur score connu ; SUCCESS renvoie le résultat.
    """
    from celery.result import AsyncResult

    ar = AsyncResult(task_id)
    if ar.state == "PROGRESS":
        return JsonResponse({"status": "PROGRESS", "progress": ar.info or {}})
    if ar.state in ("PENDING", "RECEIVED", "STARTED", "RETRY"):
        return JsonResponse({"status": ar.state})
    if ar.state == "SUCCESS":
        return JsonResponse(ar.result)  # type: ignore[arg-type]

    # FAILURE inattendue (exception dans la tâche)
    return JsonResponse({"status": "FAILURE", "error": str(ar.result) or "échec."})


# ---------------------------------------------------------------------------
# Export du document (cache éphémère)
# ---------------------------------------------------------------------------

@csrf_exempt
@require_POST
def export(request: HttpRequest) -> HttpResponse:
    """
    Normalise le document (affectation réparée), le met en cache et renvoie
    l’URL de téléchargement : {"token": ..., "json": "/plansalle/download/<token>"}.
    """
    try:
        data = _lire_json(request)
        doc = _document(data)
        plan = PlanDeClasse.depuis_document(doc)
        graine = graine_depuis(data.get("options"))
    except ErreurPlacement as exc:
        return _echec(exc)
    affectation, _ = _reparer_ou_vider(plan, lire_affectation(doc), graine)
    contenu = json.dumps(plan.vers_document(affectation), ensure_ascii=False, indent=2)

    token = secrets.token_urlsafe(16)
    cache.set(f"ps:{token}:json", contenu.encode("utf-8"), timeout=DUREE_CACHE_EXPORT)
    return JsonResponse({"token": token, "json": f"/plansalle/download/{token}"})


@require_GET
def download(request: HttpRequest, token: str) -> HttpResponse:
    """Sert le document exporté en pièce jointe, tant qu’il est en cache."""
    contenu = cache.get(f"ps:{token}:json")
    if contenu is None:
        return JsonResponse({"status": "FAILURE", "error": "export expiré ou inconnu"}, status=404)
    rep = HttpResponse(contenu, content_type="application/json; charset=utf-8")
    rep["Content-Disposition"] = 'attachment; filename="plan_de_salle.json"'
    return rep
