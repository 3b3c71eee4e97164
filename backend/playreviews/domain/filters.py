"""Evaluacion de filtros sobre reviews.

Todas las restricciones presentes se combinan con AND; dentro de una lista
(languages, countries, ...) basta con que el valor este incluido (OR).
Funciones puras: no tocan el store ni mutan la review.
"""

from __future__ import annotations

from typing import Callable, Iterable, Optional

from playreviews.domain.models import Review, ReviewFilter
from playreviews.domain.versions import version_at_least

Predicate = Callable[[Review], bool]


def _allowed(values: Optional[list[str]], value: str | None) -> bool:
    # lista vacia o ausente = sin restriccion
    if not values:
        return True
    return value is not None and value in values


def has_fresh_reply(review: Review) -> bool:
    """Reply presente y posterior (estricto) a la ultima actualizacion de la review."""
    reply = review.reply_data
    if reply is None:
        return False
    return reply.effective_date > review.last_update_date


def matches(review: Review, flt: ReviewFilter) -> bool:
    """True si la review cumple todas las restricciones especificadas en `flt`."""
    if flt.app_package is not None and review.app_package != flt.app_package:
        return False

    if flt.min_rating is not None and review.rating < flt.min_rating:
        return False
    if flt.max_rating is not None and review.rating > flt.max_rating:
        return False

    if flt.start_date is not None and review.date < flt.start_date:
        return False
    if flt.end_date is not None and review.date > flt.end_date:
        return False

    if not _allowed(flt.languages, review.language):
        return False
    if not _allowed(flt.countries, review.country):
        return False
    if not _allowed(flt.app_versions, review.app_version):
        return False
    if not _allowed(flt.device_types, review.device_metadata.device):
        return False
    if not _allowed(flt.os_versions, review.device_metadata.os_version):
        return False
    if flt.min_app_version and not version_at_least(review.app_version, flt.min_app_version):
        return False
    if flt.min_os_version and not version_at_least(
        review.device_metadata.os_version, flt.min_os_version
    ):
        return False

    if flt.has_reply is not None and (review.reply_data is not None) != flt.has_reply:
        return False
    if flt.has_fresh_reply is not None and has_fresh_reply(review) != flt.has_fresh_reply:
        return False

    return _matches_internal(review, flt)


def _matches_internal(review: Review, flt: ReviewFilter) -> bool:
    wants_status = bool(flt.status)
    wants_tags = bool(flt.tags)
    wants_assignee = bool(flt.assigned_to)
    if not (wants_status or wants_tags or wants_assignee):
        return True

    meta = review.internal_metadata
    if meta is None:
        return False
    if wants_status and meta.status not in (flt.status or []):
        return False
    if wants_tags and not set(meta.tags).intersection(flt.tags or []):
        return False
    if wants_assignee and meta.assigned_to not in (flt.assigned_to or []):
        return False
    return True


def matches_query(review: Review, query: str) -> bool:
    """Busqueda de texto libre (substring, sin distinguir mayusculas)."""
    needle = query.casefold()
    if needle in review.text.casefold():
        return True
    return bool(review.title) and needle in (review.title or "").casefold()


def build_predicate(flt: ReviewFilter, query: str | None = None) -> Predicate:
    """Compone el filtro con el texto de busqueda opcional."""
    if query is None:
        return lambda review: matches(review, flt)
    return lambda review: matches(review, flt) and matches_query(review, query)


def select(reviews: Iterable[Review], predicate: Predicate) -> list[Review]:
    return [r for r in reviews if predicate(r)]
