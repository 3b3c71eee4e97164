"""Motor de consulta: filtro, orden estable y paginacion."""

from __future__ import annotations

from typing import Optional

from playreviews.domain.errors import InvalidArgument, NotFound
from playreviews.domain.filters import build_predicate, select
from playreviews.domain.models import PaginatedResult, Pagination, Review, ReviewFilter
from playreviews.logging_utils import get_logger
from playreviews.repositories.review_store import ReviewStore

logger = get_logger(__name__)

DEFAULT_LIMIT = 20
MAX_LIMIT = 100


def sort_reviews(reviews: list[Review]) -> list[Review]:
    """Orden determinista: `date` descendente, empate por `id` ascendente."""
    ordered = sorted(reviews, key=lambda r: r.id)
    ordered.sort(key=lambda r: r.date, reverse=True)
    return ordered


def paginate(items: list[Review], limit: int, offset: int) -> PaginatedResult[Review]:
    total = len(items)
    return PaginatedResult[Review](
        items=items[offset : offset + limit],
        pagination=Pagination(
            total=total,
            limit=limit,
            offset=offset,
            has_more=offset + limit < total,
        ),
    )


class ReviewQueryService:
    def __init__(
        self,
        store: ReviewStore,
        default_limit: int = DEFAULT_LIMIT,
        max_limit: int = MAX_LIMIT,
    ) -> None:
        self._store = store
        self._default_limit = default_limit
        self._max_limit = max_limit

    def resolve_page(self, limit: Optional[int], offset: Optional[int]) -> tuple[int, int]:
        """Aplica defaults; valores fuera de rango son error, no se recortan."""
        if limit is None:
            limit = self._default_limit
        if offset is None:
            offset = 0
        if isinstance(limit, bool) or not isinstance(limit, int):
            raise InvalidArgument("limit must be an integer")
        if isinstance(offset, bool) or not isinstance(offset, int):
            raise InvalidArgument("offset must be an integer")
        if not 1 <= limit <= self._max_limit:
            raise InvalidArgument(f"limit must be between 1 and {self._max_limit} (got {limit})")
        if offset < 0:
            raise InvalidArgument(f"offset must be >= 0 (got {offset})")
        return limit, offset

    def _candidates(self, app_package: str | None) -> list[Review]:
        return self._store.reviews(app_package)

    def find(self, flt: ReviewFilter) -> PaginatedResult[Review]:
        """Reviews que cumplen `flt`, ordenadas y paginadas."""
        limit, offset = self.resolve_page(flt.limit, flt.offset)
        matched = select(self._candidates(flt.app_package), build_predicate(flt))
        result = paginate(sort_reviews(matched), limit, offset)
        logger.debug(
            "find app=%s total=%s limit=%s offset=%s",
            flt.app_package,
            result.pagination.total,
            limit,
            offset,
        )
        return result

    def count_reviews(self, app_package: str | None, flt: ReviewFilter | None = None) -> int:
        """Total de coincidencias ignorando limit/offset."""
        flt = flt or ReviewFilter()
        if app_package is not None:
            flt = flt.model_copy(update={"app_package": app_package})
        return len(select(self._candidates(flt.app_package), build_predicate(flt)))

    def search(
        self,
        query: str,
        app_package: str | None = None,
        flt: ReviewFilter | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> PaginatedResult[Review]:
        """Busqueda de texto sobre todo el conjunto filtrado, paginada despues.

        `total` y `hasMore` se calculan tras el filtro de texto.
        """
        if not isinstance(query, str):
            raise InvalidArgument("query must be a string")
        flt = flt or ReviewFilter()
        if app_package is not None:
            flt = flt.model_copy(update={"app_package": app_package})
        limit, offset = self.resolve_page(
            limit if limit is not None else flt.limit,
            offset if offset is not None else flt.offset,
        )
        predicate = build_predicate(flt, query=query)
        matched = select(self._candidates(flt.app_package), predicate)
        result = paginate(sort_reviews(matched), limit, offset)
        logger.debug("search q=%r total=%s", query, result.pagination.total)
        return result

    def get_review(self, app_package: str, review_id: str) -> Review:
        review = self._store.find_by_id(review_id)
        if review is None or review.app_package != app_package:
            raise NotFound(f"Review not found: {review_id}")
        return review
