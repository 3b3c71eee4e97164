"""Estadisticas agregadas por app y globales.

Se recalculan en cada llamada a partir del contenido actual del store.
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable, Optional

from playreviews.domain.models import AppStats, GlobalStats, Review
from playreviews.repositories.review_store import ReviewStore


def _average(ratings: list[int]) -> float:
    if not ratings:
        return 0.0
    return sum(ratings) / len(ratings)


def _distribution(reviews: Iterable[Review]) -> dict[str, int]:
    counts = Counter(r.rating for r in reviews)
    return {str(star): counts.get(star, 0) for star in range(1, 6)}


class StatsService:
    def __init__(self, store: ReviewStore) -> None:
        self._store = store

    def get_app_stats(self, app_package: str) -> Optional[AppStats]:
        """Stats de una app; None si la app no esta registrada."""
        app = self._store.find_app(app_package)
        if app is None:
            return None
        reviews = self._store.reviews(app_package)
        return AppStats(
            package_name=app.package_name,
            title=app.title,
            total_reviews=len(reviews),
            average_rating=_average([r.rating for r in reviews]),
            rating_distribution=_distribution(reviews),
            replied_reviews=sum(1 for r in reviews if r.reply_data is not None),
        )

    def get_global_stats(self) -> GlobalStats:
        reviews = self._store.reviews()
        return GlobalStats(
            total_apps=len(self._store.find_all()),
            total_reviews=len(reviews),
            average_rating=_average([r.rating for r in reviews]),
        )
