from __future__ import annotations

from playreviews.domain.models import App
from playreviews.repositories.review_store import ReviewStore
from playreviews.services.reply_service import ReplyService
from playreviews.services.stats_service import StatsService


def test_app_stats_average_is_mean_of_ratings(populated_store: ReviewStore) -> None:
    stats = StatsService(populated_store).get_app_stats("com.example.app")
    assert stats is not None
    assert stats.total_reviews == 3
    assert stats.average_rating == (5 + 1 + 5) / 3
    assert stats.rating_distribution == {"1": 1, "2": 0, "3": 0, "4": 0, "5": 2}
    assert stats.replied_reviews == 0


def test_app_stats_unknown_app_is_none(populated_store: ReviewStore) -> None:
    assert StatsService(populated_store).get_app_stats("com.unknown") is None


def test_app_stats_zero_reviews(store: ReviewStore) -> None:
    store.upsert_app(App(package_name="com.empty", title="Empty"))
    stats = StatsService(store).get_app_stats("com.empty")
    assert stats is not None
    assert stats.total_reviews == 0
    assert stats.average_rating == 0.0


def test_stats_are_recomputed_after_mutation(populated_store: ReviewStore, make_review) -> None:
    service = StatsService(populated_store)
    populated_store.upsert_review(make_review("r9", rating=1))
    ReplyService(populated_store).add_reply("r1", "thanks")
    stats = service.get_app_stats("com.example.app")
    assert stats is not None
    assert stats.total_reviews == 4
    assert stats.average_rating == 3.0
    assert stats.replied_reviews == 1


def test_global_stats(populated_store: ReviewStore) -> None:
    stats = StatsService(populated_store).get_global_stats()
    assert stats.total_apps == 2
    assert stats.total_reviews == 4
    assert stats.average_rating == 3.5
    assert stats.to_wire() == {"totalApps": 2, "totalReviews": 4, "averageRating": 3.5}


def test_global_stats_empty_store(store: ReviewStore) -> None:
    stats = StatsService(store).get_global_stats()
    assert (stats.total_apps, stats.total_reviews, stats.average_rating) == (0, 0, 0.0)
