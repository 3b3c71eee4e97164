"""Construccion de un unico store compartido por todos los servicios."""

from __future__ import annotations

from dataclasses import dataclass

from playreviews.config import Settings
from playreviews.repositories.review_store import ReviewStore
from playreviews.services.import_service import ImportService
from playreviews.services.query_service import ReviewQueryService
from playreviews.services.reply_service import ReplyService
from playreviews.services.stats_service import StatsService


@dataclass
class ReviewServices:
    store: ReviewStore
    queries: ReviewQueryService
    replies: ReplyService
    stats: StatsService
    importer: ImportService


def build_services(cfg: Settings, load: bool = True) -> ReviewServices:
    """Crea el store y los servicios que lo comparten.

    Con `load=True` hidrata el store desde disco y, si `seed_mock_data`
    esta activo y el store queda vacio, lo rellena con datos mock.
    """
    store = ReviewStore(cfg.reviews_path, cfg.apps_path)
    services = ReviewServices(
        store=store,
        queries=ReviewQueryService(
            store,
            default_limit=cfg.default_page_size,
            max_limit=cfg.max_page_size,
        ),
        replies=ReplyService(store, max_length=cfg.max_reply_length),
        stats=StatsService(store),
        importer=ImportService(store),
    )
    if load:
        store.load()
        if cfg.seed_mock_data:
            services.importer.seed_mock_data()
    return services
