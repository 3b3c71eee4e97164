"""Servicios del core: consulta, respuestas, estadisticas e import."""

from playreviews.services.container import ReviewServices, build_services
from playreviews.services.import_service import ImportResult, ImportService
from playreviews.services.query_service import ReviewQueryService
from playreviews.services.reply_service import ReplyService
from playreviews.services.stats_service import StatsService

__all__ = [
    "ImportResult",
    "ImportService",
    "ReplyService",
    "ReviewQueryService",
    "ReviewServices",
    "StatsService",
    "build_services",
]
