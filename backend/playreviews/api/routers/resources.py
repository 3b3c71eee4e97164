"""Recursos de solo lectura direccionados por URI `googleplay://`."""

from __future__ import annotations

import json
import re
from typing import Any, Callable
from urllib.parse import unquote

from fastapi import APIRouter, Query, Request

from playreviews.api.errors import InvalidRequest
from playreviews.domain.errors import NotFound
from playreviews.domain.models import ReviewFilter, ReviewsResponse
from playreviews.services.container import ReviewServices

router = APIRouter()

APP_REVIEWS_PAGE_SIZE = 10

RESOURCES: list[dict[str, str]] = [
    {
        "uri": "googleplay://apps",
        "name": "Google Play Apps",
        "description": "List of apps accessible to the authenticated user",
    },
    {
        "uri": "googleplay://stats",
        "name": "Google Play Review Statistics",
        "description": "Aggregate statistics for app reviews",
    },
]

RESOURCE_TEMPLATES: list[dict[str, str]] = [
    {
        "uriTemplate": "googleplay://reviews/{appPackage}",
        "name": "App Reviews",
        "description": "Reviews for a specific app",
    },
    {
        "uriTemplate": "googleplay://reviews/{appPackage}/{reviewId}",
        "name": "Specific Review",
        "description": "Details of a specific review",
    },
    {
        "uriTemplate": "googleplay://stats/{appPackage}",
        "name": "App Statistics",
        "description": "Review statistics for an app",
    },
]


def _apps(services: ReviewServices) -> Any:
    return [app.to_wire() for app in services.store.find_all()]


def _global_stats(services: ReviewServices) -> Any:
    return services.stats.get_global_stats().to_wire()


def _app_reviews(services: ReviewServices, app_package: str) -> Any:
    result = services.queries.find(
        ReviewFilter(app_package=app_package, limit=APP_REVIEWS_PAGE_SIZE, offset=0)
    )
    return ReviewsResponse(reviews=result.items, pagination=result.pagination).to_wire()


def _review(services: ReviewServices, app_package: str, review_id: str) -> Any:
    return services.queries.get_review(app_package, review_id).to_wire()


def _app_stats(services: ReviewServices, app_package: str) -> Any:
    stats = services.stats.get_app_stats(app_package)
    if stats is None:
        raise NotFound(f"App not found: {app_package}")
    return stats.to_wire()


_ROUTES: list[tuple[re.Pattern[str], Callable[..., Any]]] = [
    (re.compile(r"^googleplay://apps$"), _apps),
    (re.compile(r"^googleplay://stats$"), _global_stats),
    (re.compile(r"^googleplay://reviews/([^/]+)$"), _app_reviews),
    (re.compile(r"^googleplay://reviews/([^/]+)/([^/]+)$"), _review),
    (re.compile(r"^googleplay://stats/([^/]+)$"), _app_stats),
]


def read_resource(services: ReviewServices, uri: str) -> dict[str, Any]:
    """Resuelve una URI y devuelve su contenido serializado como JSON."""
    for pattern, handler in _ROUTES:
        match = pattern.match(uri)
        if match is None:
            continue
        params = [unquote(group) for group in match.groups()]
        payload = handler(services, *params)
        return {
            "contents": [
                {
                    "uri": uri,
                    "mimeType": "application/json",
                    "text": json.dumps(payload, ensure_ascii=False, indent=2),
                }
            ]
        }
    raise InvalidRequest(f"Invalid URI format: {uri}")


@router.get("")
def list_resources() -> dict[str, Any]:
    return {"resources": RESOURCES}


@router.get("/templates")
def list_resource_templates() -> dict[str, Any]:
    return {"resourceTemplates": RESOURCE_TEMPLATES}


@router.get("/read")
def read(request: Request, uri: str = Query(..., min_length=1)) -> dict[str, Any]:
    return read_resource(request.app.state.services, uri)
