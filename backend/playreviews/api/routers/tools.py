"""Herramientas invocables: get_reviews, post_reply, search_reviews."""

from __future__ import annotations

import json
import math
from typing import Any, Callable

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from playreviews.api.errors import MethodNotFound
from playreviews.domain.errors import InvalidArgument
from playreviews.domain.models import ReplyResponse, ReviewFilter, ReviewsResponse
from playreviews.logging_utils import get_logger
from playreviews.services.container import ReviewServices

router = APIRouter()
logger = get_logger(__name__)

_FILTER_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "minRating": {"type": "number", "minimum": 1, "maximum": 5},
        "maxRating": {"type": "number", "minimum": 1, "maximum": 5},
        "startDate": {"type": "string", "format": "date-time"},
        "endDate": {"type": "string", "format": "date-time"},
        "languages": {"type": "array", "items": {"type": "string"}},
        "countries": {"type": "array", "items": {"type": "string"}},
        "appVersions": {"type": "array", "items": {"type": "string"}},
        "minAppVersion": {"type": "string"},
        "deviceTypes": {"type": "array", "items": {"type": "string"}},
        "osVersions": {"type": "array", "items": {"type": "string"}},
        "minOsVersion": {"type": "string"},
        "hasReply": {"type": "boolean"},
        "hasFreshReply": {"type": "boolean"},
        "status": {
            "type": "array",
            "items": {"type": "string", "enum": ["new", "flagged", "responded", "resolved"]},
        },
        "tags": {"type": "array", "items": {"type": "string"}},
        "assignedTo": {"type": "array", "items": {"type": "string"}},
        "limit": {"type": "number", "minimum": 1, "maximum": 100, "default": 20},
        "offset": {"type": "number", "minimum": 0, "default": 0},
    },
}

TOOLS: list[dict[str, Any]] = [
    {
        "name": "get_reviews",
        "description": "Retrieves reviews for a specific app with optional filtering",
        "inputSchema": {
            "type": "object",
            "properties": {
                "appPackage": {"type": "string", "description": "Package name of the app"},
                "filter": _FILTER_SCHEMA,
            },
            "required": ["appPackage"],
        },
    },
    {
        "name": "post_reply",
        "description": "Posts a reply to a specific review",
        "inputSchema": {
            "type": "object",
            "properties": {
                "reviewId": {"type": "string"},
                "replyText": {"type": "string", "maxLength": 350},
            },
            "required": ["reviewId", "replyText"],
        },
    },
    {
        "name": "search_reviews",
        "description": "Searches reviews across all apps using text search capabilities",
        "inputSchema": {
            "type": "object",
            "properties": {
                "query": {"type": "string"},
                "appPackage": {"type": "string"},
                "filter": {"type": "object"},
                "limit": {"type": "number", "minimum": 1, "maximum": 100, "default": 20},
                "offset": {"type": "number", "minimum": 0, "default": 0},
            },
            "required": ["query"],
        },
    },
]


class ToolCall(BaseModel):
    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)


def _services(request: Request) -> ReviewServices:
    return request.app.state.services


def _require_str(args: dict[str, Any], key: str) -> str:
    value = args.get(key)
    if not isinstance(value, str):
        raise InvalidArgument(f"{key} must be a string")
    return value


def _optional_str(args: dict[str, Any], key: str) -> str | None:
    value = args.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidArgument(f"{key} must be a string")
    return value


def _optional_int(args: dict[str, Any], key: str) -> int | None:
    value = args.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgument(f"{key} must be an integer")
    # JSON admite 1e400 (inf) y NaN.
    if isinstance(value, float) and not (math.isfinite(value) and value.is_integer()):
        raise InvalidArgument(f"{key} must be an integer")
    return int(value)


def _text_content(payload: dict[str, Any]) -> dict[str, Any]:
    return {
        "content": [
            {"type": "text", "text": json.dumps(payload, ensure_ascii=False, indent=2)}
        ]
    }


def handle_get_reviews(services: ReviewServices, args: dict[str, Any]) -> dict[str, Any]:
    app_package = _require_str(args, "appPackage")
    flt = ReviewFilter.parse(args.get("filter")).model_copy(update={"app_package": app_package})
    logger.info("Getting reviews for %s", app_package)

    result = services.queries.find(flt)
    response = ReviewsResponse(reviews=result.items, pagination=result.pagination)
    return _text_content(response.to_wire())


def handle_post_reply(services: ReviewServices, args: dict[str, Any]) -> dict[str, Any]:
    review_id = _require_str(args, "reviewId")
    reply_text = _require_str(args, "replyText")

    reply = services.replies.add_reply(review_id, reply_text)
    response = ReplyResponse(success=True, reply_id=reply.reply_id, timestamp=reply.reply_date)
    return _text_content(response.to_wire())


def handle_search_reviews(services: ReviewServices, args: dict[str, Any]) -> dict[str, Any]:
    query = _require_str(args, "query")
    app_package = _optional_str(args, "appPackage")
    flt = ReviewFilter.parse(args.get("filter"))

    result = services.queries.search(
        query,
        app_package=app_package,
        flt=flt,
        limit=_optional_int(args, "limit"),
        offset=_optional_int(args, "offset"),
    )
    response = ReviewsResponse(reviews=result.items, pagination=result.pagination)
    return _text_content(response.to_wire())


_HANDLERS: dict[str, Callable[[ReviewServices, dict[str, Any]], dict[str, Any]]] = {
    "get_reviews": handle_get_reviews,
    "post_reply": handle_post_reply,
    "search_reviews": handle_search_reviews,
}


@router.get("")
def list_tools() -> dict[str, Any]:
    return {"tools": TOOLS}


@router.post("/call")
def call_tool(request: Request, payload: ToolCall) -> dict[str, Any]:
    """Invoca una herramienta por nombre con sus argumentos."""
    handler = _HANDLERS.get(payload.name)
    if handler is None:
        raise MethodNotFound(f"Unknown tool: {payload.name}")
    return handler(_services(request), payload.arguments)
