"""Modelos canonicos del dominio (Pydantic).

Se serializan con los nombres del wire original (camelCase) y aceptan
tanto el nombre del campo como el alias en la entrada.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Generic, Mapping, TypeVar

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel
from typing_extensions import Annotated

from playreviews.domain.enums import ReviewStatus
from playreviews.domain.errors import InvalidArgument


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# Naive timestamps se interpretan como UTC.
Timestamp = Annotated[datetime, AfterValidator(_as_utc)]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        """Dict JSON-compatible con alias camelCase y sin campos vacios."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class DeviceMetadata(CamelModel):
    device: str = ""
    os: str = ""
    os_version: str = ""


class ReplyData(CamelModel):
    reply_id: str
    reply_text: str
    reply_date: Timestamp
    last_edit_date: Timestamp | None = None

    @model_validator(mode="after")
    def _edit_after_reply(self) -> "ReplyData":
        if self.last_edit_date is not None and self.last_edit_date < self.reply_date:
            raise ValueError("lastEditDate must not precede replyDate")
        return self

    @property
    def effective_date(self) -> datetime:
        return self.last_edit_date or self.reply_date


class InternalMetadata(CamelModel):
    status: ReviewStatus = ReviewStatus.NEW
    tags: list[str] = Field(default_factory=list)
    assigned_to: str | None = None
    notes: str | None = None

    @field_validator("tags")
    @classmethod
    def _unique_tags(cls, value: list[str]) -> list[str]:
        # dict preserva el orden de insercion
        return list(dict.fromkeys(value))


class Review(CamelModel):
    """Review de un usuario sobre una app."""

    id: str
    app_package: str
    user_name: str = ""
    user_image: str | None = None
    rating: int = Field(ge=1, le=5)
    title: str | None = None
    text: str = ""
    date: Timestamp
    last_update_date: Timestamp

    language: str = ""
    country: str = ""
    app_version: str = ""
    device_metadata: DeviceMetadata = Field(default_factory=DeviceMetadata)

    reply_data: ReplyData | None = None
    internal_metadata: InternalMetadata | None = None

    @model_validator(mode="after")
    def _update_after_creation(self) -> "Review":
        if self.last_update_date < self.date:
            raise ValueError("lastUpdateDate must not precede date")
        return self


class Developer(CamelModel):
    name: str
    website: str | None = None
    email: str | None = None


class App(CamelModel):
    package_name: str
    title: str
    icon: str | None = None
    latest_version: str | None = None
    description: str | None = None
    category: str | None = None
    developer: Developer | None = None
    updated_at: Timestamp | None = None


class ReviewFilter(CamelModel):
    """Especificacion de consulta; campos ausentes no restringen."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    app_package: str | None = None

    min_rating: int | None = Field(default=None, ge=1, le=5)
    max_rating: int | None = Field(default=None, ge=1, le=5)

    start_date: Timestamp | None = None
    end_date: Timestamp | None = None

    languages: list[str] | None = None
    countries: list[str] | None = None
    app_versions: list[str] | None = None
    min_app_version: str | None = None
    device_types: list[str] | None = None
    os_versions: list[str] | None = None
    min_os_version: str | None = None

    has_reply: bool | None = None
    has_fresh_reply: bool | None = None

    status: list[ReviewStatus] | None = None
    tags: list[str] | None = None
    assigned_to: list[str] | None = None

    limit: int | None = None
    offset: int | None = None

    @classmethod
    def parse(cls, payload: Mapping[str, Any] | None) -> "ReviewFilter":
        """Valida un payload de filtro; cualquier fallo es `InvalidArgument`."""
        if payload is None:
            return cls()
        if not isinstance(payload, Mapping):
            raise InvalidArgument("filter must be an object")
        try:
            return cls.model_validate(dict(payload))
        except ValidationError as exc:
            raise InvalidArgument(f"Invalid filter: {_summarize(exc)}") from exc


def _summarize(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts)


T = TypeVar("T")


class Pagination(CamelModel):
    total: int
    limit: int
    offset: int
    has_more: bool


class PaginatedResult(CamelModel, Generic[T]):
    items: list[T]
    pagination: Pagination


class ReviewsResponse(CamelModel):
    reviews: list[Review]
    pagination: Pagination


class ReplyResponse(CamelModel):
    success: bool
    reply_id: str
    timestamp: Timestamp


class AppStats(CamelModel):
    package_name: str
    title: str
    total_reviews: int = 0
    average_rating: float = 0.0
    rating_distribution: dict[str, int] = Field(default_factory=dict)
    replied_reviews: int = 0


class GlobalStats(CamelModel):
    total_apps: int = 0
    total_reviews: int = 0
    average_rating: float = 0.0
