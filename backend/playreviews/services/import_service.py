"""Carga del snapshot local: import de exports de Google Play y datos mock."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from playreviews.domain.enums import ReviewStatus
from playreviews.domain.errors import InvalidArgument, StorageError
from playreviews.domain.models import (
    App,
    DeviceMetadata,
    Developer,
    InternalMetadata,
    ReplyData,
    Review,
)
from playreviews.logging_utils import get_logger
from playreviews.repositories.review_store import ReviewStore

logger = get_logger(__name__)


@dataclass(frozen=True)
class ImportResult:
    imported: int = 0
    skipped: int = 0


def _from_last_modified(raw: object) -> datetime | None:
    """`{"seconds": "...", "nanos": ...}` -> datetime UTC."""
    if not isinstance(raw, dict):
        return None
    try:
        seconds = int(raw.get("seconds") or 0)
        nanos = int(raw.get("nanos") or 0)
    except (TypeError, ValueError):
        return None
    if seconds <= 0:
        return None
    return datetime.fromtimestamp(seconds, tz=timezone.utc) + timedelta(microseconds=nanos // 1000)


def _split_locale(raw: object) -> tuple[str, str]:
    # "en_US" / "en-GB" / "es"
    if not isinstance(raw, str) or not raw.strip():
        return "", ""
    parts = raw.strip().replace("-", "_").split("_")
    language = parts[0].lower()
    country = parts[1].upper() if len(parts) > 1 else ""
    return language, country


def _split_title(text: str) -> tuple[str | None, str]:
    # La API entrega "titulo\tcuerpo" cuando la review tiene titulo.
    if "\t" in text:
        title, body = text.split("\t", 1)
        return (title.strip() or None), body.strip()
    return None, text.strip()


def map_google_play_review(
    raw: dict[str, Any], app_package: str, default_country: str = ""
) -> Review | None:
    """Convierte una review del formato de la Google Play Developer API.

    Devuelve None si falta el comentario del usuario o el identificador.
    Lanza `ValidationError` si los valores no cumplen el modelo.
    """
    review_id = raw.get("reviewId")
    comments = raw.get("comments")
    if not review_id or not isinstance(comments, list):
        return None

    user_comment: dict[str, Any] | None = None
    developer_comment: dict[str, Any] | None = None
    for comment in comments:
        if not isinstance(comment, dict):
            continue
        if user_comment is None and isinstance(comment.get("userComment"), dict):
            user_comment = comment["userComment"]
        if developer_comment is None and isinstance(comment.get("developerComment"), dict):
            developer_comment = comment["developerComment"]
    if user_comment is None:
        return None

    modified = _from_last_modified(user_comment.get("lastModified"))
    if modified is None:
        return None
    title, text = _split_title(str(user_comment.get("text") or ""))
    language, country = _split_locale(user_comment.get("reviewerLanguage"))
    os_version = user_comment.get("androidOsVersion")

    reply: ReplyData | None = None
    if developer_comment and developer_comment.get("text"):
        reply_date = _from_last_modified(developer_comment.get("lastModified")) or modified
        reply = ReplyData(
            reply_id=f"{review_id}:developer",
            reply_text=str(developer_comment["text"]),
            reply_date=reply_date,
        )

    author_image = raw.get("authorImage")
    return Review(
        id=str(review_id),
        app_package=app_package,
        user_name=str(raw.get("authorName") or ""),
        user_image=author_image.get("url") if isinstance(author_image, dict) else None,
        rating=user_comment.get("starRating"),
        title=title,
        text=text,
        date=modified,
        last_update_date=modified,
        language=language,
        country=country or default_country.upper(),
        app_version=str(
            user_comment.get("appVersionName") or user_comment.get("appVersionCode") or ""
        ),
        device_metadata=DeviceMetadata(
            device=str(user_comment.get("device") or ""),
            os="Android",
            os_version="" if os_version is None else str(os_version),
        ),
        reply_data=reply,
    )


def _extract_reviews(data: object) -> list[Any]:
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for key in ("reviews", "items", "data"):
            raw = data.get(key)
            if isinstance(raw, list):
                return raw
    raise InvalidArgument("Import file must contain a list of reviews")


class ImportService:
    def __init__(self, store: ReviewStore) -> None:
        self._store = store

    def import_reviews(self, raw_reviews: list[Any], app_package: str) -> ImportResult:
        """Mapea e inserta reviews; conserva `internalMetadata` de las existentes."""
        if not isinstance(app_package, str) or not app_package.strip():
            raise InvalidArgument("appPackage must be a non-empty string")

        mapped: list[Review] = []
        skipped = 0
        for raw in raw_reviews:
            if not isinstance(raw, dict):
                skipped += 1
                continue
            try:
                review = map_google_play_review(raw, app_package)
            except ValidationError as exc:
                logger.warning("Skipping review %s: %s", raw.get("reviewId"), exc.error_count())
                review = None
            if review is None:
                skipped += 1
                continue
            existing = self._store.find_by_id(review.id)
            if existing is not None:
                review.internal_metadata = existing.internal_metadata
            elif review.reply_data is not None:
                review.internal_metadata = InternalMetadata(status=ReviewStatus.RESPONDED)
            mapped.append(review)

        if self._store.find_app(app_package) is None:
            self._store.upsert_app(App(package_name=app_package, title=app_package))
        if mapped:
            self._store.upsert_reviews(mapped)

        logger.info(
            "Imported %s reviews for %s (%s skipped)", len(mapped), app_package, skipped
        )
        return ImportResult(imported=len(mapped), skipped=skipped)

    def import_file(self, path: Path, app_package: str) -> ImportResult:
        try:
            with Path(path).open("r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as exc:
            raise StorageError(f"Cannot read import file {path}") from exc
        except json.JSONDecodeError as exc:
            raise InvalidArgument(f"Import file is not valid JSON: {path}") from exc
        return self.import_reviews(_extract_reviews(data), app_package)

    def seed_mock_data(self) -> ImportResult:
        """Rellena el store con el snapshot mock si esta vacio."""
        if self._store.count() > 0 or self._store.find_all():
            return ImportResult()
        apps, reviews = mock_snapshot()
        for app in apps:
            self._store.upsert_app(app)
        self._store.upsert_reviews(reviews)
        logger.info("Seeded %s apps and %s mock reviews", len(apps), len(reviews))
        return ImportResult(imported=len(reviews))


def mock_snapshot() -> tuple[list[App], list[Review]]:
    base = datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)
    apps = [
        App(
            package_name="com.example.fittrack",
            title="FitTrack",
            latest_version="3.2.0",
            category="HEALTH_AND_FITNESS",
            developer=Developer(name="Example Labs", website="https://example.com"),
            updated_at=base,
        ),
        App(
            package_name="com.example.quicknotes",
            title="QuickNotes",
            latest_version="1.10.2",
            category="PRODUCTIVITY",
            developer=Developer(name="Example Labs", email="support@example.com"),
            updated_at=base,
        ),
        App(
            package_name="com.example.skycast",
            title="SkyCast Weather",
            latest_version="5.0.1",
            category="WEATHER",
            updated_at=base,
        ),
    ]

    def review(
        rid: str,
        app: str,
        rating: int,
        text: str,
        days: int,
        *,
        title: str | None = None,
        language: str = "en",
        country: str = "US",
        version: str = "1.0.0",
        device: str = "Pixel 7",
        os_version: str = "14",
        reply: str | None = None,
        meta: InternalMetadata | None = None,
    ) -> Review:
        created = base + timedelta(days=days)
        return Review(
            id=rid,
            app_package=app,
            user_name=f"user_{rid}",
            rating=rating,
            title=title,
            text=text,
            date=created,
            last_update_date=created,
            language=language,
            country=country,
            app_version=version,
            device_metadata=DeviceMetadata(device=device, os="Android", os_version=os_version),
            reply_data=(
                ReplyData(
                    reply_id=f"reply-{rid}",
                    reply_text=reply,
                    reply_date=created + timedelta(days=1),
                )
                if reply
                else None
            ),
            internal_metadata=meta,
        )

    reviews = [
        review("gp-001", "com.example.fittrack", 5, "Great workout tracking, syncs fast.", 1,
               title="Love it", version="3.2.0"),
        review("gp-002", "com.example.fittrack", 4, "Good app but the widget is small.", 2,
               version="3.1.5", device="Galaxy S23", os_version="13",
               reply="Thanks! A bigger widget is on the roadmap.",
               meta=InternalMetadata(status=ReviewStatus.RESPONDED, tags=["widget"])),
        review("gp-003", "com.example.fittrack", 1, "Crash on startup after the update.", 3,
               version="3.2.0", language="es", country="ES",
               meta=InternalMetadata(status=ReviewStatus.FLAGGED, tags=["crash", "startup"],
                                     assigned_to="ana")),
        review("gp-004", "com.example.quicknotes", 2, "Notes disappeared when offline.", 4,
               version="1.9.0", device="Moto G", os_version="12",
               meta=InternalMetadata(status=ReviewStatus.NEW, tags=["sync"])),
        review("gp-005", "com.example.quicknotes", 5, "Simple and fast, exactly what I need.", 5,
               version="1.10.2"),
        review("gp-006", "com.example.quicknotes", 3, "Decent, wish it had folders.", 6,
               title="Missing folders", version="1.10.0", language="de", country="DE"),
        review("gp-007", "com.example.skycast", 4, "Accurate forecasts most days.", 7,
               version="5.0.1", device="Pixel 6a"),
        review("gp-008", "com.example.skycast", 3, "Too many ads between screens.", 8,
               version="4.9.8", country="GB",
               meta=InternalMetadata(status=ReviewStatus.RESOLVED, tags=["ads"],
                                     notes="Ad frequency reduced in 5.0")),
    ]
    return apps, reviews
