"""Fixtures compartidas para tests del backend."""

from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable

import pytest

ROOT = Path(__file__).resolve().parents[1]
BACKEND = ROOT / "backend"

# Ensure the backend package is importable without installing.
if str(BACKEND) not in sys.path:
    sys.path.insert(0, str(BACKEND))

from playreviews.config import Settings  # noqa: E402
from playreviews.domain.enums import ReviewStatus  # noqa: E402
from playreviews.domain.models import (  # noqa: E402
    App,
    DeviceMetadata,
    InternalMetadata,
    ReplyData,
    Review,
)
from playreviews.repositories.review_store import ReviewStore  # noqa: E402
from playreviews.services.container import ReviewServices, build_services  # noqa: E402

BASE_DATE = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
APP = "com.example.app"
OTHER_APP = "com.example.other"


def _make_review(
    review_id: str,
    *,
    app_package: str = APP,
    rating: int = 5,
    text: str = "Nice app",
    title: str | None = None,
    days: int = 0,
    updated_days: int | None = None,
    language: str = "en",
    country: str = "US",
    app_version: str = "1.0.0",
    device: str = "Pixel 7",
    os_version: str = "14",
    reply_days: int | None = None,
    status: ReviewStatus | None = None,
    tags: list[str] | None = None,
    assigned_to: str | None = None,
) -> Review:
    created = BASE_DATE + timedelta(days=days)
    updated = BASE_DATE + timedelta(days=updated_days if updated_days is not None else days)
    reply = None
    if reply_days is not None:
        reply = ReplyData(
            reply_id=f"reply-{review_id}",
            reply_text="Thanks for the feedback",
            reply_date=BASE_DATE + timedelta(days=reply_days),
        )
    meta = None
    if status is not None or tags is not None or assigned_to is not None:
        meta = InternalMetadata(
            status=status or ReviewStatus.NEW,
            tags=tags or [],
            assigned_to=assigned_to,
        )
    return Review(
        id=review_id,
        app_package=app_package,
        user_name=f"user-{review_id}",
        rating=rating,
        title=title,
        text=text,
        date=created,
        last_update_date=updated,
        language=language,
        country=country,
        app_version=app_version,
        device_metadata=DeviceMetadata(device=device, os="Android", os_version=os_version),
        reply_data=reply,
        internal_metadata=meta,
    )


@pytest.fixture()
def make_review() -> Callable[..., Review]:
    return _make_review


@pytest.fixture()
def settings_factory(tmp_path: Path) -> Callable[..., Settings]:
    def _build(**overrides: Any) -> Settings:
        values: dict[str, Any] = {
            "reviews_path": tmp_path / "reviews.json",
            "apps_path": tmp_path / "apps.json",
            "seed_mock_data": False,
        }
        values.update(overrides)
        return Settings().model_copy(update=values)

    return _build


@pytest.fixture()
def store(tmp_path: Path) -> ReviewStore:
    repo = ReviewStore(tmp_path / "reviews.json", tmp_path / "apps.json")
    repo.load()
    return repo


@pytest.fixture()
def populated_store(store: ReviewStore) -> ReviewStore:
    store.upsert_app(App(package_name=APP, title="Example"))
    store.upsert_app(App(package_name=OTHER_APP, title="Other"))
    store.upsert_reviews(
        [
            _make_review("r1", rating=5, text="Works great", days=3),
            _make_review("r2", rating=1, text="Crash!! every time I open it", days=2),
            _make_review("r3", rating=5, text="Solid", title="Five stars", days=1),
            _make_review("o1", app_package=OTHER_APP, rating=3, text="Meh, it crashes", days=4),
        ]
    )
    return store


@pytest.fixture()
def services(
    populated_store: ReviewStore, settings_factory: Callable[..., Settings]
) -> ReviewServices:
    # populated_store ya persistio en tmp_path; los servicios lo recargan de disco.
    return build_services(settings_factory())
