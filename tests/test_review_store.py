from __future__ import annotations

import json
from pathlib import Path

import pytest

import playreviews.repositories.review_store as review_store_module
from playreviews.domain.errors import ConflictError, StorageError
from playreviews.domain.models import App
from playreviews.repositories.review_store import ReviewStore


def _store(tmp_path: Path) -> ReviewStore:
    return ReviewStore(tmp_path / "reviews.json", tmp_path / "apps.json")


def test_load_missing_files_is_empty(tmp_path: Path) -> None:
    store = _store(tmp_path)
    assert store.load_all() == []
    assert store.load_apps() == []
    assert store.find_by_id("nope") is None
    assert store.count_by_app("com.example.app") == 0


def test_upsert_persists_and_reloads(tmp_path: Path, make_review) -> None:
    store = _store(tmp_path)
    store.upsert_app(App(package_name="com.example.app", title="Example"))
    store.upsert_review(make_review("r1"))

    data = json.loads((tmp_path / "reviews.json").read_text(encoding="utf-8"))
    assert "updated_at" in data
    assert data["items"][0]["id"] == "r1"
    assert data["items"][0]["appPackage"] == "com.example.app"

    reloaded = _store(tmp_path)
    reloaded.load()
    assert reloaded.find_by_id("r1") == make_review("r1")
    assert [a.package_name for a in reloaded.find_all()] == ["com.example.app"]


def test_upsert_replaces_by_identity(tmp_path: Path, make_review) -> None:
    store = _store(tmp_path)
    store.upsert_review(make_review("r1", rating=2))
    store.upsert_review(make_review("r1", rating=4))
    assert store.count_by_app("com.example.app") == 1
    found = store.find_by_id("r1")
    assert found is not None and found.rating == 4


def test_reads_return_copies(tmp_path: Path, make_review) -> None:
    store = _store(tmp_path)
    store.upsert_review(make_review("r1", rating=2))
    found = store.find_by_id("r1")
    assert found is not None
    found.rating = 5
    again = store.find_by_id("r1")
    assert again is not None and again.rating == 2


def test_load_skips_malformed_records(tmp_path: Path, make_review) -> None:
    good = make_review("r1").to_wire()
    bad_rating = dict(make_review("r2").to_wire(), rating=9)
    (tmp_path / "reviews.json").write_text(
        json.dumps({"items": [good, bad_rating, {"id": "r3"}, "junk"]}), encoding="utf-8"
    )
    store = _store(tmp_path)
    loaded = store.load_all()
    assert [r.id for r in loaded] == ["r1"]


def test_load_accepts_flat_list(tmp_path: Path, make_review) -> None:
    (tmp_path / "reviews.json").write_text(
        json.dumps([make_review("r1").to_wire()]), encoding="utf-8"
    )
    assert [r.id for r in _store(tmp_path).load_all()] == ["r1"]


@pytest.mark.parametrize("content", ["{", '{"items": 3}', '"text"'])
def test_load_malformed_document_raises_storage_error(tmp_path: Path, content: str) -> None:
    (tmp_path / "reviews.json").write_text(content, encoding="utf-8")
    with pytest.raises(StorageError):
        _store(tmp_path).load_all()


def test_count_by_app(populated_store: ReviewStore) -> None:
    assert populated_store.count_by_app("com.example.app") == 3
    assert populated_store.count_by_app("com.example.other") == 1
    assert populated_store.count_by_app("com.unknown") == 0


def test_compare_and_swap_detects_lost_update(tmp_path: Path, make_review) -> None:
    store = _store(tmp_path)
    store.upsert_review(make_review("r1"))
    generation = store.generation("r1")
    assert generation == 0

    assert store.upsert_review(make_review("r1", rating=3), expected_generation=generation) == 1
    with pytest.raises(ConflictError):
        store.upsert_review(make_review("r1", rating=1), expected_generation=generation)
    found = store.find_by_id("r1")
    assert found is not None and found.rating == 3


def test_failed_write_rolls_back(
    tmp_path: Path, make_review, monkeypatch: pytest.MonkeyPatch
) -> None:
    store = _store(tmp_path)
    store.upsert_review(make_review("r1", rating=2))

    def _boom(path: Path, items: list) -> None:
        raise StorageError("disk full")

    monkeypatch.setattr(review_store_module, "_write_items", _boom)
    with pytest.raises(StorageError):
        store.upsert_review(make_review("r1", rating=5))
    with pytest.raises(StorageError):
        store.upsert_review(make_review("r2"))

    found = store.find_by_id("r1")
    assert found is not None and found.rating == 2
    assert store.find_by_id("r2") is None


def test_no_temp_files_left_behind(tmp_path: Path, make_review) -> None:
    store = _store(tmp_path)
    store.upsert_review(make_review("r1"))
    assert sorted(p.name for p in tmp_path.iterdir()) == ["reviews.json"]
