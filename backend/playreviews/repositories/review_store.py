"""Store de reviews y apps persistido en JSON.

Unica fuente de verdad: los servicios reciben la instancia y no cachean
reviews entre llamadas. Las lecturas devuelven copias.
"""

from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from pathlib import Path
from threading import RLock
from typing import Any, Iterable, Optional, Type, TypeVar
from uuid import uuid4

from pydantic import BaseModel, ValidationError

from playreviews.domain.errors import ConflictError, StorageError
from playreviews.domain.models import App, Review
from playreviews.logging_utils import get_logger

logger = get_logger(__name__)

M = TypeVar("M", bound=BaseModel)


def _read_items(path: Path) -> list[Any]:
    """Lee `{"items": [...]}` (o una lista plana). Fichero ausente = vacio."""
    if not path.exists():
        return []
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as exc:
        raise StorageError(f"Cannot read {path.name}") from exc
    except json.JSONDecodeError as exc:
        raise StorageError(f"Malformed JSON in {path.name}") from exc

    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get("items"), list):
        return data["items"]
    raise StorageError(f"Unexpected document shape in {path.name}")


def _write_items(path: Path, items: list[dict[str, Any]]) -> None:
    """Escritura atomica y durable (tmp + fsync + replace)."""
    payload = {
        "updated_at": datetime.now(timezone.utc).isoformat(),
        "items": items,
    }
    tmp = path.with_name(f".{path.name}.{uuid4().hex}.tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tmp.open("w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, path)
    except OSError as exc:
        tmp.unlink(missing_ok=True)
        raise StorageError(f"Cannot write {path.name}") from exc


def _parse_records(raw_items: Iterable[Any], model: Type[M], label: str) -> list[M]:
    records: list[M] = []
    for index, raw in enumerate(raw_items):
        try:
            records.append(model.model_validate(raw))
        except ValidationError as exc:
            logger.warning(
                "Skipping malformed %s record #%s: %s", label, index, exc.error_count()
            )
    return records


class ReviewStore:
    def __init__(self, reviews_path: Path, apps_path: Path) -> None:
        self._reviews_path = Path(reviews_path)
        self._apps_path = Path(apps_path)
        self._reviews: dict[str, Review] = {}
        self._apps: dict[str, App] = {}
        self._generations: dict[str, int] = {}
        self._lock = RLock()

    # ------------------------------------------------------------------
    # Carga
    # ------------------------------------------------------------------
    def load(self) -> None:
        """Hidrata reviews y apps desde disco."""
        self.load_all()
        self.load_apps()

    def load_all(self) -> list[Review]:
        reviews = _parse_records(_read_items(self._reviews_path), Review, "review")
        with self._lock:
            self._reviews = {r.id: r for r in reviews}
            self._generations = {rid: 0 for rid in self._reviews}
            logger.info("Loaded %s reviews from %s", len(self._reviews), self._reviews_path)
            return [r.model_copy(deep=True) for r in self._reviews.values()]

    def load_apps(self) -> list[App]:
        apps = _parse_records(_read_items(self._apps_path), App, "app")
        with self._lock:
            self._apps = {a.package_name: a for a in apps}
            logger.info("Loaded %s apps from %s", len(self._apps), self._apps_path)
            return [a.model_copy(deep=True) for a in self._apps.values()]

    # ------------------------------------------------------------------
    # Lectura
    # ------------------------------------------------------------------
    def find_by_id(self, review_id: str) -> Optional[Review]:
        with self._lock:
            review = self._reviews.get(review_id)
            return review.model_copy(deep=True) if review else None

    def find_with_generation(self, review_id: str) -> Optional[tuple[Review, int]]:
        """Copia de la review y su generacion, leidas bajo el mismo lock."""
        with self._lock:
            review = self._reviews.get(review_id)
            if review is None:
                return None
            return review.model_copy(deep=True), self._generations.get(review_id, 0)

    def find_app(self, package_name: str) -> Optional[App]:
        with self._lock:
            app = self._apps.get(package_name)
            return app.model_copy(deep=True) if app else None

    def find_all(self) -> list[App]:
        """Apps ordenadas por package name."""
        with self._lock:
            return [self._apps[k].model_copy(deep=True) for k in sorted(self._apps)]

    def reviews(self, app_package: str | None = None) -> list[Review]:
        """Snapshot de reviews (opcionalmente de una sola app)."""
        with self._lock:
            return [
                r.model_copy(deep=True)
                for r in self._reviews.values()
                if app_package is None or r.app_package == app_package
            ]

    def count_by_app(self, app_package: str) -> int:
        with self._lock:
            return sum(1 for r in self._reviews.values() if r.app_package == app_package)

    def count(self) -> int:
        with self._lock:
            return len(self._reviews)

    def generation(self, review_id: str) -> Optional[int]:
        """Contador de versiones del registro; None si no existe."""
        with self._lock:
            return self._generations.get(review_id)

    # ------------------------------------------------------------------
    # Escritura
    # ------------------------------------------------------------------
    def upsert_review(self, review: Review, expected_generation: int | None = None) -> int:
        """Reemplaza por id y persiste antes de volver. Devuelve la nueva generacion.

        Con `expected_generation` actua como compare-and-swap: si otro escritor
        ha avanzado el registro, lanza `ConflictError` sin tocar nada.
        """
        with self._lock:
            current = self._generations.get(review.id)
            if expected_generation is not None and current != expected_generation:
                raise ConflictError(f"Review {review.id} was modified concurrently")

            previous = self._reviews.get(review.id)
            self._reviews[review.id] = review.model_copy(deep=True)
            try:
                self._flush_reviews()
            except StorageError:
                if previous is None:
                    del self._reviews[review.id]
                else:
                    self._reviews[review.id] = previous
                raise

            generation = 0 if current is None else current + 1
            self._generations[review.id] = generation
            return generation

    def upsert_reviews(self, reviews: Iterable[Review]) -> int:
        """Upsert en bloque con una sola escritura a disco."""
        with self._lock:
            snapshot = dict(self._reviews)
            touched: list[str] = []
            for review in reviews:
                self._reviews[review.id] = review.model_copy(deep=True)
                touched.append(review.id)
            try:
                self._flush_reviews()
            except StorageError:
                self._reviews = snapshot
                raise
            for rid in touched:
                current = self._generations.get(rid)
                self._generations[rid] = 0 if current is None else current + 1
            return len(touched)

    def upsert_app(self, app: App) -> None:
        with self._lock:
            previous = self._apps.get(app.package_name)
            self._apps[app.package_name] = app.model_copy(deep=True)
            try:
                self._flush_apps()
            except StorageError:
                if previous is None:
                    del self._apps[app.package_name]
                else:
                    self._apps[app.package_name] = previous
                raise

    def _flush_reviews(self) -> None:
        items = [r.to_wire() for r in self._reviews.values()]
        _write_items(self._reviews_path, items)
        logger.debug("Persisted %s reviews to %s", len(items), self._reviews_path)

    def _flush_apps(self) -> None:
        items = [a.to_wire() for a in self._apps.values()]
        _write_items(self._apps_path, items)
        logger.debug("Persisted %s apps to %s", len(items), self._apps_path)
