"""CLI: servir la API, sembrar datos mock, importar exports y ver stats."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

import uvicorn

from playreviews.config import settings
from playreviews.domain.errors import ReviewsError
from playreviews.logging_utils import configure_logging, get_logger
from playreviews.services.container import build_services


@dataclass(frozen=True)
class Exit:
    code: int = 0


def cmd_serve(host: str, port: int) -> Exit:
    uvicorn.run("playreviews.api.main:create_app", host=host, port=port, factory=True)
    return Exit(0)


def cmd_seed() -> Exit:
    services = build_services(settings.model_copy(update={"seed_mock_data": False}))
    result = services.importer.seed_mock_data()
    if result.imported:
        print(f"[OK] Seeded {result.imported} mock reviews")
    else:
        print("[OK] Store already populated, nothing to seed")
    return Exit(0)


def cmd_import(path: Path, app_package: str) -> Exit:
    services = build_services(settings.model_copy(update={"seed_mock_data": False}))
    result = services.importer.import_file(path, app_package)
    print(f"[OK] Imported {result.imported} reviews for {app_package} ({result.skipped} skipped)")
    print(f"[OK] Store: {settings.reviews_path}")
    return Exit(0)


def cmd_stats(app_package: str | None) -> Exit:
    services = build_services(settings)
    if app_package:
        stats = services.stats.get_app_stats(app_package)
        if stats is None:
            print(f"[ERROR] App not found: {app_package}", file=sys.stderr)
            return Exit(1)
        print(json.dumps(stats.to_wire(), indent=2))
    else:
        print(json.dumps(services.stats.get_global_stats().to_wire(), indent=2))
    return Exit(0)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="playreviews", description="GPlay Reviews CLI")
    sub = p.add_subparsers(dest="cmd", required=True)

    sp = sub.add_parser("serve", help="Serve the FastAPI app")
    sp.add_argument("--host", default="127.0.0.1")
    sp.add_argument("--port", type=int, default=8000)

    sub.add_parser("seed", help="Populate an empty store with mock data")

    ip = sub.add_parser("import", help="Import a Google Play API reviews export (JSON)")
    ip.add_argument("file", type=Path)
    ip.add_argument("--app", required=True, dest="app_package")

    st = sub.add_parser("stats", help="Print global or per-app statistics")
    st.add_argument("--app", dest="app_package", default=None)

    return p


def run(argv: Sequence[str] | None = None) -> Exit:
    args = build_parser().parse_args(argv)
    logger = get_logger(__name__)

    try:
        if args.cmd == "serve":
            return cmd_serve(args.host, args.port)
        if args.cmd == "seed":
            return cmd_seed()
        if args.cmd == "import":
            return cmd_import(args.file, args.app_package)
        if args.cmd == "stats":
            return cmd_stats(args.app_package)
    except ReviewsError as exc:
        logger.error("%s failed: %s", args.cmd, exc)
        print(f"[ERROR] {exc.code}: {exc.message}", file=sys.stderr)
        return Exit(1)

    return Exit(2)


def main() -> None:
    configure_logging(force=True)
    raise SystemExit(run().code)


if __name__ == "__main__":
    main()
