"""Comparacion de versiones por componentes ("2.10" > "2.9").

Una version es un nucleo numerico ("1.0.3") seguido opcionalmente de un
sufijo de pre-release ("beta.2"). Los ceros finales del nucleo no cuentan y
una pre-release ordena por debajo de su release: "1.0-beta" < "1.0" = "1.0.0".
"""

from __future__ import annotations

import re

_SPLIT_RE = re.compile(r"[.\-_+ ]+")

VersionKey = tuple[tuple[int, ...], int, tuple[tuple[int, int, str], ...]]


def _component_key(part: str) -> tuple[int, int, str]:
    # Dentro del sufijo los numeros van antes que el texto.
    if part.isdigit():
        return (0, int(part), "")
    return (1, 0, part.lower())


def version_key(version: str) -> VersionKey:
    """Clave ordenable: (nucleo sin ceros finales, es_release, sufijo)."""
    parts = [p for p in _SPLIT_RE.split(version.strip()) if p]
    core: list[int] = []
    while parts and parts[0].isdigit():
        core.append(int(parts.pop(0)))
    while core and core[-1] == 0:
        core.pop()
    is_release = 0 if parts else 1
    return tuple(core), is_release, tuple(_component_key(p) for p in parts)


def compare_versions(left: str, right: str) -> int:
    """Devuelve -1, 0 o 1."""
    lk = version_key(left)
    rk = version_key(right)
    if lk < rk:
        return -1
    if lk > rk:
        return 1
    return 0


def version_at_least(version: str | None, minimum: str) -> bool:
    if not version:
        return False
    return compare_versions(version, minimum) >= 0
