"""Enums de dominio para el estado interno de las reviews."""

from __future__ import annotations

from enum import Enum


class ReviewStatus(str, Enum):
    """Estado de gestion interna de una review."""

    NEW = "new"
    FLAGGED = "flagged"
    RESPONDED = "responded"
    RESOLVED = "resolved"
