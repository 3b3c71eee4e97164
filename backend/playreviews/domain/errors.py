"""Taxonomia de errores del core.

La capa de transporte traduce cada `code` a su propio sobre de error.
"""

from __future__ import annotations


class ReviewsError(Exception):
    """Base de los errores que el core expone al llamante."""

    code = "INTERNAL_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidArgument(ReviewsError):
    """Parametros mal formados o fuera de rango. No se reintenta."""

    code = "INVALID_PARAMS"


class ConflictError(InvalidArgument):
    """Escritura concurrente detectada sobre el mismo registro."""

    code = "CONFLICT"


class NotFound(ReviewsError):
    """La review o app referenciada no existe."""

    code = "NOT_FOUND"


class StorageError(ReviewsError):
    """El medio de persistencia no se puede leer o escribir."""

    code = "DATABASE_ERROR"


class InternalError(ReviewsError):
    """Violacion de invariante; indica un bug."""

    code = "INTERNAL_ERROR"
