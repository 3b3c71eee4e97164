"""Servicio de consulta y respuesta de reviews de Google Play."""

__version__ = "1.0.0"
