"""Capa HTTP (FastAPI) sobre el core de reviews."""
