"""Repositorios de persistencia (store JSON local)."""

from playreviews.repositories.review_store import ReviewStore

__all__ = ["ReviewStore"]
