"""Modelos, filtros y errores de dominio."""
