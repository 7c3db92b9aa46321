"""Balayages distance/durée d'un lien Wi-Fi simulé (RSS et débit)."""

from __future__ import annotations

__version__ = "1.0.0"

__all__ = ["__version__"]
