"""HTTP layer: webhook intake, gallery and artifact serving."""

from .app import create_app

__all__ = ["create_app"]
