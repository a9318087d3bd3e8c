"""HTTP API for VoxTube."""

from .app import create_app

__all__ = ["create_app"]
