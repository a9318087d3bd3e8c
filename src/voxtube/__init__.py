"""VoxTube - listen to YouTube videos as summaries and synthesized speech."""

__version__ = "0.1.0"
__all__ = ["create_app"]


def __getattr__(name: str):  # type: ignore[no-untyped-def]
    if name == "create_app":
        from .server import create_app

        return create_app
    raise AttributeError(f"module 'voxtube' has no attribute {name!r}")
