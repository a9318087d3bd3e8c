"""TTS (Text-to-Speech) package for VoxTube.

This package provides speech synthesis through a local Kokoro server.
"""

from .kokoro import KokoroClient
from .models import (
    KNOWN_VOICES,
    SynthesisResult,
    Voice,
    get_voices,
    is_valid_voice,
    known_voice_ids,
)
from .text import clean_transcript

__all__ = [
    "KNOWN_VOICES",
    "KokoroClient",
    "SynthesisResult",
    "Voice",
    "clean_transcript",
    "get_voices",
    "is_valid_voice",
    "known_voice_ids",
]
