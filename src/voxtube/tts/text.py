"""Transcript cleanup before speech synthesis."""

import re

# Caption annotations that sound wrong when read aloud
_ANNOTATIONS = re.compile(r"[\[(](?:music|applause|laughter)[\])]", re.IGNORECASE)
_MUSIC_NOTES = re.compile(r"♪[^♪]*♪")
_WHITESPACE = re.compile(r"\s+")


def clean_transcript(text: str) -> str:
    """Remove YouTube caption artifacts and collapse whitespace.

    Args:
        text: Raw transcript text

    Returns:
        Text suitable for TTS (may be empty)
    """
    text = _ANNOTATIONS.sub("", text)
    text = _MUSIC_NOTES.sub("", text)
    return _WHITESPACE.sub(" ", text).strip()
