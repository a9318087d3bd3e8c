"""TTS data models with validation."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Voice:
    """A selectable Kokoro voice.

    Args:
        id: Kokoro voice identifier (e.g., "af_sky")
        name: Human-readable label
    """

    id: str
    name: str

    def __post_init__(self) -> None:
        if not self.id or not self.id.strip():
            raise ValueError("id cannot be empty")
        if not self.name or not self.name.strip():
            raise ValueError("name cannot be empty")

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "name": self.name}


@dataclass
class SynthesisResult:
    """Audio returned by the TTS server."""

    audio: bytes
    content_type: str = "audio/mpeg"


# Kokoro has no voice listing endpoint; requests are validated against this
# list so the voice parameter can never carry arbitrary input.
KNOWN_VOICES: tuple[Voice, ...] = (
    Voice("af_sky", "Sky (Female)"),
    Voice("af_bella", "Bella (Female)"),
    Voice("af_nicole", "Nicole (Female)"),
    Voice("af_sarah", "Sarah (Female)"),
    Voice("am_adam", "Adam (Male)"),
    Voice("am_michael", "Michael (Male)"),
    Voice("bf_emma", "Emma (British Female)"),
    Voice("bm_george", "George (British Male)"),
)


def get_voices() -> list[Voice]:
    """Return the voices offered to clients."""
    return list(KNOWN_VOICES)


def known_voice_ids() -> list[str]:
    return [voice.id for voice in KNOWN_VOICES]


def is_valid_voice(voice_id: str) -> bool:
    """Check a voice ID against the known voice list."""
    return any(voice.id == voice_id for voice in KNOWN_VOICES)
