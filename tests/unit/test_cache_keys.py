"""Unit tests for cache key derivation and the expiry boundary."""

import random
import string
import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from voxtube.cache.keys import (
    audio_key,
    is_artifact,
    is_expired,
    summary_key,
    voice_index_key,
)


class TestKeyDerivation:
    """Test deterministic, filesystem-safe filenames."""

    def test_audio_key_deterministic(self) -> None:
        """Same (video, voice) always maps to the same filename."""
        key1 = audio_key("dQw4w9WgXcQ", "af_sky")
        key2 = audio_key("dQw4w9WgXcQ", "af_sky")

        assert key1 == key2
        assert key1.endswith(".mp3")
        assert len(key1) == 64 + len(".mp3")

    def test_summary_key_deterministic_and_voice_independent(self) -> None:
        """Summary key depends on the video only."""
        assert summary_key("dQw4w9WgXcQ") == summary_key("dQw4w9WgXcQ")
        assert summary_key("dQw4w9WgXcQ").endswith("_summary.json")
        assert summary_key("dQw4w9WgXcQ") != summary_key("aaaaaaaaaaa")

    def test_keys_never_echo_raw_input(self) -> None:
        """Path traversal input produces a plain hex filename."""
        key = audio_key("../../etc/passwd", "../voice")

        assert "/" not in key
        assert ".." not in key
        assert "passwd" not in key
        stem = key.removesuffix(".mp3")
        assert all(c in "0123456789abcdef" for c in stem)

    def test_long_input_has_fixed_length_key(self) -> None:
        """Filename length does not grow with the identity."""
        assert len(audio_key("x" * 10000, "v" * 500)) == len(audio_key("a", "b"))

    def test_audio_and_summary_variants_differ(self) -> None:
        """Narrated-summary audio does not collide with transcript audio."""
        assert audio_key("dQw4w9WgXcQ", "af_sky") != audio_key(
            "dQw4w9WgXcQ_summary", "af_sky"
        )

    def test_no_collisions_across_random_pairs(self) -> None:
        """10,000 distinct (video, voice) pairs give 10,000 distinct keys."""
        rng = random.Random(1234)
        alphabet = string.ascii_letters + string.digits + "-_"
        voices = ["af_sky", "af_bella", "am_adam", "bm_george"]

        pairs = set()
        while len(pairs) < 10000:
            video = "".join(rng.choice(alphabet) for _ in range(11))
            pairs.add((video, rng.choice(voices)))

        keys = {audio_key(video, voice) for video, voice in pairs}
        assert len(keys) == len(pairs)

    def test_none_inputs_rejected(self) -> None:
        """None never silently hashes to a valid key."""
        with pytest.raises(ValueError):
            audio_key(None, "af_sky")  # type: ignore[arg-type]
        with pytest.raises(ValueError):
            summary_key(None)  # type: ignore[arg-type]
        with pytest.raises(ValueError):
            voice_index_key(None)  # type: ignore[arg-type]


class TestExpiryBoundary:
    """Exactly-at-TTL counts as expired everywhere."""

    def test_younger_than_ttl_is_fresh(self) -> None:
        assert is_expired(99.999, 100) is False

    def test_exactly_ttl_is_expired(self) -> None:
        assert is_expired(100, 100) is True

    def test_older_than_ttl_is_expired(self) -> None:
        assert is_expired(100.001, 100) is True


def test_is_artifact_recognizes_owned_files() -> None:
    """Sweeper only touches files the cache created."""
    assert is_artifact(audio_key("dQw4w9WgXcQ", "af_sky"))
    assert is_artifact(summary_key("dQw4w9WgXcQ"))
    assert is_artifact(voice_index_key("dQw4w9WgXcQ"))
    assert is_artifact(".write-abc123.tmp")
    assert not is_artifact("README.md")
    assert not is_artifact("notes.json")
