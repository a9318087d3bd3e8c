"""Unit tests for YouTube URL handling."""

import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from voxtube.youtube import extract_video_id, is_valid_video_id, is_valid_youtube_input

VIDEO_ID = "dQw4w9WgXcQ"


class TestExtractVideoId:
    """Test video ID extraction from URLs and bare IDs."""

    @pytest.mark.parametrize(
        "value",
        [
            f"https://www.youtube.com/watch?v={VIDEO_ID}",
            f"https://youtube.com/watch?v={VIDEO_ID}&t=42s",
            f"http://youtu.be/{VIDEO_ID}",
            f"youtu.be/{VIDEO_ID}?si=abc",
            f"https://www.youtube.com/embed/{VIDEO_ID}",
            f"https://www.youtube.com/v/{VIDEO_ID}",
            VIDEO_ID,
            f"  {VIDEO_ID}  ",
        ],
    )
    def test_supported_forms(self, value: str) -> None:
        assert extract_video_id(value) == VIDEO_ID
        assert is_valid_youtube_input(value)

    @pytest.mark.parametrize(
        "value",
        [
            "",
            "not a url",
            "https://vimeo.com/123456789",
            "https://www.youtube.com/watch?v=short",
            "dQw4w9WgXcQX",
            "dQw4w9W/XcQ",
        ],
    )
    def test_rejected_forms(self, value: str) -> None:
        assert extract_video_id(value) is None
        assert not is_valid_youtube_input(value)


class TestIsValidVideoId:
    """Test the strict 11-character ID check used by the routes."""

    def test_valid(self) -> None:
        assert is_valid_video_id(VIDEO_ID)
        assert is_valid_video_id("a-b_c-d_e-f")

    def test_invalid(self) -> None:
        assert not is_valid_video_id("")
        assert not is_valid_video_id(f"{VIDEO_ID}_summary")
        assert not is_valid_video_id("../../etc/x")
