"""Unit tests for cache data models."""

import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from voxtube.cache.models import HistoryEntry, SummaryRecord, VideoMetadata


class TestSummaryRecord:
    """Test summary record serialization."""

    def test_to_dict_uses_stored_field_names(self) -> None:
        """Serialized shape matches the on-disk JSON layout."""
        record = SummaryRecord(
            video_id="abc12345678",
            summary="## Title",
            model="model-x",
            created_at=1700000000000,
            metadata=VideoMetadata(title="T"),
        )

        assert record.to_dict() == {
            "videoId": "abc12345678",
            "summary": "## Title",
            "metadata": {"title": "T"},
            "model": "model-x",
            "createdAt": 1700000000000,
        }

    def test_from_dict_restores_record(self) -> None:
        """Parsing a stored record restores every field."""
        data = {
            "videoId": "abc12345678",
            "summary": "text",
            "metadata": {"title": "T", "channel": "C", "duration": "10:00"},
            "model": "m",
            "createdAt": 42,
        }

        record = SummaryRecord.from_dict(data)

        assert record.video_id == "abc12345678"
        assert record.metadata == VideoMetadata(title="T", channel="C", duration="10:00")
        assert record.created_at == 42

    def test_from_dict_tolerates_missing_metadata(self) -> None:
        """Metadata is optional in stored records."""
        record = SummaryRecord.from_dict(
            {"videoId": "v", "summary": "s", "model": "m", "createdAt": 1}
        )
        assert record.metadata == VideoMetadata()

    @pytest.mark.parametrize(
        "data",
        [
            {"summary": "s", "model": "m", "createdAt": 1},
            {"videoId": "v", "model": "m", "createdAt": 1},
            {"videoId": "v", "summary": "s", "model": "m", "createdAt": "yesterday"},
            {"videoId": 5, "summary": "s", "model": "m", "createdAt": 1},
            {"videoId": "v", "summary": "s", "model": "m", "createdAt": float("inf")},
            {"videoId": "v", "summary": "s", "model": "m", "createdAt": float("nan")},
            {"videoId": "v", "summary": "s", "model": "m", "createdAt": 1, "metadata": "oops"},
            {"videoId": "v", "summary": "s", "model": "m", "createdAt": 1, "metadata": ["t"]},
            {
                "videoId": "v",
                "summary": "s",
                "model": "m",
                "createdAt": 1,
                "metadata": {"title": 5},
            },
            ["not", "an", "object"],
        ],
    )
    def test_from_dict_rejects_malformed_records(self, data) -> None:
        """Malformed records raise ValueError so callers can skip them."""
        with pytest.raises(ValueError):
            SummaryRecord.from_dict(data)


def test_history_entry_to_dict_is_camel_case() -> None:
    """History entries serialize with the API's field names."""
    entry = HistoryEntry(
        video_id="v",
        title="T",
        channel="C",
        duration="",
        created_at=5,
        has_audio=True,
    )
    assert entry.to_dict() == {
        "videoId": "v",
        "title": "T",
        "channel": "C",
        "duration": "",
        "createdAt": 5,
        "hasAudio": True,
    }
