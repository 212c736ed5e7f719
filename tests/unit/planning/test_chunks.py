"""Tests for chunk planning."""

import pytest

from socialcut.errors import InvalidMetadataError, InvalidSkipError
from socialcut.planning.chunks import plan_chunks


class TestPlanChunks:
    """Tests for plan_chunks."""

    def test_47s_in_15s_chunks(self):
        """Three full chunks and an open-ended final chunk."""
        chunks = plan_chunks(47.0, 15.0)

        assert [c.index for c in chunks] == [1, 2, 3, 4]
        assert [c.start for c in chunks] == [0.0, 15.0, 30.0, 45.0]
        assert [c.duration for c in chunks] == [15.0, 15.0, 15.0, None]

    def test_exact_multiple(self):
        chunks = plan_chunks(45.0, 15.0)

        assert len(chunks) == 3
        assert chunks[-1].duration is None

    def test_fractional_remainder_is_truncated(self):
        """45.9s covers three chunks; the fraction does not add a fourth."""
        chunks = plan_chunks(45.9, 15.0)

        assert len(chunks) == 3

    def test_short_source_yields_one_chunk(self):
        chunks = plan_chunks(0.5, 15.0)

        assert len(chunks) == 1
        assert chunks[0].start == 0.0
        assert chunks[0].duration is None

    def test_skip_offsets_every_chunk(self):
        chunks = plan_chunks(100.0, 30.0, skip=10.0)

        assert [c.start for c in chunks] == [10.0, 40.0, 70.0]
        assert chunks[-1].duration is None

    def test_skip_equal_to_duration(self):
        with pytest.raises(InvalidSkipError):
            plan_chunks(47.0, 15.0, skip=47.0)

    def test_skip_beyond_duration(self):
        with pytest.raises(InvalidSkipError, match="exceeds video duration"):
            plan_chunks(47.0, 15.0, skip=90.0)

    def test_negative_skip(self):
        with pytest.raises(InvalidSkipError):
            plan_chunks(47.0, 15.0, skip=-1.0)

    def test_invalid_source_duration(self):
        with pytest.raises(InvalidMetadataError):
            plan_chunks(0.0, 15.0)

    def test_invalid_chunk_duration(self):
        with pytest.raises(ValueError):
            plan_chunks(47.0, 0.0)
