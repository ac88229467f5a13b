"""Unit tests for asa_metadata_codec.pagination."""

import pytest

from asa_metadata_codec.pagination import (
    chunk_metadata_payload,
    chunks_for_slice,
    page_count,
    paginate,
)


class TestPageCount:
    """Tests for page_count."""

    @pytest.mark.parametrize(
        ("size", "page_size", "expected"),
        [(0, 100, 0), (1, 100, 1), (100, 100, 1), (101, 100, 2), (250, 100, 3)],
    )
    def test_ceiling_division(self, size: int, page_size: int, expected: int) -> None:
        """Test page_count rounds up."""
        assert page_count(size, page_size) == expected

    def test_invalid_page_size(self) -> None:
        """Test non-positive page sizes raise."""
        with pytest.raises(ValueError, match="page_size must be > 0"):
            page_count(10, 0)

    def test_negative_size(self) -> None:
        """Test negative sizes raise."""
        with pytest.raises(ValueError, match="non-negative"):
            page_count(-1, 10)


class TestPaginate:
    """Tests for paginate."""

    def test_empty(self) -> None:
        """Test empty data yields no pages."""
        assert paginate(b"", 100) == []

    def test_remainder_in_last_page(self) -> None:
        """Test 250 bytes at page size 100 split as 100/100/50."""
        data = bytes(range(250))
        pages = paginate(data, 100)
        assert [len(p) for p in pages] == [100, 100, 50]
        assert b"".join(pages) == data

    def test_exact_multiple(self) -> None:
        """Test no trailing empty page on exact multiples."""
        assert [len(p) for p in paginate(b"x" * 200, 100)] == [100, 100]

    def test_invalid_page_size(self) -> None:
        """Test non-positive page sizes raise."""
        with pytest.raises(ValueError, match="page_size must be > 0"):
            paginate(b"abc", -1)


class TestChunkMetadataPayload:
    """Tests for chunk_metadata_payload."""

    def test_empty_yields_single_empty_head(self) -> None:
        """Test empty payload still produces one head chunk."""
        assert chunk_metadata_payload(b"", head_max_size=4, extra_max_size=8) == [b""]

    def test_head_only(self) -> None:
        """Test payload shorter than the head limit."""
        assert chunk_metadata_payload(b"abc", head_max_size=4, extra_max_size=8) == [
            b"abc"
        ]

    def test_head_and_extras(self) -> None:
        """Test head chunk then extras of the extra limit."""
        chunks = chunk_metadata_payload(
            b"x" * 21, head_max_size=5, extra_max_size=8
        )
        assert [len(c) for c in chunks] == [5, 8, 8]

    def test_invalid_sizes(self) -> None:
        """Test non-positive limits raise."""
        with pytest.raises(ValueError, match="Chunk sizes must be > 0"):
            chunk_metadata_payload(b"x", head_max_size=0, extra_max_size=8)


class TestChunksForSlice:
    """Tests for chunks_for_slice."""

    def test_empty(self) -> None:
        """Test empty slice yields a single empty chunk."""
        assert chunks_for_slice(b"", 10) == [b""]

    def test_split(self) -> None:
        """Test slices split at the chunk limit."""
        assert chunks_for_slice(b"abcdefg", 3) == [b"abc", b"def", b"g"]

    def test_invalid_size(self) -> None:
        """Test non-positive limit raises."""
        with pytest.raises(ValueError, match="max_chunk_size must be > 0"):
            chunks_for_slice(b"abc", 0)
