"""
Pagination and transport chunking of metadata bytes.

Pages are the hashing granularity and must split exactly as the registry
contract does. Chunks are transport slices for multi-call writes and have
their own size limits.
"""

from __future__ import annotations


def page_count(size: int, page_size: int) -> int:
    """Number of pages for `size` bytes (0 for empty metadata)."""
    if page_size <= 0:
        raise ValueError("page_size must be > 0")
    if size < 0:
        raise ValueError("size must be non-negative")
    return -(-size // page_size)


def paginate(data: bytes, page_size: int) -> list[bytes]:
    """
    Split `data` into consecutive pages of `page_size` bytes.

    The last page holds the remainder. Empty data yields no pages.
    """
    if page_size <= 0:
        raise ValueError("page_size must be > 0")
    return [data[i : i + page_size] for i in range(0, len(data), page_size)]


def chunk_metadata_payload(
    data: bytes,
    *,
    head_max_size: int,
    extra_max_size: int,
) -> list[bytes]:
    """
    Split a metadata payload into one head chunk plus zero or more extra chunks.

    Empty data yields a single empty head chunk: a create call always carries one.
    """
    if head_max_size <= 0 or extra_max_size <= 0:
        raise ValueError("Chunk sizes must be > 0")

    head, rest = data[:head_max_size], data[head_max_size:]
    return [head] + [
        rest[i : i + extra_max_size] for i in range(0, len(rest), extra_max_size)
    ]


def chunks_for_slice(payload: bytes, max_chunk_size: int) -> list[bytes]:
    """Split a replace-slice payload into chunks of at most `max_chunk_size` bytes."""
    if max_chunk_size <= 0:
        raise ValueError("max_chunk_size must be > 0")
    if not payload:
        return [b""]
    return paginate(payload, max_chunk_size)
