"""Padding and block segmentation for SHA-256.

The padded message is the original bytes, a single 0x80 byte, zero bytes, and
the 64-bit big-endian bit length, laid out over N 64-byte blocks:

    N = len // 64 + 1 + (1 if len % 64 >= 56 else 0)

The blocks are produced one at a time so that the whole padded message is
never materialized by the hasher.
"""

from __future__ import annotations

from typing import Iterator

BLOCK_SIZE = 64
LENGTH_FIELD_SIZE = 8

# Largest byte length whose bit length still fits the 64-bit length field.
MAX_MESSAGE_BYTES = (1 << 61) - 1


def block_count(length: int) -> int:
    """Number of 512-bit blocks in the padded form of a `length`-byte message.

    One block beyond the full ones always holds at least the 0x80 marker; a
    second one is needed when the last partial block has fewer than 9 free
    bytes for the marker and the length field.
    """
    if length < 0:
        raise ValueError(f"Message length must be non-negative, got {length}")

    tail = length % BLOCK_SIZE
    return length // BLOCK_SIZE + 1 + (1 if tail >= BLOCK_SIZE - LENGTH_FIELD_SIZE else 0)


def iter_blocks(view: memoryview, length: int) -> Iterator[bytes]:
    """Yield the padded 64-byte blocks for the first `length` bytes of `view`.

    Each block is a fresh zero-filled buffer. The 0x80 marker goes right after
    the message bytes of the first block that is not completely filled; when
    `length` is a multiple of 64 that is the trailing block with no message
    bytes at all. The bit length always occupies the last 8 bytes of block N.
    """
    n_blocks = block_count(length)
    consumed = 0
    marker_written = False

    for i in range(1, n_blocks + 1):
        block = bytearray(BLOCK_SIZE)

        take = min(length - consumed, BLOCK_SIZE)
        block[:take] = view[consumed : consumed + take]
        consumed += take

        if take < BLOCK_SIZE and not marker_written:
            block[take] = 0x80
            marker_written = True

        if i == n_blocks:
            block[BLOCK_SIZE - LENGTH_FIELD_SIZE :] = (length * 8).to_bytes(
                LENGTH_FIELD_SIZE, byteorder="big"
            )

        yield bytes(block)


def pad_message(data: bytes) -> bytes:
    """Return the full padded form of `data` (a multiple of 64 bytes)."""
    view = memoryview(data)
    view = view.cast("B") if view.c_contiguous else memoryview(view.tobytes())
    return b"".join(iter_blocks(view, len(view)))


def split_into_blocks(padded: bytes) -> list[bytes]:
    """Split an already padded message into its 64-byte blocks."""
    if len(padded) % BLOCK_SIZE != 0:
        raise ValueError(
            f"Padded message length must be a multiple of 64 bytes, got {len(padded)}"
        )

    return [padded[i : i + BLOCK_SIZE] for i in range(0, len(padded), BLOCK_SIZE)]
