"""SHA-256 digest of a whole in-memory message (FIPS 180-4).

This module provides:

- `sha256(data, length=None) -> bytes`: the 32-byte digest.
- `sha256_hex(data, length=None) -> str`: the 64-character lowercase hex digest.

Every call builds its own hash state, schedule and output, so calls are safe
to make concurrently.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

from sha256_compress import H_INITIAL, State, compress64, update_hash_state
from sha256_padding import MAX_MESSAGE_BYTES, iter_blocks
from sha256_schedule import build_message_schedule

DIGEST_SIZE = 32


def message_view(data, length: Optional[int] = None) -> Tuple[memoryview, int]:
    """Validate the caller's buffer and declared length.

    Returns a byte view of `data` and the number of bytes to hash. A `None`
    buffer is only accepted for an empty message.
    """
    if length is not None:
        if isinstance(length, bool) or not isinstance(length, int):
            raise TypeError(f"length must be an integer, got {type(length).__name__}")
        if length < 0:
            raise ValueError(f"length must be non-negative, got {length}")
        if length > MAX_MESSAGE_BYTES:
            raise ValueError(
                f"Message of {length} bytes exceeds the 2^64-bit SHA-256 length limit"
            )

    if data is None:
        if length:
            raise ValueError(f"No input buffer given for a message of {length} bytes")
        return memoryview(b""), 0

    if isinstance(data, str):
        raise TypeError("Cannot hash str; encode it to bytes first")

    try:
        view = memoryview(data)
    except TypeError:
        raise TypeError(f"Expected a bytes-like object, got {type(data).__name__}") from None

    # cast() needs a C-contiguous buffer; strided views are copied once.
    if view.c_contiguous:
        view = view.cast("B")
    else:
        view = memoryview(view.tobytes())

    if length is None:
        length = len(view)
    elif length > len(view):
        raise ValueError(f"length {length} exceeds the {len(view)}-byte input buffer")

    return view, length


def finalize_digest(state: Sequence[int]) -> bytes:
    """Convert the final hash state into the 32-byte big-endian digest."""
    if len(state) != 8:
        raise ValueError(f"Hash state must have 8 words, got {len(state)}")
    return b"".join(word.to_bytes(4, byteorder="big") for word in state)


def sha256(data, length: Optional[int] = None) -> bytes:
    """Compute the SHA-256 digest of `data`.

    Args:
        data: A bytes-like object (``bytes``, ``bytearray``, ``memoryview``...).
        length: Number of leading bytes of `data` to hash. Defaults to the
            whole buffer; must satisfy ``0 <= length <= len(data)``.

    Returns:
        256-bit (32-byte) digest as bytes

    Example:
        >>> sha256(b"abc").hex()
        'ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad'
    """
    view, length = message_view(data, length)

    state: State = H_INITIAL
    for block in iter_blocks(view, length):
        ws = build_message_schedule(block)
        working = compress64(*state, ws)
        state = update_hash_state(state, working)

    return finalize_digest(state)


def sha256_hex(data, length: Optional[int] = None) -> str:
    """Compute the SHA-256 digest of `data` as a lowercase hex string."""
    return sha256(data, length).hex()
