"""Message schedule: load a 512-bit block as words and expand it to W[0..63]."""

from __future__ import annotations

from typing import List, Sequence

from sha256_compress import MASK32, rotr


def shr(x: int, n: int) -> int:
    """Right-shift a 32-bit word `x` by `n` bits."""
    x &= MASK32
    return x >> n


def small_sigma0(x: int) -> int:
    """SHA-256 function σ0 used in the message schedule."""
    return (rotr(x, 7) ^ rotr(x, 18) ^ shr(x, 3)) & MASK32


def small_sigma1(x: int) -> int:
    """SHA-256 function σ1 used in the message schedule."""
    return (rotr(x, 17) ^ rotr(x, 19) ^ shr(x, 10)) & MASK32


def block_words(block: bytes) -> List[int]:
    """Split a 64-byte block into 16 big-endian 32-bit words.

    The byte order is fixed by the algorithm, not by the host.
    """
    if len(block) != 64:
        raise ValueError(f"Expected 64-byte block, got {len(block)}")

    return [int.from_bytes(block[4 * i : 4 * (i + 1)], byteorder="big") for i in range(16)]


def expand_message_schedule(words: Sequence[int]) -> List[int]:
    """Expand the 16 block words to the 64-word schedule.

    For t from 16 to 63:
        W[t] = σ1(W[t-2]) + W[t-7] + σ0(W[t-15]) + W[t-16]   (mod 2^32)
    """
    if len(words) != 16:
        raise ValueError(f"Message schedule needs exactly 16 block words, got {len(words)}")

    w: List[int] = [word & MASK32 for word in words]
    for t in range(16, 64):
        s0 = small_sigma0(w[t - 15])
        s1 = small_sigma1(w[t - 2])
        w.append((s1 + w[t - 7] + s0 + w[t - 16]) & MASK32)

    return w


def build_message_schedule(block: bytes) -> List[int]:
    """Given a 512-bit block, build the 64-word message schedule w[0..63]."""
    return expand_message_schedule(block_words(block))
