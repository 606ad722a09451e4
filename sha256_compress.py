"""SHA-256 compression: word primitives, one round and the 64-round loop.

Given the current working state words `(a, b, c, d, e, f, g, h)`, the round
constant `k`, and the message schedule word `w`, one round computes:

    T1 = h + S1(e) + ch(e, f, g) + k + w
    T2 = S0(a) + maj(a, b, c)

    h' = g, g' = f, f' = e, e' = d + T1
    d' = c, c' = b, b' = a, a' = T1 + T2

All additions are performed modulo 2**32. The hash state is only touched by
`update_hash_state`, once per block, after all 64 rounds.
"""

from __future__ import annotations

from typing import Iterator, Sequence, Tuple


MASK32 = 0xFFFFFFFF

State = Tuple[int, int, int, int, int, int, int, int]

# First 32 bits of the fractional parts of the square roots of the first
# 8 primes 2..19.
H_INITIAL: State = (
    0x6A09E667,
    0xBB67AE85,
    0x3C6EF372,
    0xA54FF53A,
    0x510E527F,
    0x9B05688C,
    0x1F83D9AB,
    0x5BE0CD19,
)

# First 32 bits of the fractional parts of the cube roots of the first
# 64 primes.
K_VALUES: Tuple[int, ...] = (
    0x428A2F98, 0x71374491, 0xB5C0FBCF, 0xE9B5DBA5,
    0x3956C25B, 0x59F111F1, 0x923F82A4, 0xAB1C5ED5,
    0xD807AA98, 0x12835B01, 0x243185BE, 0x550C7DC3,
    0x72BE5D74, 0x80DEB1FE, 0x9BDC06A7, 0xC19BF174,
    0xE49B69C1, 0xEFBE4786, 0x0FC19DC6, 0x240CA1CC,
    0x2DE92C6F, 0x4A7484AA, 0x5CB0A9DC, 0x76F988DA,
    0x983E5152, 0xA831C66D, 0xB00327C8, 0xBF597FC7,
    0xC6E00BF3, 0xD5A79147, 0x06CA6351, 0x14292967,
    0x27B70A85, 0x2E1B2138, 0x4D2C6DFC, 0x53380D13,
    0x650A7354, 0x766A0ABB, 0x81C2C92E, 0x92722C85,
    0xA2BFE8A1, 0xA81A664B, 0xC24B8B70, 0xC76C51A3,
    0xD192E819, 0xD6990624, 0xF40E3585, 0x106AA070,
    0x19A4C116, 0x1E376C08, 0x2748774C, 0x34B0BCB5,
    0x391C0CB3, 0x4ED8AA4A, 0x5B9CCA4F, 0x682E6FF3,
    0x748F82EE, 0x78A5636F, 0x84C87814, 0x8CC70208,
    0x90BEFFFA, 0xA4506CEB, 0xBEF9A3F7, 0xC67178F2,
)


def rotr(x: int, n: int) -> int:
    """Right-rotate a 32-bit word `x` by `n` bits."""
    x &= MASK32
    return ((x >> n) | (x << (32 - n))) & MASK32


def rotl(x: int, n: int) -> int:
    """Left-rotate a 32-bit word `x` by `n` bits."""
    x &= MASK32
    return ((x << n) | (x >> (32 - n))) & MASK32


def byteswap32(x: int) -> int:
    """Reverse the byte order of a 32-bit word."""
    return (rotr(x, 8) & 0xFF00FF00) | (rotl(x, 8) & 0x00FF00FF)


def ch(x: int, y: int, z: int) -> int:
    """Choose: take each bit from `y` where `x` is 1, otherwise from `z`."""
    return ((x & y) ^ (~x & z)) & MASK32


def maj(x: int, y: int, z: int) -> int:
    """Majority vote of the bits of `x`, `y` and `z`."""
    return (x & y) ^ (x & z) ^ (y & z)


def big_sigma0(x: int) -> int:
    return rotr(x, 2) ^ rotr(x, 13) ^ rotr(x, 22)


def big_sigma1(x: int) -> int:
    return rotr(x, 6) ^ rotr(x, 11) ^ rotr(x, 25)


def compression(
    a: int,
    b: int,
    c: int,
    d: int,
    e: int,
    f: int,
    g: int,
    h: int,
    w: int,
    k: int,
) -> State:
    """Perform one SHA-256 compression round.

    Parameters
    ----------
    a, b, c, d, e, f, g, h : int
        32-bit words representing the current working state.
    w : int
        Message schedule word `w[t]`.
    k : int
        Round constant `k[t]`.

    Returns
    -------
    (a, b, c, d, e, f, g, h) : tuple[int, ...]
        Working state after the round, all reduced modulo 2**32.
    """
    temp1 = (h + big_sigma1(e) + ch(e, f, g) + k + w) & MASK32
    temp2 = (big_sigma0(a) + maj(a, b, c)) & MASK32

    return (
        (temp1 + temp2) & MASK32,
        a,
        b,
        c,
        (d + temp1) & MASK32,
        e,
        f,
        g,
    )


def iter_rounds(state: Sequence[int], ws: Sequence[int]) -> Iterator[State]:
    """Yield the working state after each of the 64 rounds of one block.

    `state` is the hash value the working registers are loaded from.
    """
    if len(ws) != 64:
        raise ValueError(f"Expected 64 message schedule words, got {len(ws)}")

    working = tuple(state)
    for t in range(64):
        working = compression(*working, ws[t], K_VALUES[t])
        yield working


def compress64(
    a: int,
    b: int,
    c: int,
    d: int,
    e: int,
    f: int,
    g: int,
    h: int,
    ws: Sequence[int],
) -> State:
    """Run the full 64-round SHA-256 compression loop for one block.

    Parameters
    ----------
    a, b, c, d, e, f, g, h : int
        Initial working state words (the current hash value).
    ws : Sequence[int]
        The 64-word message schedule `w[0..63]` for this block.

    Returns
    -------
    (a, b, c, d, e, f, g, h) : tuple[int, ...]
        Final working state words after 64 rounds. The caller folds these
        into the hash state with `update_hash_state`.
    """
    working = (a, b, c, d, e, f, g, h)
    for working in iter_rounds(working, ws):
        pass

    return working


def update_hash_state(state: Sequence[int], working: Sequence[int]) -> State:
    """Fold the post-compression working registers into the hash state.

        H_{i+1}[j] = (H_i[j] + working[j]) mod 2^32
    """
    if len(state) != 8 or len(working) != 8:
        raise ValueError(
            f"Expected 8-word state and working registers, got {len(state)} and {len(working)}"
        )

    h0, h1, h2, h3, h4, h5, h6, h7 = state
    a, b, c, d, e, f, g, h = working

    return (
        (h0 + a) & MASK32,
        (h1 + b) & MASK32,
        (h2 + c) & MASK32,
        (h3 + d) & MASK32,
        (h4 + e) & MASK32,
        (h5 + f) & MASK32,
        (h6 + g) & MASK32,
        (h7 + h) & MASK32,
    )
