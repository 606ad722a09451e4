import hashlib
from concurrent.futures import ThreadPoolExecutor

import pytest

from sha256 import DIGEST_SIZE, finalize_digest, message_view, sha256, sha256_hex


# NIST / well-known test vectors.
KNOWN_DIGESTS = [
    (b"", "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"),
    (b"abc", "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"),
    (
        b"abcdbcdecdefdefgefghfghighijhijkijkljklmklmnlmnomnopnopq",
        "248d6a61d20638b8e5c026930c3e6039a33ce45964ff2167f6ecedd419db06c1",
    ),
    (
        b"The quick brown fox jumps over the lazy dog",
        "d7a8fbb307d7809469ca9abcb0082e4f8d5651e46d3cdb762d02d0bf37c9e592",
    ),
    (b"a" * 1000, "41edece42d63e8d9bf515a9ba6932e1c20cbc9f5a5d134645adb5db1b9737ea3"),
]


@pytest.mark.parametrize("message,expected", KNOWN_DIGESTS)
def test_known_digests(message, expected):
    assert sha256_hex(message) == expected
    assert sha256(message) == bytes.fromhex(expected)


@pytest.mark.parametrize("length", [0, 1, 55, 56, 57, 63, 64, 65, 119, 120, 127, 128, 129, 1000])
def test_block_boundaries_match_hashlib(length):
    message = bytes((i * 31 + 17) & 0xFF for i in range(length))
    assert sha256(message) == hashlib.sha256(message).digest()


@pytest.mark.parametrize("length", [0, 1, 32, 1000, 4096])
def test_digest_is_always_32_bytes(length):
    digest = sha256(b"\x5a" * length)
    assert isinstance(digest, bytes)
    assert len(digest) == DIGEST_SIZE


def test_deterministic():
    message = b"deterministic" * 20
    assert sha256(message) == sha256(message)
    assert sha256(b"") == sha256(b"")


def test_accepts_bytes_like_inputs():
    expected = sha256(b"abc")
    assert sha256(bytearray(b"abc")) == expected
    assert sha256(memoryview(b"abc")) == expected
    assert sha256(memoryview(b"xxabcxx")[2:5]) == expected
    # Strided views are not C-contiguous.
    assert sha256(memoryview(b"aXbXcX")[::2]) == expected
    assert sha256(memoryview(b"aXbXcX")[::2], 2) == sha256(b"ab")


def test_explicit_length_hashes_prefix():
    assert sha256(b"abcdef", 3) == sha256(b"abc")
    assert sha256(b"abcdef", 0) == sha256(b"")
    assert sha256(b"abc", 3) == sha256(b"abc")


def test_none_buffer_is_only_valid_for_empty_message():
    assert sha256(None, 0) == sha256(b"")
    assert sha256(None) == sha256(b"")
    with pytest.raises(ValueError):
        sha256(None, 1)


@pytest.mark.parametrize("length", [4, 100])
def test_length_past_end_of_buffer_is_rejected(length):
    with pytest.raises(ValueError):
        sha256(b"abc", length)


def test_negative_length_is_rejected():
    with pytest.raises(ValueError, match="non-negative"):
        message_view(None, -1)


@pytest.mark.parametrize("length", [2**61, 2**64])
def test_length_outside_64_bit_bit_length_is_rejected(length):
    """
    No buffer is given, so only the bit-length bound can reject the call.
    """
    with pytest.raises(ValueError, match=r"2\^64-bit"):
        message_view(None, length)
    with pytest.raises(ValueError, match=r"2\^64-bit"):
        sha256(b"abc", length)


def test_largest_valid_length_passes_the_bound_check():
    # 2**61 - 1 is in range, so the buffer-size check is the one that fires.
    with pytest.raises(ValueError, match="exceeds the 3-byte input buffer"):
        sha256(b"abc", 2**61 - 1)


@pytest.mark.parametrize("data", ["abc", [1, 2, 3], 123])
def test_non_bytes_input_is_rejected(data):
    with pytest.raises(TypeError):
        sha256(data)


def test_non_integer_length_is_rejected():
    with pytest.raises(TypeError):
        sha256(b"abc", 1.5)


def test_finalize_digest_is_big_endian():
    state = (0x01020304, 0, 0, 0, 0, 0, 0, 0xA0B0C0D0)
    digest = finalize_digest(state)
    assert digest[:4] == b"\x01\x02\x03\x04"
    assert digest[-4:] == b"\xa0\xb0\xc0\xd0"
    with pytest.raises(ValueError):
        finalize_digest(state[:7])


def _bit_difference(x: bytes, y: bytes) -> int:
    return sum(bin(a ^ b).count("1") for a, b in zip(x, y))


@pytest.mark.parametrize("bit", [0, 7, 100, 511])
def test_single_bit_flip_avalanche(bit):
    """
    Smoke test only: flipping one input bit should change roughly half of the
    256 output bits.
    """
    message = bytearray(b"The quick brown fox jumps over the lazy dog!!!!!!!!!!!!!!!!!!!!!")
    original = sha256(bytes(message))

    message[bit // 8] ^= 0x80 >> (bit % 8)
    flipped = sha256(bytes(message))

    assert 64 <= _bit_difference(original, flipped) <= 192


def test_concurrent_calls_do_not_share_output():
    messages = [bytes([i]) * (i * 13) for i in range(64)]
    expected = [hashlib.sha256(m).digest() for m in messages]

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(sha256, messages))

    assert results == expected

    first = sha256(b"one")
    second = sha256(b"one")
    assert first == second
    assert first is not second
