"""Command-line driver for `sha256`.

Usage:
    python sha256_cli.py "message"          # hash the bytes of "message"
    python sha256_cli.py -f path/to/file    # hash the raw bytes of a file
    python sha256_cli.py                    # hash the sample: 1000 x 'a'
    python sha256_cli.py "abc" --show-blocks

The digest is printed as 64 lowercase hex characters, most significant byte
first.
"""

from __future__ import annotations

import argparse
import os
import sys
from typing import List, Optional

from sha256_padding import pad_message, split_into_blocks
from sha256_schedule import block_words
from sha256 import sha256_hex

SAMPLE_MESSAGE = b"a" * 1000


def format_block(block: bytes) -> List[str]:
    """Render a 64-byte block as four lines of four big-endian hex words."""
    words = block_words(block)
    return [" ".join(f"{w:08x}" for w in words[i : i + 4]) for i in range(0, 16, 4)]


def print_blocks(data: bytes) -> None:
    """Print every padded block of `data`."""
    for index, block in enumerate(split_into_blocks(pad_message(data))):
        print(f"block {index}:")
        for line in format_block(block):
            print(f"  {line}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compute the SHA-256 digest of a message or file"
    )
    parser.add_argument(
        "message",
        nargs="?",
        help=(
            "Message to hash (as given on the command line). "
            "Defaults to 1000 repetitions of 'a'."
        ),
    )
    parser.add_argument(
        "-f",
        "--file",
        help="Hash the raw bytes of this file instead of a message",
    )
    parser.add_argument(
        "--show-blocks",
        action="store_true",
        help="Print the padded 512-bit blocks before the digest",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point. Returns the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.file is not None and args.message is not None:
        sys.stderr.write("Give either a message or -f FILE, not both\n")
        return 1

    if args.file is not None:
        try:
            with open(args.file, "rb") as f:
                data = f.read()
        except OSError as e:
            sys.stderr.write(f"Error reading file '{args.file}': {e}\n")
            return 1
    elif args.message is not None:
        data = os.fsencode(args.message)
    else:
        data = SAMPLE_MESSAGE

    if args.show_blocks:
        print_blocks(data)

    print(sha256_hex(data))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
