"""Record the internals of a SHA-256 computation, block by block and round by round.

For a message this script:
1. Pads it and splits it into 512-bit blocks
2. Computes SHA-256 while recording the message schedule and the working
   state (a..h) after every round
3. Saves the trace to <output-dir>/trace.yaml or trace.db (SQLite)

Usage:
    python trace_rounds.py "abc"
    python trace_rounds.py -f path/to/file --format sqlite
    python trace_rounds.py "abc" --output-dir data/trace

SQLite Schema:
    - metadata: message_length_bytes, block_count, digest_hex
    - blocks: block_index, block_hex, hash_in, hash_out
    - schedule: block_index, t, w
    - rounds: block_index, round_index, a, b, c, d, e, f, g, h
"""

from __future__ import annotations

import argparse
import os
import sqlite3
import sys
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import yaml

from sha256_compress import H_INITIAL, State, iter_rounds, update_hash_state
from sha256_padding import iter_blocks
from sha256_schedule import build_message_schedule
from sha256 import finalize_digest, message_view


@dataclass
class BlockTrace:
    """Everything computed while processing one block.

    ``rounds[0]`` is the working state loaded from ``hash_in``; ``rounds[t + 1]``
    is the state after round ``t``.
    """

    block_index: int
    block: bytes
    schedule: List[int]
    hash_in: State
    hash_out: State
    rounds: List[State] = field(default_factory=list)


def _hex_words(words) -> List[str]:
    return [f"{w:08x}" for w in words]


def trace_sha256(data, length: Optional[int] = None) -> Tuple[bytes, List[BlockTrace]]:
    """Compute SHA-256 of `data` and return ``(digest, block_traces)``."""
    view, length = message_view(data, length)

    state: State = H_INITIAL
    traces: List[BlockTrace] = []

    for block_index, block in enumerate(iter_blocks(view, length)):
        ws = build_message_schedule(block)

        rounds = [state]
        rounds.extend(iter_rounds(state, ws))

        new_state = update_hash_state(state, rounds[-1])
        traces.append(BlockTrace(block_index, block, ws, state, new_state, rounds))
        state = new_state

    return finalize_digest(state), traces


def trace_to_dict(data_length: int, digest: bytes, traces: List[BlockTrace]) -> Dict:
    """Build the YAML document for a trace."""
    return {
        "message_length_bytes": data_length,
        "block_count": len(traces),
        "digest_hex": digest.hex(),
        "blocks": [
            {
                "block_index": tr.block_index,
                "block_hex": tr.block.hex(),
                "schedule": _hex_words(tr.schedule),
                "hash_in": _hex_words(tr.hash_in),
                "hash_out": _hex_words(tr.hash_out),
                "rounds": [" ".join(_hex_words(r)) for r in tr.rounds],
            }
            for tr in traces
        ],
    }


def write_yaml(path: str, data_length: int, digest: bytes, traces: List[BlockTrace]) -> None:
    with open(path, "w") as f:
        yaml.dump(
            trace_to_dict(data_length, digest, traces),
            f,
            default_flow_style=False,
            sort_keys=False,
        )


def write_sqlite(path: str, data_length: int, digest: bytes, traces: List[BlockTrace]) -> None:
    """Save a trace to a fresh SQLite database at `path`."""
    if os.path.exists(path):
        os.remove(path)

    conn = sqlite3.connect(path)
    try:
        cursor = conn.cursor()
        cursor.executescript("""
            CREATE TABLE metadata (
                message_length_bytes INTEGER NOT NULL,
                block_count INTEGER NOT NULL,
                digest_hex TEXT NOT NULL
            );

            CREATE TABLE blocks (
                block_index INTEGER PRIMARY KEY,
                block_hex TEXT NOT NULL,
                hash_in TEXT NOT NULL,
                hash_out TEXT NOT NULL
            );

            CREATE TABLE schedule (
                block_index INTEGER NOT NULL,
                t INTEGER NOT NULL,
                w TEXT NOT NULL,
                FOREIGN KEY (block_index) REFERENCES blocks(block_index)
            );

            CREATE TABLE rounds (
                block_index INTEGER NOT NULL,
                round_index INTEGER NOT NULL,
                a TEXT NOT NULL, b TEXT NOT NULL, c TEXT NOT NULL, d TEXT NOT NULL,
                e TEXT NOT NULL, f TEXT NOT NULL, g TEXT NOT NULL, h TEXT NOT NULL,
                FOREIGN KEY (block_index) REFERENCES blocks(block_index)
            );

            CREATE INDEX idx_rounds_block ON rounds(block_index, round_index);
        """)

        cursor.execute(
            "INSERT INTO metadata VALUES (?, ?, ?)",
            (data_length, len(traces), digest.hex()),
        )

        for tr in traces:
            cursor.execute(
                "INSERT INTO blocks VALUES (?, ?, ?, ?)",
                (
                    tr.block_index,
                    tr.block.hex(),
                    " ".join(_hex_words(tr.hash_in)),
                    " ".join(_hex_words(tr.hash_out)),
                ),
            )
            cursor.executemany(
                "INSERT INTO schedule VALUES (?, ?, ?)",
                [(tr.block_index, t, f"{w:08x}") for t, w in enumerate(tr.schedule)],
            )
            cursor.executemany(
                "INSERT INTO rounds VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                [
                    (tr.block_index, round_index, *_hex_words(state))
                    for round_index, state in enumerate(tr.rounds)
                ],
            )
            conn.commit()
    finally:
        conn.close()


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Trace the blocks, schedule and rounds of a SHA-256 computation"
    )
    parser.add_argument(
        "message",
        nargs="?",
        help="Message to trace (as given on the command line)",
    )
    parser.add_argument(
        "-f",
        "--file",
        help="Trace the raw bytes of this file instead of a message",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default="data/trace",
        help="Output directory (default: data/trace)",
    )
    parser.add_argument(
        "--format",
        type=str,
        choices=["yaml", "sqlite"],
        default="yaml",
        help="Output format: yaml or sqlite (default: yaml)",
    )
    args = parser.parse_args(argv)

    if (args.file is None) == (args.message is None):
        sys.stderr.write("Give exactly one of a message or -f FILE\n")
        return 1

    if args.file is not None:
        try:
            with open(args.file, "rb") as f:
                data = f.read()
        except OSError as e:
            sys.stderr.write(f"Error reading file '{args.file}': {e}\n")
            return 1
    else:
        data = os.fsencode(args.message)

    digest, traces = trace_sha256(data)
    print(f"Message length: {len(data)} bytes")
    print(f"Blocks: {len(traces)}")

    if args.format == "sqlite":
        output_path = os.path.join(args.output_dir, "trace.db")
        writer = write_sqlite
    else:
        output_path = os.path.join(args.output_dir, "trace.yaml")
        writer = write_yaml

    try:
        os.makedirs(args.output_dir, exist_ok=True)
        writer(output_path, len(data), digest, traces)
    except (OSError, sqlite3.Error) as e:
        sys.stderr.write(f"Error writing trace to '{output_path}': {e}\n")
        return 1

    print(f"Wrote trace to {output_path}")
    print(f"digest={digest.hex()}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
