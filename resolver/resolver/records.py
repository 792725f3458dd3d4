"""SQLite-backed record store for the example resolver.

Two tables:
  - ``addr_records``: namehash → address
  - ``text_records``: (namehash, key) → value

Namehashes are stored as ``0x``-prefixed lowercase hex.  Handlers run in
worker threads, so the single connection is shared under a lock.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from pathlib import Path

from eth_utils import is_address, to_checksum_address

log = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS addr_records (
    namehash    TEXT PRIMARY KEY,
    address     TEXT NOT NULL,
    owner       TEXT
);

CREATE TABLE IF NOT EXISTS text_records (
    namehash    TEXT NOT NULL,
    key         TEXT NOT NULL,
    value       TEXT NOT NULL,
    PRIMARY KEY (namehash, key)
);
"""

# (namehash, address) pairs and (namehash, key, value) triples used by --seed
EXAMPLE_ADDRESSES = [
    (bytes(31) + b"\x01", "0x1111111111111111111111111111111111111111"),
    (bytes(31) + b"\x02", "0x2222222222222222222222222222222222222222"),
]
EXAMPLE_TEXTS = [
    (bytes(31) + b"\x01", "email", "user@example.com"),
    (bytes(31) + b"\x01", "url", "https://example.com"),
]


def _node_key(namehash: bytes) -> str:
    if len(namehash) != 32:
        raise ValueError(f"namehash must be 32 bytes, got {len(namehash)}")
    return "0x" + bytes(namehash).hex()


class RecordStore:
    """Address and text records keyed by ENS namehash.

    Parameters
    ----------
    db_path:
        Path to the SQLite database file.  Use ``":memory:"`` for tests.
    """

    def __init__(self, db_path: str = ":memory:") -> None:
        self._db_path = db_path
        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(db_path, check_same_thread=False)
        self._conn.executescript(_SCHEMA)
        self._conn.commit()
        log.info("record store opened: %s", db_path)

    def close(self) -> None:
        self._conn.close()

    # ── Address records ──────────────────────────

    def set_addr(self, namehash: bytes, address: str, owner: str | None = None) -> None:
        if not is_address(address):
            raise ValueError(f"not a valid address: {address!r}")
        with self._lock:
            self._conn.execute(
                """INSERT INTO addr_records (namehash, address, owner) VALUES (?, ?, ?)
                   ON CONFLICT(namehash) DO UPDATE SET address = excluded.address,
                                                       owner = excluded.owner""",
                (_node_key(namehash), to_checksum_address(address), owner),
            )
            self._conn.commit()

    def addr(self, namehash: bytes) -> str | None:
        """Return the checksum address for *namehash*, or ``None``."""
        with self._lock:
            row = self._conn.execute(
                "SELECT address FROM addr_records WHERE namehash = ?",
                (_node_key(namehash),),
            ).fetchone()
        return None if row is None else row[0]

    # ── Text records ─────────────────────────────

    def set_text(self, namehash: bytes, key: str, value: str) -> None:
        with self._lock:
            self._conn.execute(
                """INSERT INTO text_records (namehash, key, value) VALUES (?, ?, ?)
                   ON CONFLICT(namehash, key) DO UPDATE SET value = excluded.value""",
                (_node_key(namehash), key, value),
            )
            self._conn.commit()

    def text(self, namehash: bytes, key: str) -> str | None:
        with self._lock:
            row = self._conn.execute(
                "SELECT value FROM text_records WHERE namehash = ? AND key = ?",
                (_node_key(namehash), key),
            ).fetchone()
        return None if row is None else row[0]

    # ── Seeding ──────────────────────────────────

    def seed_examples(self) -> None:
        """Insert the example records, leaving existing ones untouched."""
        with self._lock:
            self._conn.executemany(
                "INSERT OR IGNORE INTO addr_records (namehash, address) VALUES (?, ?)",
                [(_node_key(n), to_checksum_address(a)) for n, a in EXAMPLE_ADDRESSES],
            )
            self._conn.executemany(
                "INSERT OR IGNORE INTO text_records (namehash, key, value) VALUES (?, ?, ?)",
                [(_node_key(n), k, v) for n, k, v in EXAMPLE_TEXTS],
            )
            self._conn.commit()
        log.info("seeded %d address and %d text records", len(EXAMPLE_ADDRESSES), len(EXAMPLE_TEXTS))
