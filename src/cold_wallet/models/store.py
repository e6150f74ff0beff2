"""
Vault Store - Transactional key/value persistence on SQLite.

One table ("bucket") holds every vault record as (key BLOB, value BLOB),
ordered by key so prefix scans walk records in byte order.

Transaction discipline:
- One read-write transaction at a time (writer lock + BEGIN IMMEDIATE)
- Read-only transactions each use their own connection; in WAL mode they
  see the last committed snapshot and never a half-written batch
- Every transaction scope commits on success and rolls back on any error
"""

import logging
import re
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, Optional

from cold_wallet.utils import set_secure_permissions
from cold_wallet.wallet.errors import StorageError
from .records import VaultRecord

logger = logging.getLogger(__name__)

MAIN_DATA_BUCKET = "main_data"
BUSY_TIMEOUT_SECONDS = 5.0
# Main database file, then its WAL mode sidecars
DB_FILE_SUFFIXES = ("", "-wal", "-shm")

_BUCKET_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@contextmanager
def _storage_errors(action: str) -> Iterator[None]:
    """Translate engine failures into StorageError."""
    try:
        yield
    except sqlite3.Error as e:
        raise StorageError(f"{action} failed: {e}") from e


def _rollback(conn: sqlite3.Connection) -> None:
    if not conn.in_transaction:
        return
    try:
        conn.execute("ROLLBACK")
    except sqlite3.Error as e:
        # The first error is still propagating; record this one
        logger.error(f"Rollback failed: {e}")


class VaultTransaction:
    """
    Operations bound to one open transaction.

    Obtained from VaultStore.read() or VaultStore.transaction(); unusable
    once the enclosing scope exits.
    """

    def __init__(self, conn: sqlite3.Connection, bucket: str, writable: bool):
        self._conn = conn
        self._bucket = bucket
        self._writable = writable
        self._closed = False

    @property
    def writable(self) -> bool:
        return self._writable

    def close(self) -> None:
        self._closed = True

    def _check(self, write: bool = False) -> None:
        if self._closed:
            raise StorageError("transaction is closed")
        if write and not self._writable:
            raise StorageError("cannot write in a read-only transaction")

    # Reads

    def get(self, key: bytes) -> Optional[bytes]:
        """Value stored under key, or None."""
        self._check()
        with _storage_errors("read"):
            row = self._conn.execute(
                f"SELECT value FROM {self._bucket} WHERE key = ?", (key,)
            ).fetchone()
        return bytes(row[0]) if row is not None else None

    def scan(self, prefix: bytes = b"") -> list[VaultRecord]:
        """All records whose key starts with prefix, in key order."""
        self._check()
        records = []
        with _storage_errors("scan"):
            cursor = self._conn.execute(
                f"SELECT key, value FROM {self._bucket} WHERE key >= ? ORDER BY key",
                (prefix,)
            )
            # Seek to the prefix, stop at the first key past it
            for key, value in cursor:
                key = bytes(key)
                if not key.startswith(prefix):
                    break
                records.append(VaultRecord(key=key, value=bytes(value)))
        return records

    def count(self) -> int:
        self._check()
        with _storage_errors("count"):
            return self._conn.execute(
                f"SELECT COUNT(*) FROM {self._bucket}"
            ).fetchone()[0]

    # Writes

    def put(self, key: bytes, value: bytes) -> None:
        self._check(write=True)
        with _storage_errors("write"):
            self._conn.execute(
                f"INSERT OR REPLACE INTO {self._bucket} (key, value) VALUES (?, ?)",
                (key, value)
            )

    def put_all(self, records: Iterable[VaultRecord]) -> int:
        """Write every record; returns the number written."""
        written = 0
        for record in records:
            self.put(record.key, record.value)
            written += 1
        return written

    def delete(self, key: bytes) -> None:
        self._check(write=True)
        with _storage_errors("delete"):
            self._conn.execute(f"DELETE FROM {self._bucket} WHERE key = ?", (key,))

    def truncate(self) -> None:
        """Drop the bucket and recreate it empty. Irreversible once committed."""
        self._check(write=True)
        with _storage_errors("truncate"):
            self._conn.execute(f"DROP TABLE IF EXISTS {self._bucket}")
            self._conn.execute(_create_bucket_sql(self._bucket))


def _create_bucket_sql(bucket: str) -> str:
    return (
        f"CREATE TABLE IF NOT EXISTS {bucket} ("
        "key BLOB PRIMARY KEY NOT NULL, "
        "value BLOB NOT NULL"
        ") WITHOUT ROWID"
    )


class VaultStore:
    """
    Atomic key/value store for vault records.

    Usage:
        with VaultStore(path) as store:
            with store.transaction() as txn:
                txn.put_all(records)      # all or nothing
            value = store.get(b"mk")
    """

    def __init__(self, db_path: str | Path, bucket: str = MAIN_DATA_BUCKET):
        if not _BUCKET_NAME_PATTERN.match(bucket):
            raise ValueError(f"Invalid bucket name: {bucket!r}")
        self.db_path = Path(db_path)
        self.bucket = bucket
        self._conn: Optional[sqlite3.Connection] = None
        self._write_lock = threading.Lock()

    # ============================================
    # Connection Lifecycle
    # ============================================

    def _connect(self) -> sqlite3.Connection:
        with _storage_errors(f"open {self.db_path}"):
            return sqlite3.connect(
                str(self.db_path),
                timeout=BUSY_TIMEOUT_SECONDS,
                isolation_level=None,  # Explicit BEGIN/COMMIT only
                check_same_thread=False
            )

    def open(self) -> "VaultStore":
        """Open the database and create the bucket if needed."""
        if self._conn is not None:
            return self

        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"cannot create {self.db_path.parent}: {e}") from e

        conn = self._connect()
        try:
            with _storage_errors("initialize storage"):
                conn.execute("PRAGMA journal_mode=WAL")
                conn.execute("PRAGMA synchronous=FULL")
                conn.execute(_create_bucket_sql(self.bucket))
        except StorageError:
            conn.close()
            raise

        self._conn = conn
        self._secure_files()
        logger.debug(f"Opened vault store: {self.db_path}")
        return self

    def _secure_files(self) -> None:
        """Owner-only access for the database and its WAL sidecar files."""
        for suffix in DB_FILE_SUFFIXES:
            set_secure_permissions(self.db_path.with_name(self.db_path.name + suffix))

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            logger.debug(f"Closed vault store: {self.db_path}")

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def __enter__(self) -> "VaultStore":
        return self.open()

    def __exit__(self, *args) -> None:
        self.close()

    def _require_open(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StorageError("vault store is not open")
        return self._conn

    # ============================================
    # Transaction Scopes
    # ============================================

    @contextmanager
    def read(self) -> Iterator[VaultTransaction]:
        """Read-only transaction over a consistent committed snapshot."""
        self._require_open()
        conn = self._connect()
        txn = VaultTransaction(conn, self.bucket, writable=False)
        try:
            with _storage_errors("begin read transaction"):
                conn.execute("BEGIN")
            yield txn
        finally:
            txn.close()
            _rollback(conn)
            conn.close()

    @contextmanager
    def transaction(self) -> Iterator[VaultTransaction]:
        """
        Read-write transaction.

        Commits when the block exits normally; rolls back and re-raises
        on any exception, leaving prior state untouched.
        """
        conn = self._require_open()
        with self._write_lock:
            with _storage_errors("begin write transaction"):
                conn.execute("BEGIN IMMEDIATE")
            txn = VaultTransaction(conn, self.bucket, writable=True)
            try:
                yield txn
            except BaseException:
                _rollback(conn)
                raise
            else:
                try:
                    conn.execute("COMMIT")
                except sqlite3.Error as e:
                    _rollback(conn)
                    raise StorageError(f"commit failed: {e}") from e
                self._secure_files()
            finally:
                txn.close()

    # ============================================
    # Single-Operation Helpers
    # ============================================

    def get(self, key: bytes) -> Optional[bytes]:
        with self.read() as txn:
            return txn.get(key)

    def scan(self, prefix: bytes = b"") -> list[VaultRecord]:
        with self.read() as txn:
            return txn.scan(prefix)

    def count(self) -> int:
        with self.read() as txn:
            return txn.count()

    def snapshot(self) -> dict[bytes, bytes]:
        """Every record in the store, keyed by record key."""
        return {record.key: record.value for record in self.scan()}

    def put(self, key: bytes, value: bytes) -> None:
        with self.transaction() as txn:
            txn.put(key, value)

    def put_all(self, records: Iterable[VaultRecord]) -> int:
        with self.transaction() as txn:
            return txn.put_all(records)

    def truncate(self) -> None:
        with self.transaction() as txn:
            txn.truncate()
        logger.info(f"Truncated bucket {self.bucket}")
