"""
SQLite-backed directory store for zipzap.

This module owns the single ``zipzap`` table mapping a normalized path to
its rank and last access time. Every mutation runs in one transaction, so
a visit and the aging pass it may trigger either both commit or neither
does.
"""

import sqlite3
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from ..errors import NotFoundError, StorageError
from ..models.config import AgingConfig, CaseNormalization, RankingConfig
from ..models.entry import Entry
from .matcher import LIKE_ESCAPE, build_pattern, normalize_path
from .scorer import needs_aging, score_params, score_sql


logger = logging.getLogger(__name__)


SCHEMA = """
CREATE TABLE IF NOT EXISTS zipzap (
    path  TEXT PRIMARY KEY,
    rank  REAL NOT NULL,
    time  INTEGER NOT NULL
)
"""

_UPSERT_VISIT = """
INSERT INTO zipzap (path, rank, time) VALUES (:path, :increment, :now)
ON CONFLICT(path)
DO UPDATE SET rank = rank + :increment, time = :now
"""

_UPSERT_IF_NEWER = """
INSERT INTO zipzap (path, rank, time) VALUES (:path, :rank, :time)
ON CONFLICT(path)
DO UPDATE SET
    rank = excluded.rank,
    time = excluded.time
WHERE excluded.time > zipzap.time
"""


class Store:
    """
    Persistent frecency index of visited directories.

    The store is opened lazily on first use and can be used as a context
    manager to close the connection afterwards. It applies the configured
    case policy to every path it writes and every query it runs.
    """

    def __init__(
        self,
        db_path: Union[str, Path],
        ranking: Optional[RankingConfig] = None,
        aging: Optional[AgingConfig] = None,
        timeout_seconds: float = 5.0,
    ):
        """
        Initialize the store.

        Args:
            db_path: Location of the SQLite database file
            ranking: Frecency curve constants and case policy
            aging: Aging threshold and factor
            timeout_seconds: How long to wait on a database locked by another process
        """
        self.db_path = Path(db_path)
        self.ranking = ranking or RankingConfig()
        self.aging = aging or AgingConfig()
        self.timeout_seconds = timeout_seconds
        self._conn: Optional[sqlite3.Connection] = None
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    def case_policy(self) -> CaseNormalization:
        return self.ranking.case_normalization

    def open(self) -> 'Store':
        """
        Open the database, creating its directory and table if needed.

        Raises:
            StorageError: If the database cannot be created or opened
        """
        if self._conn is not None:
            return self

        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"could not create data directory '{self.db_path.parent}': {e}", self.db_path) from e

        try:
            conn = sqlite3.connect(str(self.db_path), timeout=self.timeout_seconds)
        except sqlite3.Error as e:
            raise StorageError(f"failed to open / create database at '{self.db_path}': {e}", self.db_path) from e

        try:
            # LIKE is ASCII case-insensitive by default
            if self.case_policy is CaseNormalization.PRESERVE:
                conn.execute("PRAGMA case_sensitive_like = ON")
            conn.execute(SCHEMA)
            conn.commit()
        except sqlite3.Error as e:
            conn.close()
            raise StorageError(f"failed to initialize database at '{self.db_path}': {e}", self.db_path) from e

        self._conn = conn
        self.logger.info(f"Opened database at {self.db_path}")
        return self

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> 'Store':
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _get_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self.open()
        return self._conn

    @contextmanager
    def transaction(self, operation: str = "transaction") -> Iterator[sqlite3.Connection]:
        """
        Run a block of statements atomically.

        Commits when the block succeeds and rolls back on any exception.
        SQLite errors are re-raised as StorageError naming the operation.
        """
        conn = self._get_connection()
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StorageError(f"{operation} failed on '{self.db_path}': {e}", self.db_path) from e
        except Exception:
            conn.rollback()
            raise

    def path_to_storage(self) -> Path:
        """Get the location of the database file."""
        return self.db_path

    def record_visit(self, path: str, now: int) -> None:
        """
        Record a visit to a directory.

        Creates the entry with the visit increment as its rank, or adds the
        increment to an existing rank. The new time is stored either way.
        If the summed rank of all entries then reaches the aging threshold,
        every rank is multiplied by the aging factor in the same transaction.

        Args:
            path: Canonical absolute path of the directory
            now: Unix timestamp of the visit
        """
        key = normalize_path(path, self.case_policy)
        with self.transaction("record visit") as conn:
            conn.execute(_UPSERT_VISIT, {'path': key, 'increment': self.ranking.increment, 'now': now})
            total = self._total_rank(conn)
            if needs_aging(total, self.aging.threshold):
                conn.execute("UPDATE zipzap SET rank = rank * ?", (self.aging.factor,))
                self.logger.info(
                    f"Total rank {total:.3f} reached {self.aging.threshold}; aged all ranks by {self.aging.factor}"
                )
        self.logger.debug(f"Recorded visit to {key} at {now}")

    def find_best(self, query_tokens: Sequence[str], now: int) -> str:
        """
        Find the best match for a query by frecency.

        Args:
            query_tokens: Ordered substrings the path must contain
            now: Unix timestamp to score at

        Returns:
            The stored path with the highest score; ties go to the smallest path

        Raises:
            NotFoundError: If there are no tokens or no entry matches
        """
        pattern = build_pattern(query_tokens, self.case_policy)
        params = score_params(now, self.ranking)
        params['pattern'] = pattern
        query = (
            f"SELECT path FROM zipzap WHERE path LIKE :pattern ESCAPE '{LIKE_ESCAPE}' "
            f"ORDER BY {score_sql()} DESC, path ASC LIMIT 1"
        )
        with self.transaction("find") as conn:
            row = conn.execute(query, params).fetchone()

        if row is None:
            self.logger.debug(f"No match for pattern {pattern}")
            raise NotFoundError(f"no match for '{' '.join(query_tokens)}'")
        return row[0]

    def import_entries(self, entries: Iterable[Entry], clear: bool = False) -> Tuple[int, int]:
        """
        Merge entries into the store in a single transaction.

        Without ``clear``, an entry overwrites an existing row only if its
        time is strictly newer; otherwise the row is left untouched. With
        ``clear``, all rows are deleted first.

        Args:
            entries: Rows to merge
            clear: Whether to delete all existing rows first

        Returns:
            Tuple of (applied, skipped) counts
        """
        applied = 0
        skipped = 0
        with self.transaction("import") as conn:
            if clear:
                deleted = conn.execute("DELETE FROM zipzap").rowcount
                self.logger.info(f"Cleared {deleted} existing rows before import")
            for entry in entries:
                cursor = conn.execute(_UPSERT_IF_NEWER, {
                    'path': normalize_path(entry.path, self.case_policy),
                    'rank': entry.rank,
                    'time': entry.last_access,
                })
                if cursor.rowcount > 0:
                    applied += 1
                else:
                    skipped += 1
        return applied, skipped

    def get_entry(self, path: str) -> Optional[Entry]:
        """Get the entry stored for a path, if any."""
        key = normalize_path(path, self.case_policy)
        with self.transaction("get entry") as conn:
            row = conn.execute("SELECT path, rank, time FROM zipzap WHERE path = ?", (key,)).fetchone()
        return self._row_to_entry(row) if row else None

    def entries(self) -> List[Entry]:
        """Get all entries ordered by path."""
        with self.transaction("list entries") as conn:
            rows = conn.execute("SELECT path, rank, time FROM zipzap ORDER BY path").fetchall()
        return [self._row_to_entry(row) for row in rows]

    def total_rank(self) -> float:
        """Get the summed rank of all entries."""
        with self.transaction("total rank") as conn:
            return self._total_rank(conn)

    def _total_rank(self, conn: sqlite3.Connection) -> float:
        return conn.execute("SELECT COALESCE(SUM(rank), 0.0) FROM zipzap").fetchone()[0]

    @staticmethod
    def _row_to_entry(row: Tuple[str, float, int]) -> Entry:
        return Entry(path=row[0], rank=row[1], last_access=row[2])
