"""
SQLite version store
Reference implementation of VersionStoreProtocol, keeping one row per
(scope, key) in a schema_versions table
"""

import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, Tuple, Union

from schema_keeper.core.errors import StoreUnavailableError
from schema_keeper.core.logger import get_logger
from schema_keeper.models.table import StoreScope

logger = get_logger(__name__)


class SQLiteVersionStore:
    """Persisted table versions, installation-wide or per tenant"""

    SCHEMA_VERSIONS_TABLE = """
        CREATE TABLE IF NOT EXISTS schema_versions (
            scope TEXT NOT NULL,
            option_key TEXT NOT NULL,
            version INTEGER NOT NULL,
            updated_at TEXT NOT NULL,
            PRIMARY KEY (scope, option_key)
        )
    """

    def __init__(self, db_path: Union[str, Path]):
        self.db_path = Path(db_path)
        self._table_ready = False

    @contextmanager
    def _get_conn(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = sqlite3.connect(str(self.db_path))
        except sqlite3.Error as e:
            raise StoreUnavailableError(f"Cannot open version store {self.db_path}: {e}") from e

        conn.row_factory = sqlite3.Row
        try:
            if not self._table_ready:
                conn.execute(self.SCHEMA_VERSIONS_TABLE)
                conn.commit()
                self._table_ready = True
            yield conn
        except sqlite3.Error as e:
            raise StoreUnavailableError(f"Version store error: {e}") from e
        finally:
            conn.close()

    def get_version(self, scope: StoreScope, key: str) -> Tuple[int, bool]:
        with self._get_conn() as conn:
            cursor = conn.execute(
                "SELECT version FROM schema_versions WHERE scope = ? AND option_key = ?",
                (scope.key, key),
            )
            row = cursor.fetchone()

        if row is None:
            return 0, False
        return int(row["version"]), True

    def set_version(self, scope: StoreScope, key: str, version: int) -> None:
        with self._get_conn() as conn:
            conn.execute(
                """
                INSERT INTO schema_versions (scope, option_key, version, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT (scope, option_key)
                DO UPDATE SET version = excluded.version, updated_at = excluded.updated_at
                """,
                (scope.key, key, int(version), datetime.now().isoformat()),
            )
            conn.commit()

        logger.debug(f"✓ Stored {key}={version} in {scope.key}")
