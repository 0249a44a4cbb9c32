"""
SQLite execution engine
Reference implementation of ExecutionEngineProtocol on top of sqlite3
"""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Union

from schema_keeper.core.logger import get_logger

logger = get_logger(__name__)


class SQLiteEngine:
    """Runs DDL against a SQLite database file"""

    # SQLite has no table-level character set or collation clause
    charset: Optional[str] = None
    collate: Optional[str] = None

    def __init__(self, db_path: Union[str, Path]):
        self.db_path = Path(db_path)

    @contextmanager
    def _get_conn(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    @staticmethod
    def esc_like(value: str) -> str:
        """Escape LIKE wildcards so a table name only matches itself"""
        return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")

    def table_exists(self, qualified_name: str) -> bool:
        with self._get_conn() as conn:
            cursor = conn.execute(
                """
                SELECT name FROM sqlite_master
                WHERE type = 'table' AND name LIKE ? ESCAPE '\\'
                """,
                (self.esc_like(qualified_name),),
            )
            return cursor.fetchone() is not None

    def execute_ddl(self, statement: str) -> int:
        """
        Execute a CREATE/ALTER statement

        Returns:
            1 when the statement changed the schema, 0 when the object
            already matched (table already exists, duplicate column)
        """
        with self._get_conn() as conn:
            try:
                conn.execute(statement)
                conn.commit()
                return 1
            except sqlite3.OperationalError as e:
                error_msg = str(e).lower()
                if "already exists" in error_msg or "duplicate column" in error_msg:
                    logger.debug(f"DDL already applied, skipping: {e}")
                    return 0
                raise

    def column_exists(self, table: str, column: str) -> bool:
        with self._get_conn() as conn:
            cursor = conn.execute(f'PRAGMA table_info("{table}")')
            return any(row["name"] == column for row in cursor.fetchall())
