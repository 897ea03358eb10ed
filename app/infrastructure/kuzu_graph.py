"""
Kuzu Graph Database

Embedded graph storage for users, grams and comments. One ``KuzuGraphDB`` is
bound to each Flask application (``app.extensions['kuzu']``); every query runs
on a short-lived connection opened under a reentrant lock.
"""

import os
import threading
import logging
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Dict, Any, List, Generator

import kuzu  # type: ignore

logger = logging.getLogger(__name__)

_SLOW_QUERY_MS = int(os.getenv('KUZU_SLOW_QUERY_MS', '150'))

NODE_TABLES = [
    """
    CREATE NODE TABLE User(
        id STRING,
        username STRING,
        email STRING,
        password_hash STRING,
        active BOOLEAN,
        created_at TIMESTAMP,
        PRIMARY KEY(id)
    )
    """,
    """
    CREATE NODE TABLE Gram(
        id STRING,
        message STRING,
        created_at TIMESTAMP,
        updated_at TIMESTAMP,
        PRIMARY KEY(id)
    )
    """,
    """
    CREATE NODE TABLE Comment(
        id STRING,
        message STRING,
        position INT64,
        created_at TIMESTAMP,
        PRIMARY KEY(id)
    )
    """,
]

REL_TABLES = [
    "CREATE REL TABLE POSTED(FROM User TO Gram)",
    "CREATE REL TABLE WROTE(FROM User TO Comment)",
    "CREATE REL TABLE ON_GRAM(FROM Comment TO Gram)",
]


def to_utc(value: Any) -> Any:
    """Kuzu hands TIMESTAMP columns back as naive UTC datetimes."""
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _run_query(conn: kuzu.Connection, cypher_query: str, params: Optional[Dict[str, Any]],
               operation: str) -> List[Dict[str, Any]]:
    t0 = time.time()
    result = conn.execute(cypher_query, params or {})
    # Handle both single QueryResult and list[QueryResult]
    if isinstance(result, list):
        result = result[-1] if result else None

    rows: List[Dict[str, Any]] = []
    if result is not None:
        columns = result.get_column_names()
        while result.has_next():
            values = result.get_next()
            rows.append({col: to_utc(val) for col, val in zip(columns, values)})

    elapsed_ms = (time.time() - t0) * 1000
    if elapsed_ms >= _SLOW_QUERY_MS:
        logger.warning(f"Slow Kuzu query ({elapsed_ms:.0f}ms) op='{operation}'")
    return rows


class KuzuTransaction:
    """Queries issued inside ``KuzuGraphDB.transaction``."""

    def __init__(self, connection: kuzu.Connection, operation: str):
        self._connection = connection
        self.operation = operation

    def query(self, cypher_query: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        return _run_query(self._connection, cypher_query, params, self.operation)

    def query_value(self, cypher_query: str, params: Optional[Dict[str, Any]] = None,
                    default: Any = None) -> Any:
        rows = self.query(cypher_query, params)
        if not rows:
            return default
        return next(iter(rows[0].values()), default)


class KuzuGraphDB:
    """Thread-safe wrapper around a single Kuzu database file."""

    def __init__(self, database_path: Optional[str] = None):
        if database_path:
            self.database_path = database_path
        else:
            kuzu_dir = os.getenv('KUZU_DB_PATH', 'data/kuzu')
            self.database_path = os.path.join(kuzu_dir, 'grammable.db')
        self._lock = threading.RLock()
        self._database: Optional[kuzu.Database] = None
        self._is_initialized = False

    def connect(self) -> kuzu.Database:
        """Open the database and initialize the schema on first use."""
        with self._lock:
            if self._database is None:
                try:
                    Path(self.database_path).parent.mkdir(parents=True, exist_ok=True)
                    self._database = kuzu.Database(self.database_path)
                    logger.info("Database opened, initializing schema...")
                    self._initialize_schema()
                    logger.info(f"Kuzu connected at {self.database_path}")
                except Exception as e:
                    logger.error(f"Failed to connect to Kuzu at {self.database_path}: {e}")
                    self._database = None
                    raise
            return self._database

    def _initialize_schema(self):
        """Create node and relationship tables, skipping ones that already exist."""
        if self._is_initialized:
            logger.debug("Already initialized, skipping")
            return

        connection = kuzu.Connection(self._database)
        try:
            for query in NODE_TABLES + REL_TABLES:
                try:
                    connection.execute(query)
                except Exception as e:
                    if "already exists" in str(e).lower():
                        logger.debug(f"Schema object already exists: {e}")
                    else:
                        raise
        finally:
            connection.close()

        self._is_initialized = True
        logger.info("Schema initialization complete")

    @contextmanager
    def get_connection(self, operation: str = "unknown") -> Generator[kuzu.Connection, None, None]:
        """
        Yield a connection for one operation and close it afterwards.

        Example:
            with db.get_connection(operation="gram_create") as conn:
                conn.execute("MATCH (g:Gram) RETURN g.id")
        """
        with self._lock:
            database = self.connect()
            connection = kuzu.Connection(database)
            try:
                yield connection
            except Exception as e:
                logger.error(f"Error during Kuzu operation '{operation}': {e}")
                raise
            finally:
                connection.close()

    def query(self, cypher_query: str, params: Optional[Dict[str, Any]] = None,
              operation: str = "query") -> List[Dict[str, Any]]:
        """Execute a Cypher query and return rows keyed by column name."""
        with self.get_connection(operation=operation) as conn:
            return _run_query(conn, cypher_query, params, operation)

    @contextmanager
    def transaction(self, operation: str = "transaction") -> Generator["KuzuTransaction", None, None]:
        """
        Run several statements atomically on one connection.

        Commits when the block exits normally and rolls back if it raises.

        Example:
            with db.transaction(operation="gram_delete") as tx:
                tx.query("MATCH (g:Gram {id: $id}) DETACH DELETE g", {'id': gram_id})
        """
        with self.get_connection(operation=operation) as conn:
            conn.execute("BEGIN TRANSACTION")
            try:
                yield KuzuTransaction(conn, operation)
            except Exception:
                conn.execute("ROLLBACK")
                logger.warning(f"Rolled back Kuzu transaction '{operation}'")
                raise
            conn.execute("COMMIT")

    def execute(self, cypher_query: str, params: Optional[Dict[str, Any]] = None,
                operation: str = "execute") -> None:
        """Execute a write query, discarding any result rows."""
        self.query(cypher_query, params, operation=operation)

    def query_value(self, cypher_query: str, params: Optional[Dict[str, Any]] = None,
                    operation: str = "query_value", default: Any = None) -> Any:
        """First column of the first row, or ``default``."""
        rows = self.query(cypher_query, params, operation=operation)
        if not rows:
            return default
        return next(iter(rows[0].values()), default)

    def count_nodes(self, node_type: str) -> int:
        return int(self.query_value(f"MATCH (n:{node_type}) RETURN COUNT(n) AS count",
                                    operation=f"count_{node_type.lower()}", default=0) or 0)

    def disconnect(self):
        """Close the Kuzu database."""
        with self._lock:
            if self._database is not None:
                self._database.close()
                self._database = None
                self._is_initialized = False
                logger.info("Kuzu database closed")
            else:
                logger.info("Database already closed")


def get_kuzu_database() -> KuzuGraphDB:
    """Return the database bound to the current Flask application."""
    from flask import current_app
    return current_app.extensions['kuzu']


def init_kuzu(app) -> KuzuGraphDB:
    """Create the application's database handle from ``KUZU_DB_PATH``."""
    db = KuzuGraphDB(app.config.get('KUZU_DB_PATH'))
    app.extensions['kuzu'] = db
    return db
