"""
serialdb/db.py

Public Client API for serialdb.

Responsibilities:
- Provide a simple library interface:
    - Client.open(path)
    - client.query(sql, params) -> Future[Result]
    - client.execute(sql, params) -> Future[Result]
    - client.close()
- Own exactly one SQLite connection and one single-thread worker; every
  statement runs on that worker, in submission order (FIFO), never in parallel.
- Materialize cursors into immutable Result/Row objects before handing them
  back to the caller.

The connection is created, used and closed on the worker thread only. Callers
never touch it directly; they only enqueue work.
"""

from __future__ import annotations

import logging
import os
import sqlite3
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from contextlib import closing
from dataclasses import dataclass, field
from typing import Callable, Mapping, Sequence

from .config import Settings, get_settings
from .errors import ClientClosedError, ConnectionError, ExecutionError
from .results import Result, Row, Value

logger = logging.getLogger(__name__)

# Engine-side failures wrapped into ExecutionError. OverflowError covers Python
# ints that do not fit a 64-bit SQLite INTEGER.
ENGINE_ERRORS = (sqlite3.Error, OverflowError)

QUERY_SAVEPOINT = "serialdb_query"


def _connect(path: str, timeout: float) -> sqlite3.Connection:
    # isolation_level=None: autocommit, each statement is its own transaction.
    return sqlite3.connect(path, timeout=timeout, isolation_level=None)


def _failed(exc: Exception) -> Future[Result]:
    """Return a future that has already failed with `exc`."""
    future: Future[Result] = Future()
    future.set_exception(exc)
    return future


@dataclass(eq=False)
class Client:
    """
    Asynchronous client bound to one SQLite database file.

    Attributes:
        path: Database file path as passed to the engine.
        settings: Settings the client was opened with.

    Usage:
        with Client.open("app.db") as db:
            db.execute("CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT)").result()
            fut = db.query("SELECT * FROM users WHERE id = ?", [1])
            row = fut.result().first()

    Futures resolve on the worker thread, so done-callbacks run there as well.
    Calling close() from such a callback would wait on itself and deadlock.
    """
    path: str
    settings: Settings
    _executor: ThreadPoolExecutor = field(repr=False)
    _connection: sqlite3.Connection = field(repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)
    _closed: bool = field(default=False, init=False)

    @classmethod
    def open(cls, path: str | os.PathLike, settings: Settings | None = None) -> "Client":
        """
        Open (or create) a database file and start its worker.

        Args:
            path: Database file path. The file is created by the engine if absent.
            settings: Optional Settings; defaults to the environment-derived ones.

        Returns:
            Client instance.

        Raises:
            ConnectionError: if the engine cannot open the path.
        """
        cfg = settings or get_settings()
        db_path = os.fspath(path)
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=cfg.thread_name)
        try:
            connection = executor.submit(_connect, db_path, cfg.timeout).result()
        except (sqlite3.Error, ValueError) as exc:
            # ValueError: paths the engine refuses outright, e.g. embedded NUL.
            executor.shutdown(wait=True)
            raise ConnectionError(f"failed to open database {db_path}", exc) from exc
        except BaseException:
            executor.shutdown(wait=True)
            raise

        logger.info("opened database %s", db_path)
        return cls(path=db_path, settings=cfg, _executor=executor, _connection=connection)

    @property
    def closed(self) -> bool:
        return self._closed

    # --------------------------
    # public operations
    # --------------------------

    def query(self, sql: str, params: Sequence[Value] | None = None) -> Future[Result]:
        """
        Schedule a row-returning statement (SELECT, PRAGMA, ... RETURNING).

        Args:
            sql: SQL text; use ? for positional parameters.
            params: Values bound to the placeholders in order, or None.

        Returns:
            Future resolving to a Result whose affected_rows equals its row
            count. It fails with ExecutionError if the engine rejects the
            statement or the statement yields no result set, and with
            ClientClosedError after close().
        """
        return self._submit(self._run_query, sql, params)

    def execute(self, sql: str, params: Sequence[Value] | None = None) -> Future[Result]:
        """
        Schedule a data-modifying or DDL statement.

        Args:
            sql: SQL text; use ? for positional parameters.
            params: Values bound to the placeholders in order, or None.

        Returns:
            Future resolving to a Result with no rows and the engine-reported
            number of modified rows (0 for DDL). Fails like query().
        """
        return self._submit(self._run_execute, sql, params)

    def close(self) -> None:
        """
        Close the connection once all previously queued work has run, then
        stop the worker.

        Calling close() again is a no-op.

        Raises:
            ConnectionError: if the engine fails to close the connection.
        """
        with self._lock:
            if self._closed:
                logger.debug("database %s already closed", self.path)
                return
            self._closed = True
            done = self._executor.submit(self._connection.close)

        try:
            done.result()
        except sqlite3.Error as exc:
            raise ConnectionError(f"failed to close database {self.path}", exc) from exc
        finally:
            self._executor.shutdown(wait=True)

        logger.info("closed database %s", self.path)

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # --------------------------
    # scheduling
    # --------------------------

    def _submit(
        self,
        work: Callable[[str, tuple[Value, ...]], Result],
        sql: str,
        params: Sequence[Value] | None,
    ) -> Future[Result]:
        if params is None:
            bound: tuple[Value, ...] = ()
        elif isinstance(params, (str, bytes, Mapping)) or not isinstance(params, Sequence):
            logger.warning("rejected statement with non-sequence params %r: %s", params, sql)
            return _failed(ExecutionError(f"params must be a sequence of values, got {type(params).__name__}"))
        else:
            # Snapshot the parameters so later mutation by the caller has no effect.
            bound = tuple(params)

        with self._lock:
            if self._closed:
                logger.warning("rejected statement on closed database %s: %s", self.path, sql)
                return _failed(ClientClosedError(f"database {self.path} is closed"))

            level = logging.INFO if self.settings.echo else logging.DEBUG
            logger.log(level, "scheduling %s params=%r", sql, bound)
            return self._executor.submit(work, sql, bound)

    # --------------------------
    # worker-side execution
    # --------------------------

    def _run_query(self, sql: str, params: tuple[Value, ...]) -> Result:
        # The statement runs inside a savepoint so that one yielding no result
        # set (an INSERT sent through query()) leaves no trace when rejected.
        conn = self._connection
        try:
            conn.execute(f"SAVEPOINT {QUERY_SAVEPOINT}")
            try:
                with closing(conn.execute(sql, params)) as cursor:
                    if cursor.description is None:
                        raise ExecutionError(f"statement did not return a result set: {sql}")
                    names = [d[0] for d in cursor.description]
                    rows = [Row(dict(zip(names, values))) for values in cursor]
            except BaseException:
                conn.execute(f"ROLLBACK TO {QUERY_SAVEPOINT}")
                raise
            finally:
                conn.execute(f"RELEASE {QUERY_SAVEPOINT}")
        except ExecutionError as exc:
            logger.warning("query rejected: %s", exc)
            raise
        except ENGINE_ERRORS as exc:
            logger.warning("query failed: %s (%s)", exc, sql)
            raise ExecutionError("failed to execute query", exc) from exc

        return Result(rows=tuple(rows), affected_rows=len(rows))

    def _run_execute(self, sql: str, params: tuple[Value, ...]) -> Result:
        try:
            with closing(self._connection.execute(sql, params)) as cursor:
                # sqlite3 reports -1 for statements that are not INSERT/UPDATE/DELETE.
                affected = max(cursor.rowcount, 0)
        except ENGINE_ERRORS as exc:
            logger.warning("statement failed: %s (%s)", exc, sql)
            raise ExecutionError("failed to execute statement", exc) from exc

        return Result(rows=(), affected_rows=affected)
