import sqlite3
import queue
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from assetcat.errors import ConnectionPoolExhausted
from .unit_of_work import UnitOfWork


class ConnectionPool:
    def __init__(self, db_path: Path, pool_size: int = 5, timeout: float = 30.0):
        self._db_path = db_path
        self._pool_size = pool_size
        self._timeout = timeout
        self._pool: queue.Queue = queue.Queue(maxsize=pool_size)
        self._created = 0
        self._lock = threading.Lock()

    @property
    def db_path(self) -> Path:
        return self._db_path

    def _create_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        # Folder and asset rows cascade from their parents.
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def _acquire(self) -> sqlite3.Connection:
        # Try to get an existing connection without blocking
        try:
            return self._pool.get_nowait()
        except queue.Empty:
            pass

        # Lazily create a new connection if under the limit
        with self._lock:
            if self._created < self._pool_size:
                self._created += 1
                return self._create_connection()

        # All connections created and in use; wait with timeout
        try:
            return self._pool.get(timeout=self._timeout)
        except queue.Empty:
            raise ConnectionPoolExhausted(
                f"No connections available within {self._timeout}s "
                f"(pool_size={self._pool_size})"
            )

    def _release(self, conn: sqlite3.Connection):
        try:
            self._pool.put_nowait(conn)
        except queue.Full:
            conn.close()

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        conn = self._acquire()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            self._release(conn)

    @contextmanager
    def unit_of_work(self, outer: Optional[UnitOfWork] = None) -> Iterator[UnitOfWork]:
        """Open a transactional boundary, or join *outer* if one is given.

        Joining is flat: the nested block gets the outer unit of work itself,
        without a savepoint.  Errors raised inside it propagate but only the
        outermost boundary commits or rolls back.
        """
        if outer is not None:
            if not outer.active:
                raise RuntimeError("Cannot join a unit of work that has already finished")
            yield outer
            return

        with self.connection() as conn:
            uow = UnitOfWork(conn)
            try:
                yield uow
            finally:
                uow.active = False

    @contextmanager
    def connection_for(self, uow: Optional[UnitOfWork] = None) -> Iterator[sqlite3.Connection]:
        """Yield the connection of *uow*, or a pooled one that commits on exit."""
        if uow is not None:
            yield uow.connection
            return
        with self.connection() as conn:
            yield conn

    def close_all(self):
        while not self._pool.empty():
            try:
                conn = self._pool.get_nowait()
                conn.close()
            except queue.Empty:
                break
