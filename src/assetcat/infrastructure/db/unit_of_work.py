"""Explicit transaction handle threaded through catalog writes."""
from __future__ import annotations

import sqlite3
import uuid
from dataclasses import dataclass, field


@dataclass(eq=False)
class UnitOfWork:
    """A single open transaction on one pooled connection.

    Created by :meth:`ConnectionPool.unit_of_work`.  Code that wants to take
    part in a caller's transaction receives the handle explicitly and passes
    it to the repositories; nothing inspects global connection state to find
    out whether a transaction is already open.
    """

    connection: sqlite3.Connection
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    active: bool = True

    def execute(self, sql: str, params=()) -> sqlite3.Cursor:
        return self.connection.execute(sql, params)
