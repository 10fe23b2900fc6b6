import logging
import sqlite3
from datetime import datetime
from typing import Optional

from assetcat.application.interfaces import IElementService
from assetcat.config import ASSET_ELEMENT_TYPE
from assetcat.domain.models import Asset, Element
from assetcat.errors import DatabaseError
from assetcat.infrastructure.db.pool import ConnectionPool
from assetcat.infrastructure.db.unit_of_work import UnitOfWork

_logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 255


class SQLiteElementStore(IElementService):
    """Element identities and titles kept in the catalog database.

    An asset's id is its element id; deleting the element removes the asset
    row through the ``ON DELETE CASCADE`` foreign key.
    """

    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    def save_element(self, asset: Asset, validate: bool = True, uow: Optional[UnitOfWork] = None) -> bool:
        if validate and asset.title is not None and len(asset.title) > MAX_TITLE_LENGTH:
            asset.add_errors({"title": [f"Title should contain at most {MAX_TITLE_LENGTH} characters."]})
            return False

        now = datetime.now().isoformat()
        try:
            with self._pool.connection_for(uow) as conn:
                if asset.id is None:
                    cursor = conn.execute(
                        "INSERT INTO elements (type, title, date_created, date_updated) VALUES (?, ?, ?, ?)",
                        (ASSET_ELEMENT_TYPE, asset.title, now, now),
                    )
                    asset.id = cursor.lastrowid
                else:
                    # An asset loaded without its content keeps the stored title.
                    cursor = conn.execute(
                        "UPDATE elements SET title = COALESCE(?, title), date_updated = ? WHERE id = ?",
                        (asset.title, now, asset.id),
                    )
                    if cursor.rowcount == 0:
                        _logger.warning("[ELEMENT-SAVE] no element row for id=%s", asset.id)
                        return False
        except sqlite3.Error as exc:
            _logger.error("[ELEMENT-SAVE] failed for %r: %s", asset.filename, exc)
            return False
        return True

    def get_element_by_id(self, id: int, type: Optional[str] = None, locale: Optional[str] = None) -> Optional[Element]:
        # Titles are not localised; ``locale`` is accepted for interface parity.
        sql = "SELECT id, type, title, date_created, date_updated FROM elements WHERE id = ?"
        params = [id]
        if type is not None:
            sql += " AND type = ?"
            params.append(type)
        with self._pool.connection() as conn:
            row = conn.execute(sql, params).fetchone()
        if row is None:
            return None
        return Element(
            id=row["id"],
            type=row["type"],
            title=row["title"],
            date_created=_parse_datetime(row["date_created"]),
            date_updated=_parse_datetime(row["date_updated"]),
        )

    def delete_element_by_id(self, id: int) -> bool:
        try:
            with self._pool.connection() as conn:
                cursor = conn.execute("DELETE FROM elements WHERE id = ?", (id,))
        except sqlite3.Error as exc:
            raise DatabaseError(str(exc)) from exc
        return cursor.rowcount > 0


def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None
