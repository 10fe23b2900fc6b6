import sqlite3
import logging
from dataclasses import replace
from typing import List, Optional
from datetime import datetime

from assetcat.domain.models import Asset
from assetcat.domain.models.query import AssetQuery, build_asset_sql
from assetcat.domain.repositories import IAssetRepository
from assetcat.errors import ConflictError, DatabaseError
from assetcat.infrastructure.db.pool import ConnectionPool
from assetcat.infrastructure.db.unit_of_work import UnitOfWork

_logger = logging.getLogger(__name__)


class SQLiteAssetRepository(IAssetRepository):
    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    def get(self, id: int, uow: Optional[UnitOfWork] = None) -> Optional[Asset]:
        with self._pool.connection_for(uow) as conn:
            row = conn.execute(
                "SELECT id, volume_id, folder_id, filename, kind, size, width, height, date_modified"
                " FROM assets WHERE id = ?",
                (id,),
            ).fetchone()
        return self._map_row_to_asset(row) if row else None

    def exists(self, id: int, uow: Optional[UnitOfWork] = None) -> bool:
        with self._pool.connection_for(uow) as conn:
            row = conn.execute("SELECT 1 FROM assets WHERE id = ?", (id,)).fetchone()
        return row is not None

    def find_by_query(self, query: AssetQuery, uow: Optional[UnitOfWork] = None) -> List[Asset]:
        sql, params = build_asset_sql(query)
        with self._pool.connection_for(uow) as conn:
            rows = conn.execute(sql, params).fetchall()
        return [self._map_row_to_asset(row) for row in rows]

    def find_one(self, query: AssetQuery, uow: Optional[UnitOfWork] = None) -> Optional[Asset]:
        assets = self.find_by_query(replace(query, limit=1), uow=uow)
        return assets[0] if assets else None

    def count(self, query: AssetQuery) -> int:
        sql, params = build_asset_sql(query, count_only=True)
        with self._pool.connection() as conn:
            return conn.execute(sql, params).fetchone()[0]

    def save(self, asset: Asset, uow: Optional[UnitOfWork] = None) -> None:
        if asset.id is None:
            raise ValueError("Asset rows are keyed by their element id; save the element first")

        record = asset.to_record()
        _logger.info(
            "[REPO-SAVE] id=%s folder=%s filename=%r kind=%s size=%s",
            asset.id, asset.folder_id, asset.filename, asset.kind, asset.size,
        )
        try:
            with self._pool.connection_for(uow) as conn:
                conn.execute(
                    """
                    INSERT INTO assets
                    (id, volume_id, folder_id, filename, kind, size, width, height, date_modified)
                    VALUES (:id, :volume_id, :folder_id, :filename, :kind, :size, :width, :height, :date_modified)
                    ON CONFLICT(id) DO UPDATE SET
                        volume_id = excluded.volume_id,
                        folder_id = excluded.folder_id,
                        filename = excluded.filename,
                        kind = excluded.kind,
                        size = excluded.size,
                        width = excluded.width,
                        height = excluded.height,
                        date_modified = excluded.date_modified
                    """,
                    record,
                )
        except sqlite3.IntegrityError as exc:
            if "UNIQUE" not in str(exc):
                raise DatabaseError(str(exc)) from exc
            raise ConflictError(
                f"A file with the name “{asset.filename}” already exists in the folder."
            ) from exc
        except sqlite3.Error as exc:
            raise DatabaseError(str(exc)) from exc

    def delete(self, id: int, uow: Optional[UnitOfWork] = None) -> None:
        with self._pool.connection_for(uow) as conn:
            conn.execute("DELETE FROM assets WHERE id = ?", (id,))

    def _map_row_to_asset(self, row) -> Asset:
        date_modified = None
        if row["date_modified"]:
            try:
                date_modified = datetime.fromisoformat(row["date_modified"])
            except ValueError:
                _logger.warning("[REPO-GET] bad date_modified %r for asset %s", row["date_modified"], row["id"])

        return Asset(
            id=row["id"],
            volume_id=row["volume_id"],
            folder_id=row["folder_id"],
            filename=row["filename"],
            kind=row["kind"],
            size=row["size"],
            width=row["width"],
            height=row["height"],
            date_modified=date_modified,
        )
