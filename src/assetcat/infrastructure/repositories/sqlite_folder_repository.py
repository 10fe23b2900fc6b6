import logging
import sqlite3
from dataclasses import replace
from typing import Dict, List, Optional

from assetcat.domain.models import Folder
from assetcat.domain.models.query import FolderQuery, build_folder_sql
from assetcat.domain.repositories import IFolderRepository
from assetcat.domain.services.folder_cache import FolderCache
from assetcat.errors import ConflictError, DatabaseError
from assetcat.infrastructure.db.pool import ConnectionPool
from assetcat.infrastructure.db.unit_of_work import UnitOfWork

_logger = logging.getLogger(__name__)


class SQLiteFolderRepository(IFolderRepository):
    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    def get(
        self,
        id: int,
        cache: Optional[FolderCache] = None,
        uow: Optional[UnitOfWork] = None,
    ) -> Optional[Folder]:
        if cache is not None and id in cache:
            return cache.get(id)

        with self._pool.connection_for(uow) as conn:
            row = conn.execute(
                "SELECT id, parent_id, volume_id, name, path FROM folders WHERE id = ?", (id,)
            ).fetchone()
        folder = self._map_row_to_folder(row) if row else None
        if cache is not None:
            # Misses are remembered too.
            cache.put(id, folder)
        return folder

    def find(
        self,
        query: FolderQuery,
        cache: Optional[FolderCache] = None,
        uow: Optional[UnitOfWork] = None,
    ) -> List[Folder]:
        sql, params = build_folder_sql(query)
        with self._pool.connection_for(uow) as conn:
            rows = conn.execute(sql, params).fetchall()
        folders = [self._map_row_to_folder(row) for row in rows]
        if cache is not None:
            cache.put_all(folders)
        _logger.debug("[FOLDER-QUERY] %s -> %d folders", query, len(folders))
        return folders

    def find_one(
        self,
        query: FolderQuery,
        cache: Optional[FolderCache] = None,
        uow: Optional[UnitOfWork] = None,
    ) -> Optional[Folder]:
        folders = self.find(replace(query, limit=1), cache=cache, uow=uow)
        return folders[0] if folders else None

    def count(self, query: FolderQuery) -> int:
        sql, params = build_folder_sql(query, count_only=True)
        with self._pool.connection() as conn:
            return conn.execute(sql, params).fetchone()[0]

    def get_all_descendants(self, parent: Folder, cache: Optional[FolderCache] = None) -> Dict[int, Folder]:
        # ``LIKE`` treats ``%`` and ``_`` as wildcards, so match the prefix
        # with ``substr`` instead; paths may contain either character.
        with self._pool.connection() as conn:
            rows = conn.execute(
                """
                SELECT id, parent_id, volume_id, name, path FROM folders
                WHERE volume_id = ?
                  AND substr(path, 1, ?) = ?
                ORDER BY path ASC
                """,
                (parent.volume_id, len(parent.path), parent.path),
            ).fetchall()
        descendants = {row["id"]: self._map_row_to_folder(row) for row in rows}
        if cache is not None:
            cache.put_all(descendants.values())
        return descendants

    def save(
        self,
        folder: Folder,
        cache: Optional[FolderCache] = None,
        uow: Optional[UnitOfWork] = None,
    ) -> Folder:
        try:
            with self._pool.connection_for(uow) as conn:
                if folder.id is None:
                    cursor = conn.execute(
                        "INSERT INTO folders (parent_id, volume_id, name, path) VALUES (?, ?, ?, ?)",
                        (folder.parent_id, folder.volume_id, folder.name, folder.path),
                    )
                    folder.id = cursor.lastrowid
                else:
                    conn.execute(
                        """
                        INSERT INTO folders (id, parent_id, volume_id, name, path)
                        VALUES (?, ?, ?, ?, ?)
                        ON CONFLICT(id) DO UPDATE SET
                            parent_id = excluded.parent_id,
                            volume_id = excluded.volume_id,
                            name = excluded.name,
                            path = excluded.path
                        """,
                        (folder.id, folder.parent_id, folder.volume_id, folder.name, folder.path),
                    )
        except sqlite3.IntegrityError as exc:
            if "UNIQUE" not in str(exc):
                raise DatabaseError(str(exc)) from exc
            raise ConflictError(
                f"A folder with the path “{folder.path}” already exists in volume {folder.volume_id}."
            ) from exc
        except sqlite3.Error as exc:
            raise DatabaseError(str(exc)) from exc

        if cache is not None:
            cache.invalidate(folder.id)
        _logger.info(
            "[FOLDER-SAVE] id=%s volume=%s parent=%s path=%r",
            folder.id, folder.volume_id, folder.parent_id, folder.path,
        )
        return folder

    def delete(
        self,
        id: int,
        cache: Optional[FolderCache] = None,
        uow: Optional[UnitOfWork] = None,
    ) -> None:
        try:
            with self._pool.connection_for(uow) as conn:
                # Asset rows cascade from their folder but their element rows
                # do not, so drop the subtree's elements first.
                conn.execute(
                    """
                    WITH RECURSIVE subtree(id) AS (
                        SELECT ?
                        UNION ALL
                        SELECT folders.id FROM folders JOIN subtree ON folders.parent_id = subtree.id
                    )
                    DELETE FROM elements
                    WHERE id IN (SELECT id FROM assets WHERE folder_id IN (SELECT id FROM subtree))
                    """,
                    (id,),
                )
                conn.execute("DELETE FROM folders WHERE id = ?", (id,))
        except sqlite3.Error as exc:
            raise DatabaseError(str(exc)) from exc
        if cache is not None:
            # Descendant rows cascade, so nothing cached stays trustworthy.
            cache.invalidate()

    def _map_row_to_folder(self, row) -> Folder:
        return Folder(
            id=row["id"],
            parent_id=row["parent_id"],
            volume_id=row["volume_id"],
            name=row["name"],
            path=row["path"],
        )
