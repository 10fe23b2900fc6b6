"""Query objects and parameter helpers for folder and asset lookups.

String filters follow a small grammar inherited from the catalog's original
criteria format: a value may hold several comma separated alternatives and a
literal comma is written as ``\\,``.  Paths are always treated as literals,
so they are escaped on the way in and come back out unescaped.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Collection, List, Optional, Tuple, Union

from .core import Asset


class SortOrder(Enum):
    ASC = "ASC"
    DESC = "DESC"


class _Empty:
    """Sentinel matching a NULL column (e.g. root folders with no parent)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return ":empty:"


EMPTY = _Empty()

IntParam = Union[int, Collection[int], _Empty, None]
StrParam = Union[str, Collection[str], _Empty, None]


def escape_param(value: str) -> str:
    """Backslash-escape commas so *value* is not split into alternatives."""
    return value.replace(",", "\\,")


def split_param(value: str, strip: bool = True) -> List[str]:
    """Split *value* on unescaped commas and unescape the pieces."""
    parts: List[str] = []
    current: List[str] = []
    index = 0
    while index < len(value):
        char = value[index]
        if char == "\\" and value[index + 1:index + 2] == ",":
            current.append(",")
            index += 2
            continue
        if char == ",":
            parts.append(_join(current, strip))
            current = []
        else:
            current.append(char)
        index += 1
    parts.append(_join(current, strip))
    return parts


def _join(chars: List[str], strip: bool) -> str:
    text = "".join(chars)
    return text.strip() if strip else text


def _literal_values(value: StrParam) -> List[str]:
    if isinstance(value, str):
        return split_param(escape_param(value), strip=False)
    return [split_param(escape_param(item), strip=False)[0] for item in value]


def _param_values(value: Union[IntParam, StrParam]) -> List[Any]:
    if isinstance(value, str):
        return split_param(value)
    if isinstance(value, (int, float)):
        return [value]
    return list(value)


def parse_param(column: str, value: Union[IntParam, StrParam], params: List[Any], *, literal: bool = False) -> str:
    """Return a SQL condition for *column* matching *value*, extending *params*."""
    if value is EMPTY:
        return f"{column} IS NULL"
    values = _literal_values(value) if literal else _param_values(value)
    if not values:
        # An explicitly empty set matches nothing.
        return "0 = 1"
    if len(values) == 1:
        params.append(values[0])
        return f"{column} = ?"
    params.extend(values)
    placeholders = ", ".join("?" for _ in values)
    return f"{column} IN ({placeholders})"


@dataclass
class FolderQuery:
    """Optional matchers for folder lookups; unset fields do not filter."""

    id: IntParam = None
    volume_id: IntParam = None
    parent_id: IntParam = None
    name: StrParam = None
    path: StrParam = None
    order_by: Optional[str] = None
    order: SortOrder = SortOrder.ASC
    offset: int = 0
    limit: Optional[int] = None

    def ordered_by_path(self):
        self.order_by = "path"
        self.order = SortOrder.ASC
        return self


FOLDER_SORT_COLUMNS = frozenset({"id", "parent_id", "volume_id", "name", "path"})


def build_folder_sql(query: FolderQuery, count_only: bool = False) -> Tuple[str, List[Any]]:
    """Turn *query* into a ``SELECT`` over the ``folders`` table."""
    if count_only:
        sql = "SELECT COUNT(*) FROM folders"
    else:
        sql = "SELECT id, parent_id, volume_id, name, path FROM folders"

    params: List[Any] = []
    conditions: List[str] = []

    if query.id is not None:
        conditions.append(parse_param("id", query.id, params))
    if query.volume_id is not None:
        conditions.append(parse_param("volume_id", query.volume_id, params))
    if query.parent_id is not None:
        conditions.append(parse_param("parent_id", query.parent_id, params))
    if query.name is not None:
        conditions.append(parse_param("name", query.name, params))
    if query.path is not None:
        conditions.append(parse_param("path", query.path, params, literal=True))

    if conditions:
        sql += " WHERE " + " AND ".join(conditions)

    if not count_only:
        if query.order_by:
            if query.order_by not in FOLDER_SORT_COLUMNS:
                raise ValueError(f"Cannot order folders by {query.order_by!r}")
            sql += f" ORDER BY {query.order_by} {query.order.value}"
        if query.limit is not None or query.offset:
            sql += " LIMIT ? OFFSET ?"
            params.extend([query.limit if query.limit is not None else -1, query.offset])

    return sql, params


@dataclass
class AssetQuery:
    """Asset query object - filters on the indexed asset columns."""

    id: IntParam = None
    volume_id: IntParam = None
    folder_id: IntParam = None
    filename: StrParam = None
    kind: StrParam = None
    order_by: Optional[str] = "filename"
    order: SortOrder = SortOrder.ASC
    offset: int = 0
    limit: Optional[int] = None

    def in_folder(self, folder_id: int):
        self.folder_id = folder_id
        return self

    def named(self, filename: str):
        self.filename = filename
        return self

    def only_images(self):
        self.kind = "image"
        return self

    def paginate(self, page: int, page_size: int):
        self.offset = (page - 1) * page_size
        self.limit = page_size
        return self


ASSET_SORT_COLUMNS = frozenset(
    {"id", "volume_id", "folder_id", "filename", "kind", "size", "date_modified"}
)


def build_asset_sql(query: AssetQuery, count_only: bool = False) -> Tuple[str, List[Any]]:
    if count_only:
        sql = "SELECT COUNT(*) FROM assets"
    else:
        sql = (
            "SELECT id, volume_id, folder_id, filename, kind, size, width, height, date_modified"
            " FROM assets"
        )

    params: List[Any] = []
    conditions: List[str] = []

    if query.id is not None:
        conditions.append(parse_param("id", query.id, params))
    if query.volume_id is not None:
        conditions.append(parse_param("volume_id", query.volume_id, params))
    if query.folder_id is not None:
        conditions.append(parse_param("folder_id", query.folder_id, params))
    if query.filename is not None:
        conditions.append(parse_param("filename", query.filename, params, literal=True))
    if query.kind is not None:
        conditions.append(parse_param("kind", query.kind, params))

    if conditions:
        sql += " WHERE " + " AND ".join(conditions)

    if not count_only:
        order_col = query.order_by or "filename"
        if order_col not in ASSET_SORT_COLUMNS:
            raise ValueError(f"Cannot order assets by {order_col!r}")
        sql += f" ORDER BY {order_col} {query.order.value}"
        if query.limit is not None or query.offset:
            sql += " LIMIT ? OFFSET ?"
            params.extend([query.limit if query.limit is not None else -1, query.offset])

    return sql, params


def sibling_query(asset: Asset, filename: str) -> AssetQuery:
    """Query for an asset named *filename* in the same folder as *asset*."""
    return AssetQuery(folder_id=asset.folder_id, filename=filename, limit=1)
