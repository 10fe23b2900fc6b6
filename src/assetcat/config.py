"""Default configuration values for assetcat."""

from __future__ import annotations

from typing import Final

# The ``elements.type`` value used for asset rows.
ASSET_ELEMENT_TYPE: Final[str] = "asset"

# Folder paths are materialized with this separator and always end with it,
# except for the volume root folder whose path is the empty string.
PATH_SEPARATOR: Final[str] = "/"
VOLUME_ROOT_PATH: Final[str] = ""

DEFAULT_DATABASE_NAME: Final[str] = "assetcat.db"
DEFAULT_POOL_SIZE: Final[int] = 5
DEFAULT_POOL_TIMEOUT_SEC: Final[float] = 30.0

# Filenames are cleaned before hitting a volume.  Whitespace runs collapse to
# the separator and these characters are dropped entirely.
DEFAULT_FILENAME_WORD_SEPARATOR: Final[str] = "-"
DISALLOWED_FILENAME_CHARS: Final[frozenset[str]] = frozenset(
    "?[]/\\=<>:;,'\"&$#*()|~`!{}%+’«»”“"
)
EMPTY_FILENAME_PLACEHOLDER: Final[str] = "-"

MAX_FILENAME_LENGTH: Final[int] = 255
MAX_KIND_LENGTH: Final[int] = 50

# Used by the transform source cache when settings do not name a directory.
TRANSFORM_SOURCE_DIR_NAME: Final[str] = ".assetcat-sources"
