"""Filename cleanup applied before a file reaches a volume."""

from __future__ import annotations

import re
import unicodedata

from ..config import (
    DEFAULT_FILENAME_WORD_SEPARATOR,
    DISALLOWED_FILENAME_CHARS,
    EMPTY_FILENAME_PLACEHOLDER,
)

_WHITESPACE = re.compile(r"\s+")


def split_extension(filename: str) -> tuple[str, str]:
    """Return ``(base, extension)`` where the extension has no leading dot.

    A leading dot alone (``".htaccess"``) is part of the base name.
    """

    index = filename.rfind(".")
    if index <= 0:
        return filename, ""
    return filename[:index], filename[index + 1:]


def _clean(text: str, separator: str, ascii_only: bool) -> str:
    if ascii_only:
        text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    # Tabs and newlines are control characters; fold them into spaces first.
    text = _WHITESPACE.sub(" ", text)
    text = "".join(
        char
        for char in text
        if char not in DISALLOWED_FILENAME_CHARS and unicodedata.category(char) != "Cc"
    )
    return _WHITESPACE.sub(separator, text.strip())


def prepare_asset_name(
    name: str,
    word_separator: str = DEFAULT_FILENAME_WORD_SEPARATOR,
    ascii_only: bool = False,
) -> str:
    """Return *name* made safe for storage on any volume.

    Disallowed and control characters are removed, whitespace runs become
    *word_separator*, and the extension is lower-cased.  An empty base name
    is replaced with a placeholder so the result never starts with a dot.
    """

    base, extension = split_extension(name)
    base = _clean(base, word_separator, ascii_only)
    extension = _clean(extension, "", ascii_only).lower()

    if not base:
        base = EMPTY_FILENAME_PLACEHOLDER
    if extension:
        return f"{base}.{extension}"
    return base


def default_title(filename: str) -> str:
    """Title used for a new asset that was saved without one."""

    base, _ = split_extension(filename)
    return base.replace("_", " ")


__all__ = ["default_title", "prepare_asset_name", "split_extension"]
