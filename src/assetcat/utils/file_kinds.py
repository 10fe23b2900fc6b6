"""File kind classification by extension."""

from __future__ import annotations

from typing import Mapping

UNKNOWN_KIND = "unknown"

# Checked in insertion order; an extension listed under two kinds
# (``ogg``, ``flv``) resolves to the first.
FILE_KINDS: Mapping[str, frozenset[str]] = {
    "access": frozenset({"adp", "accdb", "mdb", "accde", "accdt", "accdr"}),
    "audio": frozenset({
        "3gp", "aac", "act", "aif", "aiff", "aifc", "alac", "amr", "au", "dct",
        "dss", "dvf", "flac", "gsm", "iklax", "ivs", "m4a", "m4p", "mmf", "mp3",
        "mpc", "msv", "oga", "ogg", "opus", "ra", "tta", "vox", "wav", "wma", "wv",
    }),
    "compressed": frozenset({"bz2", "tar", "gz", "7z", "s7z", "dmg", "rar", "zip", "tgz", "zipx"}),
    "excel": frozenset({"xls", "xlsx", "xlsm", "xltx", "xltm"}),
    "flash": frozenset({"fla", "flv", "swf", "swt", "swc"}),
    "html": frozenset({"html", "htm"}),
    "illustrator": frozenset({"ai"}),
    "image": frozenset({
        "jfif", "jp2", "jpx", "jpg", "jpeg", "jpe", "tiff", "tif", "png", "gif",
        "bmp", "webp", "ppm", "pgm", "pnm", "pfm", "pam", "svg", "heic", "heif",
    }),
    "javascript": frozenset({"js"}),
    "json": frozenset({"json"}),
    "pdf": frozenset({"pdf"}),
    "photoshop": frozenset({"psd", "psb"}),
    "php": frozenset({"php"}),
    "powerpoint": frozenset({"pps", "ppsm", "ppsx", "ppt", "pptm", "pptx", "potx"}),
    "text": frozenset({"txt", "text"}),
    "video": frozenset({
        "avchd", "asf", "asx", "avi", "flv", "fla", "mov", "m4v", "mng", "mpeg",
        "mpg", "m1s", "mp2v", "m2v", "m2s", "mp4", "mkv", "qt", "ogg", "ogv",
        "rm", "wmv", "webm", "vob",
    }),
    "word": frozenset({"doc", "docx", "dot", "docm", "dotm"}),
    "xml": frozenset({"xml"}),
}


def get_file_kind(extension: str) -> str:
    """Return the kind for *extension* (with or without the leading dot)."""

    extension = extension.lower().lstrip(".")
    if not extension:
        return UNKNOWN_KIND
    for kind, extensions in FILE_KINDS.items():
        if extension in extensions:
            return kind
    return UNKNOWN_KIND


__all__ = ["FILE_KINDS", "UNKNOWN_KIND", "get_file_kind"]
