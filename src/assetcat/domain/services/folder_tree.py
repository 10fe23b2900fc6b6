"""Assemble a folder forest from flat, path-ordered folder rows."""

from __future__ import annotations

from dataclasses import replace
from typing import Dict, Iterable, List, Mapping

from ..models import Folder


def build_folder_tree(
    folders: Iterable[Folder],
    sort_orders: Mapping[int, int] | None = None,
) -> List[Folder]:
    """Return the root folders of the forest described by *folders*.

    *folders* must be sorted ascending by path: a parent's path is a prefix
    of its children's paths and therefore sorts first, which lets a single
    pass attach every folder whose parent has already been seen.  A folder
    whose parent is not part of the input becomes a root.  Unsorted input
    silently yields a wrong forest.

    The input objects are not modified; each node in the result is a copy
    with its own ``children`` list.  Roots are ordered by the ``sort_order``
    of their volume (``sort_orders`` maps volume id to sort order), keeping
    the path order among roots of the same volume.
    """

    tree: List[Folder] = []
    by_id: Dict[int, Folder] = {}

    for folder in folders:
        node = replace(folder, children=[])
        parent = by_id.get(node.parent_id) if node.parent_id is not None else None
        if parent is not None:
            parent.add_child(node)
        else:
            tree.append(node)
        if node.id is not None:
            by_id[node.id] = node

    if sort_orders:
        tree.sort(key=lambda root: sort_orders.get(root.volume_id, 0))
    return tree


def iter_tree(roots: Iterable[Folder]) -> Iterable[Folder]:
    """Yield every folder of the forest, parents before children."""

    stack = list(reversed(list(roots)))
    while stack:
        folder = stack.pop()
        yield folder
        stack.extend(reversed(folder.children))


__all__ = ["build_folder_tree", "iter_tree"]
