from typing import Iterable

from assetcat.application.interfaces import IPermissionChecker


class StaticPermissionChecker(IPermissionChecker):
    """Grants exactly the permission names it was built with.

    Names are volume scoped, e.g. ``"deleteFilesAndFolders:3"``.  A ``"*"``
    entry grants everything.
    """

    def __init__(self, granted: Iterable[str] = ()):
        self._granted = set(granted)

    def grant(self, name: str) -> None:
        self._granted.add(name)

    def revoke(self, name: str) -> None:
        self._granted.discard(name)

    def check_permission(self, name: str) -> bool:
        return "*" in self._granted or name in self._granted
