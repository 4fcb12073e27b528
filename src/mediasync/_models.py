"""Read-only projections of filesystem nodes."""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING

from mediasync._path import to_web_path

if TYPE_CHECKING:
    from mediasync._fsobject import FilesystemObject
    from mediasync._types import JSONObject


@dataclasses.dataclass(frozen=True, eq=False)
class WebObject:
    """A file as published under a web prefix.

    :param fso: The underlying filesystem node.
    :param web_path: URL path the file can be downloaded from.
    """

    fso: FilesystemObject
    web_path: str

    @classmethod
    def from_fso(cls, fso: FilesystemObject, disk_root: str, web_prefix: str) -> WebObject:
        """Project ``fso`` from ``disk_root`` onto ``web_prefix``."""
        return cls(fso=fso, web_path=to_web_path(fso.path, disk_root, web_prefix))

    @property
    def path(self) -> str:
        return self.fso.path

    def __eq__(self, other: object) -> bool:
        if isinstance(other, WebObject):
            return self.web_path == other.web_path
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.web_path)

    def to_dict(self) -> JSONObject:
        """JSON-serializable listing entry, including ``web_path``."""
        return {**self.fso.to_dict(), "web_path": self.web_path}
