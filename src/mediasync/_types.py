"""Type aliases used throughout mediasync."""

from __future__ import annotations

import os  # noqa: TC003
from typing import Any, Union

PathLike = Union[str, "os.PathLike[str]"]  # noqa: UP007
JSONObject = dict[str, Any]
