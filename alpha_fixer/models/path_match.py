from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from .errors import PathResolutionError


@dataclass
class PathMatch:
    """
    One entry produced by glob expansion: either a resolvable path
    or the error met while resolving it.
    """
    path: Path
    error: PathResolutionError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
