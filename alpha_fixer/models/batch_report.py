from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple
from .errors import AlphaFixerError, PathResolutionError


@dataclass
class BatchReport:
    """
    Aggregated result of one run over a glob pattern.
    """
    updated: List[Path] = field(default_factory=list)      # Rewritten on disk
    unchanged: List[Path] = field(default_factory=list)    # Nothing to fix, not written
    skipped: List[Tuple[Path, AlphaFixerError]] = field(default_factory=list)  # Decode/encode failures
    unresolved: List[PathResolutionError] = field(default_factory=list)

    @property
    def processed(self) -> int:
        return len(self.updated) + len(self.unchanged)

    @property
    def failed(self) -> bool:
        return bool(self.skipped)
