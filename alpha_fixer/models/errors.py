from __future__ import annotations
from pathlib import Path


class AlphaFixerError(Exception):
    """Base class for every error raised by alpha_fixer."""


class PatternError(AlphaFixerError, ValueError):
    """The glob pattern itself is malformed; nothing can be discovered."""

    def __init__(self, pattern: str, reason: str):
        super().__init__(f"Invalid glob pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason


class _PathError(AlphaFixerError, OSError):
    _verb = "process"

    def __init__(self, path: str | Path, reason: object):
        super().__init__(f"Failed to {self._verb} {path}: {reason}")
        self.path = Path(path)
        self.reason = reason


class PathResolutionError(_PathError):
    """A single matched entry could not be resolved (e.g. permission denied)."""
    _verb = "resolve"


class DecodeError(_PathError):
    """A file could not be read as an image."""
    _verb = "decode"


class EncodeError(_PathError):
    """A fixed image could not be written back to its path."""
    _verb = "encode"
