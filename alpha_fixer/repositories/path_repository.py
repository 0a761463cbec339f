from pathlib import Path
from typing import Iterable, Iterator, Union
import glob
import os
import re
import stat
from dotenv import load_dotenv
from ..models.path_match import PathMatch
from ..models.errors import PatternError, PathResolutionError

# Load environment variables
load_dotenv()


class PathRepository:
    """
    Expands glob patterns into candidate image paths.
    Nothing is opened here, entries are only stat-ed.
    """
    def __init__(self, exts: Iterable[str] | None = None):
        raw = exts if exts is not None else os.getenv("VALID_IMAGE_EXTENSIONS", ".png").split(",")
        self.VALID_EXTS = {self._normalise_ext(e) for e in raw if e.strip()}

    @staticmethod
    def _normalise_ext(ext: str) -> str:
        ext = ext.strip().lower()
        return ext if ext.startswith(".") else f".{ext}"

    @staticmethod
    def validate_pattern(pattern: str) -> None:
        """
        Raise PatternError when the pattern cannot be expanded at all.
        """
        if not pattern or not pattern.strip():
            raise PatternError(pattern, "pattern is empty")
        if "\0" in pattern:
            raise PatternError(pattern, "pattern contains a NUL byte")

        components = re.split(r"[\\/]", pattern) if os.sep == "\\" else pattern.split("/")
        for part in components:
            if "**" in part and part != "**":
                raise PatternError(pattern, f"'**' must be a whole path component, got {part!r}")
            PathRepository._check_char_classes(pattern, part)

    @staticmethod
    def _check_char_classes(pattern: str, part: str) -> None:
        i = 0
        while i < len(part):
            if part[i] == "[":
                j = i + 1
                if j < len(part) and part[j] == "!":
                    j += 1
                if j < len(part) and part[j] == "]":  # leading ']' is a literal member
                    j += 1
                close = part.find("]", j)
                if close == -1:
                    raise PatternError(pattern, f"unclosed character class in {part!r}")
                i = close
            i += 1

    def has_valid_extension(self, path: Union[str, Path], exts: Iterable[str] | None = None) -> bool:
        allowed = self.VALID_EXTS if exts is None else {self._normalise_ext(e) for e in exts}
        return Path(path).suffix.lower() in allowed

    def iter_matches(self, pattern: str, *, exts: Iterable[str] | None = None) -> Iterator[PathMatch]:
        """
        Yield one PathMatch per matched file, lazily.
        Files with another extension are skipped without comment. Candidates
        that cannot be stat-ed come back with their error attached.
        """
        self.validate_pattern(pattern)
        exts = list(exts) if exts is not None else None

        for p in glob.iglob(pattern, recursive=True, include_hidden=True):
            path = Path(p)
            if not self.has_valid_extension(path, exts):
                continue
            try:
                st = path.stat()
            except OSError as err:
                yield PathMatch(path, PathResolutionError(path, err.strerror or err))
                continue

            if stat.S_ISDIR(st.st_mode):
                continue
            yield PathMatch(path)
