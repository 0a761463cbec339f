from pathlib import Path
from typing import Iterable, Iterator, Union
from ..models.image import Image
from ..models.path_match import PathMatch
from ..repositories.image_repository import ImageRepository
from ..repositories.path_repository import PathRepository


class ImageService:
    """I/O helpers.  No pixel logic here."""
    def __init__(self, exts: Iterable[str] | None = None):
        self.image_repository = ImageRepository()
        self.path_repository = PathRepository(exts)

    def load(self, path: Union[str, Path]) -> Image:
        """Load a single image from disk into an Image object."""
        return self.image_repository.load(path)

    def save(self, image: Image) -> None:
        """
        Business-level method to overwrite the image at its own path.
        """
        self.image_repository.save(image)

    def validate_pattern(self, pattern: str) -> None:
        self.path_repository.validate_pattern(pattern)

    def stream_matches(self, pattern: str) -> Iterator[PathMatch]:
        """
        Yield candidate image paths lazily instead of expanding the whole
        pattern up front.
        """
        return self.path_repository.iter_matches(pattern)

