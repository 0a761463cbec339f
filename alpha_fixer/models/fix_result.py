from __future__ import annotations
from dataclasses import dataclass
from .image import Image


@dataclass
class FixResult:
    """
    Outcome of one transparent-pixel pass over an Image.
    `modified` gates whether the image is written back to its path.
    """
    image: Image          # Fresh output grid, same dimensions as the input
    modified: bool        # True if at least one pixel differs from the input
    filled: int = 0       # Target pixels that received a neighbour colour
    isolated: int = 0     # Target pixels with no opaque neighbour
