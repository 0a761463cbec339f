from pathlib import Path
from typing import Union
import shutil
import struct
import numpy as np
from PIL import Image as PILImage
from PIL import UnidentifiedImageError
from ..models.image import Image
from ..models.errors import DecodeError, EncodeError

# Pillow reports a corrupt chunk header as SyntaxError and a short chunk as struct.error / EOFError
_DECODE_ERRORS = (
    UnidentifiedImageError,
    PILImage.DecompressionBombError,
    SyntaxError,
    struct.error,
    EOFError,
    OSError,
    ValueError,
)


class ImageRepository:
    """
    Handles PNG file I/O for Image entities.
    """

    @staticmethod
    def load(path: Union[str, Path]) -> Image:
        path = Path(path)
        try:
            with PILImage.open(path) as pil_img:
                arr = np.array(pil_img.convert("RGBA"), dtype=np.uint8)
        except _DECODE_ERRORS as err:
            raise DecodeError(path, err) from err

        return Image(pixels=arr, path=path)

    @staticmethod
    def save(image: Image) -> None:
        """
        Overwrite the file behind image.path with a PNG encoding of image.pixels.
        Symlinks are followed, so the linked file is rewritten and the link kept.
        The encoded file is written next to the real file first, given the same
        permission bits, and moved over it in one step, so the target is either
        untouched or fully rewritten.
        """
        if image.path is None:
            raise EncodeError("<unnamed image>", "image has no path")

        target = Path(image.path)
        real = target.resolve()
        tmp = real.with_name(f".{real.name}.tmp")
        try:
            PILImage.fromarray(np.ascontiguousarray(image.pixels)).save(tmp, format="PNG")
            if real.exists():
                shutil.copymode(real, tmp)
            tmp.replace(real)
        except (OSError, ValueError) as err:
            tmp.unlink(missing_ok=True)
            raise EncodeError(target, err) from err
