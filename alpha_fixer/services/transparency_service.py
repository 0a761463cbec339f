from __future__ import annotations

import os
import logging
from typing import Tuple

import cv2
import numpy as np
from dotenv import load_dotenv

from ..models.image import Image
from ..models.fix_result import FixResult
from ..models.policies import FillPolicy, TargetMode, SENTINEL_PIXEL

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

# 3x3 block minus its centre, row-major from the top-left: (dy, dx)
NEIGHBOUR_OFFSETS: Tuple[Tuple[int, int], ...] = tuple(
    (dy, dx) for dy in (-1, 0, 1) for dx in (-1, 0, 1) if (dy, dx) != (0, 0)
)

_NEIGHBOUR_KERNEL = np.ones((3, 3), np.float64)
_NEIGHBOUR_KERNEL[1, 1] = 0.0


class TransparencyService:
    """
    Infers a colour for fully transparent pixels from their 3x3 neighbourhood.
    *   No I/O here, works only with Image objects (RGBA numpy arrays).
    *   Reads only the input grid and fills a fresh output grid, so the
        result never depends on scan order.
    *   Alpha is never changed, only the RGB of target pixels.
    """

    def __init__(self,
                 policy: FillPolicy | str | None = None,
                 target: TargetMode | str | None = None):
        self.policy = FillPolicy(policy or os.getenv("FILL_POLICY", FillPolicy.FIRST.value))
        self.target = TargetMode(target or os.getenv("TARGET_MODE", TargetMode.TRANSPARENT.value))

    # ─── Masks ─────────────────────────────────────────────────────
    def target_mask(self, pixels: np.ndarray) -> np.ndarray:
        """(H, W) bool: pixels whose colour gets rewritten."""
        if self.target is TargetMode.SENTINEL:
            return np.all(pixels == np.array(SENTINEL_PIXEL, np.uint8), axis=-1)
        return pixels[..., 3] == 0

    @staticmethod
    def opaque_mask(pixels: np.ndarray) -> np.ndarray:
        """(H, W) bool: pixels that may be sampled as neighbours."""
        return pixels[..., 3] != 0

    # ─── Replacement colours ───────────────────────────────────────
    @staticmethod
    def _first_neighbour(rgb: np.ndarray, opaque: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        Returns
        -------
        colour : (H, W, 3) uint8   RGB of the first opaque neighbour
        found  : (H, W)    bool    False where no neighbour is opaque
        """
        h, w = opaque.shape
        padded_rgb = np.pad(rgb, ((1, 1), (1, 1), (0, 0)))
        padded_opaque = np.pad(opaque, 1, constant_values=False)

        colour = np.zeros_like(rgb)
        found = np.zeros((h, w), bool)
        for dy, dx in NEIGHBOUR_OFFSETS:
            window = (slice(1 + dy, 1 + dy + h), slice(1 + dx, 1 + dx + w))
            take = padded_opaque[window] & ~found
            colour[take] = padded_rgb[window][take]
            found |= take
        return colour, found

    @staticmethod
    def _mean_neighbour(rgb: np.ndarray, opaque: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        Per-channel floor mean over the opaque neighbours.
        Sums are exact: at most 8 * 255 per channel in float64.
        """
        weights = opaque.astype(np.float64)
        masked = rgb.astype(np.float64) * weights[..., None]

        sums = cv2.filter2D(masked, -1, _NEIGHBOUR_KERNEL, borderType=cv2.BORDER_CONSTANT)
        counts = cv2.filter2D(weights, -1, _NEIGHBOUR_KERNEL, borderType=cv2.BORDER_CONSTANT)
        sums = np.rint(sums).astype(np.int64).reshape(rgb.shape)
        counts = np.rint(counts).astype(np.int64).reshape(opaque.shape)

        found = counts > 0
        colour = np.zeros(rgb.shape, np.int64)
        colour[found] = sums[found] // counts[found][:, None]
        return colour.astype(np.uint8), found

    # ─── Public API ────────────────────────────────────────────────
    def fix_pixels(self, pixels: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Args
        ----
        pixels : np.ndarray  (H, W, 4)  uint8  RGBA order, left untouched

        Returns
        -------
        out      : (H, W, 4) uint8  fresh output grid
        filled   : (H, W) bool      target pixels given a neighbour colour
        isolated : (H, W) bool      target pixels without an opaque neighbour
        """
        out = pixels.copy()
        targets = self.target_mask(pixels)
        if not targets.any():
            return out, np.zeros_like(targets), np.zeros_like(targets)

        rgb = pixels[..., :3]
        opaque = self.opaque_mask(pixels)
        if self.policy is FillPolicy.AVERAGE:
            colour, found = self._mean_neighbour(rgb, opaque)
        else:
            colour, found = self._first_neighbour(rgb, opaque)

        filled = targets & found
        isolated = targets & ~found
        out[filled, :3] = colour[filled]
        if self.policy is FillPolicy.FIRST:
            out[isolated] = 0  # black marks the pixel as visited
        return out, filled, isolated

    def fix(self, img: Image) -> FixResult:
        """
        Run one neighbourhood pass over *img* and return a *new* Image
        (same path) together with the modification flag.
        """
        out, filled, isolated = self.fix_pixels(img.pixels)
        modified = not np.array_equal(out, img.pixels)
        logger.debug(
            f"{img.path}: {int(filled.sum())} filled, {int(isolated.sum())} isolated, "
            f"modified={modified} ({self.policy.value}/{self.target.value})"
        )
        fixed = Image(pixels=out, path=img.path)
        return FixResult(image=fixed,
                         modified=modified,
                         filled=int(filled.sum()),
                         isolated=int(isolated.sum()))
