from __future__ import annotations
from enum import Enum


class FillPolicy(str, Enum):
    """
    How a replacement colour is chosen from the opaque neighbours.

    FIRST   -> colour of the first opaque neighbour in row-major order;
               a pixel without any opaque neighbour becomes (0, 0, 0, 0).
    AVERAGE -> per-channel floor mean of every opaque neighbour;
               a pixel without any opaque neighbour is left untouched.
    """
    FIRST = "first"
    AVERAGE = "average"


class TargetMode(str, Enum):
    """
    Which pixels are rewritten.

    TRANSPARENT -> every pixel whose alpha is exactly 0.
    SENTINEL    -> only pixels exactly equal to SENTINEL_PIXEL, so pixels
                   recoloured by an earlier run are left alone.
    """
    TRANSPARENT = "transparent"
    SENTINEL = "sentinel"


SENTINEL_PIXEL = (255, 255, 255, 0)
