# regiongrow/core/borders.py
# Region boundary mask from a colorized (or labeled) map + display overlay

from __future__ import annotations
from typing import Tuple

import cv2
import numpy as np

BorderMask = np.ndarray  # np.uint8, shape (H,W), values in {0, 255}


def extractBorders(regionMap: np.ndarray, thickness: int = 1) -> BorderMask:
    """
    Mark every pixel that has a 4-neighbor of a different color (or label).

    regionMap is an (H,W,3) color image or an (H,W) label grid. Border pixels
    are 255, the rest 0. thickness > 1 dilates the one-pixel mask with a
    thickness x thickness square element.
    """
    if regionMap.ndim == 3:
        diffX = np.any(regionMap[:, 1:] != regionMap[:, :-1], axis=2)
        diffY = np.any(regionMap[1:, :] != regionMap[:-1, :], axis=2)
    elif regionMap.ndim == 2:
        diffX = regionMap[:, 1:] != regionMap[:, :-1]
        diffY = regionMap[1:, :] != regionMap[:-1, :]
    else:
        raise ValueError(f"regionMap must be HxW or HxWx3, got shape {regionMap.shape}")

    h, w = regionMap.shape[:2]
    isBorder = np.zeros((h, w), dtype=bool)
    # a differing pair marks both of its pixels
    isBorder[:, :-1] |= diffX
    isBorder[:, 1:] |= diffX
    isBorder[:-1, :] |= diffY
    isBorder[1:, :] |= diffY

    borders = isBorder.astype(np.uint8) * 255
    if thickness > 1:
        kernel = cv2.getStructuringElement(cv2.MORPH_RECT, (int(thickness), int(thickness)))
        borders = cv2.dilate(borders, kernel)
    return borders


def overlayBorders(
    gray: np.ndarray,
    borders: BorderMask,
    color: Tuple[int, int, int] = (0, 0, 255)
) -> np.ndarray:
    """Paint border pixels over a grayscale (or BGR) image. Returns BGR uint8."""
    if gray.ndim == 2:
        base = cv2.cvtColor(gray, cv2.COLOR_GRAY2BGR)
    else:
        base = gray.copy()
    if base.shape[:2] != borders.shape[:2]:
        raise ValueError(f"Shape mismatch: image {base.shape[:2]} vs borders {borders.shape[:2]}")
    base[borders > 0] = color
    return base
