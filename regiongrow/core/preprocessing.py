# regiongrow/core/preprocessing.py
# Image I/O + median noise filter - pure callables with no GUI state
# Safe for headless testing; showImage is the only function that opens windows

from __future__ import annotations
import logging
import os
import cv2
import numpy as np
from typing import Tuple

logger = logging.getLogger(__name__)

# Type aliases for clarity
ImageArray = np.ndarray  # np.uint8, shape (H,W) grayscale or (H,W,3) BGR
ShapeHW = Tuple[int, int]  # (height, width)


def _prepGray(src) -> np.ndarray:
    """Return a 2D uint8 intensity grid (BGR -> gray, other dtypes min-max scaled)."""
    img = np.asarray(src)
    if img.ndim == 3:
        if img.shape[2] == 1:
            img = img[:, :, 0]
        else:
            img = cv2.cvtColor(img, cv2.COLOR_BGR2GRAY)
    if img.ndim != 2:
        raise ValueError(f"Expected a 2D or 3D image, got shape {img.shape}")
    if img.dtype != np.uint8:
        img = cv2.normalize(img.astype(np.float32), None, 0, 255, cv2.NORM_MINMAX).astype(np.uint8)
    return np.ascontiguousarray(img)


# --------------------- Image I/O ----------------------------------

def loadImage(path: str, asGray: bool = True) -> ImageArray:
    """Load an image with OpenCV. Returns np.uint8.
    If asGray=True, loads grayscale; else returns BGR color."""
    flag = cv2.IMREAD_GRAYSCALE if asGray else cv2.IMREAD_COLOR
    img = cv2.imread(path, flag)
    if img is None:
        raise FileNotFoundError(f"Could not read image: {path}")
    if img.dtype != np.uint8:
        img = cv2.normalize(img.astype(np.float32), None, 0, 255, cv2.NORM_MINMAX).astype(np.uint8)
    logger.debug("Loaded %s with shape %s", path, img.shape)
    return img


def resizeImage(img: ImageArray, width: int, height: int) -> ImageArray:
    """Resize to exactly (width, height) with bilinear interpolation."""
    if width < 1 or height < 1:
        raise ValueError(f"Target size must be positive, got {width}x{height}")
    return cv2.resize(img, (int(width), int(height)), interpolation=cv2.INTER_LINEAR)


def showImage(img: ImageArray, windowName: str) -> None:
    cv2.imshow(windowName, img)


def waitForKey(delayMs: int = 0) -> int:
    """Block until a key is pressed in any open window (0 = forever)."""
    return cv2.waitKey(int(delayMs))


def saveImage(path: str, img: ImageArray) -> str:
    """Write img to path, creating parent folders. Returns the path."""
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    if not cv2.imwrite(path, img):
        raise OSError(f"Could not write image: {path}")
    return path


# --------------------- Noise filter -------------------------------

def filterNoise(img: ImageArray, kernelSize: int) -> ImageArray:
    """
    Median filter over kernelSize x kernelSize windows.

    Even kernel sizes (and sizes <= 1) return an unchanged copy. Pixels closer
    than kernelSize//2 to an edge keep their original value; every other pixel
    gets the exact median of its window, read from the untouched input.
    """
    gray = _prepGray(img)
    out = gray.copy()
    k = int(kernelSize)
    if k % 2 == 0 or k <= 1:
        return out

    pad = k // 2
    h, w = gray.shape
    if h <= 2 * pad or w <= 2 * pad:
        # no pixel has a full window
        return out

    # medianBlur is exact for uint8; only its interior is used, so the
    # replicated border it pads with never reaches the output
    blurred = cv2.medianBlur(gray, k)
    out[pad:h - pad, pad:w - pad] = blurred[pad:h - pad, pad:w - pad]
    return out
