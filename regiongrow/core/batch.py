# regiongrow/core/batch.py
# Per-image segmentation pipeline and sequential batch driver
# One RegionGrower per image, created and discarded per run

from __future__ import annotations

import copy
import logging
import os
from typing import Any, Callable, Dict, List, Optional, Tuple

import numpy as np

from .borders import BorderMask, extractBorders, overlayBorders
from .growing import DEFAULTS, ColorMap, RegionGrower, RngLike
from .preprocessing import (
    filterNoise,
    loadImage,
    resizeImage,
    saveImage,
    showImage,
    waitForKey,
)

logger = logging.getLogger(__name__)

# Type aliases for clarity
Params = Dict[str, Dict[str, Any]]  # partial or full copy of DEFAULTS
MetaDict = Dict[str, Any]  # metadata dict returned from functions
ProgressCallback = Callable[[int, int], None]  # (completed, total) -> None
SegmentationResult = Tuple[ColorMap, BorderMask, MetaDict]


def mergeParams(params: Optional[Params] = None) -> Params:
    """Overlay a partial nested params dict on a deep copy of DEFAULTS."""
    out: Params = copy.deepcopy(DEFAULTS)
    if not params:
        return out
    for section, values in params.items():
        if section not in out:
            raise ValueError(f"Unknown parameter section: {section}")
        unknown = set(values) - set(out[section])
        if unknown:
            raise ValueError(f"Unknown parameters in '{section}': {sorted(unknown)}")
        out[section].update(values)
    return out


# ---------- Pipeline ----------

def runSegmentationPipeline(
    gray: np.ndarray,
    params: Optional[Params] = None,
    rng: RngLike = None
) -> SegmentationResult:
    """
    Performs noise filter -> region growing/merge -> colorize -> border mask.
    Returns (colorMap_bgr_uint8, borders_uint8, meta).
    The input is used at its own size; resizing is the caller's job.
    """
    p = mergeParams(params)
    filtered = filterNoise(gray, int(p["filter"]["kernelSize"]))

    grower = RegionGrower(
        filtered,
        growthThreshold=int(p["growth"]["growthThreshold"]),
        mergeIntensityThreshold=int(p["merge"]["mergeIntensityThreshold"]),
        similarityThreshold=float(p["merge"]["similarityThreshold"]),
        borderPolicy=str(p["merge"]["borderPolicy"]),
    )
    counts = grower.segment(int(p["growth"]["seedCount"]))
    colorMap = grower.colorize(rng)
    borders = extractBorders(colorMap, int(p["borders"]["thickness"]))

    meta: MetaDict = dict(counts)
    meta.update({
        "shape": grower.shape,
        "borderPolicy": grower.borderPolicy,
        "filtered": filtered,
        "labels": grower.labels,
    })
    return colorMap, borders, meta


def processImage(
    path: str,
    params: Optional[Params] = None,
    show: bool = True,
    outDir: Optional[str] = None,
    rng: RngLike = None
) -> SegmentationResult:
    """
    Load path as grayscale, resize to the working size, segment, then show
    and/or save the filtered input, the region map and the border mask.
    Raises FileNotFoundError if the image cannot be read.
    """
    p = mergeParams(params)
    img = loadImage(path, asGray=True)
    img = resizeImage(img, int(p["image"]["width"]), int(p["image"]["height"]))
    colorMap, borders, meta = runSegmentationPipeline(img, p, rng=rng)
    meta["path"] = path

    if outDir:
        stem = os.path.splitext(os.path.basename(path))[0]
        meta["outputs"] = {
            "regions": saveImage(os.path.join(outDir, f"{stem}_regions.png"), colorMap),
            "borders": saveImage(os.path.join(outDir, f"{stem}_borders.png"), borders),
            "overlay": saveImage(os.path.join(outDir, f"{stem}_overlay.png"),
                                 overlayBorders(meta["filtered"], borders)),
        }
    if show:
        showImage(meta["filtered"], "Original Image")
        showImage(colorMap, "Region Grown Image")
        showImage(borders, "Region Borders")
    return colorMap, borders, meta


# ---------- Batch ----------

def process_batch_sequential(
    paths: List[str],
    params: Optional[Params] = None,
    show: bool = False,
    outDir: Optional[str] = None,
    rng: RngLike = None,
    progress_callback: Optional[ProgressCallback] = None
) -> List[Optional[SegmentationResult]]:
    """
    Segment each path in order. Unreadable images are logged and yield None
    in the result list; the remaining images are still processed.
    With show=True, waits for a key press after each image.
    """
    n = len(paths)
    if n == 0:
        return []
    if not isinstance(rng, np.random.Generator):
        rng = np.random.default_rng(rng)

    results: List[Optional[SegmentationResult]] = []
    for i, path in enumerate(paths):
        try:
            results.append(processImage(path, params, show=show, outDir=outDir, rng=rng))
        except FileNotFoundError as e:
            logger.warning("Skipping image %d/%d: %s", i + 1, n, e)
            results.append(None)
        else:
            if show:
                waitForKey(0)
        if progress_callback:
            progress_callback(i + 1, n)
    return results
