# regiongrow/core/__init__.py
# Core algorithms package - pure callables with no GUI dependencies
# Safe for headless testing; only showImage/waitForKey open windows

from .batch import (
    mergeParams,
    processImage,
    process_batch_sequential,
    runSegmentationPipeline,
)
from .borders import extractBorders, overlayBorders
from .growing import (
    BORDER_POLICIES,
    DEFAULTS,
    RegionGrower,
    Sample,
)
from .preprocessing import (
    filterNoise,
    loadImage,
    resizeImage,
    saveImage,
    showImage,
    waitForKey,
)

__all__ = [
    # growing
    "DEFAULTS",
    "BORDER_POLICIES",
    "Sample",
    "RegionGrower",
    # borders
    "extractBorders",
    "overlayBorders",
    # preprocessing
    "filterNoise",
    "loadImage",
    "resizeImage",
    "saveImage",
    "showImage",
    "waitForKey",
    # batch
    "mergeParams",
    "runSegmentationPipeline",
    "processImage",
    "process_batch_sequential",
]
