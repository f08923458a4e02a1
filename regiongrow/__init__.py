# regiongrow/__init__.py
# regiongrow package root
"""
regiongrow - Seeded region growing segmentation for grayscale images

Subpackages:
    core - Pure algorithms (median filter, region growing, merge, borders)

Quick start:
    python -m regiongrow image1.jpg image2.jpg   # segment and display

    # Or use core algorithms directly:
    from regiongrow.core import RegionGrower, extractBorders
"""

# Re-export commonly used items from core for convenience
from .core import (
    DEFAULTS,
    RegionGrower,
    Sample,
    extractBorders,
    filterNoise,
    loadImage,
    overlayBorders,
    process_batch_sequential,
    processImage,
    resizeImage,
    runSegmentationPipeline,
)

__version__ = "0.1.0"

__all__ = [
    "DEFAULTS",
    "Sample",
    "RegionGrower",
    "filterNoise",
    "extractBorders",
    "overlayBorders",
    "loadImage",
    "resizeImage",
    "runSegmentationPipeline",
    "processImage",
    "process_batch_sequential",
]
