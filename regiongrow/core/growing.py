# regiongrow/core/growing.py
# Seeded region growing + border statistics + region merging
# Pure callables with no GUI dependencies - safe for headless testing

from __future__ import annotations
import logging
import math
from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, List, Optional, Tuple, Union

import numpy as np

from .preprocessing import _prepGray

logger = logging.getLogger(__name__)

# --------------------- Defaults (edit freely) ---------------------
DEFAULTS: Dict[str, Dict[str, float | int | str]] = {
    "image": {
        "width": 512,            # working size after resize
        "height": 512,
    },
    "filter": {
        "kernelSize": 1,         # odd > 1 enables the median filter
    },
    "growth": {
        "seedCount": 200,
        "growthThreshold": 3,    # max |I(a) - I(b)| to grow into a neighbor
    },
    "merge": {
        "mergeIntensityThreshold": 10,  # max |I(a) - I(b)| for a similar border pixel
        "similarityThreshold": 0.5,     # merge when similar/effective > this
        "borderPolicy": "directional",  # "directional" | "canonical"
    },
    "borders": {
        "thickness": 1,
    },
}
# ------------------------------------------------------------------

BORDER_POLICIES = ("directional", "canonical")

# Type aliases for clarity
IntensityGrid = np.ndarray  # np.uint8, shape (H,W)
LabelMap = np.ndarray  # np.int32, shape (H,W), 0=unlabeled, 1..N=regions
ColorMap = np.ndarray  # np.uint8, shape (H,W,3) BGR
RngLike = Union[None, int, np.random.Generator]


# ---------- Data Model ----------

@dataclass(frozen=True)
class Sample:
    # label is the region proposing to own this pixel; the label grid is authoritative
    label: int
    x: int
    y: int
    intensity: int


# ---------- Region grower ----------

class RegionGrower:
    """
    Owns one intensity grid and its label grid for a single segmentation run.

    Typical use is execute(seedCount), which chains seed -> grow ->
    computeBorderStats -> merge -> colorize. The steps are public so tests
    and callers can inspect the intermediate label grid and statistics.
    """

    def __init__(
        self,
        img: np.ndarray,
        growthThreshold: int = int(DEFAULTS["growth"]["growthThreshold"]),
        mergeIntensityThreshold: int = int(DEFAULTS["merge"]["mergeIntensityThreshold"]),
        similarityThreshold: float = float(DEFAULTS["merge"]["similarityThreshold"]),
        borderPolicy: str = str(DEFAULTS["merge"]["borderPolicy"]),
    ):
        if borderPolicy not in BORDER_POLICIES:
            raise ValueError(f"Unknown border policy: {borderPolicy}")
        # private copy so the caller's array is never touched
        self.image: IntensityGrid = _prepGray(img).copy()
        self.image.flags.writeable = False
        h, w = self.image.shape
        self.labels: LabelMap = np.zeros((h, w), dtype=np.int32)
        self.queue: Deque[Sample] = deque()

        self.growthThreshold = int(growthThreshold)
        self.mergeIntensityThreshold = int(mergeIntensityThreshold)
        self.similarityThreshold = float(similarityThreshold)
        self.borderPolicy = borderPolicy

        self.seedCount = 0
        self.seedsPlaced = 0
        self.borderEffectiveness: Optional[np.ndarray] = None
        self.borderSimilarity: Optional[np.ndarray] = None
        self.regionMapping: Optional[np.ndarray] = None
        self.colorTable: Optional[np.ndarray] = None

    @property
    def shape(self) -> Tuple[int, int]:
        return self.image.shape  # type: ignore[return-value]

    # ---------------- seeding ----------------

    def seed(self, seedCount: int) -> Tuple[LabelMap, List[Sample]]:
        """
        Place up to seedCount seeds at the centers of a ceil(sqrt(n)) square grid.

        Cells are visited row-major; a center outside the image is clamped to
        the last row/column. A center that already carries a label is skipped,
        so small images can end up with fewer seeds than requested.
        Returns (labels, seeds) and leaves the seeds queued for grow().
        """
        seedCount = int(seedCount)
        if seedCount < 1:
            raise ValueError(f"seedCount must be >= 1, got {seedCount}")

        self.seedCount = seedCount
        n = seedCount + 1
        self.borderEffectiveness = np.zeros((n, n), dtype=np.int64)
        self.borderSimilarity = np.zeros((n, n), dtype=np.float64)
        self.regionMapping = None
        self.colorTable = None

        h, w = self.shape
        gridRows = gridCols = int(math.ceil(math.sqrt(seedCount)))
        dx = w // gridCols
        dy = h // gridRows

        seeds: List[Sample] = []
        seedIndex = 1
        for i in range(gridRows):
            for j in range(gridCols):
                if seedIndex > seedCount:
                    break
                x = min(j * dx + dx // 2, w - 1)
                y = min(i * dy + dy // 2, h - 1)
                if self.labels[y, x] == 0:
                    self.labels[y, x] = seedIndex
                    s = Sample(seedIndex, x, y, int(self.image[y, x]))
                    self.queue.append(s)
                    seeds.append(s)
                    seedIndex += 1

        self.seedsPlaced = len(seeds)
        if self.seedsPlaced < seedCount:
            logger.debug("Placed %d of %d requested seeds on a %dx%d image",
                         self.seedsPlaced, seedCount, w, h)
        return self.labels, seeds

    # ---------------- growth ----------------

    def _neighbors(self, x: int, y: int) -> List[Tuple[int, int]]:
        h, w = self.shape
        out = []
        for nx, ny in ((x - 1, y), (x + 1, y), (x, y - 1), (x, y + 1)):
            if 0 <= nx < w and 0 <= ny < h:
                out.append((nx, ny))
        return out

    def grow(self) -> LabelMap:
        """
        Breadth-first growth from every queued sample until the queue drains.

        A neighbor joins the popped sample's region when it is still unlabeled
        and its intensity is within growthThreshold of the popped sample.
        Ownership of contested pixels follows enqueue order only.
        """
        img = self.image
        labels = self.labels
        thr = self.growthThreshold
        queue = self.queue
        grown = 0

        while queue:
            current = queue.popleft()
            for nx, ny in self._neighbors(current.x, current.y):
                if labels[ny, nx] != 0:
                    continue
                value = int(img[ny, nx])
                if abs(current.intensity - value) <= thr:
                    labels[ny, nx] = current.label
                    queue.append(Sample(current.label, nx, ny, value))
                    grown += 1

        logger.debug("Growth labeled %d pixels, %d left unlabeled",
                     grown, int(np.count_nonzero(labels == 0)))
        return labels

    # ---------------- border statistics ----------------

    def computeBorderStats(self) -> Tuple[np.ndarray, np.ndarray]:
        """
        Count right/down neighbor pairs whose labels differ.

        borderEffectiveness[a, b] counts every such pair, borderSimilarity[a, b]
        only those with |I(a) - I(b)| <= mergeIntensityThreshold. With the
        "directional" policy (a, b) is (current, neighbor) in raster order, so
        the matrices are not symmetric; "canonical" stores at (min, max).
        Label 0 (unreached pixels) is counted like any other region.
        """
        if self.borderEffectiveness is None or self.borderSimilarity is None:
            raise ValueError("computeBorderStats() requires seed() first")

        eff = self.borderEffectiveness
        sim = self.borderSimilarity
        eff[:] = 0
        sim[:] = 0.0
        self.regionMapping = None

        labs = self.labels
        img = self.image.astype(np.int16)
        pairs = (
            (labs[:, :-1], labs[:, 1:], img[:, :-1], img[:, 1:]),  # right neighbor
            (labs[:-1, :], labs[1:, :], img[:-1, :], img[1:, :]),  # down neighbor
        )
        for curLab, nbLab, curVal, nbVal in pairs:
            diff = curLab != nbLab
            a = curLab[diff]
            b = nbLab[diff]
            if self.borderPolicy == "canonical":
                a, b = np.minimum(a, b), np.maximum(a, b)
            similar = np.abs(curVal[diff] - nbVal[diff]) <= self.mergeIntensityThreshold
            np.add.at(eff, (a, b), 1)
            np.add.at(sim, (a[similar], b[similar]), 1.0)

        logger.debug("Border scan found %d differing adjacencies", int(eff.sum()))
        return eff, sim

    # ---------------- merge ----------------

    def merge(self) -> LabelMap:
        """
        Single greedy sweep over region pairs (i, j), 1 <= i <= j, row-major.

        For each pair with a border, the similarity count is turned into a
        ratio in place; above similarityThreshold, mapping[j] = mapping[i].
        The label grid is then relabeled with one lookup per pixel, chains
        are not followed. Runs once per computeBorderStats(), since the
        ratios replace the similarity counts.
        """
        if self.borderEffectiveness is None or self.borderSimilarity is None:
            raise ValueError("merge() requires seed() first")
        if self.regionMapping is not None:
            raise ValueError("merge() already ran; call computeBorderStats() again first")

        eff = self.borderEffectiveness
        sim = self.borderSimilarity
        mapping = np.arange(self.seedCount + 1, dtype=np.int32)

        # nonzero() yields row-major order, i.e. increasing i then increasing j
        upper = np.triu(eff)
        upper[0, :] = 0
        merges = 0
        for i, j in zip(*np.nonzero(upper)):
            sim[i, j] /= eff[i, j]
            if sim[i, j] > self.similarityThreshold:
                mapping[j] = mapping[i]
                merges += 1

        self.regionMapping = mapping
        self.labels = mapping[self.labels]
        logger.debug("Merge sweep redirected %d region pairs", merges)
        return self.labels

    # ---------------- visualization ----------------

    def colorize(self, rng: RngLike = None) -> ColorMap:
        """
        Map every label to a random BGR color; label 0 stays black and no
        region draws a zero channel, so regions never look unreached.
        Pass an int or a numpy Generator for reproducible colors.
        """
        if not isinstance(rng, np.random.Generator):
            rng = np.random.default_rng(rng)
        n = max(self.seedCount, int(self.labels.max()))
        palette = rng.integers(1, 256, size=(n + 1, 3), dtype=np.uint8)
        palette[0] = (0, 0, 0)
        self.colorTable = palette
        return palette[self.labels]

    def regionCount(self) -> int:
        """Number of distinct nonzero labels currently in the label grid."""
        u = np.unique(self.labels)
        return int(np.count_nonzero(u))

    def segment(self, seedCount: int = int(DEFAULTS["growth"]["seedCount"])) -> Dict[str, int]:
        """
        Run seed -> grow -> computeBorderStats -> merge.
        Returns counts describing the run (seeds, regions, unlabeled pixels).
        """
        self.seed(seedCount)
        self.grow()
        counts = {
            "seedsRequested": self.seedCount,
            "seedsPlaced": self.seedsPlaced,
            "regionsAfterGrowth": self.regionCount(),
            "unlabeledPx": int(np.count_nonzero(self.labels == 0)),
        }
        self.computeBorderStats()
        self.merge()
        counts["regionsAfterMerge"] = self.regionCount()
        logger.info("Segmented %dx%d image: %d seeds -> %d grown regions -> %d merged regions (%d px unlabeled)",
                    self.shape[1], self.shape[0], counts["seedsPlaced"], counts["regionsAfterGrowth"],
                    counts["regionsAfterMerge"], counts["unlabeledPx"])
        return counts

    def execute(self, seedCount: int = int(DEFAULTS["growth"]["seedCount"]), rng: RngLike = None) -> ColorMap:
        """Run segment() then colorize()."""
        self.segment(seedCount)
        return self.colorize(rng)
