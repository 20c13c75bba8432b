import logging
import math
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import List
from .bitmap import Bitmap, InvalidDimensions
from .clustering import cluster
from .sampler import sample
from .schemas import AnalysisResult, AnalysisReport
from .wcag import contrast_ratio, severity_score, is_compliant, MAX_RATIO

logger = logging.getLogger(__name__)

MIN_BLOCK_EDGE = 4

def analyze_region(bitmap: Bitmap, x: int, y: int, width: int, height: int, k: int = 2) -> AnalysisResult:
    """
    Evaluate one region: sample, reduce to k dominant colors, rate the first two.

    A region with fewer than two dominant colors has nothing to compare and
    is reported as compliant with ratio 21 and score 0. Raises InvalidRegion
    when the region does not lie inside the bitmap.
    """
    bitmap.check_region(x, y, width, height)
    samples = sample(bitmap, x, y, width, height)
    colors = tuple(cluster(samples, k)) if samples else ()

    if len(colors) < 2:
        return AnalysisResult(x=x, y=y, ratio=MAX_RATIO, score=0.0, colors=colors, compliant=True)

    ratio = contrast_ratio(colors[0], colors[1])
    return AnalysisResult(
        x=x, y=y,
        ratio=ratio,
        score=severity_score(ratio),
        colors=colors,
        compliant=is_compliant(ratio)
    )

def _analyze_row(bitmap: Bitmap, y: int, block_size: int, k: int) -> List[AnalysisResult]:
    results = []
    h = min(block_size, bitmap.height - y)

    for x in range(0, bitmap.width, block_size):
        w = min(block_size, bitmap.width - x)
        if w < MIN_BLOCK_EDGE or h < MIN_BLOCK_EDGE:
            continue

        region = analyze_region(bitmap, x, y, w, h, k)
        if not region.compliant:
            results.append(region)

    return results

def analyze(bitmap: Bitmap, block_size: int = 16, k: int = 2, workers: int = 1) -> List[AnalysisResult]:
    """
    Scan the bitmap in block_size steps and return every block whose two
    dominant colors fail the 3:1 AA ratio, in row-major order.

    Edge blocks are clamped to the bitmap; blocks narrower or shorter than
    4 pixels are skipped. With workers > 1 the block rows are spread over a
    thread pool and the results are put back in (y, x) order.
    """
    if block_size < 1:
        raise InvalidDimensions(f"block_size must be positive, got {block_size}")
    if k < 1:
        raise InvalidDimensions(f"k must be positive, got {k}")

    rows = range(0, bitmap.height, block_size)

    if workers <= 1:
        results = []
        for y in rows:
            results.extend(_analyze_row(bitmap, y, block_size, k))
        return results

    results = []
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(_analyze_row, bitmap, y, block_size, k) for y in rows]
        for future in as_completed(futures):
            results.extend(future.result())

    results.sort(key=lambda r: (r.y, r.x))
    return results

def run_analysis(bitmap: Bitmap, block_size: int = 16, k: int = 2, workers: int = 1) -> AnalysisReport:
    start_time = time.time()
    logger.debug("Analyzing %dx%d bitmap (block=%d, k=%d)", bitmap.width, bitmap.height, block_size, k)

    results = analyze(bitmap, block_size=block_size, k=k, workers=workers)

    processing_time = (time.time() - start_time) * 1000
    blocks = math.ceil(bitmap.width / block_size) * math.ceil(bitmap.height / block_size)
    logger.info(
        "Contrast analysis: %d blocks, %d violations in %dx%d image, %.1fms",
        blocks, len(results), bitmap.width, bitmap.height, processing_time
    )

    return AnalysisReport(
        results=results,
        width=bitmap.width,
        height=bitmap.height,
        block_size=block_size,
        processing_time_ms=processing_time
    )
