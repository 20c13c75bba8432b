import numpy as np
from typing import List
from .schemas import AnalysisResult

# Deep pink, BGR
HIGHLIGHT_BGR = (147, 20, 255)

def fill_alpha(score: float) -> float:
    return score * 0.6 + 0.1

def stroke_alpha(score: float) -> float:
    return score * 0.8 + 0.2

def _blend(region: np.ndarray, alpha: float) -> None:
    color = np.array(HIGHLIGHT_BGR, dtype=np.float32)
    blended = region.astype(np.float32) * (1 - alpha) + color * alpha
    region[...] = np.clip(np.rint(blended), 0, 255).astype(np.uint8)

def create_overlay_image(original_image: np.ndarray, results: List[AnalysisResult], block_size: int = 16) -> np.ndarray:
    """
    Draws a translucent highlight over each flagged block on a copy of the BGR image.
    Fill and outline opacity grow with the block's severity score.
    """
    overlay = original_image.copy()
    h_img, w_img = overlay.shape[:2]

    for result in results:
        x1, y1 = result.x, result.y
        x2 = min(w_img, result.x + block_size)
        y2 = min(h_img, result.y + block_size)
        if x1 >= x2 or y1 >= y2:
            continue

        _blend(overlay[y1:y2, x1:x2], fill_alpha(result.score))

        # 1px outline; corners belong to the horizontal edges only
        alpha = stroke_alpha(result.score)
        _blend(overlay[y1, x1:x2], alpha)
        if y2 - 1 > y1:
            _blend(overlay[y2 - 1, x1:x2], alpha)
        if y2 - y1 > 2:
            _blend(overlay[y1 + 1:y2 - 1, x1], alpha)
            if x2 - 1 > x1:
                _blend(overlay[y1 + 1:y2 - 1, x2 - 1], alpha)

    return overlay
