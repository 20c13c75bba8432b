import math
from typing import List, Sequence
from .schemas import AnalysisResult

MIN_CONTRAST = 1.0
MAX_CONTRAST = 4.5
SLIDER_MAX = 100
CURVE_POWER = 2.5

def filter_results(all_results: Sequence[AnalysisResult], threshold: float) -> List[AnalysisResult]:
    """
    Keep the results whose ratio is at or above the threshold.

    Every result is already below 3.0, so raising the threshold towards 3.0
    reveals more of them; at 3.0 nothing is shown, at 1.0 everything is.
    """
    return [r for r in all_results if r.ratio >= threshold]

def summarize(all_results: Sequence[AnalysisResult], threshold: float) -> dict:
    visible = filter_results(all_results, threshold)
    total = len(all_results)

    summary = {
        'total': total,
        'visible': len(visible),
        'hidden': total - len(visible),
        'threshold': threshold,
        'worst_ratio': None,
        'average_score': None
    }
    if visible:
        summary['worst_ratio'] = min(r.ratio for r in visible)
        summary['average_score'] = sum(r.score for r in visible) / len(visible)
    return summary

def slider_to_threshold(slider_value: float) -> float:
    """
    Map a linear 0-100 slider position onto the 1.0-4.5 contrast scale,
    with more resolution at the low end. Out-of-range positions are clamped;
    the result is rounded half up to two decimals.
    """
    slider_value = max(0.0, min(float(SLIDER_MAX), slider_value))
    normalized = slider_value / SLIDER_MAX
    curved = normalized ** CURVE_POWER
    value = MIN_CONTRAST + curved * (MAX_CONTRAST - MIN_CONTRAST)
    return math.floor(value * 100 + 0.5) / 100

def threshold_to_slider(threshold: float) -> float:
    if threshold <= MIN_CONTRAST:
        return 0.0
    if threshold >= MAX_CONTRAST:
        return float(SLIDER_MAX)

    normalized = (threshold - MIN_CONTRAST) / (MAX_CONTRAST - MIN_CONTRAST)
    return normalized ** (1 / CURVE_POWER) * SLIDER_MAX
