import os
import json
import uuid
import cv2
from typing import List, Tuple
from .contrast_analyzer.bitmap import Bitmap
from .contrast_analyzer.filters import filter_results
from .contrast_analyzer.overlay import create_overlay_image
from .contrast_analyzer.schemas import AnalysisReport, AnalysisResult

# One analysis = source image + results buffer + current overlay, all keyed by the same id.
# Unique ids keep concurrent uploads from overwriting each other's buffers.

def _check_id(analysis_id: str) -> None:
    if not analysis_id or not all(c in '0123456789abcdef' for c in analysis_id):
        raise ValueError("Invalid analysis id")

def image_filename(analysis_id: str, prefix: str = 'source') -> str:
    return f"{prefix}_{analysis_id}.png"

def results_filename(analysis_id: str) -> str:
    return f"results_{analysis_id}.json"

def overlay_filename(analysis_id: str) -> str:
    return f"overlay_{analysis_id}.png"

def save_analysis(uploads_folder: str, bitmap: Bitmap, report: AnalysisReport, prefix: str = 'source') -> str:
    analysis_id = uuid.uuid4().hex

    cv2.imwrite(os.path.join(uploads_folder, image_filename(analysis_id, prefix)), bitmap.to_bgr())
    with open(os.path.join(uploads_folder, results_filename(analysis_id)), 'w') as f:
        json.dump(report.to_dict(), f)

    return analysis_id

def load_results(uploads_folder: str, analysis_id: str) -> Tuple[List[AnalysisResult], int]:
    """Returns the stored violations and the block size they were computed with."""
    _check_id(analysis_id)
    path = os.path.join(uploads_folder, results_filename(analysis_id))
    if not os.path.exists(path):
        raise ValueError("Analysis not found")

    with open(path) as f:
        data = json.load(f)
    return [AnalysisResult.from_dict(r) for r in data['results']], int(data['block_size'])

def render_overlay(uploads_folder: str, analysis_id: str, source_filename: str, threshold: float) -> Tuple[str, List[AnalysisResult], List[AnalysisResult]]:
    """
    Redraw the overlay for a new threshold from the stored image and results,
    without re-running the analysis.
    """
    all_results, block_size = load_results(uploads_folder, analysis_id)
    visible = filter_results(all_results, threshold)

    source = cv2.imread(os.path.join(uploads_folder, source_filename))
    if source is None:
        raise ValueError("Could not load image")

    filename = overlay_filename(analysis_id)
    cv2.imwrite(os.path.join(uploads_folder, filename), create_overlay_image(source, visible, block_size))
    return filename, all_results, visible

def delete_analysis(uploads_folder: str, item: dict) -> None:
    _check_id(item['analysis_id'])
    for filename in (item.get('image_filename'), item.get('overlay_filename'), results_filename(item['analysis_id'])):
        if filename:
            path = os.path.join(uploads_folder, filename)
            if os.path.exists(path):
                os.remove(path)
