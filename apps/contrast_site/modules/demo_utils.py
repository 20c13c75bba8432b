import random
import cv2
import numpy as np
from .analysis_store import save_analysis, image_filename, render_overlay
from .contrast_analyzer.bitmap import Bitmap
from .contrast_analyzer.elements import parse_color
from .contrast_analyzer.grid import run_analysis
from .contrast_analyzer.schemas import RGBColor
from .contrast_analyzer.wcag import contrast_ratio, is_compliant

BLACK = RGBColor(0, 0, 0)
WHITE = RGBColor(255, 255, 255)

def _to_bgr(color: RGBColor):
    return (color.b, color.g, color.r)

def low_contrast_text_color(panel: RGBColor, rng=random) -> RGBColor:
    """
    A text color a few steps away from the panel color.
    A shift of at most 40 per channel stays below 3:1 everywhere on the 0-255 range.
    """
    delta = rng.randint(16, 40)
    direction = 1 if (panel.r + panel.g + panel.b) / 3 < 128 else -1
    shift = lambda c: max(0, min(255, c + direction * delta))
    return RGBColor(shift(panel.r), shift(panel.g), shift(panel.b))

def high_contrast_text_color(panel: RGBColor) -> RGBColor:
    if contrast_ratio(panel, BLACK) >= contrast_ratio(panel, WHITE):
        return BLACK
    return WHITE

def draw_text_bars(image, x, y, w, h, color_bgr, rng=random):
    """Fill a panel with horizontal bars standing in for lines of text."""
    line_height = 6
    margin = 4
    ty = y + margin
    while ty + line_height <= y + h - margin:
        bar_w = max(4, int((w - 2 * margin) * rng.uniform(0.5, 1.0)))
        cv2.rectangle(image, (x + margin, ty), (x + margin + bar_w - 1, ty + line_height // 2 - 1), color_bgr, -1)
        ty += line_height

def create_sample_page(width, height, num_panels, min_size=32, max_size=96, bg_color_hex='#f0f0f0', low_contrast_share=0.5, seed=None):
    """
    Render a synthetic UI page: rectangular panels with text-like bars,
    some of them in a color too close to the panel color.

    Returns the BGR image and the list of panels with their colors and ratios.
    """
    rng = random.Random(seed)
    bg_color = parse_color(bg_color_hex)
    image = np.full((height, width, 3), _to_bgr(bg_color), dtype=np.uint8)

    panels = []
    attempts = 0
    max_attempts = num_panels * 20

    while len(panels) < num_panels and attempts < max_attempts:
        attempts += 1

        w = rng.randint(min_size, max_size)
        h = rng.randint(min_size, max_size)
        if w >= width - 4 or h >= height - 4:
            continue
        x = rng.randint(2, width - w - 2)
        y = rng.randint(2, height - h - 2)

        overlap = False
        for p in panels:
            if (x < p['x'] + p['w'] + 2 and x + w + 2 > p['x'] and
                y < p['y'] + p['h'] + 2 and y + h + 2 > p['y']):
                overlap = True
                break
        if overlap:
            continue

        panel = RGBColor(rng.randint(0, 255), rng.randint(0, 255), rng.randint(0, 255))
        if rng.random() < low_contrast_share:
            text = low_contrast_text_color(panel, rng)
        else:
            text = high_contrast_text_color(panel)

        cv2.rectangle(image, (x, y), (x + w - 1, y + h - 1), _to_bgr(panel), -1)
        draw_text_bars(image, x, y, w, h, _to_bgr(text), rng)

        ratio = contrast_ratio(panel, text)
        panels.append({
            'x': x, 'y': y, 'w': w, 'h': h,
            'panel_color': panel.to_hex(),
            'text_color': text.to_hex(),
            'ratio': round(ratio, 2),
            'compliant': is_compliant(ratio)
        })

    return image, panels

def generate_dummy_history(session, uploads_folder, num_items=3, block_size=16, threshold=1.0):
    """
    Fill the session history with analyses of generated sample pages.
    Uses the same analysis and storage path as real uploads.
    """
    if 'analysis_history' not in session:
        session['analysis_history'] = []

    presets = [
        {"w": 640, "h": 480, "num": 8, "bg": "#f0f0f0"},
        {"w": 400, "h": 400, "num": 5, "bg": "#ffffff"},
        {"w": 800, "h": 600, "num": 12, "bg": "#202020"},
    ]

    for _ in range(num_items):
        preset = random.choice(presets)
        image, _ = create_sample_page(preset['w'], preset['h'], preset['num'], bg_color_hex=preset['bg'])

        bitmap = Bitmap.from_cv2(image)
        report = run_analysis(bitmap, block_size=block_size)
        analysis_id = save_analysis(uploads_folder, bitmap, report, prefix='demo')
        source = image_filename(analysis_id, 'demo')
        overlay, _, _ = render_overlay(uploads_folder, analysis_id, source, threshold)

        session['analysis_history'].insert(0, {
            'analysis_id': analysis_id,
            'image_filename': source,
            'overlay_filename': overlay,
            'image_width': preset['w'],
            'image_height': preset['h'],
            'num_violations': len(report.results),
            'is_demo': True
        })

    session['analysis_history'] = session['analysis_history'][:20]
    return len(session['analysis_history'])
