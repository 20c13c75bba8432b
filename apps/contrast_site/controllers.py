import os
import json
import uuid
import logging
import cv2
from py4web import action, request, response, abort, redirect, URL
from ombott import static_file
from .common import session, T, url_signer
from .settings import (
    UPLOADS_FOLDER, ANALYSIS_BLOCK_SIZE, CLUSTER_COUNT, ANALYSIS_WORKERS,
    DEFAULT_THRESHOLD, HISTORY_LIMIT, ALLOWED_EXTENSIONS
)
from .modules.analysis_store import save_analysis, image_filename, overlay_filename, render_overlay, delete_analysis
from .modules.contrast_analyzer.bitmap import Bitmap
from .modules.contrast_analyzer.elements import check_elements, violations
from .modules.contrast_analyzer.filters import summarize, slider_to_threshold, threshold_to_slider
from .modules.contrast_analyzer.grid import run_analysis
from .modules.demo_utils import generate_dummy_history, create_sample_page

logger = logging.getLogger(__name__)

def _empty_result(error=None, **extra):
    result = dict(
        error=error,
        analysis_id=None,
        image_url=None,
        overlay_url=None,
        summary=None,
        json_data=None,
        image_width=None,
        image_height=None,
        threshold=session.get('threshold', DEFAULT_THRESHOLD),
        slider_value=threshold_to_slider(session.get('threshold', DEFAULT_THRESHOLD)),
        block_size=ANALYSIS_BLOCK_SIZE,
        refilter_url=URL('refilter', signer=url_signer),
        history=session.get('analysis_history', [])
    )
    result.update(extra)
    return result

def _read_threshold():
    # The page slider is linear 0-100; plain API clients send the ratio itself
    slider = request.forms.get('slider')
    if slider not in (None, ''):
        threshold = slider_to_threshold(float(slider))
    else:
        threshold = float(request.forms.get('threshold', session.get('threshold', DEFAULT_THRESHOLD)))
    session['threshold'] = threshold
    return threshold

def _read_upload():
    """
    Returns the uploaded image as a Bitmap, either from a file field or from a
    captured screenshot posted as a data URL. None when nothing was sent.
    """
    uploaded_file = request.files.get('image')
    if uploaded_file and uploaded_file.filename:
        ext = os.path.splitext(uploaded_file.filename)[1].lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise ValueError("Invalid file type")
        return Bitmap.decode(uploaded_file.file.read())

    screenshot_data = request.forms.get('screenshot_data')
    if screenshot_data:
        return Bitmap.from_data_url(screenshot_data)
    return None

def _show_analysis(item, threshold):
    overlay, all_results, visible = render_overlay(
        UPLOADS_FOLDER, item['analysis_id'], item['image_filename'], threshold
    )
    results_dict = {
        "analysis_id": item['analysis_id'],
        "block_size": ANALYSIS_BLOCK_SIZE,
        "summary": summarize(all_results, threshold),
        "violations": [r.to_dict() for r in visible]
    }
    return _empty_result(
        analysis_id=item['analysis_id'],
        image_url=URL('uploads', item['image_filename']),
        overlay_url=URL('uploads', overlay, vars=dict(v=uuid.uuid4().hex[:8])),
        summary=results_dict['summary'],
        json_data=json.dumps(results_dict, indent=2),
        image_width=item['image_width'],
        image_height=item['image_height'],
        threshold=threshold,
        slider_value=threshold_to_slider(threshold)
    )

def _find_history_item(analysis_id):
    for item in session.get('analysis_history', []):
        if item['analysis_id'] == analysis_id:
            return item
    return None

# Dashboard
@action('index')
@action.uses('index.html', session, T)
def index():
    history = session.get('analysis_history', [])
    return dict(history=history)

@action('populate_demo', method='POST')
@action.uses(session)
def populate_demo():
    generate_dummy_history(session, UPLOADS_FOLDER, num_items=3, block_size=ANALYSIS_BLOCK_SIZE,
                           threshold=session.get('threshold', DEFAULT_THRESHOLD))
    redirect(URL('index'))

@action('clear_history', method='POST')
@action.uses(session)
def clear_history():
    for item in session.get('analysis_history', []):
        try:
            delete_analysis(UPLOADS_FOLDER, item)
        except (OSError, ValueError) as e:
            logger.warning("Could not delete analysis %s: %s", item.get('analysis_id'), e)
    session['analysis_history'] = []
    redirect(URL('index'))

# Screenshot contrast checker
@action('contrast_checker', method=['GET', 'POST'])
@action.uses('contrast_checker.html', session, T)
def contrast_checker():
    if 'analysis_history' not in session:
        session['analysis_history'] = []

    # GET - empty form, or a previous analysis from history
    if request.method == 'GET':
        analysis_id = request.params.get('analysis')
        if not analysis_id:
            return _empty_result()
        item = _find_history_item(analysis_id)
        if item is None:
            return _empty_result(error="Analysis not found")
        try:
            return _show_analysis(item, session.get('threshold', DEFAULT_THRESHOLD))
        except Exception as e:
            logger.exception("Could not show analysis %s", analysis_id)
            return _empty_result(error=str(e))

    # POST - analyze an upload
    try:
        threshold = _read_threshold()
        bitmap = _read_upload()
        if bitmap is None:
            return _empty_result(error="No file selected")

        logger.info("Analyzing upload %dx%d", bitmap.width, bitmap.height)
        report = run_analysis(bitmap, block_size=ANALYSIS_BLOCK_SIZE, k=CLUSTER_COUNT, workers=ANALYSIS_WORKERS)
        analysis_id = save_analysis(UPLOADS_FOLDER, bitmap, report)

        item = {
            'analysis_id': analysis_id,
            'image_filename': image_filename(analysis_id),
            'overlay_filename': None,
            'image_width': bitmap.width,
            'image_height': bitmap.height,
            'num_violations': len(report.results),
            'processing_time_ms': report.processing_time_ms
        }
        result = _show_analysis(item, threshold)
        item['overlay_filename'] = overlay_filename(analysis_id)

        # Prepend to history (most recent first)
        session['analysis_history'].insert(0, item)
        session['analysis_history'] = session['analysis_history'][:HISTORY_LIMIT]
        result['history'] = session['analysis_history']
        return result

    except Exception as e:
        logger.exception("Contrast analysis failed")
        return _empty_result(error=str(e))

# Threshold change: redraw from the stored results, no re-analysis
@action('refilter', method='POST')
@action.uses('contrast_checker.html', session, T, url_signer.verify())
def refilter():
    try:
        threshold = _read_threshold()
        analysis_id = request.forms.get('analysis_id')
        item = _find_history_item(analysis_id)
        if item is None:
            return _empty_result(error="Analysis not found")
        return _show_analysis(item, threshold)
    except Exception as e:
        logger.exception("Refilter failed")
        return _empty_result(error=str(e))

# JSON API
@action('api/analyze', method='POST')
def api_analyze():
    try:
        bitmap = _read_upload()
        if bitmap is None:
            response.status = 400
            return dict(error="No file selected")
        block_size = int(request.forms.get('block_size', ANALYSIS_BLOCK_SIZE))
        report = run_analysis(bitmap, block_size=block_size, k=CLUSTER_COUNT, workers=ANALYSIS_WORKERS)
        threshold = float(request.forms.get('threshold', DEFAULT_THRESHOLD))
        return dict(report.to_dict(), summary=summarize(report.results, threshold))
    except ValueError as e:
        response.status = 400
        return dict(error=str(e))

@action('api/check_elements', method='POST')
def api_check_elements():
    try:
        payload = request.json or {}
        if not isinstance(payload, dict) or not isinstance(payload.get('pairs', []), list):
            raise ValueError("Expected a JSON object with a 'pairs' list")
        checks = check_elements(payload.get('pairs', []))
    except (KeyError, TypeError, ValueError) as e:
        response.status = 400
        return dict(error=str(e))
    return dict(
        checks=[c.to_dict() for c in checks],
        violations=len(violations(checks))
    )

# Sample page generator
@action('sample_generator', method=['GET', 'POST'])
@action.uses('sample_generator.html', session, T)
def sample_generator():
    if request.method == 'GET':
        return dict(error=None, image_url=None, image_filename=None, image_width=None,
                    image_height=None, panels=[], form_data={})

    try:
        img_width = int(request.forms.get('img_width', 400))
        img_height = int(request.forms.get('img_height', 300))
        num_panels = int(request.forms.get('num_panels', 6))
        min_size = int(request.forms.get('min_size', 32))
        max_size = int(request.forms.get('max_size', 96))
        bg_color_hex = request.forms.get('bg_color', '#f0f0f0')
        low_contrast_share = float(request.forms.get('low_contrast_share', 0.5))

        image, panels = create_sample_page(
            img_width, img_height, num_panels,
            min_size=min_size, max_size=max_size,
            bg_color_hex=bg_color_hex,
            low_contrast_share=low_contrast_share
        )

        filename = f"sample_{uuid.uuid4()}.png"
        cv2.imwrite(os.path.join(UPLOADS_FOLDER, filename), image)

        return dict(
            error=None,
            image_url=URL('uploads', filename),
            image_filename=filename,
            image_width=img_width,
            image_height=img_height,
            panels=panels,
            form_data={
                'img_width': img_width, 'img_height': img_height,
                'num_panels': num_panels,
                'min_size': min_size, 'max_size': max_size,
                'bg_color': bg_color_hex,
                'low_contrast_share': low_contrast_share
            }
        )

    except Exception as e:
        logger.exception("Sample generation failed")
        return dict(error=str(e), image_url=None, image_filename=None, image_width=None,
                    image_height=None, panels=[], form_data={})

# Serve uploads
@action('uploads/<filename>')
def serve_upload(filename):
    # Prevent path traversal attacks
    if '..' in filename or '/' in filename or '\\' in filename:
        abort(403)
    filepath = os.path.join(UPLOADS_FOLDER, filename)
    if not os.path.abspath(filepath).startswith(os.path.abspath(UPLOADS_FOLDER)):
        abort(403)
    return static_file(filename, root=UPLOADS_FOLDER)
