import os
import sys
import cv2
import numpy as np
import requests

# Make the repo root and the app folder importable when run from the tests folder
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'apps', 'contrast_site'))

from modules.contrast_analyzer.bitmap import Bitmap

# Configuration
BASE_URL = os.environ.get("TEST_BASE_URL", "http://127.0.0.1:8000/contrast_site")

def server_available():
    """True when a py4web server is answering at BASE_URL."""
    try:
        requests.get(f"{BASE_URL}/index", timeout=2)
        return True
    except requests.RequestException:
        return False

def uniform_bitmap(width, height, rgb):
    data = np.zeros((height, width, 4), dtype=np.uint8)
    data[:, :, :3] = rgb
    data[:, :, 3] = 255
    return Bitmap(data)

def striped_bitmap(width, height, rgb_a, rgb_b, stripe=2):
    """Vertical stripes alternating every `stripe` columns, starting with rgb_a."""
    data = np.zeros((height, width, 4), dtype=np.uint8)
    for x in range(width):
        data[:, x, :3] = rgb_a if (x // stripe) % 2 == 0 else rgb_b
    data[:, :, 3] = 255
    return Bitmap(data)

def create_test_image(filename, width=64, height=64, panel=(128, 128, 128), text=(100, 100, 100)):
    """Writes a PNG with a low-contrast striped panel in the top-left 32x32 corner."""
    img = np.full((height, width, 3), 255, dtype=np.uint8)
    for x in range(0, 32):
        color = panel if (x // 2) % 2 == 0 else text
        img[0:32, x] = color[::-1]
    cv2.imwrite(filename, img)
    return filename

def remove_test_image(filename):
    """Removes the test image if it exists."""
    if os.path.exists(filename):
        os.remove(filename)

def create_dummy_text_file(filename, content="dummy content"):
    """Creates a dummy text file."""
    with open(filename, 'w') as f:
        f.write(content)
    return filename
