import base64
import cv2
import numpy as np
from typing import Tuple

class InvalidDimensions(ValueError):
    pass

class InvalidRegion(ValueError):
    pass

class Bitmap:
    """
    Decoded RGBA raster, row-major, 4 bytes per pixel.

    Holds its own copy of the pixel buffer so the same image can be handed
    from the capture step to the analysis and render steps.
    """

    def __init__(self, rgba: np.ndarray):
        if rgba.ndim != 3 or rgba.shape[2] != 4:
            raise InvalidDimensions(f"Expected an (h, w, 4) array, got shape {rgba.shape}")
        if rgba.shape[0] == 0 or rgba.shape[1] == 0:
            raise InvalidDimensions("Bitmap must have a positive width and height")
        self.data = np.ascontiguousarray(rgba, dtype=np.uint8)

    @property
    def width(self) -> int:
        return self.data.shape[1]

    @property
    def height(self) -> int:
        return self.data.shape[0]

    def pixel(self, x: int, y: int) -> Tuple[int, int, int, int]:
        r, g, b, a = self.data[y, x]
        return int(r), int(g), int(b), int(a)

    def check_region(self, x: int, y: int, w: int, h: int) -> None:
        if x < 0 or y < 0 or w < 0 or h < 0 or x + w > self.width or y + h > self.height:
            raise InvalidRegion(
                f"Region ({x}, {y}, {w}, {h}) is outside the {self.width}x{self.height} bitmap"
            )

    def to_bgr(self) -> np.ndarray:
        return cv2.cvtColor(self.data, cv2.COLOR_RGBA2BGR)

    @classmethod
    def from_rgba_bytes(cls, width: int, height: int, buffer: bytes) -> "Bitmap":
        if width <= 0 or height <= 0:
            raise InvalidDimensions("Bitmap must have a positive width and height")
        expected = width * height * 4
        if len(buffer) != expected:
            raise InvalidDimensions(f"Expected {expected} bytes for {width}x{height} RGBA, got {len(buffer)}")
        array = np.frombuffer(buffer, dtype=np.uint8).reshape((height, width, 4))
        return cls(array.copy())

    @classmethod
    def from_cv2(cls, image: np.ndarray) -> "Bitmap":
        """
        Wrap an OpenCV image (gray, BGR or BGRA) as an RGBA bitmap.

        16-bit images (PNG can carry them) are reduced to their high byte;
        any other depth is rejected.
        """
        if image.dtype == np.uint16:
            image = (image >> 8).astype(np.uint8)
        elif image.dtype != np.uint8:
            raise InvalidDimensions(f"Unsupported pixel depth: {image.dtype}")
        if image.ndim == 2:
            rgba = cv2.cvtColor(image, cv2.COLOR_GRAY2RGBA)
        elif image.shape[2] == 3:
            rgba = cv2.cvtColor(image, cv2.COLOR_BGR2RGBA)
        elif image.shape[2] == 4:
            rgba = cv2.cvtColor(image, cv2.COLOR_BGRA2RGBA)
        else:
            raise InvalidDimensions(f"Unsupported channel count: {image.shape[2]}")
        return cls(rgba)

    @classmethod
    def decode(cls, encoded: bytes) -> "Bitmap":
        buffer = np.frombuffer(encoded, dtype=np.uint8)
        image = cv2.imdecode(buffer, cv2.IMREAD_UNCHANGED) if buffer.size else None
        if image is None:
            raise ValueError("Could not decode image")
        return cls.from_cv2(image)

    @classmethod
    def from_data_url(cls, data_url: str) -> "Bitmap":
        # data:image/png;base64,....
        if ',' in data_url:
            data_url = data_url.split(',', 1)[1]
        return cls.decode(base64.b64decode(data_url))

    @classmethod
    def load(cls, path: str) -> "Bitmap":
        image = cv2.imread(path, cv2.IMREAD_UNCHANGED)
        if image is None:
            raise ValueError("Could not load image")
        return cls.from_cv2(image)
