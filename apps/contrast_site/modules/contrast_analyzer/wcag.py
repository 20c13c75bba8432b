import math
from .schemas import RGBColor

AA_UI_MINIMUM = 3.0
MAX_RATIO = 21.0

def linearize(channel: int) -> float:
    """
    sRGB to linear transfer function for a single 0-255 channel (WCAG 2.1).
    """
    c = channel / 255
    if c <= 0.03928:
        return c / 12.92
    return ((c + 0.055) / 1.055) ** 2.4

def relative_luminance(r: int, g: int, b: int) -> float:
    return 0.2126 * linearize(r) + 0.7152 * linearize(g) + 0.0722 * linearize(b)

def contrast_ratio(color_a: RGBColor, color_b: RGBColor) -> float:
    """
    WCAG contrast ratio between two colors, in [1, 21].

    Identical colors have nothing to measure and are reported as 21 so that
    they always pass the compliance check.
    """
    if color_a == color_b:
        return MAX_RATIO

    l1 = relative_luminance(color_a.r, color_a.g, color_a.b)
    l2 = relative_luminance(color_b.r, color_b.g, color_b.b)

    lighter = max(l1, l2)
    darker = min(l1, l2)
    return (lighter + 0.05) / (darker + 0.05)

def severity_score(ratio: float) -> float:
    """
    Map a contrast ratio to a severity in [0, 1].

    1.0 at ratio 1 (no contrast), 0 at the AA line and above, with a cosine
    ease in between.
    """
    if ratio >= AA_UI_MINIMUM:
        return 0.0
    if ratio <= 1.0:
        return 1.0

    t = (ratio - 1.0) / (AA_UI_MINIMUM - 1.0)
    return 0.5 * (1 + math.cos(math.pi * t))

def is_compliant(ratio: float, minimum: float = AA_UI_MINIMUM) -> bool:
    return ratio >= minimum
