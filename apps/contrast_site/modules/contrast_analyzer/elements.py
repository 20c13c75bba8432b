import math
import re
from typing import Iterable, List, Optional, Union
from .schemas import RGBColor, ElementCheck
from .wcag import contrast_ratio, severity_score, is_compliant

HEX_RE = re.compile(r'#([0-9a-fA-F]{3,8})')
RGB_RE = re.compile(r'rgba?\(\s*([^)]+)\)')

NAMED_COLORS = {
    'black': '#000000',
    'white': '#ffffff',
    'red': '#ff0000',
    'green': '#008000',
    'blue': '#0000ff',
    'yellow': '#ffff00',
    'gray': '#808080',
    'grey': '#808080',
    'silver': '#c0c0c0',
}

def parse_color(value: Union[str, RGBColor]) -> RGBColor:
    """
    Parse a CSS color as reported by getComputedStyle or written in a stylesheet.

    Accepts #rgb, #rrggbb, #rrggbbaa, rgb()/rgba() and a few named colors.
    Alpha is dropped: the pair is compared as if both colors were opaque.
    """
    if isinstance(value, RGBColor):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Unsupported color value: {value!r}")

    s = value.strip().lower()
    s = NAMED_COLORS.get(s, s)

    m = HEX_RE.fullmatch(s)
    if m:
        h = m.group(1)
        if len(h) == 3:
            return RGBColor(*(int(c * 2, 16) for c in h))
        if len(h) in (6, 8):
            return RGBColor(int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16))

    m = RGB_RE.fullmatch(s)
    if m:
        parts = [p.strip() for p in re.split(r'[,\s/]+', m.group(1)) if p.strip()]
        if len(parts) >= 3:
            try:
                channels = [_channel(p) for p in parts[:3]]
            except ValueError:
                channels = None
            if channels is not None:
                return RGBColor(*channels)

    raise ValueError(f"Unsupported color value: {value!r}")

def _channel(part: str) -> int:
    if part.endswith('%'):
        value = float(part[:-1]) * 255 / 100
    else:
        value = float(part)
    if not math.isfinite(value):
        raise ValueError(f"Channel out of range: {part}")
    return max(0, min(255, int(round(value))))

def check_pair(background: Union[str, RGBColor], foreground: Union[str, RGBColor], label: Optional[str] = None) -> ElementCheck:
    """Rate a known background/text color pair directly, without sampling."""
    bg = parse_color(background)
    fg = parse_color(foreground)
    ratio = contrast_ratio(bg, fg)
    return ElementCheck(
        background=bg,
        foreground=fg,
        ratio=ratio,
        score=severity_score(ratio),
        compliant=is_compliant(ratio),
        label=label
    )

def check_elements(pairs: Iterable[dict]) -> List[ElementCheck]:
    """
    Rate each {"background", "foreground", "label"} entry, e.g. collected from
    the DOM by a content script.
    """
    checks = []
    for p in pairs:
        if not isinstance(p, dict):
            raise ValueError(f"Expected an object with background and foreground, got {p!r}")
        checks.append(check_pair(p['background'], p['foreground'], p.get('label')))
    return checks

def violations(checks: Iterable[ElementCheck]) -> List[ElementCheck]:
    return [c for c in checks if not c.compliant]
