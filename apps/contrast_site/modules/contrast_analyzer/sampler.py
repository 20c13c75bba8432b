from typing import List
from .bitmap import Bitmap
from .schemas import RGBColor

SAMPLE_STRIDE = 2

def sample(bitmap: Bitmap, x: int, y: int, width: int, height: int) -> List[RGBColor]:
    """
    Collect RGB samples from every 2nd pixel of a region, in both axes, row by row.
    Alpha is ignored. Pixels that fall outside the bitmap are skipped.
    """
    # Slicing clamps at the bitmap edge, which drops out-of-range pixels
    region = bitmap.data[y:y+height:SAMPLE_STRIDE, x:x+width:SAMPLE_STRIDE, :3]
    return [RGBColor(int(r), int(g), int(b)) for r, g, b in region.reshape((-1, 3))]
