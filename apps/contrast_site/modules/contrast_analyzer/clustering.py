import numpy as np
from typing import List, Sequence
from .schemas import RGBColor

MAX_ITERATIONS = 10

def _round_half_up(values: np.ndarray) -> np.ndarray:
    # Means are non-negative, so floor(v + 0.5) rounds .5 upwards instead of to even
    return np.floor(values + 0.5)

def cluster(colors: Sequence[RGBColor], k: int) -> List[RGBColor]:
    """
    Reduce colors to at most k centroids with Lloyd's algorithm in RGB space.

    Centroids start as the first k colors, so the result is deterministic and
    follows centroid index order. A centroid that loses all its members keeps
    its previous value. Stops after 10 iterations or when nothing moves.
    """
    if len(colors) <= k:
        return colors

    points = np.array([(c.r, c.g, c.b) for c in colors], dtype=np.int64)
    centroids = points[:k].astype(np.float64)

    for _ in range(MAX_ITERATIONS):
        # (N, k) distance table; argmin picks the lowest index on ties
        diff = points[:, None, :] - centroids[None, :, :]
        distances = np.sqrt(np.sum(diff * diff, axis=2))
        labels = np.argmin(distances, axis=1)

        new_centroids = centroids.copy()
        for i in range(k):
            members = points[labels == i]
            if len(members) == 0:
                continue
            new_centroids[i] = _round_half_up(members.sum(axis=0) / len(members))

        if np.array_equal(new_centroids, centroids):
            break
        centroids = new_centroids

    return [RGBColor(int(r), int(g), int(b)) for r, g, b in centroids]
