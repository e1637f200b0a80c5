"""Feature construction and k-means speaker clustering for voiced frames."""

import logging
from typing import Optional

import numpy as np
from sklearn.cluster import KMeans
from sklearn.metrics import pairwise_distances_argmin

from domain.models import MAX_SPEAKERS, MIN_SPEAKERS, ClusteringResult, VoicedFrame

logger = logging.getLogger(__name__)

# Bounds of the automatic K search.
AUTO_MIN_SPEAKERS = 2
AUTO_MAX_SPEAKERS = MAX_SPEAKERS


def clamp_num_speakers(num_speakers: int) -> int:
    return max(MIN_SPEAKERS, min(MAX_SPEAKERS, int(num_speakers)))


def build_features(voiced: list[VoicedFrame]) -> np.ndarray:
    """Build [energy, delta_energy] rows for voiced frames.

    The delta is taken against the previous *voiced* frame, so two frames
    separated by filtered silence are treated as adjacent. The first row has
    a delta of 0.
    """
    if not voiced:
        return np.empty((0, 2), dtype=np.float64)
    energies = np.array([f.energy for f in voiced], dtype=np.float64)
    deltas = np.diff(energies, prepend=energies[0])
    return np.column_stack([energies, deltas])


def _empty_result(dims: int) -> ClusteringResult:
    return ClusteringResult(
        labels=np.empty(0, dtype=int),
        centroids=np.empty((0, dims), dtype=np.float64),
        inertia=0.0,
    )


def _order_by_first_appearance(points: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """Reorder centroids so their nearest points first appear in order 0, 1, 2...

    Centroids that no point is nearest to are dropped.
    """
    nearest = pairwise_distances_argmin(points, centroids)
    _, first_idx = np.unique(nearest, return_index=True)
    return centroids[nearest[np.sort(first_idx)]]


def cluster_features(
    features: np.ndarray,
    num_speakers: int,
    max_iter: int = 300,
    n_init: int = 10,
    random_state: Optional[int] = 0,
) -> ClusteringResult:
    """Partition feature vectors into speaker clusters with k-means++.

    num_speakers is clamped to [1, 6] and then to the number of distinct
    points, so degenerate inputs yield fewer clusters instead of raising.
    Labels follow order of first appearance along the input, and a point
    equidistant from several centroids takes the lowest returned label.

    Returns:
        ClusteringResult with one label per row, the centroids actually used,
        and the total within-cluster squared distance.
    """
    points = np.asarray(features, dtype=np.float64)
    if points.ndim == 1:
        points = points.reshape(-1, 1)
    if len(points) == 0:
        return _empty_result(points.shape[1] if points.ndim == 2 else 2)

    requested = clamp_num_speakers(num_speakers)
    distinct = len(np.unique(points, axis=0))
    k = min(requested, distinct)
    if k < requested:
        logger.warning(f"Only {distinct} distinct feature points, using {k} clusters instead of {requested}")

    model = KMeans(
        n_clusters=k,
        init="k-means++",
        n_init=n_init,
        max_iter=max_iter,
        random_state=random_state,
    ).fit(points)

    centroids = _order_by_first_appearance(points, model.cluster_centers_)
    # Assign against the reordered centroids so ties land on the lowest label.
    labels = pairwise_distances_argmin(points, centroids)
    used = np.unique(labels)
    if len(used) < len(centroids):
        # Drop clusters that lost every point; the remap keeps relative order.
        remap = np.full(len(centroids), -1, dtype=int)
        remap[used] = np.arange(len(used))
        labels = remap[labels]
        centroids = centroids[used]
    inertia = float(np.sum((points - centroids[labels]) ** 2))
    return ClusteringResult(labels=labels, centroids=centroids, inertia=inertia)


def estimate_num_speakers(
    features: np.ndarray,
    tolerance: float = 0.05,
    min_speakers: int = AUTO_MIN_SPEAKERS,
    max_speakers: int = AUTO_MAX_SPEAKERS,
    max_iter: int = 300,
    n_init: int = 10,
    random_state: Optional[int] = 0,
) -> int:
    """Elbow heuristic over K in [min_speakers, max_speakers].

    Picks the smallest K whose further inertia reduction, relative to the
    single-cluster inertia, drops below tolerance. Never exceeds the number
    of distinct points.
    """
    points = np.asarray(features, dtype=np.float64)
    if len(points) == 0:
        return MIN_SPEAKERS
    distinct = len(np.unique(points, axis=0))
    upper = min(max_speakers, distinct)
    if upper <= MIN_SPEAKERS:
        return MIN_SPEAKERS

    inertias = {}
    for k in range(MIN_SPEAKERS, upper + 1):
        inertias[k] = cluster_features(
            points, k, max_iter=max_iter, n_init=n_init, random_state=random_state
        ).inertia

    baseline = inertias[MIN_SPEAKERS]
    if baseline <= 0:
        return MIN_SPEAKERS

    lower = min(min_speakers, upper)
    for k in range(lower, upper):
        gain = (inertias[k] - inertias[k + 1]) / baseline
        if gain < tolerance:
            logger.debug(f"Elbow at K={k} (inertias={inertias})")
            return k
    return upper
