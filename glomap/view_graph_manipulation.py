"""Operations that reshape the view graph: sparsification, clustering, configs."""

from __future__ import annotations

import logging
import random
from collections import defaultdict
from enum import Enum

from glomap.camera import Camera
from glomap.image import Image
from glomap.image_pair import ImagePair, TwoViewConfig
from glomap.two_view_geometry import fundamental_from_motion_and_cameras
from glomap.union_find import UnionFind
from glomap.view_graph import ViewGraph

logger = logging.getLogger(__name__)


class StrongClusterCriteria(Enum):
    INLIER_NUM = 0
    WEIGHT = 1


def _is_registered(images: dict[int, Image], image_id: int) -> bool:
    image = images.get(image_id)
    return image is not None and image.is_registered


def sparsify_graph(
    view_graph: ViewGraph,
    images: dict[int, Image],
    expected_degree: int = 50,
    rng: random.Random | None = None,
) -> int:
    """Randomly drop edges between high-degree images.

    An edge between images of degrees d1 and d2 is kept when either degree is
    at most ``expected_degree``, otherwise with probability
    expected_degree * average_degree / (d1 * d2). Returns the number of edges kept.
    """
    rng = rng if rng is not None else random.Random()
    num_img = view_graph.keep_largest_connected_components(images)
    adjacency = view_graph.adjacency_list()

    total_degree = sum(
        len(neighbors)
        for image_id, neighbors in adjacency.items()
        if _is_registered(images, image_id)
    )
    average_degree = total_degree / num_img if num_img else 0.0

    chosen: set[int] = set()
    for pair_id, image_pair in view_graph.image_pairs.items():
        if not image_pair.is_valid:
            continue
        id1, id2 = image_pair.image_id1, image_pair.image_id2
        if not (_is_registered(images, id1) and _is_registered(images, id2)):
            continue
        degree1 = len(adjacency[id1])
        degree2 = len(adjacency[id2])
        if degree1 <= expected_degree or degree2 <= expected_degree:
            chosen.add(pair_id)
            continue
        if rng.random() < (expected_degree * average_degree) / (degree1 * degree2):
            chosen.add(pair_id)

    for pair_id, image_pair in view_graph.image_pairs.items():
        if pair_id not in chosen:
            image_pair.is_valid = False

    view_graph.keep_largest_connected_components(images)
    return len(chosen)


def _is_strong(
    image_pair: ImagePair, criteria: StrongClusterCriteria, threshold: float
) -> bool:
    if criteria is StrongClusterCriteria.INLIER_NUM:
        return len(image_pair.inliers) > threshold
    return image_pair.weight > threshold


def _is_weak(
    image_pair: ImagePair, criteria: StrongClusterCriteria, threshold: float
) -> bool:
    if criteria is StrongClusterCriteria.INLIER_NUM:
        return len(image_pair.inliers) < threshold
    return image_pair.weight < threshold


def establish_strong_clusters(
    view_graph: ViewGraph,
    images: dict[int, Image],
    criteria: StrongClusterCriteria = StrongClusterCriteria.INLIER_NUM,
    min_thres: float = 100,
    min_num_images: int = 2,
) -> int:
    """Split the graph into clusters joined by strong edges.

    Edges above ``min_thres`` seed the clusters; two clusters are merged when
    at least two edges of at least 0.75 * ``min_thres`` join them. Edges
    between clusters become invalid. Returns the number of clusters marked.
    """
    view_graph.keep_largest_connected_components(images)

    uf = UnionFind()
    for image_pair in view_graph.image_pairs.values():
        if image_pair.is_valid and _is_strong(image_pair, criteria, min_thres):
            uf.union(image_pair.image_id1, image_pair.image_id2)

    iteration = 0
    merged = True
    while merged:
        merged = False
        iteration += 1
        if iteration > 10:
            break

        num_pairs: dict[int, dict[int, int]] = defaultdict(lambda: defaultdict(int))
        for image_pair in view_graph.image_pairs.values():
            if not image_pair.is_valid:
                continue
            if _is_weak(image_pair, criteria, 0.75 * min_thres):
                continue
            root1 = uf.find(image_pair.image_id1)
            root2 = uf.find(image_pair.image_id2)
            if root1 == root2:
                continue
            num_pairs[root1][root2] += 1
            num_pairs[root2][root1] += 1

        for root1, counts in num_pairs.items():
            for root2, count in counts.items():
                if root1 <= root2:
                    continue
                if count >= 2:
                    merged = True
                    uf.union(root1, root2)

    for image_pair in view_graph.image_pairs.values():
        if not image_pair.is_valid:
            continue
        if uf.find(image_pair.image_id1) != uf.find(image_pair.image_id2):
            image_pair.is_valid = False

    num_comp = view_graph.mark_connected_components(images)
    logger.info(
        "Clustering take %d iterations. Images are grouped into %d clusters "
        "after strong-clustering",
        iteration,
        num_comp,
    )
    return num_comp


def update_image_pairs_config(
    view_graph: ViewGraph,
    cameras: dict[int, Camera],
    images: dict[int, Image],
) -> None:
    """Promote uncalibrated pairs to calibrated where both cameras prove reliable.

    A camera with a prior focal length is reliable when more than half of its
    calibrated-or-uncalibrated pairs are calibrated.
    """
    totals: dict[int, int] = defaultdict(int)
    calibrated: dict[int, int] = defaultdict(int)
    for image_pair in view_graph.image_pairs.values():
        if not image_pair.is_valid:
            continue
        camera_id1 = images[image_pair.image_id1].camera_id
        camera_id2 = images[image_pair.image_id2].camera_id
        if not (
            cameras[camera_id1].has_prior_focal_length
            and cameras[camera_id2].has_prior_focal_length
        ):
            continue
        if image_pair.config == TwoViewConfig.CALIBRATED:
            for camera_id in (camera_id1, camera_id2):
                totals[camera_id] += 1
                calibrated[camera_id] += 1
        elif image_pair.config == TwoViewConfig.UNCALIBRATED:
            totals[camera_id1] += 1
            totals[camera_id2] += 1

    valid_cameras = {
        camera_id
        for camera_id, total in totals.items()
        if total > 0 and calibrated[camera_id] / total > 0.5
    }

    for image_pair in view_graph.image_pairs.values():
        if not image_pair.is_valid or image_pair.config != TwoViewConfig.UNCALIBRATED:
            continue
        camera_id1 = images[image_pair.image_id1].camera_id
        camera_id2 = images[image_pair.image_id2].camera_id
        if camera_id1 in valid_cameras and camera_id2 in valid_cameras:
            image_pair.config = TwoViewConfig.CALIBRATED
            image_pair.F = fundamental_from_motion_and_cameras(
                cameras[camera_id1], cameras[camera_id2], image_pair.cam2_from_cam1
            )