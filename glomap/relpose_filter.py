"""Filters that invalidate unreliable relative poses in the view graph."""

from __future__ import annotations

import logging

from glomap.geometry import calc_angle
from glomap.image import Image
from glomap.view_graph import ViewGraph

logger = logging.getLogger(__name__)


def filter_rotations(
    view_graph: ViewGraph, images: dict[int, Image], max_angle: float = 5.0
) -> int:
    """Invalidate pairs whose rotation disagrees with the global poses.

    ``max_angle`` is in degrees. Returns the number of pairs invalidated.
    """
    num_invalid = 0
    for image_pair in view_graph.image_pairs.values():
        if not image_pair.is_valid:
            continue
        image1 = images[image_pair.image_id1]
        image2 = images[image_pair.image_id2]
        if not (image1.is_registered and image2.is_registered):
            continue
        pose_calc = image2.cam_from_world * image1.cam_from_world.inverse()
        if calc_angle(pose_calc, image_pair.cam2_from_cam1) > max_angle:
            image_pair.is_valid = False
            num_invalid += 1
    logger.info(
        "Filtered %d relative rotation with angle > %s degrees", num_invalid, max_angle
    )
    return num_invalid


def filter_inlier_num(view_graph: ViewGraph, min_inlier_num: int = 30) -> int:
    """Invalidate pairs with fewer than ``min_inlier_num`` inliers."""
    num_invalid = 0
    for image_pair in view_graph.image_pairs.values():
        if image_pair.is_valid and len(image_pair.inliers) < min_inlier_num:
            image_pair.is_valid = False
            num_invalid += 1
    logger.info(
        "Filtered %d relative poses with inlier number < %s", num_invalid, min_inlier_num
    )
    return num_invalid


def filter_inlier_ratio(view_graph: ViewGraph, min_inlier_ratio: float = 0.25) -> int:
    """Invalidate pairs whose share of inlier matches is below ``min_inlier_ratio``.

    Pairs without any matches have no defined ratio and are kept.
    """
    num_invalid = 0
    for image_pair in view_graph.image_pairs.values():
        if not image_pair.is_valid:
            continue
        num_matches = len(image_pair.matches)
        if num_matches == 0:
            continue
        if len(image_pair.inliers) / num_matches < min_inlier_ratio:
            image_pair.is_valid = False
            num_invalid += 1
    logger.info(
        "Filtered %d relative poses with inlier ratio < %s", num_invalid, min_inlier_ratio
    )
    return num_invalid