"""Inlier classification of image-pair matches under the pair's two-view model."""

from __future__ import annotations

import math

import numpy as np

from glomap.camera import Camera
from glomap.geometry import deg_to_rad
from glomap.image import Image
from glomap.image_pair import ImagePair, TwoViewConfig
from glomap.options import EPS, InlierThresholdOptions
from glomap.two_view_geometry import (
    check_cheirality,
    essential_from_motion,
    get_orientation_signum,
    homography_error,
    sampson_error,
    sampson_error_rays,
)
from glomap.view_graph import ViewGraph

_HOMOGRAPHY_CONFIGS = frozenset(
    {
        TwoViewConfig.PLANAR,
        TwoViewConfig.PANORAMIC,
        TwoViewConfig.PLANAR_OR_PANORAMIC,
    }
)


def score_error(
    image_pair: ImagePair,
    images: dict[int, Image],
    options: InlierThresholdOptions,
    cameras: dict[int, Camera] | None = None,
) -> float:
    """Score the pair's matches and store the inlier rows in ``image_pair.inliers``.

    The model used depends on ``image_pair.config``; pairs of any other
    configuration score 0 and are left untouched.
    """
    config = image_pair.config
    if config in _HOMOGRAPHY_CONFIGS:
        return _score_homography(image_pair, images, options)
    if config == TwoViewConfig.UNCALIBRATED:
        return _score_fundamental(image_pair, images, options)
    if config == TwoViewConfig.CALIBRATED:
        if cameras is None:
            raise ValueError("cameras are required to score a calibrated pair")
        return _score_essential(image_pair, images, options, cameras)
    return 0.0


def _score_essential(
    image_pair: ImagePair,
    images: dict[int, Image],
    options: InlierThresholdOptions,
    cameras: dict[int, Camera],
) -> float:
    pose = image_pair.cam2_from_cam1
    essential = essential_from_motion(pose)

    # epipole_ij: camera i seen in image j
    epipole12 = pose.translation.copy()
    epipole21 = pose.inverse().translation
    if epipole12[2] < 0:
        epipole12 = -epipole12
    if epipole21[2] < 0:
        epipole21 = -epipole21

    image_pair.inliers.clear()
    image1 = images[image_pair.image_id1]
    image2 = images[image_pair.image_id2]

    # Convert the pixel threshold to normalized image space.
    threshold = (
        options.max_epipolar_error_E
        * 0.5
        * (
            1.0 / cameras[image1.camera_id].focal()
            + 1.0 / cameras[image2.camera_id].focal()
        )
    )
    sq_threshold = threshold * threshold

    thres_epipole = math.cos(deg_to_rad(3.0)) + 1e-6
    thres_angle = 1.0 + 1e-6
    rotation_inv = pose.rotation_matrix().T

    score = 0.0
    for row, (feature1, feature2) in enumerate(image_pair.matches):
        pt1 = np.asarray(image1.features_undist[feature1], dtype=float)
        pt2 = np.asarray(image2.features_undist[feature2], dtype=float)
        r2 = sampson_error_rays(essential, pt1, pt2)
        if not r2 < sq_threshold:
            score += sq_threshold
            continue

        cheirality = check_cheirality(pose, pt1, pt2, 1e-2, 100.0)
        # Rays that are nearly parallel or too close to an epipole are degenerate.
        not_degenerate = (
            float(pt1 @ (rotation_inv @ pt2)) < thres_angle
            and float(pt1 @ epipole21) < thres_epipole
            and float(pt2 @ epipole12) < thres_epipole
        )
        if cheirality and not_degenerate:
            score += r2
            image_pair.inliers.append(row)
        else:
            score += sq_threshold
    return score


def _score_fundamental(
    image_pair: ImagePair,
    images: dict[int, Image],
    options: InlierThresholdOptions,
) -> float:
    image_pair.inliers.clear()
    fundamental = np.asarray(image_pair.F, dtype=float)

    epipole = np.cross(fundamental[0], fundamental[2])
    if not np.any(np.abs(epipole) > EPS):
        epipole = np.cross(fundamental[1], fundamental[2])

    image1 = images[image_pair.image_id1]
    image2 = images[image_pair.image_id2]
    sq_threshold = options.max_epipolar_error_F**2

    score = 0.0
    candidates: list[tuple[int, float, float]] = []
    positive_count = 0
    for row, (feature1, feature2) in enumerate(image_pair.matches):
        pt1 = np.asarray(image1.features[feature1], dtype=float)
        pt2 = np.asarray(image2.features[feature2], dtype=float)
        r2 = sampson_error(fundamental, pt1, pt2)
        if r2 < sq_threshold:
            signum = get_orientation_signum(fundamental, epipole, pt1, pt2)
            if signum > 0:
                positive_count += 1
            candidates.append((row, r2, signum))
        else:
            score += sq_threshold

    negative_count = len(candidates) - positive_count
    # An undecided orientation makes the whole pair unusable.
    if positive_count == negative_count:
        return 0.0
    is_positive = positive_count > negative_count

    for row, r2, signum in candidates:
        if (signum > 0) == is_positive:
            image_pair.inliers.append(row)
            score += r2
        else:
            score += sq_threshold
    return score


def _score_homography(
    image_pair: ImagePair,
    images: dict[int, Image],
    options: InlierThresholdOptions,
) -> float:
    image_pair.inliers.clear()
    image1 = images[image_pair.image_id1]
    image2 = images[image_pair.image_id2]
    sq_threshold = options.max_epipolar_error_H**2

    score = 0.0
    for row, (feature1, feature2) in enumerate(image_pair.matches):
        r2 = homography_error(
            image_pair.H, image1.features[feature1], image2.features[feature2]
        )
        if r2 < sq_threshold:
            score += r2
            image_pair.inliers.append(row)
        else:
            score += sq_threshold
    return score


def image_pairs_inlier_count(
    view_graph: ViewGraph,
    cameras: dict[int, Camera],
    images: dict[int, Image],
    options: InlierThresholdOptions,
    clean_inliers: bool,
) -> None:
    """Recompute inliers of every valid pair.

    Without ``clean_inliers`` pairs that already have inliers are kept as they are.
    """
    for image_pair in view_graph.image_pairs.values():
        if not clean_inliers and image_pair.inliers:
            continue
        image_pair.inliers.clear()
        if not image_pair.is_valid:
            continue
        score_error(image_pair, images, options, cameras)