"""Filters that drop track observations which disagree with the reconstruction."""

from __future__ import annotations

import logging
import math

import numpy as np

from glomap.camera import Camera
from glomap.geometry import deg_to_rad
from glomap.image import Image, Observation, Track
from glomap.options import EPS
from glomap.view_graph import ViewGraph

logger = logging.getLogger(__name__)


def filter_tracks_by_reprojection(
    view_graph: ViewGraph,
    cameras: dict[int, Camera],
    images: dict[int, Image],
    tracks: dict[int, Track],
    max_reprojection_error: float = 1e-2,
    in_normalized_image: bool = True,
) -> int:
    """Drop observations whose reprojection error reaches ``max_reprojection_error``.

    The error is measured on the normalized image plane, or in pixels when
    ``in_normalized_image`` is false. Observations behind the camera are
    dropped. Returns the number of tracks that lost observations.
    """
    counter = 0
    for track in tracks.values():
        kept: list[Observation] = []
        for image_id, feature_id in track.observations:
            image = images[image_id]
            pt_calc = image.cam_from_world.transform_point(track.xyz)
            if pt_calc[2] < EPS:
                continue
            pt_reproj = pt_calc[:2] / pt_calc[2]
            if in_normalized_image:
                feature_undist = np.asarray(image.features_undist[feature_id], dtype=float)
                observed = feature_undist[:2] / (feature_undist[2] + EPS)
                error = float(np.linalg.norm(pt_reproj - observed))
            else:
                pt_dist = cameras[image.camera_id].img_from_cam(pt_reproj)
                observed = np.asarray(image.features[feature_id], dtype=float)
                error = float(np.linalg.norm(pt_dist - observed))
            if error < max_reprojection_error:
                kept.append((image_id, feature_id))
        if len(kept) != len(track.observations):
            counter += 1
            track.observations = kept
    logger.info(
        "Filtered %d / %d tracks by reprojection error", counter, len(tracks)
    )
    return counter


def filter_tracks_by_angle(
    view_graph: ViewGraph,
    cameras: dict[int, Camera],
    images: dict[int, Image],
    tracks: dict[int, Track],
    max_angle_error: float = 1.0,
) -> int:
    """Drop observations whose ray is more than ``max_angle_error`` degrees off.

    Cameras without a prior focal length get twice the angle. Returns the
    number of tracks that lost observations.
    """
    counter = 0
    thres = math.cos(deg_to_rad(max_angle_error))
    thres_uncalib = math.cos(deg_to_rad(max_angle_error * 2))
    for track in tracks.values():
        kept: list[Observation] = []
        for image_id, feature_id in track.observations:
            image = images[image_id]
            feature_undist = np.asarray(image.features_undist[feature_id], dtype=float)
            pt_calc = image.cam_from_world.transform_point(track.xyz)
            if pt_calc[2] < EPS:
                continue
            pt_calc = pt_calc / np.linalg.norm(pt_calc)
            thres_cam = (
                thres if cameras[image.camera_id].has_prior_focal_length else thres_uncalib
            )
            if float(pt_calc @ feature_undist) > thres_cam:
                kept.append((image_id, feature_id))
        if len(kept) != len(track.observations):
            counter += 1
            track.observations = kept
    logger.info("Filtered %d / %d tracks by angle error", counter, len(tracks))
    return counter


def filter_track_triangulation_angle(
    view_graph: ViewGraph,
    images: dict[int, Image],
    tracks: dict[int, Track],
    min_angle: float = 1.0,
) -> int:
    """Clear tracks whose widest triangulation angle is below ``min_angle`` degrees.

    Returns the number of tracks cleared.
    """
    counter = 0
    thres = math.cos(deg_to_rad(min_angle))
    for track in tracks.values():
        rays = []
        for image_id, _ in track.observations:
            direction = np.asarray(track.xyz, dtype=float) - images[image_id].center()
            rays.append(direction / np.linalg.norm(direction))
        wide_enough = any(
            float(rays[i] @ rays[j]) < thres
            for i in range(len(rays))
            for j in range(i + 1, len(rays))
        )
        if not wide_enough:
            counter += 1
            track.observations.clear()
    logger.info(
        "Filtered %d / %d tracks by too small triangulation angle",
        counter,
        len(tracks),
    )
    return counter