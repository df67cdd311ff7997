"""Normalization of a reconstruction to a canonical position and scale."""

from __future__ import annotations

import numpy as np

from glomap.camera import Camera
from glomap.geometry import Sim3d, transform_camera_world
from glomap.image import Image, Track


def normalize_reconstruction(
    cameras: dict[int, Camera],
    images: dict[int, Image],
    tracks: dict[int, Track],
    fixed_scale: bool = False,
    extent: float = 10.0,
    p0: float = 0.1,
    p1: float = 0.9,
) -> Sim3d:
    """Center the registered cameras on the origin and scale them to ``extent``.

    The center and bounding box are taken robustly over the ``p0``..``p1``
    percentiles of the camera centers. Registered poses and all tracks are
    transformed in place; the applied transform is returned.
    """
    if not 0.0 <= p0 <= p1 <= 1.0:
        raise ValueError("percentiles must satisfy 0 <= p0 <= p1 <= 1")
    centers = [image.center() for image in images.values() if image.is_registered]
    if not centers:
        raise ValueError("no registered images to normalize")

    coords = np.sort(np.asarray(centers, dtype=np.float32), axis=0).astype(float)
    count = len(coords)
    if count > 3:
        low = int(p0 * (count - 1))
        high = int(p1 * (count - 1))
    else:
        low, high = 0, count - 1

    bbox_min = coords[low]
    bbox_max = coords[high]
    mean_coord = coords[low : high + 1].mean(axis=0)

    scale = 1.0
    if not fixed_scale:
        old_extent = float(np.linalg.norm(bbox_max - bbox_min))
        if old_extent >= np.finfo(float).eps:
            scale = extent / old_extent

    # Translation is applied before scaling.
    tform = Sim3d(scale=scale, translation=-scale * mean_coord)

    for image in images.values():
        if image.is_registered:
            image.cam_from_world = transform_camera_world(tform, image.cam_from_world)
    for track in tracks.values():
        track.xyz = tform.transform_point(track.xyz)
    return tform