"""Gravity direction helpers."""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np

from glomap.geometry import angle_axis_to_rotation, rotation_to_angle_axis


def get_align_rot(gravity) -> np.ndarray:
    """Rotation whose second column is the normalized gravity direction."""
    v = np.asarray(gravity, dtype=float).reshape(3)
    v = v / np.linalg.norm(v)
    q, _ = np.linalg.qr(v.reshape(3, 1), mode="complete")
    rotation = np.empty((3, 3))
    rotation[:, 1] = v
    rotation[:, 0] = q[:, 1]
    rotation[:, 2] = q[:, 2]
    if np.linalg.det(rotation) < 0:
        rotation[:, 2] = -rotation[:, 2]
    return rotation


def rot_up_to_angle(rot_up) -> float:
    """Rotation angle of an upright (y-axis) rotation matrix."""
    return float(rotation_to_angle_axis(rot_up)[1])


def angle_to_rot_up(angle: float) -> np.ndarray:
    """Upright rotation matrix about the y axis."""
    return angle_axis_to_rotation([0.0, angle, 0.0])


def average_gravity(gravities: Sequence) -> np.ndarray:
    """Average gravity direction of a set of directions."""
    if len(gravities) == 0:
        raise ValueError("cannot average an empty set of gravities")
    vectors = np.asarray(gravities, dtype=float).reshape(-1, 3)
    scatter = vectors.T @ vectors / len(vectors)
    u, _, _ = np.linalg.svd(scatter)
    average = u[:, 0].copy()
    negative = int(np.count_nonzero(vectors @ average < 0))
    if negative > len(vectors) // 2:
        average = -average
    return average


def calc_gravity_angle(gravity1, gravity2) -> float:
    """Angle between two gravity vectors, in degrees."""
    g1 = np.asarray(gravity1, dtype=float)
    g2 = np.asarray(gravity2, dtype=float)
    cos_r = float(g1 @ g2) / (np.linalg.norm(g1) * np.linalg.norm(g2))
    return math.degrees(math.acos(min(max(cos_r, -1.0), 1.0)))