"""Rigid and similarity transforms plus rotation helpers."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np
from scipy.spatial.transform import Rotation

from glomap.options import EPS


def _identity_quaternion() -> np.ndarray:
    return np.array([1.0, 0.0, 0.0, 0.0])


def _as_quaternion(value) -> np.ndarray:
    array = np.asarray(value, dtype=float)
    if array.shape == (3, 3):
        return rotation_to_quaternion(array)
    quaternion = array.reshape(4)
    norm = np.linalg.norm(quaternion)
    if norm == 0:
        raise ValueError("rotation quaternion must not be zero")
    return quaternion / norm


def _quat_multiply(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    aw, ax, ay, az = a
    bw, bx, by, bz = b
    return np.array(
        [
            aw * bw - ax * bx - ay * by - az * bz,
            aw * bx + ax * bw + ay * bz - az * by,
            aw * by - ax * bz + ay * bw + az * bx,
            aw * bz + ax * by - ay * bx + az * bw,
        ]
    )


def _diagonal_sum(matrix: np.ndarray) -> float:
    return float(np.diag(matrix).sum())


def quaternion_to_rotation(quaternion) -> np.ndarray:
    """Return the 3x3 rotation matrix of a (w, x, y, z) quaternion."""
    w, x, y, z = _as_quaternion(quaternion)
    return np.array(
        [
            [1 - 2 * (y * y + z * z), 2 * (x * y - w * z), 2 * (x * z + w * y)],
            [2 * (x * y + w * z), 1 - 2 * (x * x + z * z), 2 * (y * z - w * x)],
            [2 * (x * z - w * y), 2 * (y * z + w * x), 1 - 2 * (x * x + y * y)],
        ]
    )


def rotation_to_quaternion(rotation) -> np.ndarray:
    """Return the (w, x, y, z) quaternion of a rotation matrix, with w >= 0."""
    x, y, z, w = Rotation.from_matrix(np.asarray(rotation, dtype=float)).as_quat()
    quaternion = np.array([w, x, y, z])
    if quaternion[0] < 0:
        quaternion = -quaternion
    return quaternion


@dataclass(eq=False)
class Rigid3d:
    """Rotation (unit quaternion w, x, y, z) followed by a translation."""

    rotation: np.ndarray = field(default_factory=_identity_quaternion)
    translation: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def __post_init__(self) -> None:
        self.rotation = _as_quaternion(self.rotation)
        self.translation = np.asarray(self.translation, dtype=float).reshape(3).copy()

    def rotation_matrix(self) -> np.ndarray:
        return quaternion_to_rotation(self.rotation)

    def inverse(self) -> Rigid3d:
        conjugate = self.rotation * np.array([1.0, -1.0, -1.0, -1.0])
        return Rigid3d(conjugate, -(self.rotation_matrix().T @ self.translation))

    def transform_point(self, point) -> np.ndarray:
        return self.rotation_matrix() @ np.asarray(point, dtype=float) + self.translation

    def __mul__(self, other):
        if not isinstance(other, Rigid3d):
            return NotImplemented
        return Rigid3d(
            _quat_multiply(self.rotation, other.rotation),
            self.translation + self.rotation_matrix() @ other.translation,
        )


@dataclass(eq=False)
class Sim3d:
    """Scale, rotation and translation: x -> scale * R x + t."""

    scale: float = 1.0
    rotation: np.ndarray = field(default_factory=_identity_quaternion)
    translation: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def __post_init__(self) -> None:
        self.scale = float(self.scale)
        self.rotation = _as_quaternion(self.rotation)
        self.translation = np.asarray(self.translation, dtype=float).reshape(3).copy()

    def transform_point(self, point) -> np.ndarray:
        rotation = quaternion_to_rotation(self.rotation)
        return self.scale * (rotation @ np.asarray(point, dtype=float)) + self.translation


def transform_camera_world(sim: Sim3d, cam_from_world: Rigid3d) -> Rigid3d:
    """Express a camera pose in the world frame produced by ``sim``."""
    cam_rotation = cam_from_world.rotation_matrix()
    sim_rotation = quaternion_to_rotation(sim.rotation)
    rotation = cam_rotation @ sim_rotation.T
    translation = sim.scale * cam_from_world.translation - rotation @ sim.translation
    return Rigid3d(rotation_to_quaternion(rotation), translation)


def _clipped_acos_deg(cos_r: float) -> float:
    return math.degrees(math.acos(min(max(cos_r, -1.0), 1.0)))


def calc_angle(pose1: Rigid3d, pose2: Rigid3d) -> float:
    """Rotation angle between two poses, in degrees."""
    relative = pose1.rotation_matrix().T @ pose2.rotation_matrix()
    return _clipped_acos_deg((_diagonal_sum(relative) - 1) / 2)


def calc_trans(pose1: Rigid3d, pose2: Rigid3d) -> float:
    """Distance between the camera centers of two poses."""
    return float(
        np.linalg.norm(pose1.inverse().translation - pose2.inverse().translation)
    )


def calc_trans_angle(pose1: Rigid3d, pose2: Rigid3d) -> float:
    """Angle between the translation directions of two poses, in degrees."""
    t1, t2 = pose1.translation, pose2.translation
    return _clipped_acos_deg(float(t1 @ t2) / (np.linalg.norm(t1) * np.linalg.norm(t2)))


def calc_rotation_angle(rotation1, rotation2) -> float:
    """Angle between two rotation matrices, in degrees."""
    relative = np.asarray(rotation1, dtype=float).T @ np.asarray(rotation2, dtype=float)
    return _clipped_acos_deg((_diagonal_sum(relative) - 1) / 2)


def deg_to_rad(degree: float) -> float:
    return degree * math.pi / 180


def rad_to_deg(radian: float) -> float:
    return radian * 180 / math.pi


def rigid3d_to_angle_axis(pose: Rigid3d) -> np.ndarray:
    w, x, y, z = pose.rotation
    return Rotation.from_quat([x, y, z, w]).as_rotvec()


def rotation_to_angle_axis(rotation) -> np.ndarray:
    return Rotation.from_matrix(np.asarray(rotation, dtype=float)).as_rotvec()


def angle_axis_to_rotation(angle_axis) -> np.ndarray:
    """Rotation matrix of an angle-axis vector; first-order for tiny angles."""
    aa = np.asarray(angle_axis, dtype=float).reshape(3)
    if np.linalg.norm(aa) > EPS:
        return Rotation.from_rotvec(aa).as_matrix()
    return np.array(
        [
            [1.0, -aa[2], aa[1]],
            [aa[2], 1.0, -aa[0]],
            [-aa[1], aa[0], 1.0],
        ]
    )