"""Two-view epipolar geometry: essential/fundamental matrices and errors."""

from __future__ import annotations

import numpy as np

from glomap.camera import Camera
from glomap.geometry import Rigid3d
from glomap.options import EPS


def check_cheirality(
    pose: Rigid3d, x1, x2, min_depth: float = 0.0, max_depth: float = 100.0
) -> bool:
    """Whether unit rays ``x1`` and ``x2`` triangulate in front of both cameras."""
    x1 = np.asarray(x1, dtype=float)
    x2 = np.asarray(x2, dtype=float)
    rx1 = pose.rotation_matrix() @ x1
    a = -float(rx1 @ x2)
    b1 = -float(rx1 @ pose.translation)
    b2 = float(x2 @ pose.translation)

    # The positive factor 1 / (1 - a*a) is dropped from the depths.
    lambda1 = b1 - a * b2
    lambda2 = -a * b1 + b2

    scale = 1 - a * a
    min_depth *= scale
    max_depth *= scale
    return min_depth < lambda1 < max_depth and min_depth < lambda2 < max_depth


def get_orientation_signum(fundamental, epipole, pt1, pt2) -> float:
    """Orientation signum used for the fundamental-matrix cheirality check."""
    f = np.asarray(fundamental, dtype=float)
    signum1 = f[0, 0] * pt2[0] + f[1, 0] * pt2[1] + f[2, 0]
    signum2 = epipole[1] - epipole[2] * pt1[1]
    return float(signum1 * signum2)


def essential_from_motion(pose: Rigid3d) -> np.ndarray:
    """Essential matrix [t]x R of a relative pose."""
    tx, ty, tz = pose.translation
    skew = np.array([[0.0, -tz, ty], [tz, 0.0, -tx], [-ty, tx, 0.0]])
    return skew @ pose.rotation_matrix()


def fundamental_from_motion_and_cameras(
    camera1: Camera, camera2: Camera, pose: Rigid3d
) -> np.ndarray:
    """Fundamental matrix of a relative pose between two calibrated cameras."""
    essential = essential_from_motion(pose)
    return (
        np.linalg.inv(camera2.calibration_matrix().T)
        @ essential
        @ np.linalg.inv(camera1.calibration_matrix())
    )


def _sampson(matrix: np.ndarray, x1: np.ndarray, x2: np.ndarray) -> float:
    ex1 = matrix @ x1
    etx2 = matrix.T @ x2
    c = float(ex1 @ x2)
    cx = float(ex1[:2] @ ex1[:2])
    cy = float(etx2[:2] @ etx2[:2])
    return c * c / (cx + cy)


def sampson_error(essential, x1, x2) -> float:
    """Squared Sampson error for 2D normalized image coordinates."""
    h1 = np.append(np.asarray(x1, dtype=float), 1.0)
    h2 = np.append(np.asarray(x2, dtype=float), 1.0)
    return _sampson(np.asarray(essential, dtype=float), h1, h2)


def sampson_error_rays(essential, x1, x2) -> float:
    """Squared Sampson error for 3D image rays."""
    x1 = np.asarray(x1, dtype=float)
    x2 = np.asarray(x2, dtype=float)
    matrix = np.asarray(essential, dtype=float)
    ex1 = matrix @ x1 / (EPS + x1[2])
    etx2 = matrix.T @ x2 / (EPS + x2[2])
    c = float(ex1 @ x2)
    cx = float(ex1[:2] @ ex1[:2])
    cy = float(etx2[:2] @ etx2[:2])
    return c * c / (cx + cy)


def homography_error(homography, x1, x2) -> float:
    """Squared transfer error of ``x1`` mapped by ``homography`` onto ``x2``."""
    hx1 = np.asarray(homography, dtype=float) @ np.append(np.asarray(x1, dtype=float), 1.0)
    projected = hx1[:2] / (EPS + hx1[2])
    diff = projected - np.asarray(x2, dtype=float)
    return float(diff @ diff)