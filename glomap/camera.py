"""Camera intrinsics with a small set of projection models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

import numpy as np


class CameraModel(str, Enum):
    SIMPLE_PINHOLE = "SIMPLE_PINHOLE"  # f, cx, cy
    PINHOLE = "PINHOLE"  # fx, fy, cx, cy
    SIMPLE_RADIAL = "SIMPLE_RADIAL"  # f, cx, cy, k
    RADIAL = "RADIAL"  # f, cx, cy, k1, k2


_NUM_PARAMS = {
    CameraModel.SIMPLE_PINHOLE: 3,
    CameraModel.PINHOLE: 4,
    CameraModel.SIMPLE_RADIAL: 4,
    CameraModel.RADIAL: 5,
}

_UNDISTORT_ITERATIONS = 100
_UNDISTORT_TOLERANCE = 1e-14


@dataclass(eq=False)
class Camera:
    """Intrinsic calibration of one camera."""

    camera_id: int = -1
    model: CameraModel = CameraModel.SIMPLE_PINHOLE
    width: int = 0
    height: int = 0
    params: np.ndarray = field(default_factory=lambda: np.array([1.0, 0.0, 0.0]))
    has_prior_focal_length: bool = False
    has_refined_focal_length: bool = False

    def __post_init__(self) -> None:
        self.model = CameraModel(self.model)
        self.params = np.asarray(self.params, dtype=float).reshape(-1).copy()
        expected = _NUM_PARAMS[self.model]
        if self.params.size != expected:
            raise ValueError(
                f"{self.model.value} takes {expected} parameters, got {self.params.size}"
            )

    @property
    def focal_length_x(self) -> float:
        return float(self.params[0])

    @property
    def focal_length_y(self) -> float:
        if self.model is CameraModel.PINHOLE:
            return float(self.params[1])
        return float(self.params[0])

    @property
    def _principal_index(self) -> int:
        return 2 if self.model is CameraModel.PINHOLE else 1

    def focal(self) -> float:
        return (self.focal_length_x + self.focal_length_y) / 2.0

    def principal_point(self) -> np.ndarray:
        i = self._principal_index
        return self.params[i : i + 2].copy()

    def calibration_matrix(self) -> np.ndarray:
        cx, cy = self.principal_point()
        return np.array(
            [
                [self.focal_length_x, 0.0, cx],
                [0.0, self.focal_length_y, cy],
                [0.0, 0.0, 1.0],
            ]
        )

    def _distortion(self, u: float, v: float) -> tuple[float, float]:
        r2 = u * u + v * v
        if self.model is CameraModel.SIMPLE_RADIAL:
            radial = self.params[3] * r2
        elif self.model is CameraModel.RADIAL:
            radial = self.params[3] * r2 + self.params[4] * r2 * r2
        else:
            return 0.0, 0.0
        return u * radial, v * radial

    def img_from_cam(self, point) -> np.ndarray:
        """Project a normalized camera-plane point to pixel coordinates."""
        u, v = np.asarray(point, dtype=float).reshape(2)
        du, dv = self._distortion(u, v)
        cx, cy = self.principal_point()
        return np.array(
            [self.focal_length_x * (u + du) + cx, self.focal_length_y * (v + dv) + cy]
        )

    def cam_from_img(self, point) -> np.ndarray:
        """Map a pixel to its undistorted normalized camera-plane point."""
        x, y = np.asarray(point, dtype=float).reshape(2)
        cx, cy = self.principal_point()
        ud = (x - cx) / self.focal_length_x
        vd = (y - cy) / self.focal_length_y
        u, v = ud, vd
        for _ in range(_UNDISTORT_ITERATIONS):
            du, dv = self._distortion(u, v)
            new_u, new_v = ud - du, vd - dv
            converged = abs(new_u - u) + abs(new_v - v) < _UNDISTORT_TOLERANCE
            u, v = new_u, new_v
            if converged:
                break
        return np.array([u, v])