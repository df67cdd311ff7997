"""Shared numeric constants and inlier threshold options."""

from __future__ import annotations

import math
from dataclasses import dataclass

EPS = 1e-12
HALF_PI = math.pi / 2
TWO_PI = 2 * math.pi


@dataclass
class InlierThresholdOptions:
    """Thresholds that decide which matches, pairs and edges count as inliers."""

    # Thresholds for 3D-2D matches
    max_angle_error: float = 1.0  # degrees, global positioning
    max_reprojection_error: float = 1e-2  # bundle adjustment
    min_triangulation_angle: float = 1.0  # degrees, triangulation

    # Thresholds for image pairs
    max_epipolar_error_E: float = 1.0
    max_epipolar_error_F: float = 4.0
    max_epipolar_error_H: float = 4.0

    # Thresholds for edges
    min_inlier_num: float = 30
    min_inlier_ratio: float = 0.25
    max_rotation_error: float = 10.0  # degrees, rotation averaging