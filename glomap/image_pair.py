"""Image pairs of the view graph and their identifiers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

import numpy as np

from glomap.geometry import Rigid3d

MAX_NUM_IMAGES = 2**31 - 1
INVALID_IMAGE_PAIR_ID = 2**64 - 1


class TwoViewConfig(IntEnum):
    """Kind of two-view geometry estimated for a pair."""

    UNDEFINED = 0
    DEGENERATE = 1
    CALIBRATED = 2
    UNCALIBRATED = 3
    PLANAR = 4
    PANORAMIC = 5
    PLANAR_OR_PANORAMIC = 6
    WATERMARK = 7
    MULTIPLE = 8


def image_pair_to_pair_id(image_id1: int, image_id2: int) -> int:
    """Order-independent identifier of a pair of images."""
    if image_id1 > image_id2:
        return MAX_NUM_IMAGES * image_id2 + image_id1
    return MAX_NUM_IMAGES * image_id1 + image_id2


def pair_id_to_image_pair(pair_id: int) -> tuple[int, int]:
    """Split a pair identifier back into its two image ids."""
    image_id1 = pair_id % MAX_NUM_IMAGES
    image_id2 = (pair_id - image_id1) // MAX_NUM_IMAGES
    return image_id1, image_id2


def _zero_matrix() -> np.ndarray:
    return np.zeros((3, 3))


@dataclass(eq=False)
class ImagePair:
    """Two images with their matches and relative geometry."""

    image_id1: int = -1
    image_id2: int = -1
    cam2_from_cam1: Rigid3d = field(default_factory=Rigid3d)
    is_valid: bool = True
    # Initial inlier rate.
    weight: float = -1.0
    config: TwoViewConfig = TwoViewConfig.UNDEFINED
    E: np.ndarray = field(default_factory=_zero_matrix)
    F: np.ndarray = field(default_factory=_zero_matrix)
    H: np.ndarray = field(default_factory=_zero_matrix)
    # Rows of (feature index in image 1, feature index in image 2).
    matches: np.ndarray = field(default_factory=lambda: np.zeros((0, 2), dtype=int))
    # Row indices of inliers in ``matches``.
    inliers: list[int] = field(default_factory=list)

    @property
    def pair_id(self) -> int:
        if self.image_id1 < 0 or self.image_id2 < 0:
            return INVALID_IMAGE_PAIR_ID
        return image_pair_to_pair_id(self.image_id1, self.image_id2)