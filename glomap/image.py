"""Images, their gravity information, and 3D point tracks."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from glomap.geometry import Rigid3d
from glomap.gravity import get_align_rot

# (image_id, feature_id)
Observation = tuple[int, int]


@dataclass(eq=False)
class GravityInfo:
    """Gravity direction of an image and the rotation that aligns to it."""

    has_gravity: bool = False
    gravity: np.ndarray = field(default_factory=lambda: np.zeros(3))
    # Alignment rotation; its second column is the gravity direction.
    r_align: np.ndarray = field(default_factory=lambda: np.eye(3))

    def set_gravity(self, gravity) -> None:
        """Store ``gravity`` and derive the alignment rotation from it."""
        self.gravity = np.asarray(gravity, dtype=float).reshape(3).copy()
        self.r_align = get_align_rot(self.gravity)
        self.has_gravity = True


@dataclass(eq=False)
class Image:
    """One image: its camera, pose, and detected features."""

    image_id: int = -1
    camera_id: int = -1
    file_name: str = ""
    # Whether the image lies in the largest connected component.
    is_registered: bool = False
    cluster_id: int = -1
    # Transformation from world to camera.
    cam_from_world: Rigid3d = field(default_factory=Rigid3d)
    gravity_info: GravityInfo = field(default_factory=GravityInfo)
    # Distorted feature points in pixels.
    features: list[np.ndarray] = field(default_factory=list)
    # Normalized feature rays, filled by undistortion.
    features_undist: list[np.ndarray] = field(default_factory=list)

    def center(self) -> np.ndarray:
        """Camera center in world coordinates."""
        rotation = self.cam_from_world.rotation_matrix()
        return rotation.T @ -self.cam_from_world.translation


@dataclass(eq=False)
class Track:
    """A 3D point and the image features that observe it."""

    track_id: int = -1
    xyz: np.ndarray = field(default_factory=lambda: np.zeros(3))
    color: np.ndarray = field(default_factory=lambda: np.zeros(3, dtype=np.uint8))
    is_initialized: bool = False
    observations: list[Observation] = field(default_factory=list)