# glomap

Building blocks for global structure-from-motion in Python, built on NumPy
and SciPy. The package holds a scene model (cameras, images, tracks, image
pairs and the view graph), the geometry that links them, and processors that
score, filter, cluster and normalize a reconstruction.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Modules

| Module | Contents |
| --- | --- |
| `glomap.options` | `InlierThresholdOptions` (epipolar, angular, reprojection and edge thresholds) and the constants `EPS`, `HALF_PI`, `TWO_PI` |
| `glomap.geometry` | `Rigid3d`, `Sim3d`, `quaternion_to_rotation`, `rotation_to_quaternion`, `transform_camera_world`, `calc_angle`, `calc_trans`, `calc_trans_angle`, `calc_rotation_angle`, `deg_to_rad`, `rad_to_deg`, angle-axis conversions |
| `glomap.gravity` | `get_align_rot`, `rot_up_to_angle`, `angle_to_rot_up`, `average_gravity`, `calc_gravity_angle` |
| `glomap.union_find` | `UnionFind` with `find`, `union`, `clear` |
| `glomap.camera` | `Camera` and `CameraModel` (`SIMPLE_PINHOLE`, `PINHOLE`, `SIMPLE_RADIAL`, `RADIAL`): `focal`, `principal_point`, `calibration_matrix`, `img_from_cam`, `cam_from_img` |
| `glomap.two_view_geometry` | `essential_from_motion`, `fundamental_from_motion_and_cameras`, `sampson_error`, `sampson_error_rays`, `homography_error`, `check_cheirality`, `get_orientation_signum` |
| `glomap.l1_solver` | `L1SolverOptions` and `L1Solver`, an ADMM minimiser of `‖Ax − b‖₁` for a sparse `A` |
| `glomap.image` | `Image`, `GravityInfo`, `Track` |
| `glomap.image_pair` | `ImagePair`, `TwoViewConfig`, `image_pair_to_pair_id`, `pair_id_to_image_pair` |
| `glomap.view_graph` | `ViewGraph`: adjacency list, largest connected component, cluster labelling |
| `glomap.tree` | `bfs` and `maximum_spanning_tree` with `WeightType` |
| `glomap.image_pair_inliers` | `score_error` and `image_pairs_inlier_count` for calibrated, uncalibrated and planar/panoramic pairs |
| `glomap.undistortion` | `undistort_images`: pixel features to unit camera rays |
| `glomap.normalizer` | `normalize_reconstruction`: robust centring and scaling, returns the applied `Sim3d` |
| `glomap.relpose_filter` | `filter_rotations`, `filter_inlier_num`, `filter_inlier_ratio` |
| `glomap.track_filter` | `filter_tracks_by_reprojection`, `filter_tracks_by_angle`, `filter_track_triangulation_angle` |
| `glomap.view_graph_manipulation` | `sparsify_graph`, `establish_strong_clusters` with `StrongClusterCriteria`, `update_image_pairs_config` |
| `glomap.pruning` | `prune_weakly_connected_images`: clusters images by shared tracks |
| `glomap.pose_io` | `read_rel_pose`, `read_rel_weight`, `read_gravity`, `write_global_rotation`, `write_rel_pose` |

Rotations in `Rigid3d` and `Sim3d` are unit quaternions in `(w, x, y, z)`
order; a 3x3 rotation matrix is accepted too and converted. The filters and
readers change the objects they are given in place and return a count.

## Example

```python
import numpy as np

from glomap.geometry import Rigid3d, angle_axis_to_rotation, calc_angle, rotation_to_quaternion
from glomap.image import Image
from glomap.image_pair import ImagePair, image_pair_to_pair_id
from glomap.view_graph import ViewGraph

images = {i: Image(i, 1, f"img{i}.jpg") for i in (1, 2, 3, 4)}

graph = ViewGraph()
for a, b in [(1, 2), (2, 3)]:
    graph.image_pairs[image_pair_to_pair_id(a, b)] = ImagePair(a, b)

largest = graph.keep_largest_connected_components(images)
print(largest)  # 3
print([img.is_registered for img in images.values()])  # [True, True, True, False]

rotation = angle_axis_to_rotation(np.array([0.0, 0.1, 0.0]))
pose = Rigid3d(rotation_to_quaternion(rotation), np.zeros(3))
print(calc_angle(Rigid3d(), pose))  # about 5.73 degrees
```

## Pose files

`glomap.pose_io` reads plain text, one record per line, fields separated by
whitespace; blank lines are skipped and malformed lines raise `ValueError`
with the file and line number. Written files use single spaces.

- relative poses: `IMAGE_NAME_1 IMAGE_NAME_2 QW QX QY QZ TX TY TZ`
- relative weights: `IMAGE_NAME_1 IMAGE_NAME_2 WEIGHT`
- gravity: `IMAGE_NAME GX GY GZ`, the image-frame direction of `[0, 1, 0]`
- global rotations (written): `IMAGE_NAME QW QX QY QZ`

```python
from glomap.pose_io import read_rel_pose, write_rel_pose
from glomap.view_graph import ViewGraph

images = {}
graph = ViewGraph()
read_rel_pose("relpose.txt", images, graph)
write_rel_pose("relpose_out.txt", images, graph)
```

Unknown image names in a relative-pose file are added to `images` with fresh
ids and camera id -1. Weights and gravity for unknown names are skipped.
`read_gravity` also resets each matching image's rotation to the one aligned
with its gravity. `write_global_rotation` writes registered images in order of
image id; `write_rel_pose` writes valid pairs sorted by their image names.

## What the package does not do

This is a library of parts, not a complete mapping pipeline. It has no
command-line program, reads no feature or match database, does not estimate
two-view geometry from matches, and does not itself carry out global rotation
averaging, global positioning, bundle adjustment or triangulation. It writes
no reconstruction models; the only files it reads and writes are the plain
text pose files above.