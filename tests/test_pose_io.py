import numpy as np
import pytest

from glomap.geometry import Rigid3d
from glomap.image import Image
from glomap.image_pair import ImagePair, image_pair_to_pair_id
from glomap.pose_io import (
    read_gravity,
    read_rel_pose,
    read_rel_weight,
    write_global_rotation,
    write_rel_pose,
)
from glomap.view_graph import ViewGraph


def _write(path, text):
    path.write_text(text, encoding="utf-8")
    return path


def test_read_rel_pose_adds_unknown_images(tmp_path):
    path = _write(tmp_path / "rel.txt", "a.jpg b.jpg 1 0 0 0 1 2 3\n")
    images = {}
    graph = ViewGraph()
    count = read_rel_pose(path, images, graph)
    assert count == 1
    assert sorted(images) == [1, 2]
    assert images[1].file_name == "a.jpg"
    assert images[2].file_name == "b.jpg"
    assert images[1].camera_id == -1
    pair = graph.image_pairs[image_pair_to_pair_id(1, 2)]
    assert (pair.image_id1, pair.image_id2) == (1, 2)
    np.testing.assert_allclose(pair.cam2_from_cam1.translation, [1, 2, 3])
    np.testing.assert_allclose(pair.cam2_from_cam1.rotation, [1, 0, 0, 0])


def test_read_rel_pose_uses_existing_ids(tmp_path):
    path = _write(tmp_path / "rel.txt", "x.jpg new.jpg 1 0 0 0 0 0 1\n")
    images = {7: Image(image_id=7, camera_id=3, file_name="x.jpg")}
    graph = ViewGraph()
    read_rel_pose(path, images, graph)
    assert sorted(images) == [7, 8]
    assert images[8].file_name == "new.jpg"
    assert image_pair_to_pair_id(7, 8) in graph.image_pairs


def test_read_rel_pose_keeps_existing_pair(tmp_path):
    path = _write(tmp_path / "rel.txt", "a.jpg b.jpg 1 0 0 0 5 5 5\n")
    images = {
        1: Image(image_id=1, file_name="a.jpg"),
        2: Image(image_id=2, file_name="b.jpg"),
    }
    graph = ViewGraph()
    pair_id = image_pair_to_pair_id(1, 2)
    graph.image_pairs[pair_id] = ImagePair(image_id1=1, image_id2=2)
    assert read_rel_pose(path, images, graph) == 1
    np.testing.assert_allclose(graph.image_pairs[pair_id].cam2_from_cam1.translation, 0)


def test_read_rel_pose_rejects_short_line(tmp_path):
    path = _write(tmp_path / "rel.txt", "a.jpg b.jpg 1 0 0\n")
    with pytest.raises(ValueError):
        read_rel_pose(path, {}, ViewGraph())


def test_read_rel_pose_rejects_bad_number(tmp_path):
    path = _write(tmp_path / "rel.txt", "a.jpg b.jpg 1 0 0 zero 0 0 0\n")
    with pytest.raises(ValueError):
        read_rel_pose(path, {}, ViewGraph())


def test_rel_pose_round_trip(tmp_path):
    rotation = np.array([0.5, 0.5, 0.5, 0.5])
    images = {
        1: Image(image_id=1, file_name="a.jpg"),
        2: Image(image_id=2, file_name="b.jpg"),
    }
    graph = ViewGraph()
    pair_id = image_pair_to_pair_id(1, 2)
    graph.image_pairs[pair_id] = ImagePair(
        image_id1=1, image_id2=2, cam2_from_cam1=Rigid3d(rotation, [0.25, -0.5, 2.0])
    )
    out = tmp_path / "out.txt"
    assert write_rel_pose(out, images, graph) == 1

    read_images = {}
    read_graph = ViewGraph()
    read_rel_pose(out, read_images, read_graph)
    names = {image.file_name for image in read_images.values()}
    assert names == {"a.jpg", "b.jpg"}
    (pair,) = read_graph.image_pairs.values()
    np.testing.assert_allclose(pair.cam2_from_cam1.rotation, rotation, atol=1e-6)
    np.testing.assert_allclose(pair.cam2_from_cam1.translation, [0.25, -0.5, 2.0])


def test_write_rel_pose_skips_invalid_and_sorts(tmp_path):
    images = {
        1: Image(image_id=1, file_name="c.jpg"),
        2: Image(image_id=2, file_name="a.jpg"),
        3: Image(image_id=3, file_name="b.jpg"),
    }
    graph = ViewGraph()
    graph.image_pairs[image_pair_to_pair_id(1, 2)] = ImagePair(image_id1=1, image_id2=2)
    graph.image_pairs[image_pair_to_pair_id(2, 3)] = ImagePair(image_id1=2, image_id2=3)
    graph.image_pairs[image_pair_to_pair_id(1, 3)] = ImagePair(
        image_id1=1, image_id2=3, is_valid=False
    )
    out = tmp_path / "out.txt"
    assert write_rel_pose(out, images, graph) == 2
    lines = out.read_text(encoding="utf-8").splitlines()
    assert [line.split()[:2] for line in lines] == [["a.jpg", "b.jpg"], ["c.jpg", "a.jpg"]]
    assert all(len(line.split()) == 9 for line in lines)


def test_read_rel_weight(tmp_path):
    images = {
        1: Image(image_id=1, file_name="a.jpg"),
        2: Image(image_id=2, file_name="b.jpg"),
        3: Image(image_id=3, file_name="c.jpg"),
    }
    graph = ViewGraph()
    pair_id = image_pair_to_pair_id(1, 2)
    graph.image_pairs[pair_id] = ImagePair(image_id1=1, image_id2=2)
    path = _write(
        tmp_path / "w.txt",
        "b.jpg a.jpg 0.75\nb.jpg c.jpg 0.5\nz.jpg a.jpg 0.1\n",
    )
    assert read_rel_weight(path, images, graph) == 1
    assert graph.image_pairs[pair_id].weight == 0.75
    assert image_pair_to_pair_id(2, 3) not in graph.image_pairs


def test_read_gravity_aligns_rotation(tmp_path):
    images = {
        1: Image(image_id=1, file_name="a.jpg"),
        2: Image(image_id=2, file_name="b.jpg"),
    }
    path = _write(tmp_path / "g.txt", "a.jpg 0.1 0.9 0.2\nmissing.jpg 0 1 0\n")
    assert read_gravity(path, images) == 1
    image = images[1]
    assert image.gravity_info.has_gravity
    assert not images[2].gravity_info.has_gravity
    gravity = np.array([0.1, 0.9, 0.2])
    rotated = image.cam_from_world.rotation_matrix() @ (gravity / np.linalg.norm(gravity))
    np.testing.assert_allclose(rotated, [0, 1, 0], atol=1e-9)


def test_read_gravity_rejects_short_line(tmp_path):
    path = _write(tmp_path / "g.txt", "a.jpg 0 1\n")
    with pytest.raises(ValueError):
        read_gravity(path, {1: Image(image_id=1, file_name="a.jpg")})


def test_write_global_rotation(tmp_path):
    images = {
        5: Image(image_id=5, file_name="e.jpg", is_registered=True),
        2: Image(image_id=2, file_name="b.jpg", is_registered=True),
        3: Image(image_id=3, file_name="c.jpg", is_registered=False),
    }
    images[5].cam_from_world = Rigid3d([0.0, 0.0, 1.0, 0.0])
    out = tmp_path / "rot.txt"
    write_global_rotation(out, images)
    lines = out.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "b.jpg 1 0 0 0"
    assert lines[1] == "e.jpg 0 0 1 0"
    assert len(lines) == 2


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_rel_pose(tmp_path / "absent.txt", {}, ViewGraph())