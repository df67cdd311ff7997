"""Plain-text reading and writing of relative poses, weights, gravity and rotations."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator

import numpy as np

from glomap.geometry import Rigid3d, rotation_to_quaternion
from glomap.image import Image
from glomap.image_pair import ImagePair, image_pair_to_pair_id
from glomap.view_graph import ViewGraph

logger = logging.getLogger(__name__)

PathLike = str | os.PathLike


def _records(path: PathLike) -> Iterator[tuple[int, list[str]]]:
    """Yield (line number, fields) for every non-blank line of a text file."""
    with open(path, encoding="utf-8") as handle:
        for number, line in enumerate(handle, start=1):
            fields = line.split()
            if fields:
                yield number, fields


def _floats(fields: list[str], count: int, path: PathLike, number: int) -> list[float]:
    if len(fields) < count:
        raise ValueError(
            f"{path}:{number}: expected {count} numbers, got {len(fields)}"
        )
    try:
        return [float(value) for value in fields[:count]]
    except ValueError as error:
        raise ValueError(f"{path}:{number}: {error}") from error


def _name_index(images: dict[int, Image]) -> dict[str, int]:
    return {image.file_name: image_id for image_id, image in images.items()}


def _format(value: float) -> str:
    return f"{float(value):g}"


def read_rel_pose(
    file_path: PathLike, images: dict[int, Image], view_graph: ViewGraph
) -> int:
    """Read lines ``NAME1 NAME2 QW QX QY QZ TX TY TZ`` into the view graph.

    Unknown image names are added as new images with fresh ids and camera id
    -1. Pairs already in the graph are kept unchanged. Returns the number of
    lines read.
    """
    name_idx = _name_index(images)
    max_image_id = max(images, default=0)
    max_image_id = max(max_image_id, 0)

    counter = 0
    for number, fields in _records(file_path):
        if len(fields) < 2:
            raise ValueError(f"{file_path}:{number}: expected two image names")
        file1, file2 = fields[0], fields[1]
        for name in (file1, file2):
            if name not in name_idx:
                max_image_id += 1
                images[max_image_id] = Image(
                    image_id=max_image_id, camera_id=-1, file_name=name
                )
                name_idx[name] = max_image_id

        values = _floats(fields[2:], 7, file_path, number)
        pose = Rigid3d(values[:4], values[4:])

        index1, index2 = name_idx[file1], name_idx[file2]
        pair_id = image_pair_to_pair_id(index1, index2)
        view_graph.image_pairs.setdefault(
            pair_id, ImagePair(image_id1=index1, image_id2=index2, cam2_from_cam1=pose)
        )
        counter += 1
    logger.info("%d relpose are loaded", counter)
    return counter


def read_rel_weight(
    file_path: PathLike, images: dict[int, Image], view_graph: ViewGraph
) -> int:
    """Read lines ``NAME1 NAME2 WEIGHT`` into the weights of existing pairs.

    Lines naming unknown images or pairs not in the graph are skipped.
    Returns the number of weights set.
    """
    name_idx = _name_index(images)
    counter = 0
    for number, fields in _records(file_path):
        if len(fields) < 2:
            raise ValueError(f"{file_path}:{number}: expected two image names")
        file1, file2 = fields[0], fields[1]
        if file1 not in name_idx or file2 not in name_idx:
            continue
        pair_id = image_pair_to_pair_id(name_idx[file1], name_idx[file2])
        image_pair = view_graph.image_pairs.get(pair_id)
        if image_pair is None:
            continue
        (weight,) = _floats(fields[2:], 1, file_path, number)
        image_pair.weight = weight
        counter += 1
    logger.info("%d weights are used are loaded", counter)
    return counter


def read_gravity(gravity_path: PathLike, images: dict[int, Image]) -> int:
    """Read lines ``NAME GX GY GZ`` and set the gravity of matching images.

    Gravity is the direction of [0, 1, 0] in the image frame. Each matching
    image's rotation is reset so that it is aligned with its gravity.
    Returns the number of images given a gravity.
    """
    name_idx = _name_index(images)
    counter = 0
    for number, fields in _records(gravity_path):
        name = fields[0]
        gravity = np.array(_floats(fields[1:], 3, gravity_path, number))
        image_id = name_idx.get(name)
        if image_id is None:
            continue
        image = images[image_id]
        image.gravity_info.set_gravity(gravity)
        image.cam_from_world.rotation = rotation_to_quaternion(
            image.gravity_info.r_align.T
        )
        counter += 1
    logger.info("%d images are loaded with gravity", counter)
    return counter


def write_global_rotation(file_path: PathLike, images: dict[int, Image]) -> None:
    """Write ``NAME QW QX QY QZ`` for every registered image, by image id."""
    with open(file_path, "w", encoding="utf-8") as handle:
        for image_id in sorted(i for i, image in images.items() if image.is_registered):
            image = images[image_id]
            quaternion = " ".join(_format(v) for v in image.cam_from_world.rotation)
            handle.write(f"{image.file_name} {quaternion}\n")


def write_rel_pose(
    file_path: PathLike, images: dict[int, Image], view_graph: ViewGraph
) -> int:
    """Write ``NAME1 NAME2 QW QX QY QZ TX TY TZ`` for valid pairs, sorted by names.

    Returns the number of pairs written.
    """
    by_name: dict[str, int] = {}
    for pair_id, image_pair in view_graph.image_pairs.items():
        if image_pair.is_valid:
            name1 = images[image_pair.image_id1].file_name
            name2 = images[image_pair.image_id2].file_name
            by_name[f"{name1} {name2}"] = pair_id

    with open(file_path, "w", encoding="utf-8") as handle:
        for name in sorted(by_name):
            pose = view_graph.image_pairs[by_name[name]].cam2_from_cam1
            values = " ".join(
                _format(v) for v in (*pose.rotation, *pose.translation)
            )
            handle.write(f"{name} {values}\n")

    logger.info("%d relpose are written", len(by_name))
    return len(by_name)