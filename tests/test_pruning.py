import pytest

from glomap.image import Image, Track
from glomap.pruning import prune_weakly_connected_images


def _tracks(groups):
    tracks = {}
    for image_ids, repeat in groups:
        for _ in range(repeat):
            track_id = len(tracks)
            tracks[track_id] = Track(
                track_id=track_id, observations=[(i, track_id) for i in image_ids]
            )
    return tracks


def _images(ids):
    return {i: Image(image_id=i, camera_id=1) for i in ids}


def test_prune_keeps_strong_group():
    images = _images(range(1, 8))
    tracks = _tracks([((1, 2, 3, 4), 40), ((1, 2, 3), 10), ((5, 6, 7), 30)])
    num = prune_weakly_connected_images(images, tracks)
    assert num == 1
    group = [images[i] for i in (1, 2, 3, 4)]
    assert all(image.cluster_id == 0 for image in group)
    assert all(image.is_registered for image in group)
    assert all(images[i].cluster_id == -1 for i in (5, 6, 7))


def test_prune_ignores_short_tracks():
    images = _images([1, 2])
    tracks = _tracks([((1, 2), 50)])
    with pytest.raises(ValueError):
        prune_weakly_connected_images(images, tracks)


def test_prune_min_observations_excludes_pairs():
    images = _images([1, 2, 3])
    tracks = _tracks([((1, 2, 3), 30)])
    with pytest.raises(ValueError):
        prune_weakly_connected_images(images, tracks, min_num_observations=1000)


def test_prune_cluster_ids_are_consistent():
    images = _images(range(1, 8))
    tracks = _tracks([((1, 2, 3, 4), 40), ((1, 2, 3), 10), ((5, 6, 7), 30)])
    num = prune_weakly_connected_images(images, tracks)
    cluster_ids = {image.cluster_id for image in images.values()} - {-1}
    assert cluster_ids == set(range(num))