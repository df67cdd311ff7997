import numpy as np
import pytest

from glomap.image_pair import (
    INVALID_IMAGE_PAIR_ID,
    MAX_NUM_IMAGES,
    ImagePair,
    TwoViewConfig,
    image_pair_to_pair_id,
    pair_id_to_image_pair,
)


def test_pair_id_is_symmetric():
    assert image_pair_to_pair_id(3, 7) == image_pair_to_pair_id(7, 3)


def test_pair_id_value():
    assert image_pair_to_pair_id(1, 2) == 2147483649


@pytest.mark.parametrize("ids", [(3, 7), (7, 3), (0, 5), (100000, 2)])
def test_pair_id_round_trip(ids):
    decoded = pair_id_to_image_pair(image_pair_to_pair_id(*ids))
    assert sorted(decoded) == sorted(ids)


def test_pair_id_decoding_order():
    assert pair_id_to_image_pair(image_pair_to_pair_id(3, 7)) == (7, 3)


def test_distinct_pairs_have_distinct_ids():
    ids = {image_pair_to_pair_id(a, b) for a in range(6) for b in range(a + 1, 6)}
    assert len(ids) == 15


def test_image_pair_defaults():
    pair = ImagePair(1, 2)
    assert pair.is_valid is True
    assert pair.weight == -1
    assert pair.config is TwoViewConfig.UNDEFINED
    assert pair.matches.shape == (0, 2)
    assert pair.inliers == []
    assert np.array_equal(pair.F, np.zeros((3, 3)))
    assert np.allclose(pair.cam2_from_cam1.translation, np.zeros(3))


def test_image_pair_id_matches_helper():
    assert ImagePair(9, 4).pair_id == image_pair_to_pair_id(4, 9)


def test_default_pair_has_invalid_id():
    assert ImagePair().pair_id == INVALID_IMAGE_PAIR_ID


@pytest.mark.parametrize(
    "value, expected",
    [
        (2, TwoViewConfig.CALIBRATED),
        (3, TwoViewConfig.UNCALIBRATED),
        (6, TwoViewConfig.PLANAR_OR_PANORAMIC),
    ],
)
def test_config_values(value, expected):
    assert TwoViewConfig(value) is expected


def test_max_num_images_bounds_ids():
    image_id1, image_id2 = pair_id_to_image_pair(image_pair_to_pair_id(5, 11))
    assert image_id1 < MAX_NUM_IMAGES and image_id2 < MAX_NUM_IMAGES