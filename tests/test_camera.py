import numpy as np
import pytest

from glomap.camera import Camera, CameraModel


def test_pinhole_calibration_matrix():
    camera = Camera(1, CameraModel.PINHOLE, 640, 480, [500.0, 520.0, 320.0, 240.0])
    np.testing.assert_allclose(
        camera.calibration_matrix(),
        [[500.0, 0.0, 320.0], [0.0, 520.0, 240.0], [0.0, 0.0, 1.0]],
    )
    assert camera.focal() == pytest.approx(510.0)
    np.testing.assert_allclose(camera.principal_point(), [320.0, 240.0])


def test_simple_pinhole_uses_single_focal():
    camera = Camera(2, "SIMPLE_PINHOLE", 100, 100, [300.0, 50.0, 50.0])
    assert camera.focal() == 300.0
    assert camera.calibration_matrix()[1, 1] == 300.0


@pytest.mark.parametrize(
    "model, params",
    [
        (CameraModel.SIMPLE_PINHOLE, [500.0, 320.0, 240.0]),
        (CameraModel.PINHOLE, [500.0, 480.0, 320.0, 240.0]),
        (CameraModel.SIMPLE_RADIAL, [500.0, 320.0, 240.0, 0.1]),
        (CameraModel.RADIAL, [500.0, 320.0, 240.0, 0.05, -0.02]),
    ],
)
def test_projection_round_trip(model, params):
    camera = Camera(1, model, 640, 480, params)
    pixel = np.array([400.0, 300.0])
    np.testing.assert_allclose(camera.img_from_cam(camera.cam_from_img(pixel)), pixel, atol=1e-8)
    normalized = np.array([0.1, -0.2])
    np.testing.assert_allclose(
        camera.cam_from_img(camera.img_from_cam(normalized)), normalized, atol=1e-10
    )


def test_principal_point_maps_to_origin():
    camera = Camera(1, CameraModel.SIMPLE_RADIAL, 640, 480, [500.0, 320.0, 240.0, 0.1])
    np.testing.assert_allclose(camera.cam_from_img([320.0, 240.0]), [0.0, 0.0])


def test_wrong_parameter_count_raises():
    with pytest.raises(ValueError):
        Camera(1, CameraModel.PINHOLE, 640, 480, [500.0, 320.0, 240.0])


def test_unknown_model_raises():
    with pytest.raises(ValueError):
        Camera(1, "FISHEYE_UNKNOWN", 640, 480, [1.0])