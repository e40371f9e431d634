import numpy as np
import pytest

from components.coordinate_mapper.scale import ScaleTransform
from components.errors import EmptyRegionError, InvalidInputError, NoFaceDetectedError
from components.roi_extractor.extractor import ROIExtractor, clamp_to_frame, map_mask, pad_box
from components.roi_selector.largest import LargestArea
from components.types import BoundingBox, PixelFormat, PixelMatrix
from tests.conftest import gradient_image


@pytest.fixture
def original():
    return PixelMatrix(gradient_image(400, 400), PixelFormat.BGR)


def test_maps_and_crops(original, face_box):
    roi = ROIExtractor().extract(original, [face_box], (100, 100), (400, 400))
    assert roi.box == BoundingBox(40, 40, 80, 80, 0.9)
    assert roi.matrix.size == (80, 80)
    assert roi.matrix == PixelMatrix(original.data[40:120, 40:120], PixelFormat.BGR)


def test_same_size_keeps_raw_box(original):
    box = BoundingBox(120, 35, 64, 80, 0.75)
    roi = ROIExtractor().extract(original, [box], (400, 400), (400, 400))
    assert roi.box == box


def test_selects_most_confident(original):
    low = BoundingBox(0, 0, 20, 20, 0.6)
    high = BoundingBox(50, 50, 10, 10, 0.8)
    roi = ROIExtractor().extract(original, [low, high], (100, 100), (400, 400))
    assert roi.box == BoundingBox(200, 200, 40, 40, 0.8)


def test_custom_selector(original):
    small = BoundingBox(0, 0, 10, 10, 0.9)
    large = BoundingBox(50, 50, 20, 20, 0.5)
    roi = ROIExtractor(roi_selector=LargestArea()).extract(original, [small, large], (400, 400), (400, 400))
    assert roi.box == large


def test_empty_candidates(original):
    with pytest.raises(NoFaceDetectedError):
        ROIExtractor().extract(original, [], (100, 100), (400, 400))


def test_padding_overhang_is_clamped():
    original = PixelMatrix(gradient_image(100, 80), PixelFormat.BGR)
    # padded to x 75..105, five pixels past the right edge
    roi = ROIExtractor(padding_ratio=0.25).extract(original, [BoundingBox(80, 20, 20, 20, 0.9)], (100, 80), (100, 80))
    assert roi.box == BoundingBox(75, 15, 25, 30, 0.9)
    assert roi.matrix.size == (25, 30)


def test_zero_padding_returns_same_box(face_box):
    assert pad_box(face_box, 0.0) is face_box


def test_right_overhang_shrinks_crop():
    original = PixelMatrix(gradient_image(100, 100), PixelFormat.BGR)
    roi = ROIExtractor().extract(original, [BoundingBox(85, 10, 20, 20, 0.9)], (100, 100), (100, 100))
    assert roi.box == BoundingBox(85, 10, 15, 20, 0.9)
    assert roi.matrix.size == (15, 20)


@pytest.mark.parametrize("box", [
    BoundingBox(-50, -50, 600, 600, 0.5),
    BoundingBox(390, 390, 50, 50, 0.5),
    BoundingBox(0, 0, 1, 1, 0.5),
])
def test_crop_never_leaves_image(original, box):
    roi = ROIExtractor(padding_ratio=0.5).extract(original, [box], (400, 400), (400, 400))
    x, y, x_end, y_end = roi.box.as_xyxy()
    assert 0 <= x < x_end <= 400
    assert 0 <= y < y_end <= 400
    assert roi.matrix.size == (roi.box.width, roi.box.height)


def test_box_outside_image_is_empty_region(original):
    with pytest.raises(EmptyRegionError):
        ROIExtractor().extract(original, [BoundingBox(500, 10, 20, 20, 0.9)], (400, 400), (400, 400))


def test_empty_region_is_a_no_face_outcome(original):
    with pytest.raises(NoFaceDetectedError):
        ROIExtractor().extract(original, [BoundingBox(10, 10, 0.2, 0.2, 0.9)], (400, 400), (400, 400))


def test_original_is_not_mutated(original, face_box):
    before = original.copy()
    roi = ROIExtractor(padding_ratio=0.2).extract(original, [face_box], (100, 100), (400, 400))
    roi.matrix.data[:] = 0
    assert original == before


def test_explicit_transform(original):
    transform = ScaleTransform.letterbox((100, 100), (400, 400))
    roi = ROIExtractor().extract(original, [BoundingBox(10, 10, 20, 20, 1.0)], (100, 100), (400, 400),
                                 transform=transform)
    assert roi.box == BoundingBox(40, 40, 80, 80, 1.0)


def test_size_mismatch(original, face_box):
    with pytest.raises(InvalidInputError):
        ROIExtractor().extract(original, [face_box], (100, 100), (300, 400))


def test_zero_detection_size(original, face_box):
    with pytest.raises(InvalidInputError):
        ROIExtractor().extract(original, [face_box], (0, 100), (400, 400))


def test_negative_padding():
    with pytest.raises(InvalidInputError):
        ROIExtractor(padding_ratio=-0.1)


def test_clamp_to_frame_rounds_edges():
    assert clamp_to_frame(BoundingBox(1.4, 1.6, 10.2, 10.2), (20, 20)) == (1, 2, 12, 12)


def test_sub_pixel_box_snaps_to_pixel_edges(original):
    box = BoundingBox(10.4, 20.6, 30.2, 40.2, 0.7)
    roi = ROIExtractor().extract(original, [box], (400, 400), (400, 400))
    assert roi.box == BoundingBox(10, 21, 31, 40, 0.7)
    assert roi.matrix.size == (31, 40)


def test_mask_zeroes_pixels_outside(original):
    mask = np.zeros((100, 100), dtype=np.uint8)
    mask[10:30, 10:20] = 255
    roi = ROIExtractor().extract(original, [BoundingBox(10, 10, 20, 20, 0.9)], (100, 100), (400, 400), mask=mask)

    assert roi.box == BoundingBox(40, 40, 80, 80, 0.9)
    assert np.array_equal(roi.matrix.data[:, :36], original.data[40:120, 40:76])
    assert not roi.matrix.data[:, 44:].any()


def test_mask_size_mismatch(original, face_box):
    with pytest.raises(InvalidInputError):
        ROIExtractor().extract(original, [face_box], (100, 100), (400, 400), mask=np.zeros((50, 50), dtype=np.uint8))


def test_map_mask_follows_letterbox():
    mask = np.zeros((100, 100), dtype=np.uint8)
    mask[35:55, 10:30] = 255
    mapped = map_mask(mask, ScaleTransform.letterbox((100, 100), (400, 200)), (400, 200))

    assert mapped.shape == (200, 400)
    assert mapped[80, 80] == 255
    assert mapped[10, 10] == 0
    assert mapped[80, 200] == 0
