import numpy as np
import pytest

from components.face_detector.base import FaceDetector
from components.types import BoundingBox, PixelFormat, PixelMatrix


class StubDetector(FaceDetector):
    """Returns a fixed list of boxes and records the matrices it saw."""

    def __init__(self, boxes):
        self.boxes = list(boxes)
        self.seen = []

    def _detect_faces(self, matrix):
        self.seen.append(matrix)
        return list(self.boxes)


def gradient_image(width, height, channels=3):
    """Image whose pixels encode their own coordinates, so crops are easy to verify."""
    ys, xs = np.mgrid[0:height, 0:width]
    planes = [xs % 256, ys % 256, (xs + ys) % 256, np.full_like(xs, 255)][:channels]
    data = np.stack(planes, axis=-1).astype(np.uint8)
    return data[:, :, 0] if channels == 1 else data


@pytest.fixture
def stub_detector():
    return StubDetector


@pytest.fixture
def face_box():
    return BoundingBox(10, 10, 20, 20, 0.9)


@pytest.fixture
def bgr_matrix():
    return PixelMatrix(gradient_image(64, 48), PixelFormat.BGR)
