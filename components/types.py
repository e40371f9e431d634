import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple

import cv2
import numpy as np

from components.errors import InvalidInputError, UnsupportedFormatError

Size = Tuple[int, int]  # (width, height)


class PixelFormat(Enum):
    GRAY = ("gray", 1)
    BGR = ("bgr", 3)
    RGB = ("rgb", 3)
    BGRA = ("bgra", 4)
    RGBA = ("rgba", 4)

    def __init__(self, label, channels):
        self.label = label
        self.channels = channels


class Orientation(Enum):
    """Display orientation tag of a platform image, relative to upright pixels."""
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


class PixelMatrix:
    """Decoded 8-bit image buffer, independent of any platform image type.

    ``data`` is row-major with shape ``(h, w)`` for gray images and
    ``(h, w, c)`` otherwise.
    """

    def __init__(self, data: np.ndarray, pixel_format: PixelFormat):
        if not isinstance(data, np.ndarray):
            raise InvalidInputError(f"Pixel data must be a numpy array, got {type(data).__name__}")
        if data.dtype != np.uint8:
            raise UnsupportedFormatError(f"Only 8-bit pixel data is supported, got {data.dtype}")

        if pixel_format is PixelFormat.GRAY:
            if data.ndim == 3 and data.shape[2] == 1:
                data = data[:, :, 0]
            if data.ndim != 2:
                raise InvalidInputError(f"Gray data must be 2-D, got shape {data.shape}")
        elif data.ndim != 3 or data.shape[2] != pixel_format.channels:
            raise InvalidInputError(
                f"{pixel_format.name} data must have shape (h, w, {pixel_format.channels}), got {data.shape}"
            )

        self.data = data
        self.pixel_format = pixel_format

    @property
    def width(self) -> int:
        return int(self.data.shape[1])

    @property
    def height(self) -> int:
        return int(self.data.shape[0])

    @property
    def channels(self) -> int:
        return self.pixel_format.channels

    @property
    def size(self) -> Size:
        return self.width, self.height

    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def copy(self) -> "PixelMatrix":
        return PixelMatrix(self.data.copy(), self.pixel_format)

    def to_format(self, pixel_format: PixelFormat) -> "PixelMatrix":
        """Return a new matrix converted to ``pixel_format``."""
        if pixel_format is self.pixel_format:
            return self.copy()
        code = getattr(cv2, f"COLOR_{self.pixel_format.name}2{pixel_format.name}")
        return PixelMatrix(cv2.cvtColor(self.data, code), pixel_format)

    def __eq__(self, other):
        if not isinstance(other, PixelMatrix):
            return NotImplemented
        return (self.pixel_format is other.pixel_format
                and self.data.shape == other.data.shape
                and np.array_equal(self.data, other.data))

    def __repr__(self):
        return f"PixelMatrix({self.width}x{self.height}, {self.pixel_format.name})"


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned box given by its top-left corner and extent."""
    x: float
    y: float
    width: float
    height: float
    confidence: float = 1.0

    def __post_init__(self):
        values = (self.x, self.y, self.width, self.height, self.confidence)
        if not all(math.isfinite(v) for v in values):
            raise InvalidInputError(f"Bounding box values must be finite: {values}")
        if self.width <= 0 or self.height <= 0:
            raise InvalidInputError(f"Bounding box must have positive size, got {self.width}x{self.height}")
        if not 0.0 <= self.confidence <= 1.0:
            raise InvalidInputError(f"Confidence must be in [0, 1], got {self.confidence}")

    @classmethod
    def from_xyxy(cls, x_min, y_min, x_max, y_max, confidence=1.0) -> "BoundingBox":
        return cls(x_min, y_min, x_max - x_min, y_max - y_min, confidence)

    @property
    def x_end(self) -> float:
        return self.x + self.width

    @property
    def y_end(self) -> float:
        return self.y + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    def as_xyxy(self):
        return self.x, self.y, self.x_end, self.y_end

    def with_confidence(self, confidence: float) -> "BoundingBox":
        return BoundingBox(self.x, self.y, self.width, self.height, confidence)


DetectionResult = List[BoundingBox]


@dataclass(frozen=True)
class ROI:
    """Cropped face region and the box, in original-image pixels, it came from."""
    matrix: PixelMatrix
    box: BoundingBox
