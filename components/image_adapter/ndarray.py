from dataclasses import dataclass

import cv2
import numpy as np

from components.errors import InvalidInputError, UnsupportedFormatError
from components.image_adapter.base import ImageAdapter
from components.types import Orientation, PixelFormat, PixelMatrix

_ROTATIONS = {
    Orientation.RIGHT: cv2.ROTATE_90_CLOCKWISE,
    Orientation.LEFT: cv2.ROTATE_90_COUNTERCLOCKWISE,
    Orientation.DOWN: cv2.ROTATE_180,
}

_CHANNEL_ORDERS = {
    'bgr': {3: PixelFormat.BGR, 4: PixelFormat.BGRA},
    'rgb': {3: PixelFormat.RGB, 4: PixelFormat.RGBA},
}


@dataclass(frozen=True)
class OrientedImage:
    """A raw array tagged with the orientation it should be displayed in."""
    data: np.ndarray
    orientation: Orientation = Orientation.UP


class NDArrayAdapter(ImageAdapter):
    """
    Adapter for OpenCV-style numpy images: 2-D gray, or 3/4 channels in
    ``channel_order``. Decoding always yields an upright copy.
    """

    def __init__(self, channel_order: str = 'bgr'):
        if channel_order not in _CHANNEL_ORDERS:
            raise ValueError(f"Invalid channel order '{channel_order}'. Supported: {list(_CHANNEL_ORDERS)}")
        self.channel_order = channel_order

    def _pixel_format(self, data):
        if data.ndim == 2:
            return PixelFormat.GRAY
        if data.ndim == 3:
            pixel_format = _CHANNEL_ORDERS[self.channel_order].get(data.shape[2])
            if pixel_format is not None:
                return pixel_format
        raise UnsupportedFormatError(f"Cannot normalize image with shape {data.shape}")

    def decode(self, image) -> PixelMatrix:
        orientation = Orientation.UP
        if isinstance(image, OrientedImage):
            image, orientation = image.data, image.orientation

        if not isinstance(image, np.ndarray):
            raise InvalidInputError(f"Expected a numpy array, got {type(image).__name__}")
        if image.size == 0:
            raise InvalidInputError(f"Image is empty (shape {image.shape})")
        if image.dtype != np.uint8:
            # 16-bit, float and palette-index buffers all land here
            raise UnsupportedFormatError(f"Only 8-bit images are supported, got {image.dtype}")

        if image.ndim == 3 and image.shape[2] == 1:
            image = image[:, :, 0]
        pixel_format = self._pixel_format(image)

        if orientation in _ROTATIONS:
            data = cv2.rotate(image, _ROTATIONS[orientation])
        else:
            data = image.copy()

        return PixelMatrix(np.ascontiguousarray(data), pixel_format)

    def encode(self, matrix: PixelMatrix) -> np.ndarray:
        if not isinstance(matrix, PixelMatrix):
            raise InvalidInputError(f"Expected a PixelMatrix, got {type(matrix).__name__}")

        # Only formats this adapter decodes to are accepted; nothing is converted.
        if matrix.pixel_format is not PixelFormat.GRAY and \
                matrix.pixel_format not in _CHANNEL_ORDERS[self.channel_order].values():
            raise UnsupportedFormatError(
                f"{matrix.pixel_format.name} matrices cannot be encoded in {self.channel_order} channel order"
            )
        return matrix.data.copy()
