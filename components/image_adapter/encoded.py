import cv2
import numpy as np

from components.errors import InvalidInputError, UnsupportedFormatError
from components.image_adapter.base import ImageAdapter
from components.image_adapter.ndarray import NDArrayAdapter
from components.types import PixelMatrix

LOSSLESS_EXTENSIONS = ('.png', '.bmp', '.tiff', '.tif')


class EncodedImageAdapter(ImageAdapter):
    """Adapter for encoded image bytes (PNG, JPEG, ...). Encodes back losslessly."""

    def __init__(self, extension: str = '.png'):
        if extension.lower() not in LOSSLESS_EXTENSIONS:
            raise ValueError(f"Extension must be lossless, one of {LOSSLESS_EXTENSIONS}, got '{extension}'")
        self.extension = extension.lower()
        self._arrays = NDArrayAdapter(channel_order='bgr')

    def decode(self, image) -> PixelMatrix:
        if not isinstance(image, (bytes, bytearray, memoryview)):
            raise InvalidInputError(f"Expected encoded image bytes, got {type(image).__name__}")
        if len(image) == 0:
            raise InvalidInputError("Encoded image is empty")

        data = cv2.imdecode(np.frombuffer(image, dtype=np.uint8), cv2.IMREAD_UNCHANGED)
        if data is None:
            raise InvalidInputError("Image bytes could not be decoded")

        return self._arrays.decode(data)

    def encode(self, matrix: PixelMatrix) -> bytes:
        data = self._arrays.encode(matrix)
        ok, buffer = cv2.imencode(self.extension, data)
        if not ok:
            raise UnsupportedFormatError(f"OpenCV could not encode {matrix!r} as {self.extension}")
        return buffer.tobytes()
