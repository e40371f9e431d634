import cv2
import numpy

from components.coordinate_mapper.scale import ScaleTransform, check_size
from components.errors import InvalidInputError
from components.types import PixelMatrix


def resize(matrix: PixelMatrix, size, interpolation=cv2.INTER_AREA) -> PixelMatrix:
    """Return a new matrix resized to ``size`` (width, height)."""
    width, height = check_size(size, "size")
    return PixelMatrix(cv2.resize(matrix.data, (width, height), interpolation=interpolation), matrix.pixel_format)


def downscale(matrix: PixelMatrix, factor: float) -> PixelMatrix:
    """Shrink ``matrix`` by ``factor`` for faster detection; sides never drop below one pixel."""
    if not 0 < factor <= 1:
        raise InvalidInputError(f"Downscale factor must be in (0, 1], got {factor}")
    if factor == 1:
        return matrix.copy()
    width = max(1, round(matrix.width * factor))
    height = max(1, round(matrix.height * factor))
    return resize(matrix, (width, height))


class Letterbox:
    """
    Fits an image into a fixed detector input size, preserving aspect ratio and
    padding the remainder with ``fill_color``.
    """

    def __init__(self, target_size, fill_color=(0, 0, 0)):
        self.target_size = check_size(target_size, "target_size")
        self.fill_color = fill_color

    def _pad(self, img, width, height):
        """Helper method for adding padding to an image
            - `img`: the image to add padding to
            - `width`: desired image width
            - `height`: desired image height
        Returns tuple with new image, left pixel coordinate of original image inside new image
        and top pixel coordinate of original image inside new image
        """
        ih, iw = img.shape[:2]
        left = (width - iw) // 2
        top = (height - ih) // 2

        image_obj = numpy.zeros((height, width) + img.shape[2:], img.dtype)
        if img.ndim == 2:
            image_obj[:] = self.fill_color[0]
        else:
            # missing channels (alpha) are filled opaque
            channels = img.shape[2]
            image_obj[:] = (list(self.fill_color) + [255] * channels)[:channels]

        image_obj[top : top + ih, left : left + iw] = img
        return image_obj, left, top

    def forward(self, matrix: PixelMatrix):
        """Letterbox ``matrix``.

        Returns the padded matrix and the ScaleTransform that maps boxes found in
        it back into ``matrix`` coordinates.
        """
        if matrix.is_empty():
            raise InvalidInputError("Cannot letterbox an empty image")

        w, h = self.target_size
        transform = ScaleTransform.letterbox((w, h), matrix.size)

        if matrix.size == (w, h):
            return matrix.copy(), transform

        scale = min(w / matrix.width, h / matrix.height)
        nw = min(round(matrix.width * scale), w)
        nh = min(round(matrix.height * scale), h)
        scaled = cv2.resize(matrix.data, (nw, nh), interpolation=cv2.INTER_LINEAR)
        padded, _, _ = self._pad(scaled, w, h)

        return PixelMatrix(padded, matrix.pixel_format), transform
