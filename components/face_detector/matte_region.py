import cv2
import numpy as np
from components.errors import InvalidInputError
from components.face_detector.base import FaceDetector
from components.types import BoundingBox, PixelFormat
from constants import MATTE_MIN_AREA, MATTE_SENSITIVITY

class MatteRegion(FaceDetector):
    """
    Finds the bright regions of a segmentation matte (e.g. a skin matte
    rendered white on black) and reports their bounding boxes.

    A pixel belongs to the matte when its HLS lightness is at least
    ``255 - sensitivity`` and its saturation at most ``sensitivity``.
    Confidence is the region's share of all matte pixels, so stray specks
    score near zero. Boxes are ordered largest first.
    """

    def __init__(self, sensitivity: int=MATTE_SENSITIVITY, min_area: int=MATTE_MIN_AREA):
        if not 0 <= sensitivity <= 255:
            raise InvalidInputError(f"Sensitivity must be in [0, 255], got {sensitivity}")
        self.sensitivity = sensitivity
        self.min_area = min_area

    def mask(self, matrix):
        hls = cv2.cvtColor(matrix.to_format(PixelFormat.BGR).data, cv2.COLOR_BGR2HLS)
        lower_white = (0, 255 - self.sensitivity, 0)
        upper_white = (255, 255, self.sensitivity)
        return cv2.inRange(hls, lower_white, upper_white)

    def _detect_faces(self, matrix):
        mask = self.mask(matrix)
        total = cv2.countNonZero(mask)
        if total == 0:
            return []
        contours, _ = cv2.findContours(mask, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)

        regions = []
        for contour in contours:
            x, y, w, h = cv2.boundingRect(contour)
            region = np.zeros_like(mask)
            cv2.drawContours(region, [contour], -1, 255, thickness=cv2.FILLED)
            filled = cv2.countNonZero(cv2.bitwise_and(mask, region))
            if filled < self.min_area:
                continue
            regions.append(BoundingBox(x, y, w, h, filled / total))

        regions.sort(key=lambda box: box.area, reverse=True)
        return regions
