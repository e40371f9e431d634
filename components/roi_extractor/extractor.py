import logging

import cv2
import numpy as np

from components.coordinate_mapper.scale import ScaleTransform, check_size
from components.errors import EmptyRegionError, InvalidInputError
from components.roi_selector.confidence import HighestConfidence
from components.types import ROI, BoundingBox, PixelMatrix

logger = logging.getLogger(__name__)


def pad_box(box: BoundingBox, padding_ratio: float) -> BoundingBox:
    """Grow ``box`` by ``padding_ratio`` of its width/height on every side."""
    if padding_ratio < 0:
        raise InvalidInputError(f"Padding ratio must be non-negative, got {padding_ratio}")
    if padding_ratio == 0:
        return box
    dx = box.width * padding_ratio
    dy = box.height * padding_ratio
    return BoundingBox(box.x - dx, box.y - dy, box.width + 2 * dx, box.height + 2 * dy, box.confidence)


def clamp_to_frame(box: BoundingBox, frame_size):
    """Round ``box`` to whole pixels and shrink any overhang.

    Each edge is rounded on its own, so integer boxes come back unchanged and
    sub-pixel boxes snap to the nearest pixel edges. Returns
    (x, y, x_end, y_end); the region may be empty.
    """
    frame_w, frame_h = frame_size
    x = min(frame_w, max(0, int(round(box.x))))
    y = min(frame_h, max(0, int(round(box.y))))
    x_end = min(frame_w, max(0, int(round(box.x_end))))
    y_end = min(frame_h, max(0, int(round(box.y_end))))
    return x, y, x_end, y_end


def map_mask(mask, transform: ScaleTransform, original_size):
    """Resample a detection-space mask onto the original image grid."""
    width, height = original_size
    warp = np.float32([
        [transform.scale_x, 0, transform.offset_x],
        [0, transform.scale_y, transform.offset_y],
    ])
    return cv2.warpAffine(mask, warp, (width, height), flags=cv2.INTER_NEAREST,
                          borderMode=cv2.BORDER_CONSTANT, borderValue=0)


class ROIExtractor:
    """
    Turns detector candidates into a crop of the original image.

    The winning candidate is mapped from detection space into original-image
    space, padded, clamped to the image bounds and cropped into a new buffer.
    """

    def __init__(self, roi_selector=None, padding_ratio: float=0.0):
        if padding_ratio < 0:
            raise InvalidInputError(f"Padding ratio must be non-negative, got {padding_ratio}")
        self.roi_selector = roi_selector or HighestConfidence()
        self.padding_ratio = padding_ratio

    def extract(self, original_matrix, candidates, detection_size, original_size, transform=None, mask=None) -> ROI:
        """
        Args:
            original_matrix (PixelMatrix): full resolution image to crop.
            candidates (list[BoundingBox]): boxes in detection-image pixels.
            detection_size (tuple): (width, height) of the detection image.
            original_size (tuple): (width, height) of ``original_matrix``.
            transform (ScaleTransform, optional): detection-to-original mapping
                to use instead of a plain resize, e.g. for letterboxed input.
            mask (numpy.ndarray, optional): 8-bit detection-space mask; pixels
                of the crop outside it are zeroed.

        Returns:
            ROI: the crop and its box in original-image pixels.

        Box edges are snapped to whole pixels (see ``clamp_to_frame``).
        """
        if not isinstance(original_matrix, PixelMatrix):
            raise InvalidInputError(f"Expected a PixelMatrix, got {type(original_matrix).__name__}")
        original_size = check_size(original_size, "original_size")
        if original_matrix.size != original_size:
            raise InvalidInputError(
                f"original_size {original_size} does not match the image size {original_matrix.size}"
            )

        selected = self.roi_selector.select(candidates)

        if mask is not None and (mask.ndim != 2 or (mask.shape[1], mask.shape[0]) != tuple(detection_size)):
            raise InvalidInputError(f"Mask of shape {mask.shape} does not match detection size {detection_size}")

        if transform is None:
            transform = ScaleTransform.between(detection_size, original_size)
        mapped = transform.apply(selected)
        padded = pad_box(mapped, self.padding_ratio)

        x, y, x_end, y_end = clamp_to_frame(padded, original_size)
        if x_end <= x or y_end <= y:
            raise EmptyRegionError(f"Face box {padded} has no overlap with a {original_size} image")

        logger.debug("Selected %s, mapped to %s, cropping (%d, %d, %d, %d)", selected, mapped, x, y, x_end, y_end)

        crop = original_matrix.data[y:y_end, x:x_end].copy()
        if mask is not None:
            crop_mask = map_mask(mask, transform, original_size)[y:y_end, x:x_end]
            crop = cv2.bitwise_and(crop, crop, mask=crop_mask)
        box = BoundingBox(x, y, x_end - x, y_end - y, selected.confidence)
        return ROI(PixelMatrix(crop, original_matrix.pixel_format), box)
