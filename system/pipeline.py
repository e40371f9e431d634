import logging

from components.errors import InvalidInputError, NoFaceDetectedError
from components.image_adapter.ndarray import NDArrayAdapter
from components.roi_extractor.extractor import ROIExtractor
from components.roi_selector.confidence import HighestConfidence
from system.config import ExtractionConfig

logger = logging.getLogger(__name__)


class FaceROIPipeline:
    """Finds a face in a detection image and crops it out of the original image.

    The pipeline only holds its collaborators, which are chosen at
    construction; no state is kept between calls, so one instance may serve
    concurrent callers as long as the detector backend allows it.
    """

    def __init__(self, face_detector, image_adapter=None, roi_selector=None):
        self.face_detector = face_detector
        self.image_adapter = image_adapter or NDArrayAdapter()
        self.roi_selector = roi_selector or HighestConfidence()

    def detect(self, detection_image, config=None):
        """Decode ``detection_image`` and return the candidates that pass ``config``."""
        config = config or ExtractionConfig()
        detection_matrix = self.image_adapter.decode(detection_image)
        candidates = self.face_detector.detect(detection_matrix)
        kept = config.filter(candidates)
        logger.debug("Detector returned %d candidate(s) on %dx%d, %d kept",
                     len(candidates), detection_matrix.width, detection_matrix.height, len(kept))
        return detection_matrix, kept

    def extract_roi(self, detection_image, original_image, config=None, transform=None):
        """Run the whole extraction and return the ROI (crop and original-space box).

        Args:
            detection_image: platform image searched for faces; usually a
                downscaled copy of ``original_image``.
            original_image: platform image the face is cropped from.
            config (ExtractionConfig, optional): call-time thresholds and padding.
            transform (ScaleTransform, optional): detection-to-original mapping
                when the detection image is not a plain resize of the original.

        Raises:
            NoFaceDetectedError: no candidate survived detection and filtering.
            EmptyRegionError: the face box collapsed when clamped to the image.
            InvalidInputError: empty images, degenerate sizes, or ``apply_mask``
                with a detector that has no mask.
            UnsupportedFormatError: an image the adapter cannot normalize.
        """
        config = config or ExtractionConfig()
        detection_matrix, candidates = self.detect(detection_image, config)
        return self.extract_from_candidates(detection_matrix, candidates, original_image, config, transform)

    def extract_from_candidates(self, detection_matrix, candidates, original_image, config=None, transform=None):
        """Crop the original using candidates already returned by ``detect``."""
        config = config or ExtractionConfig()
        original_matrix = self.image_adapter.decode(original_image)

        if not candidates:
            raise NoFaceDetectedError(
                f"No face found in {detection_matrix.width}x{detection_matrix.height} detection image"
            )

        mask = None
        if config.apply_mask:
            mask = self.face_detector.mask(detection_matrix)
            if mask is None:
                raise InvalidInputError(f"{type(self.face_detector).__name__} does not produce a face mask")

        extractor = ROIExtractor(self.roi_selector, config.padding_ratio)
        roi = extractor.extract(
            original_matrix,
            candidates,
            detection_matrix.size,
            original_matrix.size,
            transform=transform,
            mask=mask,
        )
        logger.debug("Face ROI %s in %dx%d original", roi.box, original_matrix.width, original_matrix.height)
        return roi

    def get_face_region_of_interest(self, detection_image, original_image, config=None, transform=None):
        """Same as ``extract_roi`` but returns the crop as a platform image."""
        roi = self.extract_roi(detection_image, original_image, config, transform)
        return self.image_adapter.encode(roi.matrix)


def get_face_region_of_interest(detection_image, original_image, face_detector, config=None, image_adapter=None):
    """Crop the face found in ``detection_image`` out of ``original_image``.

    Returns a platform image of the same kind ``image_adapter`` decodes
    (numpy arrays by default).
    """
    pipeline = FaceROIPipeline(face_detector, image_adapter=image_adapter)
    return pipeline.get_face_region_of_interest(detection_image, original_image, config)
