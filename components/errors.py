class FaceROIError(Exception):
    """Base class for every failure reported by the face ROI pipeline."""


class InvalidInputError(FaceROIError, ValueError):
    """Malformed or empty image data, or degenerate dimensions."""


class UnsupportedFormatError(FaceROIError, ValueError):
    """Pixel format the image adapter cannot normalize."""


class NoFaceDetectedError(FaceROIError):
    """The input was valid but no usable face candidate was found."""


class EmptyRegionError(NoFaceDetectedError):
    """The selected face box collapsed to zero area after clamping."""
