import argparse
import logging
import sys

import cv2

from components.coordinate_mapper.preprocess import Letterbox, downscale
from components.errors import FaceROIError, InvalidInputError, NoFaceDetectedError
from components.image_adapter.ndarray import NDArrayAdapter, OrientedImage
from components.types import Orientation
from constants import (
    BACKEND_MIN_CONFIDENCE,
    DEFAULT_MIN_CONFIDENCE,
    DEFAULT_MIN_FACE_SIZE,
    DEFAULT_PADDING_RATIO,
    DEFAULT_RESOLUTION_FACTOR,
    DETECTORS,
    MATTE_SENSITIVITY,
)
from system.colors import annotate_candidates
from system.config import ExtractionConfig
from system.pipeline import FaceROIPipeline

logger = logging.getLogger("face_roi")

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_NO_FACE = 2


def build_detector(name, backend_confidence=BACKEND_MIN_CONFIDENCE, sensitivity=MATTE_SENSITIVITY):
    """Create the detection backend by name. Heavy backends are imported on demand."""
    if name == 'haar':
        from components.face_detector.haar_cascade import HaarCascade
        return HaarCascade()
    if name == 'mediapipe':
        from components.face_detector.mediapipe import MediaPipe
        return MediaPipe(min_confidence=backend_confidence)
    if name == 'mtcnn':
        from components.face_detector.mt_cnn import MT_CNN
        return MT_CNN(min_confidence=backend_confidence)
    if name == 'matte':
        from components.face_detector.matte_region import MatteRegion
        return MatteRegion(sensitivity=sensitivity)
    raise ValueError(f"Unknown detector '{name}'. Supported: {DETECTORS}")


def read_image(path, orientation):
    image = cv2.imread(path, cv2.IMREAD_UNCHANGED)
    if image is None:
        raise InvalidInputError(f"Could not read image '{path}'")
    return OrientedImage(image, orientation)


def write_image(path, image):
    if not cv2.imwrite(path, image):
        raise InvalidInputError(f"Could not write image '{path}'")
    logger.info("Wrote %s", path)


def run(args):
    adapter = NDArrayAdapter()
    pipeline = FaceROIPipeline(
        build_detector(args.detector, args.backend_confidence, args.sensitivity),
        image_adapter=adapter,
    )
    config = ExtractionConfig(
        min_confidence=args.min_confidence,
        padding_ratio=args.padding_ratio,
        min_face_size=tuple(args.min_face_size),
        apply_mask=args.apply_mask,
    )

    orientation = Orientation(args.orientation)
    original_image = read_image(args.original, orientation)

    transform = None
    if args.detection_image:
        detection_image = read_image(args.detection_image, orientation)
    elif args.letterbox:
        detection_matrix, transform = Letterbox(tuple(args.letterbox)).forward(adapter.decode(original_image))
        detection_image = adapter.encode(detection_matrix)
    else:
        detection_image = adapter.encode(downscale(adapter.decode(original_image), args.resolution_factor))

    detection_matrix, candidates = pipeline.detect(detection_image, config)
    if args.annotate:
        write_image(args.annotate, adapter.encode(annotate_candidates(detection_matrix, candidates)))

    roi = pipeline.extract_from_candidates(detection_matrix, candidates, original_image, config, transform=transform)
    logger.info("Face region: x=%d y=%d w=%d h=%d (confidence %.2f)",
                roi.box.x, roi.box.y, roi.box.width, roi.box.height, roi.box.confidence)
    write_image(args.output, adapter.encode(roi.matrix))


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Crop the face region out of a full resolution image')
    parser.add_argument('original', help='Full resolution image the face is cropped from')
    source = parser.add_mutually_exclusive_group()
    source.add_argument('--detection-image', '-d',
                        help='Preprocessed image to run detection on. Default: downscaled original')
    source.add_argument('--letterbox', type=int, nargs=2, metavar=('W', 'H'),
                        help='Detect on the original letterboxed into W x H instead of a plain downscale')
    parser.add_argument('--resolution-factor', '-r', type=float, default=DEFAULT_RESOLUTION_FACTOR,
                        help=f'Downscale factor for the detection image. Default: {DEFAULT_RESOLUTION_FACTOR}')
    parser.add_argument('--detector', '-D', choices=DETECTORS, default='haar',
                        help='Face detection backend. Default: haar')
    parser.add_argument('--backend-confidence', type=float, default=BACKEND_MIN_CONFIDENCE,
                        help=f'Confidence threshold passed to mediapipe/mtcnn. Default: {BACKEND_MIN_CONFIDENCE}')
    parser.add_argument('--sensitivity', type=int, default=MATTE_SENSITIVITY,
                        help=f'Matte backend sensitivity (0-255). Default: {MATTE_SENSITIVITY}')
    parser.add_argument('--min-confidence', type=float, default=DEFAULT_MIN_CONFIDENCE,
                        help=f'Drop candidates below this score. Default: {DEFAULT_MIN_CONFIDENCE}')
    parser.add_argument('--padding-ratio', '-p', type=float, default=DEFAULT_PADDING_RATIO,
                        help=f'Context added around the face, per side. Default: {DEFAULT_PADDING_RATIO}')
    parser.add_argument('--min-face-size', type=int, nargs=2, default=list(DEFAULT_MIN_FACE_SIZE), metavar=('W', 'H'),
                        help='Drop candidates smaller than W x H detection pixels')
    parser.add_argument('--apply-mask', action='store_true',
                        help='Black out pixels outside the face mask (matte detector only)')
    parser.add_argument('--orientation', choices=[o.value for o in Orientation], default='up',
                        help='Orientation tag of the input images. Default: up')
    parser.add_argument('--output', '-o', default='face_roi.png', help='Where to write the crop')
    parser.add_argument('--annotate', '-a', help='Also write the detection image with every candidate drawn')
    parser.add_argument('--log-level', default='INFO', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level, format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    try:
        run(args)
    except NoFaceDetectedError as e:
        logger.warning("No face: %s", e)
        return EXIT_NO_FACE
    except (FaceROIError, ValueError) as e:
        logger.error("Error: %s", e)
        return EXIT_ERROR
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
