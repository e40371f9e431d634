import cv2
import numpy as np
from components.face_detector.base import FaceDetector, clamp_box
from components.types import PixelFormat
from constants import HAAR_CASCADE_FILE, HAAR_MIN_NEIGHBORS, HAAR_MIN_SIZE, HAAR_SCALE_FACTOR

class HaarCascade(FaceDetector):
    def __init__(self, scale_factor: float=HAAR_SCALE_FACTOR, min_neighbors: int=HAAR_MIN_NEIGHBORS,
                 min_size=HAAR_MIN_SIZE, cascade_path: str=None):
        self.scale_factor = scale_factor
        self.min_neighbors = min_neighbors
        self.min_size = tuple(int(v) for v in min_size)
        path = cascade_path or cv2.data.haarcascades + HAAR_CASCADE_FILE
        self.detector = cv2.CascadeClassifier(path)
        if self.detector.empty():
            raise ValueError(f"Could not load Haar cascade from {path}")

    def _detect_faces(self, matrix):
        gray = matrix.to_format(PixelFormat.GRAY).data
        faces, _, level_weights = self.detector.detectMultiScale3(
            gray,
            scaleFactor=self.scale_factor,
            minNeighbors=self.min_neighbors,
            minSize=self.min_size,
            outputRejectLevels=True,
        )
        if len(faces) == 0:
            return []

        # Level weights are unbounded; squash them into [0, 1] keeping their order.
        weights = np.asarray(level_weights, dtype=np.float64).reshape(-1)
        with np.errstate(over='ignore'):
            scores = 1.0 / (1.0 + np.exp(-weights))

        boxes = [clamp_box(x, y, x + w, y + h, score, matrix.size)
                 for (x, y, w, h), score in zip(faces, scores)]
        return [box for box in boxes if box is not None]
