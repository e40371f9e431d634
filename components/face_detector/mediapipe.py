import mediapipe as mp
import numpy as np
from components.face_detector.base import FaceDetector, clamp_box
from components.types import PixelFormat
from constants import BACKEND_MIN_CONFIDENCE

class MediaPipe(FaceDetector):
    def __init__(self, min_confidence: float=BACKEND_MIN_CONFIDENCE, model_selection: int=0):
        self.detector = mp.solutions.face_detection.FaceDetection(
            min_detection_confidence=min_confidence,
            model_selection=model_selection,
        )

    def _detect_faces(self, matrix):
        rgb_image = np.ascontiguousarray(matrix.to_format(PixelFormat.RGB).data)
        results = self.detector.process(rgb_image)

        faces = []
        if results.detections is not None:
            frame_w, frame_h = matrix.size
            for detection in results.detections:
                bbox = detection.location_data.relative_bounding_box
                x_min, y_min = int(bbox.xmin * frame_w), int(bbox.ymin * frame_h)
                x_max, y_max = int((bbox.xmin + bbox.width) * frame_w), int((bbox.ymin + bbox.height) * frame_h)
                score = min(1.0, max(0.0, detection.score[0]))
                box = clamp_box(x_min, y_min, x_max, y_max, score, matrix.size)
                if box is not None:
                    faces.append(box)

        return faces

    def close(self):
        self.detector.close()
