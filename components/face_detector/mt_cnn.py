from mtcnn import MTCNN
from components.face_detector.base import FaceDetector, clamp_box
from components.types import PixelFormat
from constants import BACKEND_MIN_CONFIDENCE

class MT_CNN(FaceDetector):
    def __init__(self, min_confidence=BACKEND_MIN_CONFIDENCE):
        self.detector = MTCNN(device="CPU:0", stages="face_detection_only")
        self.min_confidence = min_confidence

    def _detect_faces(self, matrix):
        rgb_image = matrix.to_format(PixelFormat.RGB).data
        results = self.detector.detect_faces(rgb_image, box_format="xyxy")
        if not results:
            return []
        faces = [
            clamp_box(*face['box'], face['confidence'], matrix.size)
            for face in results if face is not None and face['confidence'] >= self.min_confidence
        ]
        return [face for face in faces if face is not None]
