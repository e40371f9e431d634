HAAR_CASCADE_FILE = 'haarcascade_frontalface_default.xml'

# Backend defaults
HAAR_SCALE_FACTOR = 1.1
HAAR_MIN_NEIGHBORS = 7
HAAR_MIN_SIZE = (30, 30)
BACKEND_MIN_CONFIDENCE = 0.5
MATTE_SENSITIVITY = 50
MATTE_MIN_AREA = 1

# Call-time extraction defaults
DEFAULT_MIN_CONFIDENCE = 0.0
DEFAULT_PADDING_RATIO = 0.0
DEFAULT_MIN_FACE_SIZE = (0, 0)

# CLI
DEFAULT_RESOLUTION_FACTOR = 0.25
DETECTORS = ['haar', 'mediapipe', 'mtcnn', 'matte']
