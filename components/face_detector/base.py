from abc import ABC, abstractmethod
from typing import Optional

from components.errors import InvalidInputError
from components.types import BoundingBox, DetectionResult, PixelMatrix


def clamp_box(x_min, y_min, x_max, y_max, confidence, frame_size) -> Optional[BoundingBox]:
  """Clip raw detector corners to the frame; None when nothing is left."""
  frame_w, frame_h = frame_size
  x_min, y_min = max(0, x_min), max(0, y_min)
  x_max, y_max = min(frame_w, x_max), min(frame_h, y_max)
  if x_max <= x_min or y_max <= y_min:
    return None
  return BoundingBox.from_xyxy(x_min, y_min, x_max, y_max, float(confidence))


class FaceDetector(ABC):
  def detect(self, matrix) -> DetectionResult:
    """Return candidate face boxes in ``matrix`` pixel coordinates.

    An empty list means no face was found.
    """
    if not isinstance(matrix, PixelMatrix):
      raise InvalidInputError(f"Expected a PixelMatrix, got {type(matrix).__name__}")
    if matrix.is_empty():
      raise InvalidInputError(f"Cannot detect faces in an empty image ({matrix.width}x{matrix.height})")
    return self._detect_faces(matrix)

  @abstractmethod
  def _detect_faces(self, matrix: PixelMatrix) -> DetectionResult:
    pass

  def mask(self, matrix: PixelMatrix):
    """Per-pixel face mask in ``matrix`` coordinates, or None when the backend has none."""
    return None
