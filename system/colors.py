import cv2

from components.types import PixelFormat, PixelMatrix

ANNOTATION_COLORS = [
    (0, 255, 0),      # Green
    (0, 0, 255),      # Red
    (255, 0, 0),      # Blue
    (0, 255, 255),    # Yellow
    (255, 0, 255),    # Magenta
    (255, 255, 0),    # Cyan
    (0, 165, 255),    # Orange
    (128, 0, 128),    # Purple
    (203, 192, 255),  # Pink
    (0, 255, 127),    # Spring Green
    (147, 20, 255),   # Deep Pink
    (255, 144, 30),   # Dodger Blue
    (0, 69, 255),     # Red Orange
    (50, 205, 50),    # Lime Green
    (0, 215, 255)     # Gold
]
LEN_ANNOTATION_COLORS = len(ANNOTATION_COLORS)

def get_annotation_color(index):
    return ANNOTATION_COLORS[index % LEN_ANNOTATION_COLORS]

def annotate_candidates(matrix, candidates, thickness=2):
    """Return a BGR copy of ``matrix`` with every candidate box and score drawn on it."""
    canvas = matrix.to_format(PixelFormat.BGR).data
    for index, box in enumerate(candidates):
        color = get_annotation_color(index)
        x, y, x_end, y_end = (int(round(v)) for v in box.as_xyxy())
        cv2.rectangle(canvas, (x, y), (x_end, y_end), color, thickness)
        cv2.putText(canvas, f"{box.confidence:.2f}", (x, max(0, y - 4)),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.4, color, 1)
    return PixelMatrix(canvas, PixelFormat.BGR)
