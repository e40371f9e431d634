from dataclasses import dataclass, fields
from typing import Tuple

from components.errors import InvalidInputError
from constants import DEFAULT_MIN_CONFIDENCE, DEFAULT_MIN_FACE_SIZE, DEFAULT_PADDING_RATIO

_ALIASES = {
    'minConfidence': 'min_confidence',
    'paddingRatio': 'padding_ratio',
    'minFaceSize': 'min_face_size',
    'applyMask': 'apply_mask',
}


@dataclass(frozen=True)
class ExtractionConfig:
    """Tuning passed with each extraction call.

    Attributes:
        min_confidence: candidates scoring below this are dropped.
        padding_ratio: share of the face width/height added on each side.
        min_face_size: (width, height) in detection-image pixels; smaller
            candidates are dropped.
        apply_mask: zero the crop pixels outside the detector's face mask;
            only backends that produce a mask support it.
    """
    min_confidence: float = DEFAULT_MIN_CONFIDENCE
    padding_ratio: float = DEFAULT_PADDING_RATIO
    min_face_size: Tuple[float, float] = DEFAULT_MIN_FACE_SIZE
    apply_mask: bool = False

    def __post_init__(self):
        if not 0.0 <= self.min_confidence <= 1.0:
            raise InvalidInputError(f"min_confidence must be in [0, 1], got {self.min_confidence}")
        if self.padding_ratio < 0:
            raise InvalidInputError(f"padding_ratio must be non-negative, got {self.padding_ratio}")
        try:
            min_w, min_h = self.min_face_size
        except (TypeError, ValueError):
            raise InvalidInputError(f"min_face_size must be a (width, height) pair, got {self.min_face_size!r}") from None
        if min_w < 0 or min_h < 0:
            raise InvalidInputError(f"min_face_size must be non-negative, got {self.min_face_size!r}")
        object.__setattr__(self, 'min_face_size', (min_w, min_h))

    @classmethod
    def from_dict(cls, values: dict) -> "ExtractionConfig":
        """Build a config from snake_case or camelCase keys."""
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in values.items():
            name = _ALIASES.get(key, key)
            if name not in known:
                raise InvalidInputError(f"Unknown extraction option '{key}'")
            kwargs[name] = value
        return cls(**kwargs)

    def accepts(self, box) -> bool:
        min_w, min_h = self.min_face_size
        return box.confidence >= self.min_confidence and box.width >= min_w and box.height >= min_h

    def filter(self, candidates):
        """Keep the candidates that pass every threshold, in detector order."""
        return [box for box in candidates if self.accepts(box)]
