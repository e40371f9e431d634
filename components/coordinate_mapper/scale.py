from dataclasses import dataclass

from components.errors import InvalidInputError
from components.types import BoundingBox, Size


def check_size(size: Size, name: str):
    try:
        width, height = size
    except (TypeError, ValueError):
        raise InvalidInputError(f"{name} must be a (width, height) pair, got {size!r}") from None
    if width <= 0 or height <= 0:
        raise InvalidInputError(f"{name} must have positive width and height, got {size!r}")
    return width, height


@dataclass(frozen=True)
class ScaleTransform:
    """Per-axis scale followed by an offset; no rotation or shear.

    A point ``(x, y)`` maps to ``(x * scale_x + offset_x, y * scale_y + offset_y)``.
    Instances are recomputed for every call and never cached.
    """
    scale_x: float
    scale_y: float
    offset_x: float = 0.0
    offset_y: float = 0.0

    @classmethod
    def between(cls, from_size: Size, to_size: Size) -> "ScaleTransform":
        """Plain resize mapping; the two axes scale independently."""
        from_w, from_h = check_size(from_size, "from_size")
        to_w, to_h = check_size(to_size, "to_size")
        return cls(to_w / from_w, to_h / from_h)

    @classmethod
    def letterbox(cls, from_size: Size, to_size: Size) -> "ScaleTransform":
        """Undo an aspect-preserving resize of a ``to_size`` image padded into ``from_size``.

        Mirrors ``Letterbox.forward``: the image is scaled by the smaller ratio
        and centred, so the padding offset is subtracted before unscaling.
        """
        box_w, box_h = check_size(from_size, "from_size")
        image_w, image_h = check_size(to_size, "to_size")

        scale = min(box_w / image_w, box_h / image_h)
        new_w = min(round(image_w * scale), box_w)
        new_h = min(round(image_h * scale), box_h)
        gain = min(new_h / image_h, new_w / image_w)
        dx = (box_w - new_w) // 2
        dy = (box_h - new_h) // 2

        return cls(1 / gain, 1 / gain, -dx / gain, -dy / gain)

    def apply_point(self, x, y):
        return x * self.scale_x + self.offset_x, y * self.scale_y + self.offset_y

    def apply(self, box: BoundingBox) -> BoundingBox:
        x, y = self.apply_point(box.x, box.y)
        return BoundingBox(x, y, box.width * self.scale_x, box.height * self.scale_y, box.confidence)

    def inverse(self) -> "ScaleTransform":
        return ScaleTransform(
            1 / self.scale_x,
            1 / self.scale_y,
            -self.offset_x / self.scale_x,
            -self.offset_y / self.scale_y,
        )

    def is_identity(self) -> bool:
        return (self.scale_x == 1 and self.scale_y == 1
                and self.offset_x == 0 and self.offset_y == 0)


def map_box(box: BoundingBox, from_size: Size, to_size: Size) -> BoundingBox:
    """Map ``box`` from an image of ``from_size`` into one of ``to_size``.

    Args:
        box: box in ``from_size`` pixel coordinates.
        from_size: (width, height) of the space the box was produced in.
        to_size: (width, height) of the target space.

    Returns:
        A new box; the confidence is carried over unchanged.

    Raises:
        InvalidInputError: if either size has a zero or negative dimension.
    """
    return ScaleTransform.between(from_size, to_size).apply(box)
