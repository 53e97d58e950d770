"""
Pixel → document coordinate mapping.

Pixel space: origin top-left, unit = image pixel.
Document space: origin bottom-left, unit = typographic point.
"""

from dataclasses import dataclass

from filingkit.models.layout import Point


def _check_positive(**dims: float) -> None:
    for name, value in dims.items():
        if value is None or value <= 0:
            raise ValueError(f"{name} must be positive, got {value!r}")


def px_to_document(
    px: float,
    py: float,
    image_width: float,
    image_height: float,
    page_width: float,
    page_height: float,
) -> Point:
    """
    Map a pixel coordinate to document space with per-axis linear scaling
    and a vertical flip.

    Examples:
        >>> px_to_document(0, 0, 2480, 3508, 595.0, 842.0)
        Point(x=0.0, y=842.0)
    """
    _check_positive(
        image_width=image_width, image_height=image_height,
        page_width=page_width, page_height=page_height,
    )
    return Point(
        x=px * page_width / image_width,
        y=page_height - (py * page_height / image_height),
    )


@dataclass(frozen=True)
class PageGeometry:
    """Image/page dimensions of one page, bound once so anchors can be mapped tersely."""
    image_width: int
    image_height: int
    page_width: float
    page_height: float

    def __post_init__(self):
        _check_positive(
            image_width=self.image_width, image_height=self.image_height,
            page_width=self.page_width, page_height=self.page_height,
        )

    def to_document(self, px: float, py: float) -> Point:
        return px_to_document(px, py, self.image_width, self.image_height,
                              self.page_width, self.page_height)

    def scale_x(self, pixels: float) -> float:
        """Horizontal pixel length → points."""
        return pixels * self.page_width / self.image_width

    def scale_y(self, pixels: float) -> float:
        """Vertical pixel length → points."""
        return pixels * self.page_height / self.image_height
