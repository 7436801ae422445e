from section_finder.core.models.geometry import NormalizedRect, PageViewport, Rect


class ScaledViewportConverter:
    """Converts rectangles between viewport pixels and normalized coordinates.

    A normalized rectangle keeps the viewport size it was captured on, so it
    maps onto a viewport of any zoom level proportionally.
    """

    def to_normalized(
        self, rect: Rect, viewport: PageViewport, page_number: int | None = None
    ) -> NormalizedRect:
        return NormalizedRect(
            x1=rect.left,
            y1=rect.top,
            x2=rect.right,
            y2=rect.bottom,
            width=viewport.width,
            height=viewport.height,
            page_number=page_number,
        )

    def to_pixels(self, rect: NormalizedRect, viewport: PageViewport) -> Rect:
        if not rect.is_valid:
            raise ValueError(
                f"Normalized rect has no reference dimensions: {rect.width}x{rect.height}"
            )

        x_scale = viewport.width / rect.width
        y_scale = viewport.height / rect.height
        return Rect.from_edges(
            rect.x1 * x_scale,
            rect.y1 * y_scale,
            rect.x2 * x_scale,
            rect.y2 * y_scale,
        )
