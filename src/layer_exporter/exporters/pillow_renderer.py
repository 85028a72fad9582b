"""
Renderer that composites the visible layers of a Document with Pillow.
"""

import logging
from pathlib import Path

from PIL import Image

from ..document import Document, Node
from .base import Renderer
from .formats import FormatOptions

logger = logging.getLogger(__name__)

TRANSPARENT = (0, 0, 0, 0)


class PillowRenderer(Renderer):
    """Composite every currently visible layer and save the result."""

    def __init__(self, document: Document):
        self.document = document
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def composite(self) -> Image.Image:
        """Flatten the visible layers, bottom to top, into one RGBA image."""
        canvas = Image.new("RGBA", self.document.size, TRANSPARENT)

        for node in self.document.iter_nodes():
            if node.is_group or node.image is None:
                continue
            if not node.is_effectively_visible():
                continue
            canvas = Image.alpha_composite(canvas, self._layer_image(node))

        return canvas

    def render(self, node: Node, destination: Path, format_options: FormatOptions) -> bool:
        image = format_options.prepare(self.composite())
        image.save(destination, **format_options.save_params())

        self.logger.debug(f"Rendered '{node.name}' to {destination}")
        return True

    def _layer_image(self, node: Node) -> Image.Image:
        source = node.image.convert("RGBA")

        if node.opacity < 1.0:
            alpha = source.getchannel("A").point(lambda value: int(value * max(node.opacity, 0.0)))
            source.putalpha(alpha)

        # Paste clips layers that extend past the canvas
        layer = Image.new("RGBA", self.document.size, TRANSPARENT)
        layer.paste(source, node.offset)
        return layer
