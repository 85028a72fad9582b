"""
Loading layered documents from YAML manifests.

A manifest lists the layers of a document bottom to top:

    name: poster
    width: 800
    height: 600
    layers:
      - name: Background
        kind: background
        color: "#ffffff"
      - name: Characters
        kind: group
        layers:
          - name: Hero
            image: hero.png
            offset: [10, 20]

Image paths are relative to the manifest file.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml
from PIL import Image, ImageColor

from .document import Document, Node, NodeKind
from .exceptions import ManifestError

logger = logging.getLogger(__name__)

_KINDS = {kind.value: kind for kind in NodeKind}
_KINDS['leaf'] = NodeKind.LEAF


def load_document(manifest_path: Union[str, Path]) -> Document:
    """Load a document from a YAML manifest.

    Args:
        manifest_path: Path to the manifest file

    Returns:
        The loaded Document

    Raises:
        FileNotFoundError: If the manifest or a referenced image is missing
        ManifestError: If the manifest is malformed
    """
    manifest_file = Path(manifest_path)

    if not manifest_file.exists():
        raise FileNotFoundError(f"Manifest not found: {manifest_path}")

    with open(manifest_file, 'r', encoding='utf-8') as f:
        try:
            manifest = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ManifestError(f"Invalid YAML in {manifest_file}: {e}") from e

    if not isinstance(manifest, dict):
        raise ManifestError(f"Manifest must be a mapping: {manifest_file}")

    return DocumentBuilder(manifest_file.parent).build(manifest, default_name=manifest_file.stem)


class DocumentBuilder:
    """Builds a Document from a parsed manifest."""

    def __init__(self, base_directory: Path):
        self.base_directory = Path(base_directory)
        self._pending_fills: List[Tuple[Node, Tuple[int, ...]]] = []

    def build(self, manifest: Dict[str, Any], default_name: str = "Untitled") -> Document:
        layer_specs = manifest.get('layers')
        if not isinstance(layer_specs, list):
            raise ManifestError("Manifest needs a 'layers' list")

        layers = [self._build_node(spec, f"layers[{i}]") for i, spec in enumerate(layer_specs)]

        width, height = self._document_size(manifest, layers)

        # Solid fills take the document size, known only now
        for node, color in self._pending_fills:
            node.image = Image.new("RGBA", (width, height), color)
        self._pending_fills = []

        document = Document(
            name=str(manifest.get('name', default_name)),
            width=width,
            height=height,
            layers=layers,
            path=self.base_directory
        )
        logger.info(f"Loaded document '{document.name}' ({width}x{height}) "
                    f"with {sum(1 for _ in document.iter_nodes())} nodes")
        return document

    def _build_node(self, spec: Any, location: str) -> Node:
        if not isinstance(spec, dict):
            raise ManifestError(f"{location}: layer entry must be a mapping")

        if 'name' not in spec:
            raise ManifestError(f"{location}: layer needs a 'name'")

        kind_name = str(spec.get('kind', 'layer')).lower()
        if kind_name not in _KINDS:
            raise ManifestError(f"{location}: unknown layer kind '{kind_name}'")
        kind = _KINDS[kind_name]

        children = spec.get('layers', [])
        if kind is NodeKind.GROUP:
            if not isinstance(children, list):
                raise ManifestError(f"{location}: 'layers' must be a list")
        elif children:
            raise ManifestError(f"{location}: only groups can contain layers")

        node = Node(
            name=str(spec['name']) if spec['name'] is not None else "",
            kind=kind,
            visible=self._parse_visible(spec.get('visible', True), location),
            image=self._load_image(spec, location),
            offset=self._parse_offset(spec.get('offset', [0, 0]), location),
            opacity=self._parse_opacity(spec.get('opacity', 1.0), location)
        )

        if 'color' in spec:
            if 'image' in spec:
                raise ManifestError(f"{location}: use either 'image' or 'color', not both")
            self._pending_fills.append((node, self._parse_color(spec['color'], location)))

        if kind is NodeKind.GROUP:
            for i, child_spec in enumerate(children):
                node.add(self._build_node(child_spec, f"{location}.layers[{i}]"))

        return node

    def _load_image(self, spec: Dict[str, Any], location: str) -> Optional[Image.Image]:
        if 'image' not in spec:
            return None

        image_path = self.base_directory / str(spec['image'])
        if not image_path.exists():
            raise FileNotFoundError(f"{location}: image not found: {image_path}")

        with Image.open(image_path) as image:
            return image.convert("RGBA")

    @staticmethod
    def _parse_offset(value: Any, location: str) -> Tuple[int, int]:
        try:
            x, y = value
            return (int(x), int(y))
        except (TypeError, ValueError):
            raise ManifestError(f"{location}: offset must be a pair of integers")

    @staticmethod
    def _parse_visible(value: Any, location: str) -> bool:
        if not isinstance(value, bool):
            raise ManifestError(f"{location}: visible must be true or false")
        return value

    @staticmethod
    def _parse_opacity(value: Any, location: str) -> float:
        try:
            opacity = float(value)
        except (TypeError, ValueError):
            raise ManifestError(f"{location}: opacity must be a number")
        if not 0.0 <= opacity <= 1.0:
            raise ManifestError(f"{location}: opacity must be between 0 and 1")
        return opacity

    @staticmethod
    def _parse_color(value: Any, location: str) -> Tuple[int, ...]:
        try:
            return ImageColor.getcolor(str(value), "RGBA")
        except ValueError:
            raise ManifestError(f"{location}: invalid color '{value}'")

    def _document_size(self, manifest: Dict[str, Any], layers: List[Node]) -> Tuple[int, int]:
        width = manifest.get('width')
        height = manifest.get('height')

        if width is None or height is None:
            # Default to the extents of all layer images
            extent_w, extent_h = 0, 0
            for layer in layers:
                for node in layer.iter_tree():
                    if node.image is not None:
                        extent_w = max(extent_w, node.offset[0] + node.image.width)
                        extent_h = max(extent_h, node.offset[1] + node.image.height)
            width = width if width is not None else extent_w
            height = height if height is not None else extent_h

        try:
            width, height = int(width), int(height)
        except (TypeError, ValueError):
            raise ManifestError("Document width and height must be integers")

        if width <= 0 or height <= 0:
            raise ManifestError("Document size could not be determined; set 'width' and 'height'")

        return width, height
