"""
In-memory layered document model.

A Document owns a tree of Nodes and a linear undo history. Changing a
node's visibility behaves like an image editor would: showing a node also
shows all of its parent groups, and every effective change records one
history step.
"""

import logging
from enum import Enum
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from PIL import Image

logger = logging.getLogger(__name__)


class NodeKind(Enum):
    """Kinds of document nodes."""

    LEAF = "layer"
    GROUP = "group"
    BACKGROUND = "background"


class Node:
    """A single element of the layer hierarchy."""

    def __init__(self,
                 name: str,
                 kind: NodeKind = NodeKind.LEAF,
                 visible: bool = True,
                 children: Optional[Sequence["Node"]] = None,
                 image: Optional[Image.Image] = None,
                 offset: Tuple[int, int] = (0, 0),
                 opacity: float = 1.0):
        if children and kind is not NodeKind.GROUP:
            raise ValueError(f"Only group nodes can have children: {name!r}")

        self.name = name
        self.kind = kind
        self.image = image
        self.offset = tuple(offset)
        self.opacity = opacity
        self.parent: Optional[Node] = None
        self.document: Optional[Document] = None
        self._visible = bool(visible)
        self.children: List[Node] = []

        for child in children or []:
            self.add(child)

    def __repr__(self) -> str:
        return f"Node({self.name!r}, kind={self.kind.value}, visible={self._visible})"

    @property
    def is_group(self) -> bool:
        return self.kind is NodeKind.GROUP

    @property
    def is_background(self) -> bool:
        return self.kind is NodeKind.BACKGROUND

    @property
    def visible(self) -> bool:
        return self._visible

    @visible.setter
    def visible(self, value: bool):
        value = bool(value)

        # Showing a layer reveals every enclosing group up to the root
        if value and self.parent is not None:
            self.parent.visible = True

        if value == self._visible:
            return

        self._visible = value
        if self.document is not None:
            self.document.record_history(f"{'Show' if value else 'Hide'} {self.name}")

    def add(self, child: "Node") -> "Node":
        """Append a child node to this group."""
        if not self.is_group:
            raise ValueError(f"Cannot add children to non-group node {self.name!r}")
        child.parent = self
        child._attach(self.document)
        self.children.append(child)
        return child

    def is_effectively_visible(self) -> bool:
        """Whether this node and its whole ancestor chain are visible."""
        node = self
        while node is not None:
            if not node.visible:
                return False
            node = node.parent
        return True

    def iter_tree(self) -> Iterator["Node"]:
        """Yield this node and all of its descendants depth-first."""
        yield self
        for child in self.children:
            yield from child.iter_tree()

    def _attach(self, document: Optional["Document"]):
        for node in self.iter_tree():
            node.document = document


class Document:
    """A layered image document with a linear undo history."""

    def __init__(self,
                 name: str,
                 width: int,
                 height: int,
                 layers: Optional[Sequence[Node]] = None,
                 path=None,
                 snapshots_enabled: bool = True):
        if width <= 0 or height <= 0:
            raise ValueError(f"Invalid document size: {width}x{height}")

        self.name = name
        self.width = width
        self.height = height
        self.path = path
        self.snapshots_enabled = snapshots_enabled
        self.layers: List[Node] = []

        # History: list of step labels plus the active position in it
        self.history: List[str] = ["Open"]
        self.active_history_state = 0
        self.generation = 0

        # Set while a visibility snapshot is outstanding
        self.active_snapshot = None

        for layer in layers or []:
            self.add(layer)

    def __repr__(self) -> str:
        return f"Document({self.name!r}, {self.width}x{self.height}, layers={len(self.layers)})"

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    @property
    def is_flattened(self) -> bool:
        """A flattened document consists of a single background layer."""
        return len(self.layers) == 1 and self.layers[0].is_background

    @property
    def supports_snapshots(self) -> bool:
        return self.snapshots_enabled and not self.is_flattened

    def add(self, node: Node) -> Node:
        """Append a top-level node (on top of the existing ones)."""
        node.parent = None
        node._attach(self)
        self.layers.append(node)
        return node

    def iter_nodes(self) -> Iterator[Node]:
        """Yield every node of the document, groups included, depth-first."""
        for layer in self.layers:
            yield from layer.iter_tree()

    def find(self, name: str) -> Optional[Node]:
        """Return the first node with the given name."""
        for node in self.iter_nodes():
            if node.name == name:
                return node
        return None

    def record_history(self, label: str) -> int:
        """Record a new history step, discarding any redo branch."""
        del self.history[self.active_history_state + 1:]
        self.history.append(label)
        self.active_history_state = len(self.history) - 1
        self.generation += 1
        return self.active_history_state

    def revert_history(self, position: int):
        """Make ``position`` the active history state and drop later steps."""
        if position < 0 or position >= len(self.history):
            raise IndexError(f"History position out of range: {position}")
        del self.history[position + 1:]
        self.active_history_state = position
        self.generation += 1

    def visibility_map(self) -> Dict[Node, bool]:
        """Current visibility flag of every node."""
        return {node: node.visible for node in self.iter_nodes()}

    def apply_visibility(self, visibility: Dict[Node, bool]):
        """Set visibility flags directly, without cascading or recording history."""
        for node, visible in visibility.items():
            node._visible = visible
