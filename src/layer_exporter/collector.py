"""
Layer tree traversal.

Walking the host tree is comparatively slow, so the exporter collects all
exportable nodes once into flat lists and works on those afterwards.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Union

from .document import Document, Node
from .progress import NullProgressReporter, ProgressReporter

logger = logging.getLogger(__name__)


@dataclass
class CollectedNodes:
    """Flattened, document-ordered exportable nodes."""

    nodes: List[Node] = field(default_factory=list)
    visible_nodes: List[Node] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.nodes)

    @property
    def is_single_background(self) -> bool:
        return len(self.nodes) == 1 and self.nodes[0].is_background


class TreeCollector:
    """Collect exportable (non-group) nodes from a layer tree."""

    def __init__(self, progress: Optional[ProgressReporter] = None):
        self.progress = progress or NullProgressReporter()

    def collect(self,
                root: Union[Document, Node, Sequence[Node]],
                traverse_hidden_groups: bool = True) -> CollectedNodes:
        """
        Flatten the tree under ``root`` depth-first.

        A group is descended into only when ``traverse_hidden_groups`` is set
        or the group itself is visible. Collected nodes count as visible by
        their own flag alone; the visibility of their ancestors is ignored.

        Args:
            root: A document, a group node or a sequence of top-level nodes
            traverse_hidden_groups: Also descend into hidden groups

        Returns:
            CollectedNodes with all exportable nodes and the visible subset
        """
        top_level = self._top_level(root)
        total = len(top_level)
        nodes = []

        self.progress.set_label("Collecting layers...")
        for index, node in enumerate(top_level, 1):
            nodes.extend(_walk(node, traverse_hidden_groups))
            self.progress.tick(index, total)
        self.progress.hide()

        collected = CollectedNodes(
            nodes=nodes,
            visible_nodes=[node for node in nodes if node.visible]
        )
        logger.debug(f"Collected {len(collected.nodes)} layers "
                     f"({len(collected.visible_nodes)} visible)")
        return collected

    @staticmethod
    def _top_level(root) -> List[Node]:
        if isinstance(root, Document):
            return list(root.layers)
        if isinstance(root, Node):
            return list(root.children) if root.is_group else [root]
        return list(root)


def _walk(node: Node, traverse_hidden_groups: bool) -> Iterator[Node]:
    if node.is_group:
        if traverse_hidden_groups or node.visible:
            for child in node.children:
                yield from _walk(child, traverse_hidden_groups)
    else:
        yield node
