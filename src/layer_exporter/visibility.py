"""
Capture and restore of document visibility state around an export run.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, Optional

from .document import Document, Node
from .exceptions import GuardStateError, SnapshotUnavailableError

logger = logging.getLogger(__name__)


class GuardState(Enum):
    IDLE = "idle"
    CAPTURED = "captured"
    RESTORED = "restored"


@dataclass(frozen=True, eq=False)
class SnapshotState:
    """Visibility of every node plus the active history position."""

    document: Document = field(repr=False)
    visibility: Dict[Node, bool] = field(repr=False)
    history_position: int
    generation: int


class VisibilityGuard:
    """
    Scoped capture of a document's visibility state.

    The guard moves through IDLE -> CAPTURED -> RESTORED; a new capture may
    start again once restored. Only one snapshot may be outstanding per
    document at any time.
    """

    def __init__(self):
        self.state = GuardState.IDLE
        self._snapshot: Optional[SnapshotState] = None
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def capture(self, document: Document) -> SnapshotState:
        """Record the visibility of all nodes and the active history state."""
        if self.state is GuardState.CAPTURED:
            raise GuardStateError("A snapshot is already captured by this guard")

        if not document.supports_snapshots:
            raise SnapshotUnavailableError(
                f"Document '{document.name}' does not support state snapshots"
            )

        if document.active_snapshot is not None:
            raise GuardStateError(
                f"Document '{document.name}' already has an outstanding snapshot"
            )

        snapshot = SnapshotState(
            document=document,
            visibility=document.visibility_map(),
            history_position=document.active_history_state,
            generation=document.generation
        )
        document.active_snapshot = snapshot
        self._snapshot = snapshot
        self.state = GuardState.CAPTURED

        self.logger.debug(f"Captured visibility of {len(snapshot.visibility)} nodes "
                          f"at history state {snapshot.history_position}")
        return snapshot

    def isolate(self, node: Node):
        """Make ``node`` visible. Other nodes are left untouched."""
        if self.state is not GuardState.CAPTURED:
            raise GuardStateError(f"Cannot isolate a node in state '{self.state.value}'")
        node.visible = True

    def restore(self, snapshot: SnapshotState):
        """Reapply the captured visibility and history position."""
        if self.state is not GuardState.CAPTURED:
            raise GuardStateError(f"Cannot restore in state '{self.state.value}'")
        if snapshot is not self._snapshot:
            raise GuardStateError("Snapshot was not issued by this guard")

        document = snapshot.document
        document.apply_visibility(snapshot.visibility)
        document.revert_history(snapshot.history_position)
        document.active_snapshot = None

        self._snapshot = None
        self.state = GuardState.RESTORED

        self.logger.debug(f"Restored document '{document.name}' "
                          f"to history state {snapshot.history_position}")

    @contextmanager
    def captured(self, document: Document) -> Iterator[SnapshotState]:
        """Capture on entry and always restore on exit."""
        snapshot = self.capture(document)
        try:
            yield snapshot
        finally:
            self.restore(snapshot)
