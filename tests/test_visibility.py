"""
Tests for capturing and restoring document visibility.
"""

import random
import unittest

from layer_exporter.document import Document, Node, NodeKind
from layer_exporter.exceptions import GuardStateError, SnapshotUnavailableError
from layer_exporter.visibility import GuardState, VisibilityGuard


def build_document():
    return Document("doc", 8, 8, [
        Node("bg", NodeKind.BACKGROUND),
        Node("group", NodeKind.GROUP, visible=False, children=[
            Node("a"),
            Node("b", visible=False),
            Node("inner", NodeKind.GROUP, children=[Node("c", visible=False)]),
        ]),
        Node("top"),
    ])


class TestVisibilityGuard(unittest.TestCase):
    """Test cases for VisibilityGuard."""

    def setUp(self):
        """Set up test fixtures."""
        self.document = build_document()
        self.guard = VisibilityGuard()

    def test_initial_state(self):
        """Test that a new guard is idle."""
        self.assertIs(self.guard.state, GuardState.IDLE)

    def test_capture_and_restore(self):
        """Test the basic state transitions."""
        snapshot = self.guard.capture(self.document)
        self.assertIs(self.guard.state, GuardState.CAPTURED)
        self.assertIs(self.document.active_snapshot, snapshot)

        self.guard.restore(snapshot)
        self.assertIs(self.guard.state, GuardState.RESTORED)
        self.assertIsNone(self.document.active_snapshot)

    def test_restore_after_random_toggles(self):
        """Test that any sequence of toggles is undone by restore."""
        nodes = list(self.document.iter_nodes())
        rng = random.Random(1234)

        for _ in range(25):
            before = self.document.visibility_map()
            history = list(self.document.history)
            position = self.document.active_history_state

            guard = VisibilityGuard()
            snapshot = guard.capture(self.document)
            for node in rng.sample(nodes, k=rng.randint(1, len(nodes))):
                if rng.random() < 0.5:
                    guard.isolate(node)
                else:
                    node.visible = not node.visible
            guard.restore(snapshot)

            self.assertEqual(self.document.visibility_map(), before)
            self.assertEqual(self.document.history, history)
            self.assertEqual(self.document.active_history_state, position)

    def test_isolate_shows_node_and_ancestors(self):
        """Test that isolate makes the node visible, revealing its groups."""
        node = self.document.find("c")
        with self.guard.captured(self.document):
            self.guard.isolate(node)
            self.assertTrue(node.is_effectively_visible())
            # Other nodes are left alone
            self.assertFalse(self.document.find("b").visible)

    def test_isolate_requires_capture(self):
        """Test that isolate is rejected outside a capture."""
        with self.assertRaises(GuardStateError):
            self.guard.isolate(self.document.find("a"))

    def test_double_capture_rejected(self):
        """Test that a guard cannot capture twice."""
        self.guard.capture(self.document)
        with self.assertRaises(GuardStateError):
            self.guard.capture(self.document)

    def test_one_outstanding_snapshot_per_document(self):
        """Test that a second guard cannot capture the same document."""
        snapshot = self.guard.capture(self.document)
        other = VisibilityGuard()
        with self.assertRaises(GuardStateError):
            other.capture(self.document)

        self.guard.restore(snapshot)
        other.restore(other.capture(self.document))
        self.assertIs(other.state, GuardState.RESTORED)

    def test_new_cycle_after_restore(self):
        """Test that a restored guard may capture again."""
        self.guard.restore(self.guard.capture(self.document))
        snapshot = self.guard.capture(self.document)
        self.assertIs(self.guard.state, GuardState.CAPTURED)
        self.guard.restore(snapshot)

    def test_restore_only_once(self):
        """Test that a snapshot is consumed by restore."""
        snapshot = self.guard.capture(self.document)
        self.guard.restore(snapshot)
        with self.assertRaises(GuardStateError):
            self.guard.restore(snapshot)

    def test_restore_without_capture(self):
        """Test that restore requires a capture."""
        other = VisibilityGuard()
        snapshot = other.capture(self.document)
        with self.assertRaises(GuardStateError):
            self.guard.restore(snapshot)

    def test_restore_foreign_snapshot(self):
        """Test that a guard only restores its own snapshot."""
        other_document = build_document()
        other = VisibilityGuard()
        foreign = other.capture(other_document)

        self.guard.capture(self.document)
        with self.assertRaises(GuardStateError):
            self.guard.restore(foreign)

    def test_snapshot_unavailable(self):
        """Test that flattened documents cannot be captured."""
        flattened = Document("flat", 8, 8, [Node("Background", NodeKind.BACKGROUND)])
        with self.assertRaises(SnapshotUnavailableError):
            self.guard.capture(flattened)
        self.assertIs(self.guard.state, GuardState.IDLE)

    def test_context_manager_restores_on_error(self):
        """Test that the context manager restores even when the body fails."""
        before = self.document.visibility_map()

        with self.assertRaises(RuntimeError):
            with self.guard.captured(self.document):
                for node in self.document.iter_nodes():
                    node.visible = False
                raise RuntimeError("boom")

        self.assertEqual(self.document.visibility_map(), before)
        self.assertEqual(self.document.history, ["Open"])
        self.assertIs(self.guard.state, GuardState.RESTORED)


if __name__ == "__main__":
    unittest.main()
