"""
Layer Export Pipeline
Exports every collected layer of a document into its own image file.
"""

import logging
import time
from pathlib import Path
from typing import List, Optional

from ..collector import CollectedNodes, TreeCollector
from ..document import Document, Node
from ..exceptions import ExhaustedNameSpace, ExportSetupError, NoExportableNodesError
from ..naming import resolve_unique_path, sanitize_name
from ..progress import NullProgressReporter, ProgressReporter
from ..visibility import VisibilityGuard
from .base import ExportPreferences, ExportResult, Renderer

logger = logging.getLogger(__name__)


class ExportPipeline:
    """Export layers one at a time by toggling their visibility."""

    def __init__(self, renderer: Renderer, progress: Optional[ProgressReporter] = None):
        self.renderer = renderer
        self.progress = progress or NullProgressReporter()
        self.logger = logging.getLogger(__name__)

    def run(self,
            document: Document,
            prefs: ExportPreferences,
            collected: Optional[CollectedNodes] = None) -> ExportResult:
        """
        Export the layers of a document.

        Args:
            document: Document whose layers are exported
            prefs: Export preferences
            collected: Layers collected earlier for this document; collected
                now when omitted

        Returns:
            ExportResult with the number of written files and an error flag

        Raises:
            ExportSetupError: If the run cannot start
        """
        start_time = time.time()

        if collected is None:
            # Collect silently; ticks of this run belong to the export
            collected = TreeCollector().collect(document, traverse_hidden_groups=True)

        self._prepare(collected, prefs)

        result = ExportResult()

        if collected.is_single_background:
            # Flattened images can't toggle visibility or be snapshotted
            self.logger.info("Exporting flattened background layer directly")
            self.progress.set_label("Exporting 1 of 1...")
            self._export_node(collected.nodes[0], prefs, result)
            self.progress.tick(1, 1)
            self.progress.hide()
        else:
            nodes = self._work_subset(collected, prefs)
            self._export_isolated(document, nodes, prefs, result)

        result.execution_time = time.time() - start_time
        self.logger.info(f"Exported {result.exported_count} files"
                         f"{' with errors' if result.had_errors else ''} "
                         f"in {result.execution_time:.2f}s")
        return result

    def _prepare(self, collected: CollectedNodes, prefs: ExportPreferences):
        if not collected.nodes:
            raise NoExportableNodesError("No layers found to export")

        errors = prefs.validate()
        if errors:
            raise ExportSetupError("; ".join(errors))

        Path(prefs.destination_directory).mkdir(parents=True, exist_ok=True)

    @staticmethod
    def _work_subset(collected: CollectedNodes, prefs: ExportPreferences) -> List[Node]:
        if prefs.visible_only:
            return list(collected.visible_nodes)
        return list(collected.nodes)

    def _export_isolated(self, document: Document, nodes: List[Node],
                         prefs: ExportPreferences, result: ExportResult):
        count = len(nodes)
        guard = VisibilityGuard()

        self.logger.info(f"Exporting {count} layers as {prefs.format_options.describe()} "
                         f"to {prefs.destination_directory}")

        with guard.captured(document):
            try:
                self.progress.set_label(f"Exporting 1 of {count}...")

                # Hide everything first: showing a layer also shows its parent
                # group, which could reveal a sibling that was never hidden.
                for node in nodes:
                    node.visible = False

                for index, node in enumerate(nodes, 1):
                    guard.isolate(node)
                    self._export_node(node, prefs, result)
                    node.visible = False

                    self.progress.set_label(f"Exporting {index} of {count}...")
                    self.progress.tick(index, count)
            finally:
                self.progress.hide()

    def _export_node(self, node: Node, prefs: ExportPreferences, result: ExportResult):
        """Export a single node. Failures are recorded, never raised."""
        try:
            destination = resolve_unique_path(prefs.destination_directory,
                                              sanitize_name(node.name), prefs.extension)

            self.logger.debug(f"Exporting '{node.name}' to {destination}")

            if self.renderer.render(node, destination, prefs.format_options):
                result.add_success(destination)
            else:
                self._record_failure(result, node, "renderer reported failure")

        except ExhaustedNameSpace as e:
            self._record_failure(result, node, str(e))
        except Exception as e:
            self._record_failure(result, node, f"{type(e).__name__}: {e}")

    def _record_failure(self, result: ExportResult, node: Node, reason: str):
        self.logger.error(f"Failed to export layer '{node.name}': {reason}")
        result.add_failure(node.name, f"{node.name}: {reason}")
