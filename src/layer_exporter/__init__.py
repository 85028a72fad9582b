"""
Layer Exporter - Export every layer of a layered image document to its own file.
"""

__version__ = "1.0.0"
__author__ = "Your Name"
__email__ = "your.email@example.com"

from .document import Document, Node, NodeKind
from .collector import CollectedNodes, TreeCollector
from .visibility import SnapshotState, VisibilityGuard
from .naming import resolve_unique_path, sanitize_name
from .loader import load_document
from .exporters.base import ExportPreferences, ExportResult, Renderer
from .exporters.pipeline import ExportPipeline
from .exporters.pillow_renderer import PillowRenderer

__all__ = [
    "Document", "Node", "NodeKind",
    "CollectedNodes", "TreeCollector",
    "SnapshotState", "VisibilityGuard",
    "resolve_unique_path", "sanitize_name",
    "load_document",
    "ExportPreferences", "ExportResult", "Renderer",
    "ExportPipeline", "PillowRenderer"
]
