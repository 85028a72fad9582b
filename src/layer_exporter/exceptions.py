"""
Exception hierarchy for layer export.
"""

from pathlib import Path


class LayerExportError(Exception):
    """Base class for all layer export errors."""


class ExportSetupError(LayerExportError):
    """Raised when an export run cannot start at all."""


class NoExportableNodesError(ExportSetupError):
    """Raised when the document contains nothing that can be exported."""


class SnapshotUnavailableError(ExportSetupError):
    """Raised when the document state cannot be captured for later restore."""


class GuardStateError(LayerExportError):
    """Raised on an illegal visibility guard transition."""


class ManifestError(LayerExportError):
    """Raised when a document manifest is malformed."""


class ExhaustedNameSpace(LayerExportError):
    """Raised when every numbered variant of a file name is already taken."""

    def __init__(self, base: Path, attempts: int):
        self.base = Path(base)
        self.attempts = attempts
        super().__init__(
            f"No free file name for '{self.base}' after {attempts} attempts"
        )
