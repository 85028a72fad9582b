"""
Base classes and interfaces for layer export.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..document import Node
from .formats import FormatOptions, PNGOptions, build_format_options, format_options_for

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportPreferences:
    """User preferences for one export run. Immutable during the run."""

    destination_directory: Path
    format_options: FormatOptions = field(default_factory=PNGOptions)
    visible_only: bool = False
    file_extension: Optional[str] = None

    @property
    def extension(self) -> str:
        """Extension of the exported files, lower-case and without dot."""
        return (self.file_extension or self.format_options.extension).lstrip('.').lower()

    def validate(self) -> List[str]:
        """Validate preferences. Returns list of validation errors."""
        errors = []

        if not self.destination_directory:
            errors.append("Destination directory is required")
        elif Path(self.destination_directory).exists() and not Path(self.destination_directory).is_dir():
            errors.append(f"Destination is not a directory: {self.destination_directory}")

        if not self.extension:
            errors.append("File extension is required")

        errors.extend(self.format_options.validate())
        return errors

    @classmethod
    def from_config(cls, config: Dict[str, Any], default_destination: Path) -> "ExportPreferences":
        """Build preferences from the ``export`` section of a configuration."""
        format_name = config.get('format', 'png')
        format_params = format_options_for(config.get('format_options'), format_name)

        return cls(
            destination_directory=Path(config.get('destination') or default_destination),
            format_options=build_format_options(format_name, **format_params),
            visible_only=bool(config.get('visible_only', False)),
            file_extension=config.get('extension')
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert preferences to dictionary."""
        return {
            'destination_directory': str(self.destination_directory),
            'file_extension': self.extension,
            'format_options': self.format_options.to_dict(),
            'visible_only': self.visible_only
        }


@dataclass
class ExportResult:
    """Result of an export run."""

    exported_count: int = 0
    had_errors: bool = False

    exported_files: List[Path] = field(default_factory=list)
    failed_nodes: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    execution_time: float = 0.0
    export_timestamp: datetime = field(default_factory=datetime.now)

    def add_success(self, path: Path):
        self.exported_count += 1
        self.exported_files.append(path)

    def add_failure(self, node_name: str, error: str):
        self.had_errors = True
        self.failed_nodes.append(node_name)
        self.errors.append(error)

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary."""
        return {
            'exported_count': self.exported_count,
            'had_errors': self.had_errors,
            'exported_files': [str(path) for path in self.exported_files],
            'failed_nodes': self.failed_nodes,
            'errors': self.errors,
            'execution_time': self.execution_time,
            'export_timestamp': self.export_timestamp.isoformat()
        }


class Renderer(ABC):
    """Encodes the current look of a document into an image file."""

    @abstractmethod
    def render(self, node: Node, destination: Path, format_options: FormatOptions) -> bool:
        """
        Write a single encoded image file at exactly ``destination``.

        Implementations must not change node visibility or any other
        document state.

        Args:
            node: The node being exported
            destination: Target file path
            format_options: Encoder settings

        Returns:
            True if the file was written
        """
        pass
