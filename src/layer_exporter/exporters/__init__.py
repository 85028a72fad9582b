"""
Layer export system: preferences, file formats, renderers and the export pipeline.
"""

from .base import ExportPreferences, ExportResult, Renderer
from .formats import (
    FormatOptions, PNGOptions, JPEGOptions, TargaOptions,
    FORMATS, build_format_options, canonical_format_name, format_options_for
)
from .pillow_renderer import PillowRenderer
from .pipeline import ExportPipeline

__all__ = [
    # Base classes
    "ExportPreferences", "ExportResult", "Renderer",

    # Formats
    "FormatOptions", "PNGOptions", "JPEGOptions", "TargaOptions",
    "FORMATS", "build_format_options", "canonical_format_name", "format_options_for",

    # Rendering and export
    "PillowRenderer", "ExportPipeline"
]
